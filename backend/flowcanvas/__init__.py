"""FlowCanvas — workflow state engine for the visual task-graph editor."""

__version__ = "0.1.0"
