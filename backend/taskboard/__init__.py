"""Local task board with ordered, drag-and-drop reorderable ticket lists."""

__version__ = "1.0.0"
