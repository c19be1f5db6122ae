"""Voice-driven to-do list: spoken command -> model -> intent -> task store."""

__version__ = "0.1.0"
