"""Scout: compile declarative schema specifications into pydantic models."""

__version__ = "0.1.0"
