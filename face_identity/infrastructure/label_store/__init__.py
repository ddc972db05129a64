"""Label store backends."""
from .database import DatabaseLabelStore
from .json_file import JsonFileLabelStore
from .memory import InMemoryLabelStore

__all__ = ["DatabaseLabelStore", "InMemoryLabelStore", "JsonFileLabelStore"]
