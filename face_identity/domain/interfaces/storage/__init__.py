"""Storage interfaces package."""
from .label_store import LabelStore

__all__ = ["LabelStore"]
