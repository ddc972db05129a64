"""Custom exceptions for the face identity engine."""
from typing import Optional


class FaceIdentityError(Exception):
    """Base exception for face identity operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize face identity error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.details = details or {}


class EmbeddingDimensionError(FaceIdentityError):
    """Raised when two embeddings being compared have different lengths."""
    pass


class InvalidClusterError(FaceIdentityError):
    """Raised when a person cluster cannot be built from the given faces."""
    pass


class LabelStoreError(FaceIdentityError):
    """Raised when a label store backend fails to read or write."""
    pass
