"""Database infrastructure package."""
from .models import Base, PersonLabelRecord
from .repositories import PersonLabelRepository
from .session import create_session_factory, session_scope

__all__ = ["Base", "PersonLabelRecord", "PersonLabelRepository", "create_session_factory", "session_scope"]
