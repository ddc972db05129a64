"""SQLAlchemy models for the face identity engine."""
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class PersonLabelRecord(Base):
    """Person label row; exactly one per labeled cluster."""

    __tablename__ = "person_labels"

    cluster_id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Cluster the label is attached to"
    )
    label_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        comment="Identifier of the label itself"
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Person name"
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
