"""SQLAlchemy backed label store."""
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from face_identity.core.exceptions import LabelStoreError
from face_identity.core.logging import get_logger
from face_identity.domain.entities.person import PersonLabel
from face_identity.domain.interfaces.storage import LabelStore
from face_identity.infrastructure.database.models import PersonLabelRecord
from face_identity.infrastructure.database.repositories import PersonLabelRepository
from face_identity.infrastructure.database.session import create_session_factory, session_scope

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_label(record: PersonLabelRecord) -> PersonLabel:
    return PersonLabel(
        id=record.label_id,
        name=record.name,
        cluster_id=record.cluster_id,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )


class DatabaseLabelStore(LabelStore):
    """Label store backed by a relational database through SQLAlchemy.

    Each operation runs in its own transaction. Database failures are
    wrapped in :class:`LabelStoreError`.

    Example:
        ```python
        store = DatabaseLabelStore.from_url("sqlite:///labels.db")
        store.put(cluster_id, label)
        ```
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        """Initialize the store.

        Args:
            session_factory: Factory producing sessions on a migrated database
        """
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "DatabaseLabelStore":
        """Create a store on ``database_url``, creating the table if needed."""
        return cls(create_session_factory(database_url, echo=echo))

    def get(self, cluster_id: str) -> Optional[PersonLabel]:
        try:
            with session_scope(self._session_factory) as session:
                record = PersonLabelRepository(session).get_by_cluster_id(cluster_id)
                return _to_label(record) if record is not None else None
        except SQLAlchemyError as e:
            raise LabelStoreError("Failed to read person label", details={"cluster_id": cluster_id}) from e

    def put(self, cluster_id: str, label: PersonLabel) -> None:
        try:
            with session_scope(self._session_factory) as session:
                PersonLabelRepository(session).upsert(
                    cluster_id=cluster_id,
                    label_id=label.id,
                    name=label.name,
                    created_at=label.created_at,
                    updated_at=label.updated_at,
                )
        except SQLAlchemyError as e:
            raise LabelStoreError("Failed to store person label", details={"cluster_id": cluster_id}) from e

    def delete(self, cluster_id: str) -> bool:
        try:
            with session_scope(self._session_factory) as session:
                return PersonLabelRepository(session).delete_by_cluster_id(cluster_id)
        except SQLAlchemyError as e:
            raise LabelStoreError("Failed to delete person label", details={"cluster_id": cluster_id}) from e

    def values(self) -> List[PersonLabel]:
        try:
            with session_scope(self._session_factory) as session:
                return [_to_label(record) for record in PersonLabelRepository(session).list_all()]
        except SQLAlchemyError as e:
            raise LabelStoreError("Failed to list person labels") from e
