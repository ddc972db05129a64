"""Database repositories for the face identity engine."""
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from face_identity.infrastructure.database.models import PersonLabelRecord


class PersonLabelRepository:
    """Repository for person label rows."""

    def __init__(self, session: Session) -> None:
        """Initialize repository.

        Args:
            session: Database session
        """
        self._session = session

    def get_by_cluster_id(self, cluster_id: str) -> Optional[PersonLabelRecord]:
        """Get the label row of a cluster, if any."""
        return self._session.get(PersonLabelRecord, cluster_id)

    def upsert(
        self,
        cluster_id: str,
        label_id: str,
        name: str,
        created_at,
        updated_at,
    ) -> PersonLabelRecord:
        """Insert the label row of a cluster or overwrite the existing one."""
        record = self.get_by_cluster_id(cluster_id)
        if record is None:
            record = PersonLabelRecord(cluster_id=cluster_id)
            self._session.add(record)
        record.label_id = label_id
        record.name = name
        record.created_at = created_at
        record.updated_at = updated_at
        self._session.flush()
        return record

    def delete_by_cluster_id(self, cluster_id: str) -> bool:
        """Delete the label row of a cluster.

        Returns:
            bool: True if a row was deleted
        """
        result = self._session.execute(
            delete(PersonLabelRecord).where(PersonLabelRecord.cluster_id == cluster_id)
        )
        return result.rowcount > 0

    def list_all(self) -> List[PersonLabelRecord]:
        """All label rows ordered by creation time."""
        stmt = select(PersonLabelRecord).order_by(PersonLabelRecord.created_at)
        return list(self._session.execute(stmt).scalars().all())
