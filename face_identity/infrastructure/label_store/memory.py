"""In-memory label store."""
from typing import Dict, List, Optional

from face_identity.domain.entities.person import PersonLabel
from face_identity.domain.interfaces.storage import LabelStore


class InMemoryLabelStore(LabelStore):
    """Dict-backed label store; contents live as long as the instance."""

    def __init__(self) -> None:
        self._labels: Dict[str, PersonLabel] = {}

    def get(self, cluster_id: str) -> Optional[PersonLabel]:
        return self._labels.get(cluster_id)

    def put(self, cluster_id: str, label: PersonLabel) -> None:
        self._labels[cluster_id] = label

    def delete(self, cluster_id: str) -> bool:
        return self._labels.pop(cluster_id, None) is not None

    def values(self) -> List[PersonLabel]:
        return list(self._labels.values())
