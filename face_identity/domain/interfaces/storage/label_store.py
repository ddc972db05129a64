"""Key-value store interface for person labels."""
from abc import ABC, abstractmethod
from typing import List, Optional

from ...entities.person import PersonLabel


class LabelStore(ABC):
    """Interface for persisting person labels keyed by cluster id."""

    @abstractmethod
    def get(self, cluster_id: str) -> Optional[PersonLabel]:
        """
        Look up the label attached to a cluster.

        Args:
            cluster_id: Cluster identifier

        Returns:
            The label, or None when the cluster is unlabeled

        Raises:
            LabelStoreError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def put(self, cluster_id: str, label: PersonLabel) -> None:
        """
        Insert or replace the label attached to a cluster.

        Args:
            cluster_id: Cluster identifier
            label: Label to store

        Raises:
            LabelStoreError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def delete(self, cluster_id: str) -> bool:
        """
        Remove the label attached to a cluster.

        Args:
            cluster_id: Cluster identifier

        Returns:
            True if a label existed and was removed

        Raises:
            LabelStoreError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def values(self) -> List[PersonLabel]:
        """
        List every stored label.

        Raises:
            LabelStoreError: If the backend cannot be read
        """
        pass
