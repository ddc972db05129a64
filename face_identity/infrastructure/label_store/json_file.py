"""JSON file backed label store."""
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import portalocker
from pydantic import TypeAdapter, ValidationError

from face_identity.core.exceptions import LabelStoreError
from face_identity.core.logging import get_logger
from face_identity.domain.entities.person import PersonLabel
from face_identity.domain.interfaces.storage import LabelStore

logger = get_logger(__name__)

_LABELS_ADAPTER = TypeAdapter(Dict[str, PersonLabel])


class JsonFileLabelStore(LabelStore):
    """Label store persisted as one JSON document keyed by cluster id.

    The file is read on construction and re-read before every change. Changes
    run under an exclusive ``portalocker`` lock on a sibling ``.lock`` file, so
    processes sharing one path do not overwrite each other's labels. Writes go
    to a temporary sibling file which then replaces the target, and the cached
    labels only change once that write succeeded.

    Example:
        ```python
        store = JsonFileLabelStore(Path("labels.json"))
        store.put(cluster_id, label)
        JsonFileLabelStore(Path("labels.json")).get(cluster_id)  # label
        ```
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Open the store, loading existing labels if the file exists.

        Args:
            path: Location of the JSON document

        Raises:
            LabelStoreError: If the file exists but cannot be parsed
        """
        self.path = Path(path)
        self.lock_path = self.path.with_suffix(self.path.suffix + ".lock")
        self._labels: Dict[str, PersonLabel] = self._load()

    def get(self, cluster_id: str) -> Optional[PersonLabel]:
        return self._labels.get(cluster_id)

    def put(self, cluster_id: str, label: PersonLabel) -> None:
        with self._exclusive_lock():
            labels = {**self._load(), cluster_id: label}
            self._save(labels)
            self._labels = labels

    def delete(self, cluster_id: str) -> bool:
        with self._exclusive_lock():
            current = self._load()
            if cluster_id not in current:
                self._labels = current
                return False
            labels = {key: value for key, value in current.items() if key != cluster_id}
            self._save(labels)
            self._labels = labels
            return True

    def values(self) -> List[PersonLabel]:
        return list(self._labels.values())

    @contextmanager
    def _exclusive_lock(self) -> Iterator[None]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(self.lock_path, "a+")
        except OSError as e:
            raise LabelStoreError(
                f"Cannot open lock file: {self.lock_path}",
                details={"path": str(self.lock_path), "error": str(e)},
            ) from e

        with lock_file:
            portalocker.lock(lock_file, portalocker.LOCK_EX)
            try:
                yield
            finally:
                portalocker.unlock(lock_file)

    def _load(self) -> Dict[str, PersonLabel]:
        if not self.path.exists():
            return {}
        try:
            labels = _LABELS_ADAPTER.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.error("Failed to load label file", path=str(self.path), error=str(e))
            raise LabelStoreError(
                f"Cannot read label file: {self.path}",
                details={"path": str(self.path), "error": str(e)},
            ) from e
        logger.debug("Loaded labels", path=str(self.path), labels=len(labels))
        return labels

    def _save(self, labels: Dict[str, PersonLabel]) -> None:
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(temp_path, "wb") as f:
                f.write(_LABELS_ADAPTER.dump_json(labels, indent=2))
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except OSError as e:
            logger.error("Failed to write label file", path=str(self.path), error=str(e))
            temp_path.unlink(missing_ok=True)
            raise LabelStoreError(
                f"Cannot write label file: {self.path}",
                details={"path": str(self.path), "error": str(e)},
            ) from e
