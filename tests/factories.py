"""Factories for faces, clusters, photos and synthetic embeddings."""
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import numpy as np

from face_identity.domain.entities import BoundingBox, Face, FaceAttributes, PersonCluster, PersonLabel, Photo

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_face(
    face_id: str,
    embedding: Optional[Sequence[float]] = (1.0, 0.0, 0.0, 0.0),
    confidence: float = 0.9,
    smile: Optional[float] = None,
    eyes_open: Optional[float] = None,
    width: float = 0.2,
    height: float = 0.2,
) -> Face:
    """Build a face with sensible defaults."""
    return Face(
        id=face_id,
        bounding_box=BoundingBox(x=0.1, y=0.1, width=width, height=height),
        confidence=confidence,
        attributes=FaceAttributes(smile=smile, eyes_open=eyes_open),
        embedding=list(embedding) if embedding is not None else [],
    )


def make_cluster(
    cluster_id: str,
    faces: Optional[List[Face]] = None,
    photos: Optional[List[Photo]] = None,
    confidence: float = 0.8,
    created_at: datetime = BASE_TIME,
) -> PersonCluster:
    """Build a cluster; defaults to a single face named after the cluster."""
    return PersonCluster(
        id=cluster_id,
        faces=faces if faces is not None else [make_face(f"face_{cluster_id}")],
        photos=photos or [],
        confidence=confidence,
        created_at=created_at,
        updated_at=created_at,
    )


def make_photo(photo_id: str, faces: Optional[List[Face]] = None, days: int = 0) -> Photo:
    """Build a photo whose ``updated_at`` is ``days`` after the base time."""
    return Photo(id=photo_id, faces=faces or [], updated_at=BASE_TIME + timedelta(days=days))


def make_group_embeddings(
    n_per_group: int,
    n_groups: int = 2,
    dim: int = 64,
    noise: float = 0.05,
    seed: int = 42,
) -> List[np.ndarray]:
    """Embeddings forming tight, well separated groups.

    Group centres are orthogonal basis vectors, so faces in different groups
    score about 0.5 while faces in the same group score close to 1.
    """
    rng = np.random.RandomState(seed)
    embeddings = []
    for group in range(n_groups):
        center = np.zeros(dim)
        center[group] = 1.0
        for _ in range(n_per_group):
            emb = center + rng.randn(dim) * noise
            embeddings.append(emb / np.linalg.norm(emb))
    return embeddings


def make_label(cluster_id: str, name: str = "Alice") -> PersonLabel:
    """Build a label created at the base time."""
    return PersonLabel(
        id=str(uuid.uuid4()),
        name=name,
        cluster_id=cluster_id,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )
