"""Person identity entities."""
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from face_identity.domain.entities.face import Face
from face_identity.domain.entities.photo import Photo


def utcnow() -> datetime:
    """Timezone-aware current time used for all entity timestamps."""
    return datetime.now(timezone.utc)


class PersonCluster(BaseModel):
    """A set of faces judged to belong to the same person.

    Clusters are immutable values: incremental adds, merges and splits build
    new instances via ``model_copy`` instead of mutating this one. The human
    readable name is not stored here; it is looked up by ``id`` in the
    person identity store.
    """
    id: str = Field(..., description="Unique identifier of the cluster")
    faces: List[Face] = Field(..., description="Member faces (never empty)")
    photos: List[Photo] = Field(default_factory=list, description="Photos containing member faces")
    confidence: float = Field(..., ge=0.0, le=1.0, description="How strongly the members cohere")
    created_at: datetime = Field(default_factory=utcnow, description="When the cluster was created")
    updated_at: datetime = Field(default_factory=utcnow, description="When the cluster last changed")

    model_config = ConfigDict(frozen=True)

    @field_validator("faces")
    @classmethod
    def validate_faces(cls, v: List[Face]) -> List[Face]:
        """Reject clusters without faces."""
        if not v:
            raise ValueError("A person cluster must contain at least one face")
        return v

    @property
    def face_ids(self) -> set:
        return {face.id for face in self.faces}


class PersonLabel(BaseModel):
    """Human assigned name for a cluster, owned by the person identity store."""
    id: str = Field(..., description="Unique identifier of the label")
    name: str = Field(..., description="Person name")
    cluster_id: str = Field(..., description="Cluster this label is attached to")
    created_at: datetime = Field(default_factory=utcnow, description="When the label was created")
    updated_at: datetime = Field(default_factory=utcnow, description="When the label was last renamed")

    model_config = ConfigDict(frozen=True)
