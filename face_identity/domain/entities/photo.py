"""Photo entity as seen by the identity engine."""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from face_identity.domain.entities.face import Face


class Photo(BaseModel):
    """Photo record owned by the storage collaborator.

    Only the fields needed to link faces back to photos are modelled here.
    """
    id: str = Field(..., description="Unique identifier of the photo")
    uri: Optional[str] = Field(None, description="Location of the image")
    faces: List[Face] = Field(default_factory=list, description="Faces detected in the photo")
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last time the photo record changed",
    )

    model_config = ConfigDict(frozen=True)

    def has_any_face(self, face_ids: set) -> bool:
        """Whether any face of this photo has an id in ``face_ids``."""
        return any(face.id in face_ids for face in self.faces)
