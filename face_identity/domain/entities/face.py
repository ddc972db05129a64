"""Core face domain entities."""
from typing import List, Literal, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BoundingBox(BaseModel):
    """Face bounding box coordinates, normalized to the 0-1 range."""
    x: float = Field(..., description="Left coordinate of the bounding box")
    y: float = Field(..., description="Top coordinate of the bounding box")
    width: float = Field(..., description="Width of the bounding box")
    height: float = Field(..., description="Height of the bounding box")

    model_config = ConfigDict(frozen=True)

    @property
    def area(self) -> float:
        """Area of the box as a fraction of the image."""
        return self.width * self.height


class Landmark(BaseModel):
    """A single facial landmark position."""
    type: Literal["eye_left", "eye_right", "nose", "mouth_left", "mouth_right"]
    x: float
    y: float

    model_config = ConfigDict(frozen=True)


class EmotionScores(BaseModel):
    """Per-emotion scores reported by the detector."""
    happy: float = 0.0
    sad: float = 0.0
    angry: float = 0.0
    surprised: float = 0.0
    neutral: float = 0.0

    model_config = ConfigDict(frozen=True)


class FaceAttributes(BaseModel):
    """Optional face attributes; every field may be missing."""
    smile: Optional[float] = Field(None, description="Smile probability (0-1)")
    eyes_open: Optional[float] = Field(None, description="Eyes-open probability (0-1)")
    age: Optional[float] = Field(None, description="Estimated age in years")
    gender: Optional[str] = Field(None, description="Estimated gender")
    emotion: Optional[EmotionScores] = Field(None, description="Emotion scores")

    model_config = ConfigDict(frozen=True)


class Face(BaseModel):
    """Face produced by the external detector, carrying an identity embedding.

    An empty embedding means the face is unusable for identity work; such faces
    are routed to the unclustered path rather than rejected.
    """
    id: str = Field(..., description="Unique identifier of the face")
    bounding_box: BoundingBox = Field(..., description="Bounding box coordinates")
    landmarks: List[Landmark] = Field(default_factory=list, description="Landmark positions")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence score")
    attributes: FaceAttributes = Field(default_factory=FaceAttributes, description="Optional attributes")
    embedding: np.ndarray = Field(
        default_factory=lambda: np.zeros(0, dtype=np.float64),
        description="Face embedding vector",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @field_validator("embedding", mode="before")
    @classmethod
    def validate_embedding(cls, v: Optional[Union[np.ndarray, list, tuple]]) -> np.ndarray:
        """Validate and convert embedding to a flat float numpy array."""
        if v is None:
            return np.zeros(0, dtype=np.float64)
        return np.asarray(v, dtype=np.float64).reshape(-1)

    def __eq__(self, other: object) -> bool:
        """Field-wise equality; embeddings compare element by element."""
        if not isinstance(other, Face):
            return NotImplemented
        fields = {key: value for key, value in self.__dict__.items() if key != "embedding"}
        other_fields = {key: value for key, value in other.__dict__.items() if key != "embedding"}
        return fields == other_fields and np.array_equal(self.embedding, other.embedding)

    def __hash__(self) -> int:
        return hash((self.id, self.embedding.tobytes()))

    @property
    def has_embedding(self) -> bool:
        """Whether the face carries a usable (non-empty) embedding."""
        return self.embedding.size > 0
