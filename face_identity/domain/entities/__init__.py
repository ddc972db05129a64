"""Domain entities package."""
from .face import BoundingBox, EmotionScores, Face, FaceAttributes, Landmark
from .person import PersonCluster, PersonLabel, utcnow
from .photo import Photo

__all__ = [
    "BoundingBox",
    "EmotionScores",
    "Face",
    "FaceAttributes",
    "Landmark",
    "PersonCluster",
    "PersonLabel",
    "Photo",
    "utcnow",
]
