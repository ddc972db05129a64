"""Clustering value objects."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from face_identity.core.config import Settings
from face_identity.domain.entities.face import Face
from face_identity.domain.entities.person import PersonCluster


class Linkage(str, Enum):
    """Rule turning face-level similarities into one inter-cluster similarity."""
    SINGLE = "single"
    COMPLETE = "complete"
    AVERAGE = "average"


class ClusteringOptions(BaseModel):
    """Parameters of a clustering pass."""
    similarity_threshold: float = Field(0.6, ge=0.0, le=1.0, description="Minimum linkage similarity to merge")
    min_cluster_size: int = Field(2, ge=1, description="Smaller clusters are dissolved")
    max_clusters: int = Field(50, ge=1, description="Maximum number of clusters returned")
    linkage: Linkage = Field(Linkage.AVERAGE, description="Inter-cluster similarity rule")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClusteringOptions":
        """Build clustering options from application settings."""
        return cls(
            similarity_threshold=settings.SIMILARITY_THRESHOLD,
            min_cluster_size=settings.MIN_CLUSTER_SIZE,
            max_clusters=settings.MAX_CLUSTERS,
            linkage=Linkage(settings.LINKAGE),
        )


class ClusteringResult(BaseModel):
    """Outcome of a clustering pass."""
    clusters: List[PersonCluster] = Field(..., description="Clusters meeting the minimum size")
    unclustered_faces: List[Face] = Field(..., description="Faces not placed in any returned cluster")
    processing_time: float = Field(..., description="Wall-clock duration of the pass in seconds")
    parameters: ClusteringOptions = Field(..., description="Effective options used for the pass")


class AddFaceResult(BaseModel):
    """Outcome of adding one face to a set of existing clusters."""
    cluster: Optional[PersonCluster] = Field(None, description="Updated or newly created cluster")
    is_new_cluster: bool = Field(False, description="Whether the cluster was synthesized for this face")
