"""Person search and statistics value objects."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from face_identity.domain.entities.person import PersonCluster


class SortBy(str, Enum):
    """Field used to order person search results."""
    NAME = "name"
    PHOTO_COUNT = "photoCount"
    CONFIDENCE = "confidence"
    LAST_SEEN = "lastSeen"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PersonSearchOptions(BaseModel):
    """Filters and ordering for a person search."""
    name: Optional[str] = Field(None, description="Case-insensitive substring of the label name")
    min_photos: int = Field(0, ge=0, description="Minimum number of linked photos")
    sort_by: SortBy = Field(SortBy.PHOTO_COUNT, description="Sort key")
    sort_order: SortOrder = Field(SortOrder.DESC, description="Sort direction")

    model_config = ConfigDict(frozen=True)


class PersonStats(BaseModel):
    """Aggregate statistics over a set of person clusters."""
    total_people: int
    labeled_people: int
    unlabeled_clusters: int
    total_faces: int
    average_photos_per_person: float = Field(..., description="NaN when there are no clusters")


class MergeCandidate(BaseModel):
    """Pair of clusters that probably depict the same person."""
    cluster1: PersonCluster
    cluster2: PersonCluster
    similarity: float = Field(..., description="Mean cross-cluster face similarity")
