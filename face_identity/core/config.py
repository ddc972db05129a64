"""Configuration settings for the face identity engine."""
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        SIMILARITY_THRESHOLD: Minimum linkage similarity for two clusters to merge (0-1)
        MIN_CLUSTER_SIZE: Clusters smaller than this are dissolved into unclustered faces
        MAX_CLUSTERS: Maximum number of clusters returned by a clustering pass
        LINKAGE: Inter-cluster similarity rule (single, complete or average)
        LABEL_STORE_BACKEND: Where person labels live (memory, json or database)
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
    )

    # Core Settings
    PROJECT_NAME: str = "Face Identity Engine"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # Clustering Settings
    SIMILARITY_THRESHOLD: float = Field(0.6, ge=0.0, le=1.0)
    MIN_CLUSTER_SIZE: int = Field(2, ge=1)
    MAX_CLUSTERS: int = Field(50, ge=1)
    LINKAGE: Literal["single", "complete", "average"] = "average"

    # Split Settings
    SPLIT_THRESHOLD_DELTA: float = 0.1
    MIN_FACES_TO_SPLIT: int = 4

    # Suggestion Settings
    MERGE_SUGGESTION_THRESHOLD: float = 0.7
    SPLIT_SUGGESTION_MIN_FACES: int = 10
    SPLIT_SUGGESTION_MAX_INTERNAL_SIMILARITY: float = 0.5

    # Representative face scoring
    LARGE_FACE_AREA_FRACTION: float = 0.1  # Bounding boxes are normalized to 0-1

    # Label Store Settings
    LABEL_STORE_BACKEND: Literal["memory", "json", "database"] = "memory"
    LABEL_STORE_PATH: str = "person_labels.json"
    DATABASE_URL: str = "sqlite:///person_labels.db"
    DATABASE_ECHO: bool = False

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False


settings = Settings()
