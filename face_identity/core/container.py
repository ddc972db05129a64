"""Service container for dependency injection."""
from typing import Optional

from face_identity.core.config import Settings, settings as default_settings
from face_identity.core.logging import get_logger

# Import interfaces
from face_identity.domain.interfaces.similarity import SimilarityMetric
from face_identity.domain.interfaces.storage import LabelStore
from face_identity.domain.value_objects.clustering import ClusteringOptions

# Import concrete implementations used for instantiation
from face_identity.infrastructure.label_store import (
    DatabaseLabelStore,
    InMemoryLabelStore,
    JsonFileLabelStore,
)
from face_identity.services.clustering import HierarchicalClusterer
from face_identity.services.identity_resolver import IdentityResolver
from face_identity.services.person_identity import PersonIdentityStore
from face_identity.services.person_search import PersonSearchService
from face_identity.services.similarity import CosineSimilarityMetric, SimilarityMatrixBuilder

logger = get_logger(__name__)


def create_label_store(settings: Settings) -> LabelStore:
    """Instantiate the label store backend selected by ``LABEL_STORE_BACKEND``."""
    if settings.LABEL_STORE_BACKEND == "json":
        return JsonFileLabelStore(settings.LABEL_STORE_PATH)
    if settings.LABEL_STORE_BACKEND == "database":
        return DatabaseLabelStore.from_url(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    return InMemoryLabelStore()


class ServiceContainer:
    """Container for engine services.

    This container wires the metric, clusterer, resolver and label services
    for one photo library. Separate libraries or profiles each get their own
    container, so nothing is shared between them.

    Example:
        ```python
        container = ServiceContainer(Settings(LABEL_STORE_BACKEND="json"))
        container.initialize()

        # Get services from container
        result = container.clusterer.cluster_faces(faces)
        container.identity_store.label_person(result.clusters[0].id, "Alice")
        ```
    """

    def __init__(self, settings: Optional[Settings] = None, label_store: Optional[LabelStore] = None) -> None:
        """Initialize empty container.

        Args:
            settings: Engine settings; module settings when omitted
            label_store: Pre-built label store overriding LABEL_STORE_BACKEND
        """
        self.settings = settings or default_settings
        self._label_store_override = label_store

        # Core services - Use interface type hints
        self.metric: Optional[SimilarityMetric] = None
        self.label_store: Optional[LabelStore] = None

        # Domain services (depend on interfaces)
        self.matrix_builder: Optional[SimilarityMatrixBuilder] = None
        self.clusterer: Optional[HierarchicalClusterer] = None
        self.resolver: Optional[IdentityResolver] = None
        self.identity_store: Optional[PersonIdentityStore] = None
        self.search_service: Optional[PersonSearchService] = None

    def initialize(self) -> None:
        """Initialize all services in the correct order."""
        self.metric = CosineSimilarityMetric()
        self.label_store = self._label_store_override or create_label_store(self.settings)
        self.matrix_builder = SimilarityMatrixBuilder(self.metric)
        self.clusterer = HierarchicalClusterer(
            self.matrix_builder,
            default_options=ClusteringOptions.from_settings(self.settings),
        )
        self.resolver = IdentityResolver(self.metric, self.clusterer, settings=self.settings)
        self.identity_store = PersonIdentityStore(self.label_store, self.resolver)
        self.search_service = PersonSearchService(self.identity_store, self.metric, settings=self.settings)
        logger.info(
            "Service container initialized",
            label_store=type(self.label_store).__name__,
            linkage=self.settings.LINKAGE,
        )

    def cleanup(self) -> None:
        """Drop all services in reverse order of initialization."""
        self.search_service = None
        self.identity_store = None
        self.resolver = None
        self.clusterer = None
        self.matrix_builder = None
        self.label_store = None
        self.metric = None
