"""Tests for service wiring."""
from face_identity.core.config import Settings
from face_identity.core.container import ServiceContainer, create_label_store
from face_identity.infrastructure.label_store import (
    DatabaseLabelStore,
    InMemoryLabelStore,
    JsonFileLabelStore,
)

from tests.factories import make_face


class TestCreateLabelStore:
    """Test suite for backend selection."""

    def test_memory_backend(self):
        assert isinstance(create_label_store(Settings(_env_file=None)), InMemoryLabelStore)

    def test_json_backend(self, tmp_path):
        settings = Settings(
            _env_file=None,
            LABEL_STORE_BACKEND="json",
            LABEL_STORE_PATH=str(tmp_path / "labels.json"),
        )

        store = create_label_store(settings)

        assert isinstance(store, JsonFileLabelStore)
        assert store.path == tmp_path / "labels.json"

    def test_database_backend(self, tmp_path):
        settings = Settings(
            _env_file=None,
            LABEL_STORE_BACKEND="database",
            DATABASE_URL=f"sqlite:///{tmp_path / 'labels.db'}",
        )

        assert isinstance(create_label_store(settings), DatabaseLabelStore)


class TestServiceContainer:
    """Test suite for ServiceContainer."""

    def test_initialize_wires_services(self, settings):
        container = ServiceContainer(settings)

        container.initialize()

        assert container.clusterer.matrix_builder is container.matrix_builder
        assert container.resolver.clusterer is container.clusterer
        assert isinstance(container.label_store, InMemoryLabelStore)

    def test_containers_do_not_share_labels(self, settings):
        first, second = ServiceContainer(settings), ServiceContainer(settings)
        first.initialize()
        second.initialize()

        first.identity_store.label_person("c1", "Alice")

        assert second.identity_store.get_person_label("c1") is None

    def test_label_store_override(self, settings):
        store = InMemoryLabelStore()
        container = ServiceContainer(settings, label_store=store)

        container.initialize()

        assert container.label_store is store

    def test_clusterer_uses_configured_threshold(self):
        container = ServiceContainer(Settings(_env_file=None, SIMILARITY_THRESHOLD=0.95))
        container.initialize()
        faces = [make_face("a", embedding=[1.0, 0.0]), make_face("b", embedding=[0.8, 0.6])]

        result = container.clusterer.cluster_faces(faces)

        assert result.clusters == []

    def test_end_to_end_labeling(self, settings):
        container = ServiceContainer(settings)
        container.initialize()
        faces = [make_face(f"f{i}") for i in range(3)]

        cluster = container.clusterer.cluster_faces(faces).clusters[0]
        container.identity_store.label_person(cluster.id, "Alice")
        stats = container.search_service.get_person_stats([cluster])

        assert stats.labeled_people == 1
        assert stats.total_faces == 3

    def test_cleanup_drops_services(self, settings):
        container = ServiceContainer(settings)
        container.initialize()

        container.cleanup()

        assert container.clusterer is None
        assert container.label_store is None
