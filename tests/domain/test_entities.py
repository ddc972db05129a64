"""Tests for domain entity validation."""
import numpy as np
import pytest
from pydantic import ValidationError

from face_identity.domain.entities import BoundingBox, Face, PersonCluster

from tests.factories import make_cluster, make_face


class TestFace:
    """Test suite for Face."""

    def test_embedding_is_converted_to_flat_float_array(self):
        face = make_face("f1", embedding=[1, 2, 3])

        assert isinstance(face.embedding, np.ndarray)
        assert face.embedding.dtype == np.float64
        assert face.embedding.shape == (3,)
        assert face.has_embedding

    def test_missing_embedding_is_empty(self):
        face = Face(id="f1", bounding_box=BoundingBox(x=0, y=0, width=0.1, height=0.1), confidence=0.5)

        assert face.embedding.size == 0
        assert not face.has_embedding
        assert not make_face("f2", embedding=None).has_embedding

    @pytest.mark.parametrize("confidence", [-0.1, 1.1])
    def test_confidence_must_be_in_unit_range(self, confidence):
        with pytest.raises(ValidationError):
            make_face("f1", confidence=confidence)

    def test_bounding_box_area(self):
        assert BoundingBox(x=0, y=0, width=0.5, height=0.4).area == pytest.approx(0.2)


class TestPersonCluster:
    """Test suite for PersonCluster."""

    def test_cluster_requires_faces(self):
        with pytest.raises(ValidationError):
            PersonCluster(id="c1", faces=[], confidence=0.5)

    def test_face_ids(self):
        cluster = PersonCluster(id="c1", faces=[make_face("a"), make_face("b")], confidence=0.5)

        assert cluster.face_ids == {"a", "b"}
        assert cluster.photos == []

    def test_cluster_is_immutable(self):
        cluster = PersonCluster(id="c1", faces=[make_face("a")], confidence=0.5)

        with pytest.raises(ValidationError):
            cluster.confidence = 0.9


class TestValueEquality:
    """Entities holding embeddings compare by value."""

    def test_equal_faces_compare_equal(self):
        assert make_face("f1", embedding=[1.0, 0.0]) == make_face("f1", embedding=[1.0, 0.0])

    def test_faces_with_different_embeddings_differ(self):
        assert make_face("f1", embedding=[1.0, 0.0]) != make_face("f1", embedding=[0.0, 1.0])
        assert make_face("f1", embedding=[1.0, 0.0]) != make_face("f1", embedding=[1.0, 0.0, 0.0])

    def test_faces_with_different_fields_differ(self):
        assert make_face("f1", confidence=0.9) != make_face("f1", confidence=0.8)
        assert make_face("f1") != make_face("f2")

    def test_equal_faces_hash_alike(self):
        assert len({make_face("f1", embedding=[1.0, 0.0]), make_face("f1", embedding=[1.0, 0.0])}) == 1

    def test_equal_clusters_compare_equal(self):
        first = make_cluster("c1", faces=[make_face("f1", embedding=[1.0, 0.0])])
        second = make_cluster("c1", faces=[make_face("f1", embedding=[1.0, 0.0])])

        assert first == second
        assert second in [make_cluster("c0"), first]
        assert [make_cluster("c0"), first].index(second) == 1

    def test_clusters_with_different_faces_differ(self):
        first = make_cluster("c1", faces=[make_face("f1", embedding=[1.0, 0.0])])
        second = make_cluster("c1", faces=[make_face("f1", embedding=[0.0, 1.0])])

        assert first != second
