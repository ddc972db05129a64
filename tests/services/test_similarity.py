"""Tests for the cosine similarity metric and the similarity matrix builder."""
import numpy as np
import pytest

from face_identity.core.exceptions import EmbeddingDimensionError
from face_identity.services.similarity import CosineSimilarityMetric, SimilarityMatrixBuilder

from tests.factories import make_face


class TestCosineSimilarityMetric:
    """Test suite for the remapped cosine similarity."""

    def test_identical_embeddings_score_one(self, metric):
        embedding = np.array([0.3, -1.2, 4.5, 0.01])
        assert metric.compare(embedding, embedding.copy()) == 1.0

    def test_is_symmetric(self, metric):
        rng = np.random.RandomState(0)
        a, b = rng.randn(128), rng.randn(128)
        assert metric.compare(a, b) == metric.compare(b, a)

    def test_orthogonal_vectors_score_half(self, metric):
        assert metric.compare([1, 0, 0, 0], [0, 1, 0, 0]) == 0.5

    def test_opposite_vectors_score_zero(self, metric):
        assert metric.compare([1, 0, 0, 0], [-1, 0, 0, 0]) == 0.0

    def test_scale_does_not_matter(self, metric):
        assert metric.compare([1, 2, 3], [10, 20, 30]) == pytest.approx(1.0)

    def test_zero_vector_scores_zero(self, metric):
        assert metric.compare([0, 0, 0], [1, 0, 0]) == 0.0

    def test_dimension_mismatch_fails_fast(self, metric):
        with pytest.raises(EmbeddingDimensionError) as exc_info:
            metric.compare([1, 0, 0], [1, 0, 0, 0])
        assert exc_info.value.details == {"left_dim": 3, "right_dim": 4}

    def test_result_stays_in_unit_range(self, metric):
        rng = np.random.RandomState(1)
        for _ in range(50):
            score = metric.compare(rng.randn(16), rng.randn(16))
            assert 0.0 <= score <= 1.0


class TestSimilarityMatrixBuilder:
    """Test suite for the pairwise similarity table."""

    def test_matrix_is_symmetric_with_unit_diagonal(self, metric):
        rng = np.random.RandomState(3)
        faces = [make_face(f"f{i}", embedding=rng.randn(8)) for i in range(5)]

        matrix = SimilarityMatrixBuilder(metric).build(faces)

        assert matrix.shape == (5, 5)
        np.testing.assert_array_equal(np.diag(matrix), np.ones(5))
        np.testing.assert_array_equal(matrix, matrix.T)
        assert ((matrix >= 0.0) & (matrix <= 1.0)).all()

    def test_entries_match_metric(self, metric):
        faces = [
            make_face("a", embedding=[1, 0, 0, 0]),
            make_face("b", embedding=[0, 1, 0, 0]),
            make_face("c", embedding=[-1, 0, 0, 0]),
        ]

        matrix = SimilarityMatrixBuilder(metric).build(faces)

        assert matrix[0, 1] == 0.5
        assert matrix[0, 2] == 0.0
        assert matrix[2, 1] == 0.5

    def test_only_upper_triangle_is_computed(self):
        class CountingMetric(CosineSimilarityMetric):
            calls = 0

            def compare(self, a, b):
                CountingMetric.calls += 1
                return super().compare(a, b)

        faces = [make_face(f"f{i}", embedding=[i + 1, 1, 0, 0]) for i in range(6)]
        SimilarityMatrixBuilder(CountingMetric()).build(faces)

        assert CountingMetric.calls == 15

    def test_mixed_dimensions_are_rejected(self, metric):
        faces = [make_face("a", embedding=[1, 0, 0, 0]), make_face("b", embedding=[1, 0])]

        with pytest.raises(EmbeddingDimensionError) as exc_info:
            SimilarityMatrixBuilder(metric).build(faces)
        assert exc_info.value.details["face_id"] == "b"

    def test_empty_face_list(self, metric):
        assert SimilarityMatrixBuilder(metric).build([]).shape == (0, 0)
