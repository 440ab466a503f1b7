import pytest

from rag_services.retrieval import VectorIndex


@pytest.fixture
def index():
    return VectorIndex.from_embeddings(
        "doc-1",
        ["north", "east", "north-east"],
        [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]],
    )


def test_search_ranks_by_cosine_similarity(index):
    results = index.search([2.0, 0.1], top_k=3)

    assert [r.text for r in results] == ["north", "north-east", "east"]
    assert results[0].score == pytest.approx(0.99875, rel=1e-3)
    assert all(r.document_id == "doc-1" for r in results)


def test_search_caps_k_at_index_size(index):
    assert len(index.search([1.0, 0.0], top_k=10)) == 3


def test_add_appends_and_tags_owner(index):
    index.add("doc-2", ["south"], [[0.0, -1.0]])

    assert index.size == 4
    best = index.search([0.0, -3.0], top_k=1)[0]
    assert (best.text, best.document_id) == ("south", "doc-2")


def test_add_rejects_wrong_dimension(index):
    with pytest.raises(ValueError):
        index.add("doc-2", ["bad"], [[1.0, 2.0, 3.0]])
    assert index.size == 3


def test_add_rejects_mismatched_lengths(index):
    with pytest.raises(ValueError):
        index.add("doc-2", ["one", "two"], [[1.0, 0.0]])
    assert index.size == 3


def test_remove_document(index):
    index.add("doc-2", ["south"], [[0.0, -1.0]])

    removed = index.remove_document("doc-1")

    assert removed == 3
    assert index.size == 1
    assert [r.text for r in index.search([1.0, 0.0], top_k=3)] == ["south"]


def test_remove_unknown_document_is_noop(index):
    assert index.remove_document("nope") == 0
    assert index.size == 3


def test_from_embeddings_requires_vectors():
    with pytest.raises(ValueError):
        VectorIndex.from_embeddings("doc-1", [], [])
