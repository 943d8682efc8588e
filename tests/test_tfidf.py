import math

import numpy as np
import pytest

from sentence_qa.index.schema import Unit
from sentence_qa.index.tfidf import TfidfIndexer, build_vectors


def _norm(v):
    return float(np.sqrt(np.dot(v, v)))


def test_vocabulary_in_first_occurrence_order():
    _, vocab, _ = build_vectors([["b", "a"], ["c", "a", "d"]])
    assert dict(vocab) == {"b": 0, "a": 1, "c": 2, "d": 3}


def test_document_frequency_counts_units_not_occurrences():
    _, _, df = build_vectors([["a", "a", "a", "b"], ["b"], ["c"]])
    assert df.tolist() == [1, 2, 1]


def test_idf_weighting_and_normalization():
    vectors, vocab, df = build_vectors([["a", "b"], ["b", "c"], ["d"]])
    # b appears in 2 of 3 units: ln(3 / 3) == 0
    assert vectors[0].tolist() == pytest.approx([1.0, 0.0, 0.0, 0.0])
    assert vectors[2].tolist() == pytest.approx([0.0, 0.0, 0.0, 1.0])


def test_raw_counts_are_used():
    vectors, _, _ = build_vectors([["a", "a", "b"], ["c"], ["d"]])
    w = math.log(3 / 2)
    expected = np.array([2 * w, w, 0.0, 0.0])
    expected /= np.linalg.norm(expected)
    assert vectors[0].tolist() == pytest.approx(expected.tolist())


def test_term_in_every_unit_gets_negative_weight():
    vectors, _, _ = build_vectors([["x"], ["x"]])
    assert vectors[0].tolist() == pytest.approx([-1.0])


def test_vectors_are_unit_length_or_zero():
    seqs = [["a", "b", "b"], [], ["c", "a"], ["d", "e", "a"]]
    vectors, _, df = build_vectors(seqs)
    assert not vectors[1].any()
    for i in (0, 2, 3):
        assert _norm(vectors[i]) == pytest.approx(1.0)
    # the empty unit adds nothing to document frequency
    assert df.tolist() == [3, 1, 1, 1, 1]


def test_empty_input():
    vectors, vocab, df = build_vectors([])
    assert vectors.shape == (0, 0)
    assert len(vocab) == 0
    assert df.shape == (0,)


def test_results_are_read_only():
    vectors, vocab, df = build_vectors([["a"], ["b"]])
    with pytest.raises(ValueError):
        vectors[0, 0] = 5.0
    with pytest.raises(ValueError):
        df[0] = 5
    with pytest.raises(TypeError):
        vocab["z"] = 9


def test_indexer_vectorize_drops_unknown_tokens():
    units = [
        Unit(index=0, text="uno", tokens=["a", "b"]),
        Unit(index=1, text="dos", tokens=["c"]),
        Unit(index=2, text="tres", tokens=["d"]),
    ]
    idx = TfidfIndexer().build(units)
    assert idx.n_docs == 3
    q = idx.vectorize(["a", "zzz", "zzz"])
    assert len(idx.vocabulary) == 4
    assert q.tolist() == pytest.approx([1.0, 0.0, 0.0, 0.0])
    assert not idx.vectorize(["zzz"]).any()
