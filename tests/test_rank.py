import numpy as np
import pytest

from sentence_qa.app import index_text
from sentence_qa.retrieve.rank import cosine, select_best


def test_cosine_symmetric_and_self_similarity():
    rng = np.random.default_rng(7)
    for _ in range(5):
        a, b = rng.random(6), rng.random(6)
        assert cosine(a, b) == pytest.approx(cosine(b, a))
        assert cosine(a, a) == pytest.approx(1.0)


def test_cosine_zero_vector_is_zero():
    z = np.zeros(3)
    assert cosine(z, np.array([1.0, 0.0, 0.0])) == 0.0
    assert cosine(z, z) == 0.0


def test_threshold_is_strict():
    assert select_best([0.1, 0.2], threshold=0.2) is None
    assert select_best([0.1, 0.2001], threshold=0.2) == 1


def test_ties_prefer_earliest_index():
    assert select_best([0.3, 0.7, 0.7, 0.1]) == 1


def test_select_best_empty_and_negative():
    assert select_best([]) is None
    assert select_best([-0.4, -0.1], threshold=-0.5) == 1


def test_rank_finds_matching_sentence(sample_doc, cfg):
    ranker = index_text(sample_doc, cfg)
    hit = ranker.rank("¿Cuándo presentan los estudiantes sus exámenes?")
    assert hit is not None
    assert hit.index == 2
    assert hit.text == "Los estudiantes presentan sus exámenes finales mañana"
    assert hit.score > 0.2


def test_identical_query_scores_highest(sample_doc, cfg):
    ranker = index_text(sample_doc, cfg)
    for unit in ranker.indexer.units:
        scores = ranker.scores(unit.text)
        assert scores[unit.index] == pytest.approx(1.0)
        assert max(scores) == pytest.approx(scores[unit.index])


def test_out_of_vocabulary_query_has_no_answer(sample_doc, cfg):
    ranker = index_text(sample_doc, cfg)
    assert not ranker.query_vector("xilófono zeppelin").any()
    assert ranker.rank("xilófono zeppelin") is None
    assert ranker.scores("xilófono zeppelin") == [0.0, 0.0, 0.0, 0.0]


def test_stopword_query_has_no_answer(sample_doc, cfg):
    ranker = index_text(sample_doc, cfg)
    assert ranker.rank("el de la que") is None
    assert ranker.rank("   ") is None


def test_empty_document(cfg):
    ranker = index_text("", cfg)
    assert ranker.indexer.n_docs == 0
    assert ranker.scores("cualquier cosa") == []
    assert ranker.rank("cualquier cosa") is None


def test_threshold_override(sample_doc, cfg):
    ranker = index_text(sample_doc, cfg)
    q = "¿Cuándo presentan los estudiantes sus exámenes?"
    assert ranker.rank(q, threshold=0.99) is None
    assert ranker.rank(q, threshold=0.0) is not None


def test_rank_threshold_equal_to_score_is_strict(sample_doc, cfg):
    ranker = index_text(sample_doc, cfg)
    q = "¿Cuándo presentan los estudiantes sus exámenes?"
    hit = ranker.rank(q)
    assert ranker.rank(q, threshold=hit.score) is None
    assert ranker.rank(q, threshold=hit.score - 1e-4) == hit


def test_search_reports_tokens_scores_and_hit(sample_doc, cfg):
    ranker = index_text(sample_doc, cfg)
    ranking = ranker.search("exámenes finales")
    assert ranking.tokens == ranker.normalizer.normalize("exámenes finales")
    assert len(ranking.scores) == 4
    assert ranking.hit.index == 2
    assert ranking.top_score == ranking.hit.score
    assert ranking.threshold == 0.2
