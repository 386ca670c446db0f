import pytest

from settings_search.config import BonusPolicy
from settings_search.pipeline_types import Candidate, FieldScore, RankResult
from settings_search.rank import (
    compute_bonuses,
    compute_total_score,
    filter_ranks,
    rank_candidates,
    score_candidate,
    sort_ranks,
)


def _cand(path, title=None, description=None):
    group, item = path.split(".", 1)
    return Candidate(group_name=group, item_name=item, title=title, description=description, path=path)


def _scores(title=0.0, description=0.0, group_name=0.0, item_name=0.0):
    return {
        "title": FieldScore(title, ""),
        "description": FieldScore(description, ""),
        "group_name": FieldScore(group_name, ""),
        "item_name": FieldScore(item_name, ""),
    }


def _result(path, total):
    return RankResult(candidate=_cand(path), field_scores=_scores(), total_score=total)


CATALOG = [
    _cand("editor.fontSize", description="Height in pixels of editor text."),
    _cand("editor.showInvisibles", title="Invisibles",
          description="Render placeholders in place of invisible characters."),
    _cand("editor.tabLength", description="Number of spaces used to represent a tab."),
    _cand("core.themes", description="Names of UI and syntax themes."),
]


def test_perfect_title_match_earns_title_bonuses():
    result = score_candidate("Invisibles", CATALOG[1])
    assert result.field_scores["title"].score == 1
    assert result.bonuses["title"] == pytest.approx(0.2)
    assert result.bonuses["perfect_title"] == pytest.approx(0.1)


def test_total_score_for_invisibles_legacy_policy():
    cand = _cand("editor.showInvisibles", title="Invisibles")
    result = score_candidate("invisibles", cand)

    fs = result.field_scores
    assert fs["title"].score == 1
    assert fs["description"].score == 0
    assert fs["group_name"].score == pytest.approx(1 / 6)
    assert fs["item_name"].score == pytest.approx(10 / 14)

    # title 0.2 + perfect title 0.1, plus the title-keyed perfect description
    # and perfect group-name bonuses
    expected = 1 + 0 + 1 / 6 + 10 / 14 + 0.2 + 0.1 + 0.1 + 0.1
    assert result.total_score == pytest.approx(expected)


def test_total_score_for_invisibles_per_field_policy():
    cand = _cand("editor.showInvisibles", title="Invisibles")
    result = score_candidate("invisibles", cand, policy=BonusPolicy.PER_FIELD_KEYED)
    expected = 1 + 0 + 1 / 6 + 10 / 14 + 0.2 + 0.1
    assert result.total_score == pytest.approx(expected)
    assert result.bonuses["perfect_description"] == 0
    assert result.bonuses["perfect_group_name"] == 0


def test_legacy_policy_keys_perfect_bonuses_on_title():
    bonuses = compute_bonuses(_scores(title=1.0, description=0.0, group_name=0.0))
    assert bonuses["perfect_description"] == pytest.approx(0.1)
    assert bonuses["perfect_group_name"] == pytest.approx(0.1)

    bonuses = compute_bonuses(_scores(title=0.5, description=1.0, group_name=1.0))
    assert bonuses["perfect_description"] == 0
    assert bonuses["perfect_group_name"] == 0


def test_per_field_policy_keys_perfect_bonuses_on_own_field():
    bonuses = compute_bonuses(
        _scores(title=0.5, description=1.0, group_name=1.0),
        policy=BonusPolicy.PER_FIELD_KEYED,
    )
    assert bonuses["perfect_description"] == pytest.approx(0.1)
    assert bonuses["perfect_group_name"] == pytest.approx(0.1)
    assert bonuses["perfect_title"] == 0

    # policy may also be given by its string value
    same = compute_bonuses(_scores(title=0.5, description=1.0, group_name=1.0), "per-field-keyed-bonus")
    assert same == bonuses


def test_bonus_thresholds_are_strict():
    bonuses = compute_bonuses(_scores(title=0.8, description=0.5, group_name=0.8, item_name=0.8))
    assert sum(bonuses.values()) == 0

    bonuses = compute_bonuses(_scores(title=0.81, description=0.51, group_name=0.81, item_name=0.81))
    assert bonuses["title"] == pytest.approx(0.2)
    assert bonuses["description"] == pytest.approx(0.1)
    assert bonuses["group_name"] == pytest.approx(0.2)
    assert bonuses["item_name"] == pytest.approx(0.2)


def test_perfect_item_name_bonus():
    bonuses = compute_bonuses(_scores(item_name=1.0))
    assert bonuses["item_name"] == pytest.approx(0.2)
    assert bonuses["perfect_item_name"] == pytest.approx(0.1)


def test_compute_total_score_sums_fields_and_bonuses():
    fs = _scores(title=0.5, description=0.25, group_name=0.125, item_name=0.125)
    assert compute_total_score(fs, {"a": 0.2, "b": 0.1}) == pytest.approx(1.3)


def test_filter_ranks_min_score_is_strict():
    ranks = [_result("a.low", 1.4), _result("a.high", 1.6), _result("a.edge", 1.5)]
    kept = filter_ranks(ranks, 1.5)
    assert [r.candidate.path for r in kept] == ["a.high"]


def test_sort_ranks_descending_and_stable_on_ties():
    ranks = [
        _result("a.first", 1.0),
        _result("a.best", 3.0),
        _result("a.second", 1.0),
        _result("a.third", 1.0),
    ]
    ordered = sort_ranks(ranks)
    assert [r.candidate.path for r in ordered] == ["a.best", "a.first", "a.second", "a.third"]


def test_rank_candidates_orders_and_filters():
    results = rank_candidates("tab", CATALOG, min_score=0.5)
    totals = [r.total_score for r in results]

    assert totals == sorted(totals, reverse=True)
    assert all(t > 0.5 for t in totals)
    assert results[0].candidate.path == "editor.tabLength"


def test_rank_candidates_keeps_input_order_for_equal_scores():
    tagged = [
        Candidate(group_name="g", item_name="softwrap", title="Soft Wrap", description=None, path="g.one"),
        Candidate(group_name="g", item_name="softwrap", title="Soft Wrap", description=None, path="g.two"),
        Candidate(group_name="g", item_name="softwrap", title="Soft Wrap", description=None, path="g.three"),
    ]
    results = rank_candidates("soft wrap", tagged, min_score=0.0)
    assert [r.candidate.path for r in results] == ["g.one", "g.two", "g.three"]

    results = rank_candidates("soft wrap", list(reversed(tagged)), min_score=0.0)
    assert [r.candidate.path for r in results] == ["g.three", "g.two", "g.one"]


def test_rank_candidates_never_returns_scores_at_or_below_min():
    for min_score in (0.0, 0.5, 1.0, 2.0):
        for r in rank_candidates("editor", CATALOG, min_score=min_score):
            assert r.total_score > min_score


def test_rank_candidates_is_idempotent():
    first = rank_candidates("invisible", CATALOG, min_score=0.2)
    second = rank_candidates("invisible", CATALOG, min_score=0.2)
    assert [(r.candidate.path, r.total_score) for r in first] == [
        (r.candidate.path, r.total_score) for r in second
    ]


def test_rank_candidates_case_folds_query_and_fields():
    upper = rank_candidates("INVISIBLES", CATALOG, min_score=0.0)
    lower = rank_candidates("invisibles", CATALOG, min_score=0.0)
    assert [(r.candidate.path, r.total_score) for r in upper] == [
        (r.candidate.path, r.total_score) for r in lower
    ]
    assert upper[0].candidate.path == "editor.showInvisibles"


def test_rank_candidates_treats_missing_fields_as_empty():
    cand = Candidate(group_name="", item_name="", title=None, description=None, path="x.y")
    result = score_candidate("anything", cand)
    assert result.total_score == 0
    assert rank_candidates("anything", [cand], min_score=0.0) == []


def test_rank_candidates_requires_min_score():
    with pytest.raises(ValueError):
        rank_candidates("tab", CATALOG, min_score=None)


def test_rank_candidates_empty_input():
    assert rank_candidates("tab", [], min_score=0.0) == []
