"""
Ranking engine: tie-break chain, duration filter, numbering and stability.
"""

import logging

from atytw_engine.ranking import (
    DEFAULT_RULES,
    RankingEngine,
    TieBreakRule,
    compare_candidates,
    within_duration,
)

from factories import make_candidate


def _cusips(ranked):
    return [c.bond.cusip for c in ranked]


def test_yield_then_liquidity_scenario():
    a = make_candidate("A", atytw=4.00, liquidity=0.80)
    b = make_candidate("B", atytw=3.90, liquidity=0.90)
    c = make_candidate("C", atytw=3.90, liquidity=0.70)

    ranked = RankingEngine().rank([c, b, a])

    assert _cusips(ranked) == ["A", "B", "C"]
    assert [r.rank for r in ranked] == [1, 2, 3]


def test_yields_within_tolerance_fall_through_to_liquidity():
    higher_yield = make_candidate("Y", atytw=3.9009, liquidity=0.60)
    more_liquid = make_candidate("L", atytw=3.9000, liquidity=0.80)

    assert _cusips(RankingEngine().rank([higher_yield, more_liquid])) == ["L", "Y"]


def test_liquidity_within_tolerance_falls_through_to_stability():
    a = make_candidate("A", atytw=3.5, liquidity=0.70, stability=0.60)
    b = make_candidate("B", atytw=3.5, liquidity=0.74, stability=0.90)

    assert _cusips(RankingEngine().rank([a, b])) == ["B", "A"]


def test_shorter_duration_wins_final_tie_and_missing_counts_as_ten():
    long_bond = make_candidate("LONG", atytw=3.5, duration=12.0)
    unknown = make_candidate("NONE", atytw=3.5)
    short_bond = make_candidate("SHORT", atytw=3.5, duration=4.0)

    ranked = RankingEngine().rank([long_bond, unknown, short_bond])

    assert _cusips(ranked) == ["SHORT", "NONE", "LONG"]


def test_full_ties_keep_input_order():
    candidates = [make_candidate(str(i), atytw=3.5, liquidity=0.6, stability=0.7) for i in range(6)]
    assert _cusips(RankingEngine().rank(candidates)) == ["0", "1", "2", "3", "4", "5"]


def test_max_duration_filter_keeps_bonds_without_duration():
    short_bond = make_candidate("SHORT", atytw=3.0, duration=4.0)
    edge = make_candidate("EDGE", atytw=3.1, duration=7.0)
    long_bond = make_candidate("LONG", atytw=5.0, duration=15.0)
    unknown = make_candidate("NONE", atytw=3.2)

    ranked = RankingEngine().rank([short_bond, edge, long_bond, unknown], max_duration=7.0)

    assert _cusips(ranked) == ["NONE", "EDGE", "SHORT"]
    assert [r.rank for r in ranked] == [1, 2, 3]


def test_empty_input():
    assert RankingEngine().rank([]) == []
    assert RankingEngine().rank([], max_duration=5.0) == []


def test_rank_returns_new_objects():
    original = make_candidate("A", atytw=3.0)
    ranked = RankingEngine().rank([original])

    assert original.rank is None
    assert ranked[0].rank == 1
    assert ranked[0] is not original


def test_comparator_rules_in_isolation():
    a = make_candidate("A", atytw=3.0, liquidity=0.5)
    b = make_candidate("B", atytw=3.0, liquidity=0.9)

    atytw_rule, liquidity_rule, _, duration_rule = DEFAULT_RULES
    assert atytw_rule.compare(a, b) == 0
    assert liquidity_rule.compare(a, b) == 1
    assert liquidity_rule.compare(b, a) == -1
    assert duration_rule.compare(a, b) == 0
    assert compare_candidates(a, b) == 1
    assert compare_candidates(a, a) == 0


def test_custom_rules():
    by_stability_only = [TieBreakRule("stability", lambda c: c.stability_score)]
    a = make_candidate("A", atytw=9.0, stability=0.2)
    b = make_candidate("B", atytw=1.0, stability=0.9)

    assert _cusips(RankingEngine(rules=by_stability_only).rank([a, b])) == ["B", "A"]


def test_within_duration():
    assert within_duration(make_candidate("A", 3.0, duration=8.0), None)
    assert within_duration(make_candidate("A", 3.0), 1.0)
    assert not within_duration(make_candidate("A", 3.0, duration=8.0), 7.5)


def test_ranked_copies_share_nothing_mutable_with_inputs():
    candidate = make_candidate("A", atytw=3.0).model_copy(
        update={"explanation": ("After-tax YTW: 3.000%",)}
    )

    ranked = RankingEngine().rank([candidate])

    assert isinstance(ranked[0].explanation, tuple)
    assert ranked[0].explanation == ("After-tax YTW: 3.000%",)
    assert candidate.rank is None
    assert candidate.explanation == ("After-tax YTW: 3.000%",)


def test_rank_logs_run_summary(caplog):
    candidates = [make_candidate("A", 3.0, duration=4.0), make_candidate("B", 3.1, duration=9.0)]

    with caplog.at_level(logging.INFO, logger="atytw_engine.ranking"):
        RankingEngine().rank(candidates, max_duration=5.0)

    assert "Ranked 1 of 2 candidates (max duration 5y)" in caplog.text
