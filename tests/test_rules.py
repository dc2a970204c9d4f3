"""Tests for rule tables, confidence scoring, rule definitions and analysis."""

from typing import List

import pytest
from pydantic import BaseModel

from syndicate_kernel.rules.analysis import analyze_table
from syndicate_kernel.rules.confidence import ConfidenceScorer
from syndicate_kernel.rules.definitions import (
    ConditionDefinition,
    RuleDefinition,
    build_rule,
    load_definitions,
    validate_definitions,
)
from syndicate_kernel.rules.table import Rule, RuleError, RuleTable


class _Ctx(BaseModel):
    x: int = 0
    name: str = ""


class _Counter:
    def __init__(self):
        self.hits: List[str] = []


def _mark(label: str):
    def effect(state: _Counter, ctx: _Ctx) -> List[str]:
        state.hits.append(label)
        return [f"marked {label}"]
    return effect


def _make_table() -> RuleTable:
    t = RuleTable("test", default_verdict="idle")
    t.add_rule("LOW", "Low", lambda c: c.x > 0, "low", 10, effect=_mark("low"))
    t.add_rule("HIGH", "High", lambda c: c.x > 5, "high", 100, effect=_mark("high"))
    return t


class TestRuleTable:
    def test_highest_priority_wins_regardless_of_declaration_order(self):
        state = _Counter()
        decision = _make_table().evaluate(state, _Ctx(x=10))
        assert decision.verdict == "high"
        assert decision.matched_rule_id == "HIGH"
        assert state.hits == ["high"]

    def test_tie_goes_to_first_declared(self):
        t = RuleTable("tie", default_verdict="none")
        t.add_rule("FIRST", "First", lambda c: True, "first", 50)
        t.add_rule("SECOND", "Second", lambda c: True, "second", 50)
        for _ in range(5):
            assert t.evaluate(None, _Ctx()).matched_rule_id == "FIRST"

    def test_no_match_returns_default_and_leaves_state_alone(self):
        state = _Counter()
        decision = _make_table().evaluate(state, _Ctx(x=0))
        assert decision.verdict == "idle"
        assert decision.defaulted
        assert state.hits == []

    def test_only_winner_applies(self):
        state = _Counter()
        _make_table().evaluate(state, _Ctx(x=10))
        assert "low" not in state.hits

    def test_trace_names_rule_and_effect_lines(self):
        decision = _make_table().evaluate(_Counter(), _Ctx(x=10))
        assert decision.trace[0] == "test: High (P:100) -> high"
        assert "marked high" in decision.trace

    def test_evaluation_is_deterministic(self):
        t = _make_table()
        first = t.evaluate(_Counter(), _Ctx(x=3))
        second = t.evaluate(_Counter(), _Ctx(x=3))
        assert first.model_dump() == second.model_dump()

    def test_duplicate_rule_id_raises(self):
        t = _make_table()
        with pytest.raises(RuleError):
            t.add_rule("LOW", "Again", lambda c: True, "x", 1)

    def test_remove_and_get(self):
        t = _make_table()
        assert t.get("LOW") is not None
        assert t.remove("LOW")
        assert not t.remove("LOW")
        assert len(t) == 1

    def test_evaluate_top_respects_limit(self):
        state = _Counter()
        decisions = _make_table().evaluate_top(state, _Ctx(x=10), limit=1)
        assert [d.matched_rule_id for d in decisions] == ["HIGH"]
        assert state.hits == ["high"]

    def test_evaluate_top_empty_when_nothing_matches(self):
        assert _make_table().evaluate_top(_Counter(), _Ctx(x=0), limit=3) == []

    def test_apply_all_runs_every_match_in_order(self):
        state = _Counter()
        applied = _make_table().apply_all(state, _Ctx(x=10))
        assert [r.id for r, _ in applied] == ["HIGH", "LOW"]
        assert state.hits == ["high", "low"]

    def test_explain(self):
        lines = _make_table().explain(_Ctx(x=3))
        assert lines == ["[N] High (P:100)", "[Y] Low (P:10)"]

    def test_rule_without_effect_uses_table_default_verdict(self):
        t = RuleTable("bare", default_verdict="fallback")
        t.add(Rule(id="R", name="R", priority=1, predicate=lambda c: True))
        decision = t.evaluate(None, _Ctx())
        assert decision.verdict == "fallback"
        assert decision.matched_rule_id == "R"


class TestConfidenceScorer:
    def test_only_chosen_verdict_evidence_counts(self):
        scorer = ConfidenceScorer(base=50)
        scorer.support("accept", "big", lambda c: c.x > 5, 30)
        scorer.support("reject", "small", lambda c: c.x < 100, 40)
        score, labels = scorer.score(_Ctx(x=10), "accept")
        assert score == 80
        assert labels == ["big"]

    def test_score_is_clamped(self):
        scorer = ConfidenceScorer(base=90).support("a", "x", lambda c: True, 30)
        assert scorer.score(_Ctx(), "a")[0] == 100
        scorer = ConfidenceScorer(base=10).support("a", "x", lambda c: True, -30)
        assert scorer.score(_Ctx(), "a")[0] == 0

    def test_unknown_verdict_scores_base(self):
        assert ConfidenceScorer(base=42).score(_Ctx(), "nothing") == (42, [])


class TestRuleDefinitions:
    def _definition(self, **overrides) -> RuleDefinition:
        data = dict(
            id="BIG_X",
            name="Big X",
            priority=20,
            conditions=[ConditionDefinition(field="x", operator=">=", value=5)],
            verdict="big",
        )
        data.update(overrides)
        return RuleDefinition(**data)

    def test_built_rule_reads_context_fields(self):
        rule = build_rule(self._definition(), _Ctx)
        assert rule.matches(_Ctx(x=5))
        assert not rule.matches(_Ctx(x=4))

    def test_missing_field_is_false(self):
        definition = self._definition(
            conditions=[ConditionDefinition(field="nope", operator="==", value=1)]
        )
        rule = build_rule(definition)
        assert not rule.matches(_Ctx(x=1))

    def test_incompatible_types_are_false(self):
        definition = self._definition(
            conditions=[ConditionDefinition(field="x", operator=">", value="five")]
        )
        assert not build_rule(definition).matches(_Ctx(x=10))

    def test_contains_operator(self):
        definition = self._definition(
            conditions=[ConditionDefinition(field="name", operator="contains", value="ZINI")]
        )
        assert build_rule(definition).matches(_Ctx(name="Barzini"))

    def test_invalid_definition_raises(self):
        with pytest.raises(RuleError):
            build_rule(self._definition(verdict=""))

    def test_validation_errors(self):
        report = validate_definitions([
            self._definition(id=""),
            self._definition(name=" "),
            self._definition(id="DUP"),
            self._definition(id="DUP", priority=1),
        ])
        assert not report.ok
        assert "Rule has an empty id" in report.errors
        assert any("empty name" in e for e in report.errors)
        assert "Duplicate rule id 'DUP'" in report.errors

    def test_validation_warnings(self):
        report = validate_definitions(
            [
                self._definition(id="A"),
                self._definition(
                    id="B",
                    conditions=[
                        ConditionDefinition(field="x", operator="~=", value=1),
                        ConditionDefinition(field="missing", operator="==", value=1),
                    ],
                ),
                self._definition(id="C", priority=5, conditions=[]),
            ],
            _Ctx,
        )
        assert report.ok
        assert any("unknown operator '~='" in w for w in report.warnings)
        assert any("unknown field 'missing'" in w for w in report.warnings)
        assert any("share priority 20" in w for w in report.warnings)
        assert any("always matches" in w for w in report.warnings)

    def test_unknown_operator_never_holds(self):
        definition = self._definition(
            conditions=[ConditionDefinition(field="x", operator="~=", value=1)]
        )
        assert not build_rule(definition).matches(_Ctx(x=1))

    def test_load_definitions(self):
        definitions = load_definitions([
            {
                "id": "LOUD",
                "name": "Loud",
                "priority": 3,
                "conditions": [{"field": "x", "operator": ">", "value": 1}],
                "verdict": "noise",
            }
        ])
        assert definitions[0].conditions[0].operator == ">"
        assert definitions[0].verdict == "noise"


class TestAnalysis:
    def test_dead_shadowed_and_overlapping_rules(self):
        t = RuleTable("analysis", default_verdict="none")
        t.add_rule("A", "A", lambda c: c.x > 5, "a", 10)
        t.add_rule("B", "B", lambda c: c.x > 3, "b", 5)
        t.add_rule("C", "C", lambda c: c.x > 100, "c", 50)
        t.add_rule("D", "D", lambda c: c.x > 5, "d", 1)

        report = analyze_table(t, [_Ctx(x=4), _Ctx(x=6)])

        assert report.scenarios == 2
        assert report.match_counts == {"A": 1, "B": 2, "C": 0, "D": 1}
        assert report.win_counts == {"A": 1, "B": 1, "C": 0, "D": 0}
        assert report.dead_rules == ["C"]
        assert report.shadowed_rules == ["D"]
        assert ("A", "B", 1) in report.overlaps
        assert ("A", "D", 1) in report.overlaps
        assert ("B", "D", 1) in report.overlaps
