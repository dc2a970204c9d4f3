"""
Rule Table — priority-ordered rules matched against a context snapshot.

Behavioral Contract:
- A table sees only its own rules
- evaluate() applies at most one rule: the highest-priority match, with
  ties going to the rule declared first
- When nothing matches, the table's default verdict is returned and the
  state is left untouched
- Effects mutate the state in place and return trace lines; the table
  never writes output itself
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from syndicate_kernel.models.decision import Decision
from syndicate_kernel.rules.confidence import ConfidenceScorer

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]
Effect = Callable[[Any, Any], Optional[List[str]]]


class RuleError(Exception):
    """Raised when a rule table is assembled incorrectly."""
    pass


class Rule:
    """A named (predicate, effect) pair with an integer priority. Higher wins."""

    def __init__(
        self,
        id: str,
        name: str,
        priority: int,
        predicate: Predicate,
        effect: Optional[Effect] = None,
        verdict: str = "",
        description: str = "",
    ):
        self.id = id
        self.name = name
        self.priority = priority
        self.predicate = predicate
        self.effect = effect
        self.verdict = verdict
        self.description = description

    def matches(self, ctx: Any) -> bool:
        return bool(self.predicate(ctx))

    def apply(self, state: Any, ctx: Any) -> List[str]:
        """Run the effect against the state. Rules without one only carry a verdict."""
        if self.effect is None:
            return []
        return list(self.effect(state, ctx) or [])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "priority": self.priority,
            "verdict": self.verdict,
            "description": self.description,
        }

    def __repr__(self) -> str:
        return f"Rule({self.id!r}, priority={self.priority})"


class RuleTable:
    """An independent, ordered set of rules for one subsystem."""

    def __init__(
        self,
        name: str,
        default_verdict: str,
        default_reason: str = "",
        scorer: Optional[ConfidenceScorer] = None,
    ):
        self.name = name
        self.default_verdict = default_verdict
        self.default_reason = default_reason or f"No {name} rule matched"
        self.scorer = scorer or ConfidenceScorer()
        self._rules: List[Rule] = []

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> List[Rule]:
        """Rules in declaration order."""
        return list(self._rules)

    def add(self, rule: Rule) -> Rule:
        if any(r.id == rule.id for r in self._rules):
            raise RuleError(f"Duplicate rule id '{rule.id}' in table '{self.name}'")
        self._rules.append(rule)
        return rule

    def add_rule(
        self,
        id: str,
        name: str,
        predicate: Predicate,
        verdict: str = "",
        priority: int = 0,
        effect: Optional[Effect] = None,
        description: str = "",
    ) -> Rule:
        """Declare a rule. Declaration order breaks priority ties."""
        return self.add(Rule(
            id=id,
            name=name,
            priority=priority,
            predicate=predicate,
            effect=effect,
            verdict=verdict,
            description=description,
        ))

    def remove(self, rule_id: str) -> bool:
        for i, rule in enumerate(self._rules):
            if rule.id == rule_id:
                del self._rules[i]
                return True
        return False

    def get(self, rule_id: str) -> Optional[Rule]:
        return next((r for r in self._rules if r.id == rule_id), None)

    def ranked(self) -> List[Rule]:
        """Rules in winning order. sorted() is stable, so ties keep declaration order."""
        return sorted(self._rules, key=lambda r: -r.priority)

    def matching(self, ctx: Any) -> List[Rule]:
        """Every rule whose predicate holds, in winning order."""
        return [r for r in self.ranked() if r.matches(ctx)]

    def select(self, ctx: Any, limit: int) -> List[Rule]:
        """The top `limit` matches, for tables that may fire more than one rule."""
        return self.matching(ctx)[:max(0, limit)]

    def winner(self, ctx: Any) -> Optional[Rule]:
        for rule in self.ranked():
            if rule.matches(ctx):
                return rule
        return None

    def evaluate(
        self,
        state: Any,
        ctx: Any,
        now: Optional[datetime] = None,
    ) -> Decision:
        """Pick the winning rule, apply its effect, and report the ruling."""
        rule = self.winner(ctx)

        if rule is None:
            confidence, _ = self.scorer.score(ctx, self.default_verdict)
            logger.debug("%s: no rule matched, default '%s'", self.name, self.default_verdict)
            return Decision(
                table=self.name,
                verdict=self.default_verdict,
                confidence=confidence,
                reason=self.default_reason,
                trace=[f"{self.name}: default '{self.default_verdict}'"],
                decided_at=now,
            )

        logger.debug(
            "%s: rule %s won with priority %d", self.name, rule.id, rule.priority,
        )
        return self._apply_rule(rule, state, ctx, now)

    def evaluate_top(
        self,
        state: Any,
        ctx: Any,
        limit: int,
        now: Optional[datetime] = None,
    ) -> List[Decision]:
        """Apply up to `limit` matching rules in winning order. No default on an empty match."""
        return [
            self._apply_rule(rule, state, ctx, now)
            for rule in self.select(ctx, limit)
        ]

    def _apply_rule(
        self,
        rule: Rule,
        state: Any,
        ctx: Any,
        now: Optional[datetime],
    ) -> Decision:
        verdict = rule.verdict or self.default_verdict
        trace = [f"{self.name}: {rule.name} (P:{rule.priority}) -> {verdict}"]
        trace.extend(rule.apply(state, ctx))
        confidence, support = self.scorer.score(ctx, verdict)
        trace.extend(f"confidence +{label}" for label in support)

        return Decision(
            table=self.name,
            verdict=verdict,
            matched_rule_id=rule.id,
            matched_rule_name=rule.name,
            confidence=confidence,
            reason=rule.description or rule.name,
            trace=trace,
            decided_at=now,
        )

    def apply_all(self, state: Any, ctx: Any) -> List[Tuple[Rule, List[str]]]:
        """Apply every matching rule in winning order. Used by additive modifier tables."""
        applied = []
        for rule in self.matching(ctx):
            applied.append((rule, rule.apply(state, ctx)))
        return applied

    def explain(self, ctx: Any) -> List[str]:
        """One line per rule in winning order: '[Y] name (P:900)' or '[N] ...'."""
        lines = []
        for rule in self.ranked():
            mark = "Y" if rule.matches(ctx) else "N"
            lines.append(f"[{mark}] {rule.name} (P:{rule.priority})")
        return lines

    def describe(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.ranked()]
