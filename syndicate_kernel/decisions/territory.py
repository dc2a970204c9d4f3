"""
Territory Valuation — what a block of turf is really worth this week.

The valuation never rewrites the territory's base revenue; it reports an
effective revenue for the week's collections. A disputed territory's
effective revenue is never above its base.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from syndicate_kernel.contexts.world import TerritoryContext
from syndicate_kernel.models.decision import NOT_FOUND, Decision
from syndicate_kernel.models.state import GameState, Territory
from syndicate_kernel.rules.confidence import ConfidenceScorer
from syndicate_kernel.rules.table import RuleTable

UNCHANGED = "unchanged"
INCREASED = "increased"
REDUCED = "reduced"


class RevenueAdjustment:
    """Working figure the valuation rules adjust."""

    def __init__(self, base: float):
        self.base = base
        self.revenue = base


class TerritoryValuation(BaseModel):
    territory_id: str
    base_revenue: float
    effective_revenue: float
    decision: Decision


def _scale(factor: float, label: str):
    def effect(adj: RevenueAdjustment, ctx: TerritoryContext) -> List[str]:
        adj.revenue *= factor
        return [f"{label}: revenue x{factor:g}"]
    return effect


def _shift(amount: float, label: str):
    def effect(adj: RevenueAdjustment, ctx: TerritoryContext) -> List[str]:
        adj.revenue += amount
        return [f"{label}: revenue {amount:+,.0f}"]
    return effect


def _valuation_scorer() -> ConfidenceScorer:
    scorer = ConfidenceScorer(base=60)
    scorer.support(INCREASED, "high_value", lambda c: c.is_high_value, 20)
    scorer.support(INCREASED, "low_risk", lambda c: c.is_low_risk, 10)
    scorer.support(REDUCED, "disputed", lambda c: c.disputed, 20)
    scorer.support(REDUCED, "police_watching", lambda c: c.police_watching, 10)
    scorer.support(REDUCED, "high_risk", lambda c: c.is_high_risk, 10)
    return scorer


def build_valuation_table() -> RuleTable:
    t = RuleTable(
        "territory_valuation",
        default_verdict=UNCHANGED,
        default_reason="Territory earns its usual take",
        scorer=_valuation_scorer(),
    )
    t.add_rule("VALUE_GOLDEN", "Golden Territory",
               lambda c: c.is_prime and c.heat < 20 and c.reputation > 80,
               INCREASED, 1100, effect=_scale(2.0, "Golden territory"))
    t.add_rule("VALUE_PRIME", "Prime Territory",
               lambda c: c.is_prime and c.high_demand,
               INCREASED, 1000, effect=_scale(1.5, "Prime location in high demand"))
    t.add_rule("VALUE_DISPUTED", "Disputed Territory",
               lambda c: c.disputed,
               REDUCED, 950, effect=_scale(0.5, "Contested turf"))
    t.add_rule("VALUE_RISKY", "Risky Territory",
               lambda c: c.needs_cleaning,
               REDUCED, 900, effect=_scale(0.7, "Too hot to run at full tilt"))
    t.add_rule("VALUE_GAMBLING_BOOM", "Gambling Boom",
               lambda c: c.is_gambling and c.reputation > 70 and not c.police_watching,
               INCREASED, 850, effect=_shift(5_000, "Gambling boom"))
    t.add_rule("VALUE_SMUGGLING_SAFE", "Safe Smuggling",
               lambda c: c.is_smuggling and c.heat < 40,
               INCREASED, 850, effect=_shift(8_000, "Smuggling routes are quiet"))
    t.add_rule("VALUE_TROUBLED", "Troubled Territory",
               lambda c: (c.disputed or c.heat > 80 or c.reputation < 30) and not c.is_prime,
               REDUCED, 800, effect=_scale(0.6, "Trouble keeps the customers away"))
    t.add_rule("VALUE_SATURATED", "Saturated Market",
               lambda c: c.market_saturated and not c.is_high_value,
               REDUCED, 700, effect=_shift(-2_000, "Market saturated"))
    return t


class TerritoryValuator:
    def __init__(self, table: Optional[RuleTable] = None):
        self.table = table or build_valuation_table()

    def value(
        self,
        state: GameState,
        territory: Territory,
        now: Optional[datetime] = None,
    ) -> TerritoryValuation:
        ctx = TerritoryContext.from_state(state, territory)
        adj = RevenueAdjustment(territory.weekly_revenue)
        decision = self.table.evaluate(adj, ctx, now=now)

        effective = max(0.0, adj.revenue)
        if territory.disputed and effective > adj.base:
            effective = adj.base
            decision.trace.append("Disputed territory: increase withheld")

        return TerritoryValuation(
            territory_id=territory.id,
            base_revenue=adj.base,
            effective_revenue=round(effective, 2),
            decision=decision,
        )

    def value_by_id(
        self,
        state: GameState,
        territory_id: str,
        now: Optional[datetime] = None,
    ) -> TerritoryValuation:
        """Value a territory by id. Unknown ids come back as a not-found verdict."""
        territory = state.territories.get(territory_id)
        if territory is None:
            return TerritoryValuation(
                territory_id=territory_id,
                base_revenue=0.0,
                effective_revenue=0.0,
                decision=Decision(
                    table=self.table.name,
                    verdict=NOT_FOUND,
                    confidence=100,
                    reason=f"Territory '{territory_id}' not found",
                    decided_at=now,
                ),
            )
        return self.value(state, territory, now=now)
