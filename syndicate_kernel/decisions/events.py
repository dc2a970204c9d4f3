"""
Which events land on the family this week.

At most `max_events_per_turn` event rules fire per week, strongest first.
Raids, rival attacks and betrayals hand a chain event back to the caller
for the chain reaction dispatcher.
"""

from datetime import datetime
from typing import List, Optional

from syndicate_kernel.contexts.world import EventContext
from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.decision import Decision
from syndicate_kernel.models.events import Betrayal, ChainEvent, Hit, PoliceRaid
from syndicate_kernel.models.state import GameState
from syndicate_kernel.rules.table import RuleTable

NO_EVENT = "none"


class GeneratedEvent:
    """An event that fired, with the chain reaction it sets off (if any)."""

    def __init__(self, decision: Decision, chain_event: Optional[ChainEvent] = None):
        self.decision = decision
        self.chain_event = chain_event

    @property
    def rule_id(self) -> Optional[str]:
        return self.decision.matched_rule_id

    def to_dict(self) -> dict:
        return {
            "decision": self.decision.model_dump(mode="json"),
            "chain_event": (
                self.chain_event.model_dump(mode="json") if self.chain_event else None
            ),
        }


def _hottest_territory(state: GameState) -> Optional[str]:
    owned = [t for t in state.territories.values() if t.owner_id is not None]
    if not owned:
        return None
    return max(owned, key=lambda t: t.heat_generation).id


def _most_hostile_rival(state: GameState) -> Optional[str]:
    if not state.rivals:
        return None
    return max(state.rivals.values(), key=lambda r: r.hostility).id


def _windfall(state: GameState, ctx: EventContext) -> List[str]:
    bonus = state.weekly_income
    state.wealth += bonus
    return [f"An unexpected windfall: +${bonus:,.0f}"]


def _is_crisis(ctx: EventContext) -> bool:
    return (
        (ctx.wealth < 10_000 and ctx.week > 5)
        or ctx.heat >= 95
        or (ctx.is_tense and ctx.is_weak_position)
    )


def _is_fortunate(ctx: EventContext) -> bool:
    return (
        ctx.reputation > 70
        and ctx.heat < 30
        and ctx.week % 8 == 0
        and ctx.week > 0
    )


def build_event_table() -> RuleTable:
    t = RuleTable("event", default_verdict=NO_EVENT, default_reason="A quiet week")
    t.add_rule("EVENT_POLICE_RAID", "Police Raid Event",
               lambda c: c.police_attention_high and not c.recent_raid, "police_raid", 900)
    t.add_rule("EVENT_INFORMANT", "Informant Threat",
               lambda c: c.is_weak_position and c.week > 10, "informant", 850)
    t.add_rule("EVENT_RIVAL_ATTACK", "Rival Family Attack",
               lambda c: c.is_tense and not c.recent_hit, "rival_attack", 800)
    t.add_rule("EVENT_OPPORTUNITY", "Business Opportunity",
               lambda c: c.is_wealthy_target and c.week % 4 == 0, "opportunity", 700)
    t.add_rule("EVENT_BETRAYAL", "Internal Betrayal",
               lambda c: c.is_weak_position and c.heat > 70, "betrayal", 750)
    t.add_rule("EVENT_CRISIS", "Family Crisis", _is_crisis, "crisis", 950)
    t.add_rule("EVENT_WINDFALL", "Unexpected Windfall", _is_fortunate, "windfall", 600,
               effect=_windfall)
    return t


class EventGenerator:
    def __init__(self, config: Optional[EngineConfig] = None, table: Optional[RuleTable] = None):
        self.config = config or EngineConfig()
        self.table = table or build_event_table()

    def generate(self, state: GameState, now: Optional[datetime] = None) -> List[GeneratedEvent]:
        ctx = EventContext.from_state(state, self.config)
        decisions = self.table.evaluate_top(
            state, ctx, self.config.max_events_per_turn, now=now
        )
        return [GeneratedEvent(d, self._chain_event_for(d, state)) for d in decisions]

    def _chain_event_for(self, decision: Decision, state: GameState) -> Optional[ChainEvent]:
        if decision.verdict == "police_raid":
            return PoliceRaid(territory_id=_hottest_territory(state))
        if decision.verdict == "rival_attack":
            return Hit(rival_id=_most_hostile_rival(state))
        if decision.verdict == "informant":
            return Betrayal(source="informant")
        if decision.verdict == "betrayal":
            return Betrayal(headcount_loss=1)
        return None
