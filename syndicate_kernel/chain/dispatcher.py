"""
Chain Reaction Dispatcher — secondary effects that cascade from an event.

Behavioral Contract:
- Each trigger first applies its direct effect, then every chain rule that
  holds against the resulting state fires, strongest first
- Chain rules may emit follow-up events; these are dispatched only while
  depth < max_cascade_depth, deeper ones are dropped with a trace line
- Unknown trigger names and malformed payloads are a logged no-op
- Every reaction is written to the session log under the trigger's name
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from syndicate_kernel.contexts.world import ChainContext
from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.decision import Decision
from syndicate_kernel.models.events import (
    Betrayal,
    ChainEvent,
    ChainEventAdapter,
    Hit,
    MissionFailed,
    PoliceRaid,
    TerritoryLost,
)
from syndicate_kernel.models.state import GameState
from syndicate_kernel.rules.table import RuleTable
from syndicate_kernel.session.providers import Clock, SystemClock

logger = logging.getLogger(__name__)

RAID_REVENUE_FACTOR = 0.8
LOST_REVENUE_FACTOR = 0.5


class ChainResult:
    """Everything one dispatch did, including the cascades it set off."""

    def __init__(self, trigger: str, depth: int = 0):
        self.trigger = trigger
        self.depth = depth
        self.decisions: List[Decision] = []
        self.trace: List[str] = []
        self.follow_ups: List["ChainResult"] = []
        self.dropped: List[str] = []

    @property
    def fired_rules(self) -> List[str]:
        fired = [d.matched_rule_id for d in self.decisions if d.matched_rule_id]
        for child in self.follow_ups:
            fired.extend(child.fired_rules)
        return fired

    @property
    def empty(self) -> bool:
        return not self.trace and not self.decisions

    def to_dict(self) -> dict:
        return {
            "trigger": self.trigger,
            "depth": self.depth,
            "decisions": [d.model_dump(mode="json") for d in self.decisions],
            "trace": list(self.trace),
            "follow_ups": [f.to_dict() for f in self.follow_ups],
            "dropped": list(self.dropped),
        }


class _Reaction:
    """What chain rule effects act on: the live state plus any follow-ups they queue."""

    def __init__(self, state: GameState, event: ChainEvent):
        self.state = state
        self.event = event
        self.follow_ups: List[ChainEvent] = []


def _informant_paranoia(r: _Reaction, ctx: ChainContext) -> List[str]:
    r.state.reputation -= 10
    r.follow_ups.append(Betrayal(headcount_loss=0, source="informant"))
    return ["The raid has everyone paranoid about informants: reputation -10"]


def _hit_to_war(r: _Reaction, ctx: ChainContext) -> List[str]:
    rival = next((x for x in r.state.rivals.values() if x.hostility > 80), None)
    if rival is None:
        return []
    rival.at_war = True
    rival.hostility = 100
    return [f"The {rival.name} declares war"]


def _leadership_crisis(r: _Reaction, ctx: ChainContext) -> List[str]:
    r.state.reputation -= 15
    r.state.wealth -= 10_000
    return ["The betrayal triggers a leadership crisis: reputation -15, wealth -$10,000"]


def _revenge(r: _Reaction, ctx: ChainContext) -> List[str]:
    lines = ["The loss demands revenge: your soldiers are calling for blood"]
    if r.state.rivals:
        rival = max(r.state.rivals.values(), key=lambda x: x.hostility)
        rival.hostility += 5
        lines.append(f"Tension with the {rival.name} rises: hostility +5")
    return lines


def _compound_crisis(r: _Reaction, ctx: ChainContext) -> List[str]:
    r.state.heat += 15
    r.state.reputation -= 10
    return ["Crisis is compounding: heat +15, reputation -10"]


def build_chain_table() -> RuleTable:
    t = RuleTable("chain_reaction", default_verdict="none")
    t.add_rule("CHAIN_RAID_TO_INFORMANT", "Raid Triggers Informant Paranoia",
               lambda c: c.trigger == "police_raid" and c.heat > 50,
               "informant", 1000, effect=_informant_paranoia)
    t.add_rule("CHAIN_HIT_TO_WAR", "Hit Escalates to War",
               lambda c: c.trigger == "hit" and c.high_tension,
               "war", 1000, effect=_hit_to_war)
    t.add_rule("CHAIN_BETRAYAL_TO_CRISIS", "Betrayal Triggers Crisis",
               lambda c: c.trigger == "betrayal" and c.unstable,
               "leadership_crisis", 1000, effect=_leadership_crisis)
    t.add_rule("CHAIN_LOSS_TO_REVENGE", "Loss Triggers Revenge",
               lambda c: c.trigger in ("territory_lost", "mission_failed") and not c.crisis,
               "revenge", 900, effect=_revenge)
    t.add_rule("CHAIN_COMPOUND_CRISIS", "Compounding Crises",
               lambda c: c.crisis and c.trigger in ("police_raid", "betrayal"),
               "compound_crisis", 800, effect=_compound_crisis)
    return t


class ChainReactionDispatcher:
    """Applies a chain event and the cascade it sets off."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
        table: Optional[RuleTable] = None,
    ):
        self.config = config or EngineConfig()
        self.clock = clock or SystemClock()
        self.table = table or build_chain_table()
        self._direct: Dict[str, Callable[[GameState, Any], List[str]]] = {}
        self._register_direct_effects()

    def _register_direct_effects(self) -> None:
        self._direct["police_raid"] = self._police_raid
        self._direct["hit"] = self._hit
        self._direct["betrayal"] = self._betrayal
        self._direct["territory_lost"] = self._territory_lost
        self._direct["mission_failed"] = self._mission_failed

    def dispatch_named(
        self,
        state: GameState,
        name: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> ChainResult:
        """Validate a trigger name and payload, then dispatch. Bad input does nothing."""
        data = dict(payload or {})
        data["trigger"] = name
        try:
            event = ChainEventAdapter.validate_python(data)
        except ValidationError as e:
            logger.warning("Ignoring chain trigger %r: %s", name, e.error_count())
            return ChainResult(trigger=name)
        return self.dispatch(state, event)

    def dispatch(self, state: GameState, event: ChainEvent, depth: int = 0) -> ChainResult:
        now = self.clock.now()
        result = ChainResult(trigger=event.trigger, depth=depth)

        direct = self._direct.get(event.trigger)
        if direct is None:
            logger.warning("No chain handler for trigger %r", event.trigger)
            return result
        result.trace.extend(direct(state, event))

        reaction = _Reaction(state, event)
        ctx = ChainContext.from_state(state, event.trigger)
        result.decisions = self.table.evaluate_top(reaction, ctx, limit=len(self.table), now=now)
        for decision in result.decisions:
            result.trace.extend(decision.trace)

        if result.trace:
            state.log(event.trigger, result.trace[0], now)
        logger.debug(
            "chain %s at depth %d fired %s",
            event.trigger, depth, [d.matched_rule_id for d in result.decisions],
        )

        for follow_up in reaction.follow_ups:
            if depth < self.config.max_cascade_depth:
                result.follow_ups.append(self.dispatch(state, follow_up, depth + 1))
            else:
                result.dropped.append(follow_up.trigger)
                result.trace.append(
                    f"Cascade depth limit reached: {follow_up.trigger} dropped"
                )
        return result

    # --- Direct effects ---

    def _police_raid(self, state: GameState, event: PoliceRaid) -> List[str]:
        state.heat += 10
        lines = ["Police raid! Heat +10"]
        territory = state.territories.get(event.territory_id) if event.territory_id else None
        if territory is not None:
            territory.weekly_revenue *= RAID_REVENUE_FACTOR
            lines.append(f"{territory.name} revenue cut to ${territory.weekly_revenue:,.0f}/week")
        return lines

    def _hit(self, state: GameState, event: Hit) -> List[str]:
        state.heat += 5
        lines = ["A hit goes down. Heat +5"]
        rival = state.rivals.get(event.rival_id) if event.rival_id else None
        if rival is not None:
            rival.hostility += 20
            lines.append(f"The {rival.name} is furious: hostility +20")
        return lines

    def _betrayal(self, state: GameState, event: Betrayal) -> List[str]:
        state.reputation -= 10
        state.soldier_count -= event.headcount_loss
        lines = [f"Betrayal by an {event.source}! Reputation -10"]
        if event.headcount_loss:
            lines.append(f"Lost {event.headcount_loss} soldier(s)")
        return lines

    def _territory_lost(self, state: GameState, event: TerritoryLost) -> List[str]:
        territory = state.territories.get(event.territory_id) if event.territory_id else None
        if territory is None:
            return []
        territory.disputed = True
        territory.owner_id = None
        territory.weekly_revenue *= LOST_REVENUE_FACTOR
        return [
            f"Lost control of {territory.name}",
            f"Weekly income now ${state.weekly_income:,.0f}",
        ]

    def _mission_failed(self, state: GameState, event: MissionFailed) -> List[str]:
        return [f"Mission {event.mission_id or 'unknown'} failed"]
