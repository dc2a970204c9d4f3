"""
Player commands: bribe, expand, hit and peace.

Behavioral Contract:
- Each command checks its cost first; without the money the state is left
  untouched and the verdict is cannot_afford
- A command naming an unknown rival returns not_found, never raises
- Every command that runs writes one line to the session log
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.decision import CANNOT_AFFORD, NOT_FOUND, Decision
from syndicate_kernel.models.state import GameState, Territory, TerritoryType
from syndicate_kernel.session.providers import Clock, SystemClock

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND = "unknown_command"
TABLE_NAME = "commands"

Handler = Callable[[GameState, List[str], datetime], Decision]


def _decision(verdict: str, message: str, now: datetime, trace: Optional[List[str]] = None) -> Decision:
    return Decision(
        table=TABLE_NAME,
        verdict=verdict,
        confidence=100,
        reason=message,
        trace=trace or [message],
        decided_at=now,
    )


def _cannot_afford(cost: float, now: datetime) -> Decision:
    return _decision(CANNOT_AFFORD, f"Not enough money (need ${cost:,.0f})", now)


class CommandRunner:
    """Parses a command line and dispatches it to a registered handler."""

    def __init__(self, config: Optional[EngineConfig] = None, clock: Optional[Clock] = None):
        self.config = config or EngineConfig()
        self.clock = clock or SystemClock()
        self._handlers: Dict[str, Handler] = {}
        self._register_default_commands()

    def _register_default_commands(self) -> None:
        self._handlers["bribe"] = self._bribe
        self._handlers["expand"] = self._expand
        self._handlers["hit"] = self._hit
        self._handlers["peace"] = self._peace

    def register_command(self, name: str, handler: Handler) -> None:
        """Register a custom command handler."""
        self._handlers[name.lower()] = handler

    @property
    def commands(self) -> List[str]:
        return sorted(self._handlers)

    def run(self, state: GameState, line: str, now: Optional[datetime] = None) -> Decision:
        now = now or self.clock.now()
        parts = line.strip().split()
        if not parts:
            return _decision(UNKNOWN_COMMAND, "No command given", now)

        name, args = parts[0].lower(), parts[1:]
        handler = self._handlers.get(name)
        if handler is None:
            return _decision(UNKNOWN_COMMAND, f"Unknown command: {name}", now)

        decision = handler(state, args, now)
        logger.debug("command %s -> %s", name, decision.verdict)
        if decision.verdict not in (CANNOT_AFFORD, NOT_FOUND):
            state.log("command", decision.reason, now)
        return decision

    # --- Handlers ---

    def _bribe(self, state: GameState, args: List[str], now: datetime) -> Decision:
        cost = self.config.bribe_cost
        if state.wealth < cost:
            return _cannot_afford(cost, now)
        state.wealth -= cost
        state.heat -= self.config.bribe_heat_reduction
        return _decision(
            "bribe",
            f"Paid ${cost:,.0f} in bribes. Heat reduced by {self.config.bribe_heat_reduction}.",
            now,
        )

    def _expand(self, state: GameState, args: List[str], now: datetime) -> Decision:
        cost = self.config.expand_cost
        if state.wealth < cost:
            return _cannot_afford(cost, now)

        territory_id = f"new-territory-{state.week}"
        suffix = 2
        while territory_id in state.territories:
            territory_id = f"new-territory-{state.week}-{suffix}"
            suffix += 1

        state.wealth -= cost
        state.territories[territory_id] = Territory(
            id=territory_id,
            name=f"New Territory (week {state.week})",
            weekly_revenue=self.config.expand_revenue,
            heat_generation=self.config.expand_heat_generation,
            type=TerritoryType.PROTECTION,
        )
        return _decision(
            "expand",
            f"Expanded into new territory! (+${self.config.expand_revenue:,.0f}/week)",
            now,
        )

    def _hit(self, state: GameState, args: List[str], now: datetime) -> Decision:
        rival = state.find_rival(" ".join(args)) if args else None
        if rival is None:
            return _decision(NOT_FOUND, "Rival family not found", now)
        cost = self.config.hit_cost
        if state.wealth < cost:
            return _cannot_afford(cost, now)

        state.wealth -= cost
        rival.strength -= 20
        rival.hostility += 30
        state.heat += 25
        state.reputation += 10
        return _decision(
            "hit",
            f"Hit on the {rival.name}. Their strength drops, but the heat is on.",
            now,
            trace=[
                f"{rival.name}: strength -20, hostility +30",
                "Heat +25, reputation +10",
            ],
        )

    def _peace(self, state: GameState, args: List[str], now: datetime) -> Decision:
        rival = state.find_rival(" ".join(args)) if args else None
        if rival is None:
            return _decision(NOT_FOUND, "Rival family not found", now)
        cost = self.config.peace_cost
        if state.wealth < cost:
            return _cannot_afford(cost, now)

        state.wealth -= cost
        rival.hostility -= 40
        rival.at_war = False
        return _decision(
            "peace",
            f"Made peace with the {rival.name}. Hostility -40.",
            now,
        )
