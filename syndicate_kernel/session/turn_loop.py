"""
Turn Loop — advances one session a week at a time.

Weekly order:
  collections → events (and their chain reactions) → agents → rivals
  → difficulty → game rules → upkeep → week + 1

Behavioral Contract:
- One advance() runs one evaluate-and-apply sequence against the state;
  nothing else touches the state while it runs
- Time and randomness come only from the injected clock and random source
- A finished game does not advance
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional

from syndicate_kernel.chain.dispatcher import ChainReactionDispatcher, ChainResult
from syndicate_kernel.decisions.agent import WAIT, AgentActions, AgentDecider
from syndicate_kernel.decisions.commands import CommandRunner
from syndicate_kernel.decisions.difficulty import DifficultyAdjuster
from syndicate_kernel.decisions.events import EventGenerator, GeneratedEvent
from syndicate_kernel.decisions.game_rules import GameRules
from syndicate_kernel.decisions.rival import RivalStrategist
from syndicate_kernel.decisions.territory import TerritoryValuator
from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.decision import Decision
from syndicate_kernel.models.state import GameState
from syndicate_kernel.session.providers import Clock, RandomSource, SystemClock, seeded_random

logger = logging.getLogger(__name__)


class TurnReport:
    """What happened during one week."""

    def __init__(self, week: int):
        self.week = week
        self.collected = 0.0
        self.collections: Dict[str, float] = {}
        self.events: List[GeneratedEvent] = []
        self.chains: List[ChainResult] = []
        self.agent_decisions: Dict[str, Decision] = {}
        self.agent_actions: Dict[str, str] = {}
        self.rival_decisions: Dict[str, Decision] = {}
        self.difficulty: Optional[Decision] = None
        self.game: Optional[Decision] = None
        self.skipped = False

    def to_dict(self) -> dict:
        return {
            "week": self.week,
            "collected": round(self.collected, 2),
            "collections": {k: round(v, 2) for k, v in self.collections.items()},
            "events": [e.to_dict() for e in self.events],
            "chains": [c.to_dict() for c in self.chains],
            "agent_decisions": {
                k: d.model_dump(mode="json") for k, d in self.agent_decisions.items()
            },
            "agent_actions": dict(self.agent_actions),
            "rival_decisions": {
                k: d.model_dump(mode="json") for k, d in self.rival_decisions.items()
            },
            "difficulty": self.difficulty.model_dump(mode="json") if self.difficulty else None,
            "game": self.game.model_dump(mode="json") if self.game else None,
            "skipped": self.skipped,
        }


class TurnLoop:
    """Runs the weekly decision modules against one game state."""

    def __init__(
        self,
        state: GameState,
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.state = state
        self.config = config or EngineConfig()
        self.clock = clock or SystemClock()
        self.rng = rng or seeded_random(self.config.seed)

        self.valuator = TerritoryValuator()
        self.events = EventGenerator(self.config)
        self.chains = ChainReactionDispatcher(self.config, self.clock)
        self.agents = AgentDecider()
        self.agent_actions = AgentActions(self.rng)
        self.rivals = RivalStrategist(self.rng)
        self.difficulty = DifficultyAdjuster()
        self.rules = GameRules(self.config)
        self.commands = CommandRunner(self.config, self.clock)

        self._running = False

    @property
    def status(self) -> str:
        if self.state.game_over:
            return "finished"
        return "running" if self._running else "idle"

    def run_command(self, line: str) -> Decision:
        return self.commands.run(self.state, line, now=self.clock.now())

    def advance(self) -> TurnReport:
        """Play one week."""
        state = self.state
        report = TurnReport(state.week)
        if state.game_over:
            report.skipped = True
            return report

        now = self.clock.now()
        state.previous_heat = state.heat
        state.previous_wealth = state.wealth

        self._collect(report)

        for event in self.events.generate(state, now=now):
            report.events.append(event)
            state.log("event", event.decision.reason, now)
            if event.chain_event is not None:
                report.chains.append(self.chains.dispatch(state, event.chain_event))

        self._act(report, now)

        for rival_id in list(state.rivals):
            report.rival_decisions[rival_id] = self.rivals.decide(state, rival_id, now=now)

        report.difficulty = self.difficulty.adjust(state, now=now)

        # Game rules see the week's heat before upkeep decays it.
        report.game = self.rules.check(state, now=now)
        if state.game_over:
            state.log("game_over", report.game.reason, now)
            logger.info("Game over in week %d: %s", state.week, state.outcome)
        elif state.heat > 0:
            state.heat -= self.config.upkeep_heat_decay

        self._update_streaks(report.collected)
        state.week += 1
        logger.info(
            "Week %d done: wealth=%.0f heat=%d reputation=%d",
            report.week, state.wealth, state.heat, state.reputation,
        )
        return report

    def _act(self, report: TurnReport, now: datetime) -> None:
        """Each agent off cooldown picks an action and carries it out."""
        state = self.state
        for agent_id in list(state.agents):
            cooldown = state.agent_cooldowns.get(agent_id, 0)
            if cooldown > 0:
                state.agent_cooldowns[agent_id] = cooldown - 1
                continue

            decision = self.agents.decide_for(state, agent_id, now=now)
            report.agent_decisions[agent_id] = decision
            if decision.verdict == WAIT:
                state.log("agent", f"{agent_id} chooses {decision.verdict}", now)
                continue

            result = self.agent_actions.execute(state, agent_id, decision.verdict)
            if result:
                report.agent_actions[agent_id] = result
            state.log("agent", result or f"{agent_id} chooses {decision.verdict}", now)
            state.agent_cooldowns[agent_id] = self.agent_actions.cooldown()

    def _collect(self, report: TurnReport) -> None:
        state = self.state
        variance = self.config.revenue_variance_percent
        heat = 0
        # Every territory is valued against the state as the week opened.
        for territory in list(state.territories.values()):
            if territory.owner_id is None:
                continue
            valuation = self.valuator.value(state, territory)
            swing = self.rng.randint(-variance, variance)
            revenue = valuation.effective_revenue * (1 + swing / 100)
            report.collections[territory.id] = revenue
            report.collected += revenue
            heat += territory.heat_generation
        state.heat += heat
        state.wealth += report.collected
        state.log("collection", f"Weekly collection: ${report.collected:,.0f}", self.clock.now())

    def _update_streaks(self, collected: float) -> None:
        state = self.state
        previous = state.income_history[-1] if state.income_history else None
        state.income_history.append(collected)
        if previous is None:
            return
        if collected > previous:
            state.win_streak += 1
            state.loss_streak = 0
        elif collected < previous:
            state.loss_streak += 1
            state.win_streak = 0

    async def run_async(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Advance a week every turn_interval_seconds until stopped or the game ends."""
        self._running = True
        if stop_event is None:
            stop_event = asyncio.Event()

        try:
            while not stop_event.is_set() and not self.state.game_over:
                self.advance()
                try:
                    await asyncio.wait_for(
                        stop_event.wait(),
                        timeout=self.config.turn_interval_seconds,
                    )
                except asyncio.TimeoutError:
                    continue
        finally:
            self._running = False
