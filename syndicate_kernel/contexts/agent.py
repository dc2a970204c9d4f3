"""
Agent context: one family member's temperament against the family's
situation.

Personality traits, situational reads, a coarse strategic phase and the
combinations the agent action rules are written against.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from syndicate_kernel.contexts.world import RivalSnapshot
from syndicate_kernel.models.persona import Persona
from syndicate_kernel.models.state import GameState


class GamePhase(str, Enum):
    SURVIVAL = "survival"
    ACCUMULATION = "accumulation"
    GROWTH = "growth"
    DOMINANCE = "dominance"


# Upper wealth bound of each phase; anything above GROWTH is DOMINANCE.
PHASE_CEILINGS = (
    (GamePhase.SURVIVAL, 50_000),
    (GamePhase.ACCUMULATION, 150_000),
    (GamePhase.GROWTH, 400_000),
)


def phase_for(wealth: float) -> GamePhase:
    for phase, ceiling in PHASE_CEILINGS:
        if wealth < ceiling:
            return phase
    return GamePhase.DOMINANCE


class AgentContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    agent_id: str = ""
    aggression: int = 50
    greed: int = 50
    loyalty: int = 50
    ambition: int = 50

    wealth: float
    previous_wealth: Optional[float] = None
    heat: int
    previous_heat: Optional[int] = None
    reputation: int = 50
    week: int = 1
    soldier_count: int = 0
    territory_count: int = 0
    rivals: Tuple[RivalSnapshot, ...] = ()

    @classmethod
    def from_state(cls, state: GameState, persona: Persona) -> "AgentContext":
        return cls(
            agent_id=persona.id,
            aggression=persona.aggression,
            greed=persona.greed,
            loyalty=persona.loyalty,
            ambition=persona.ambition,
            wealth=state.wealth,
            previous_wealth=state.previous_wealth,
            heat=state.heat,
            previous_heat=state.previous_heat,
            reputation=state.reputation,
            week=state.week,
            soldier_count=state.soldier_count,
            territory_count=len(state.territories),
            rivals=tuple(RivalSnapshot.of(r) for r in state.rivals.values()),
        )

    # --- Personality ---

    @property
    def is_aggressive(self) -> bool:
        return self.aggression > 70

    @property
    def is_greedy(self) -> bool:
        return self.greed > 70

    @property
    def is_ambitious(self) -> bool:
        return self.ambition > 70

    @property
    def is_loyal(self) -> bool:
        return self.loyalty > 80

    @property
    def is_hotheaded(self) -> bool:
        return self.aggression > 80 and self.loyalty < 60

    @property
    def is_calculating(self) -> bool:
        return self.aggression < 40 and self.ambition > 60

    @property
    def is_family_first(self) -> bool:
        return self.loyalty > 90 and self.greed < 50

    @property
    def is_cautious(self) -> bool:
        return self.aggression < 30 and self.loyalty > 70

    # --- Situation ---

    @property
    def max_rival_hostility(self) -> int:
        return max((r.hostility for r in self.rivals), default=0)

    @property
    def most_hostile_rival(self) -> Optional[RivalSnapshot]:
        if not self.rivals:
            return None
        return max(self.rivals, key=lambda r: r.hostility)

    @property
    def family_needs_money(self) -> bool:
        return self.wealth < 100_000

    @property
    def family_under_threat(self) -> bool:
        return self.heat > 60 or any(r.hostility > 80 for r in self.rivals)

    @property
    def can_take_risks(self) -> bool:
        return self.wealth > 150_000 and self.heat < 50

    @property
    def needs_more_soldiers(self) -> bool:
        return self.soldier_count < 15

    @property
    def can_afford_bribe(self) -> bool:
        return self.wealth > 50_000 and self.heat > 40

    @property
    def heat_is_dangerous(self) -> bool:
        return self.heat > 70

    @property
    def heat_is_critical(self) -> bool:
        return self.heat > 85

    @property
    def has_heat_budget(self) -> bool:
        return self.heat < 40

    @property
    def heat_is_rising(self) -> bool:
        return self.previous_heat is not None and self.heat > self.previous_heat

    @property
    def heat_is_falling(self) -> bool:
        return self.previous_heat is not None and self.heat < self.previous_heat

    @property
    def needs_heat_reduction(self) -> bool:
        return self.heat > 50 and self.heat_is_rising

    @property
    def wealth_is_growing(self) -> bool:
        return self.previous_wealth is not None and self.wealth > self.previous_wealth

    @property
    def wealth_is_shrinking(self) -> bool:
        return self.previous_wealth is not None and self.wealth < self.previous_wealth

    @property
    def rival_is_weak(self) -> bool:
        return any(r.strength < 40 for r in self.rivals)

    @property
    def rival_is_threatening(self) -> bool:
        worst = self.most_hostile_rival
        return worst is not None and worst.hostility > 70 and worst.strength > 60

    @property
    def rival_attack_imminent(self) -> bool:
        return self.max_rival_hostility > 85

    @property
    def rivals_are_peaceful(self) -> bool:
        return all(r.hostility <= 50 for r in self.rivals)

    # --- Phase ---

    @property
    def phase(self) -> GamePhase:
        return phase_for(self.wealth)

    @property
    def in_survival_mode(self) -> bool:
        return self.phase == GamePhase.SURVIVAL

    @property
    def in_accumulation_mode(self) -> bool:
        return self.phase == GamePhase.ACCUMULATION

    @property
    def in_growth_mode(self) -> bool:
        return self.phase == GamePhase.GROWTH

    @property
    def in_dominance_mode(self) -> bool:
        return self.phase == GamePhase.DOMINANCE

    # --- Combinations ---

    @property
    def should_conserve(self) -> bool:
        return self.wealth_is_shrinking or self.in_survival_mode

    @property
    def can_afford_expensive(self) -> bool:
        return self.wealth > 200_000 and not self.should_conserve

    @property
    def good_time_to_expand(self) -> bool:
        return (
            self.wealth_is_growing
            and self.has_heat_budget
            and not self.rival_is_threatening
        )

    @property
    def heat_risk_worth_it(self) -> bool:
        return self.can_take_risks and (self.in_growth_mode or self.in_dominance_mode)

    @property
    def opportunistic_strike(self) -> bool:
        return self.in_dominance_mode and self.rival_is_weak and self.has_heat_budget

    @property
    def emergency_lay_low(self) -> bool:
        return self.heat_is_critical or (self.heat_is_dangerous and self.heat_is_rising)

    @property
    def defensive_posture(self) -> bool:
        return (
            (self.rival_is_threatening or self.heat_is_dangerous)
            and not self.in_dominance_mode
        )

    @property
    def aggressive_opportunity(self) -> bool:
        return self.good_time_to_expand and self.is_ambitious and self.in_growth_mode
