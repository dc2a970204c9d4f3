"""
Read-only snapshots of the family's position.

Every predicate is a property over frozen fields, so two contexts built
from the same state always agree.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.state import GameState, RivalFaction, Territory, TerritoryType


class RivalSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    strength: int
    hostility: int
    at_war: bool = False

    @classmethod
    def of(cls, rival: RivalFaction) -> "RivalSnapshot":
        return cls(
            id=rival.id,
            strength=rival.strength,
            hostility=rival.hostility,
            at_war=rival.at_war,
        )


def _rivals(state: GameState) -> Tuple[RivalSnapshot, ...]:
    return tuple(RivalSnapshot.of(r) for r in state.rivals.values())


class GameContext(BaseModel):
    """Family-wide position for the win/lose and consequence rules."""

    model_config = ConfigDict(frozen=True)

    week: int
    wealth: float
    reputation: int
    heat: int
    territory_count: int
    disputed_count: int = 0
    rivals: Tuple[RivalSnapshot, ...] = ()
    victory_week: int = 52

    @classmethod
    def from_state(cls, state: GameState, config: Optional[EngineConfig] = None) -> "GameContext":
        config = config or EngineConfig()
        return cls(
            week=state.week,
            wealth=state.wealth,
            reputation=state.reputation,
            heat=state.heat,
            territory_count=len(state.territories),
            disputed_count=sum(1 for t in state.territories.values() if t.disputed),
            rivals=_rivals(state),
            victory_week=config.victory_week,
        )

    @property
    def max_rival_hostility(self) -> int:
        return max((r.hostility for r in self.rivals), default=0)

    # Financial
    @property
    def is_weak_financially(self) -> bool:
        return self.wealth < 50_000

    @property
    def is_strong_financially(self) -> bool:
        return self.wealth > 200_000

    @property
    def is_rich(self) -> bool:
        return self.wealth > 500_000

    # Reputation
    @property
    def has_low_reputation(self) -> bool:
        return self.reputation < 30

    @property
    def has_high_reputation(self) -> bool:
        return self.reputation > 70

    # Heat
    @property
    def is_under_heat(self) -> bool:
        return self.heat > 50

    @property
    def is_severe_heat(self) -> bool:
        return self.heat > 80

    # Timeline
    @property
    def is_early_game(self) -> bool:
        return self.week < 10

    @property
    def is_mid_game(self) -> bool:
        return 10 <= self.week < 30

    @property
    def is_late_game(self) -> bool:
        return self.week >= 30

    @property
    def reached_victory_week(self) -> bool:
        return self.week >= self.victory_week

    # Territory
    @property
    def has_few_territories(self) -> bool:
        return self.territory_count < 3

    @property
    def has_many_territories(self) -> bool:
        return self.territory_count > 5

    # Composites
    @property
    def is_vulnerable(self) -> bool:
        return self.is_weak_financially and (self.has_low_reputation or self.is_under_heat)

    @property
    def is_dominant(self) -> bool:
        return (
            self.is_strong_financially
            and self.has_high_reputation
            and self.territory_count > 4
        )

    @property
    def needs_to_lay_low(self) -> bool:
        return self.is_severe_heat or (self.is_under_heat and self.has_low_reputation)

    @property
    def can_expand(self) -> bool:
        return self.is_strong_financially and self.heat < 60

    @property
    def should_be_aggressive(self) -> bool:
        return self.has_high_reputation and self.is_strong_financially and self.heat < 40


class EventContext(GameContext):
    """GameContext plus what has happened recently, for random-event rules."""

    recent_raid: bool = False
    recent_hit: bool = False

    @classmethod
    def from_state(cls, state: GameState, config: Optional[EngineConfig] = None) -> "EventContext":
        config = config or EngineConfig()
        since = state.week - config.recent_event_window_weeks
        recent = [e.kind for e in state.event_log if e.week >= since]
        base = GameContext.from_state(state, config)
        return cls(
            **base.model_dump(),
            recent_raid="police_raid" in recent,
            recent_hit="hit" in recent,
        )

    @property
    def police_attention_high(self) -> bool:
        return self.heat > 60

    @property
    def is_wealthy_target(self) -> bool:
        return self.wealth > 300_000

    @property
    def is_weak_position(self) -> bool:
        return self.reputation < 40

    @property
    def is_tense(self) -> bool:
        return self.max_rival_hostility > 70


class TerritoryContext(BaseModel):
    """One territory seen against the family's standing."""

    model_config = ConfigDict(frozen=True)

    territory_id: str
    revenue: float
    heat_generation: int
    type: TerritoryType
    disputed: bool
    wealth: float
    reputation: int
    heat: int
    territory_count: int

    @classmethod
    def from_state(cls, state: GameState, territory: Territory) -> "TerritoryContext":
        return cls(
            territory_id=territory.id,
            revenue=territory.weekly_revenue,
            heat_generation=territory.heat_generation,
            type=territory.type,
            disputed=territory.disputed,
            wealth=state.wealth,
            reputation=state.reputation,
            heat=state.heat,
            territory_count=len(state.territories),
        )

    @property
    def is_high_value(self) -> bool:
        return self.revenue > 15_000

    @property
    def is_low_risk(self) -> bool:
        return self.heat_generation < 5

    @property
    def is_high_risk(self) -> bool:
        return self.heat_generation > 10

    @property
    def is_protection(self) -> bool:
        return self.type == TerritoryType.PROTECTION

    @property
    def is_gambling(self) -> bool:
        return self.type == TerritoryType.GAMBLING

    @property
    def is_smuggling(self) -> bool:
        return self.type == TerritoryType.SMUGGLING

    @property
    def market_saturated(self) -> bool:
        return self.territory_count > 8

    @property
    def high_demand(self) -> bool:
        return self.reputation > 70 and not self.market_saturated

    @property
    def police_watching(self) -> bool:
        return self.heat > 60

    @property
    def is_prime(self) -> bool:
        return self.is_high_value and self.is_low_risk and not self.disputed

    @property
    def is_risky_but_profitable(self) -> bool:
        return self.is_high_value and self.is_high_risk

    @property
    def needs_cleaning(self) -> bool:
        return self.is_high_risk and self.police_watching


class RivalContext(BaseModel):
    """A rival family sizing up the player."""

    model_config = ConfigDict(frozen=True)

    rival: RivalSnapshot
    player_wealth: float
    player_reputation: int
    player_heat: int

    @classmethod
    def from_state(cls, state: GameState, rival: RivalFaction) -> "RivalContext":
        return cls(
            rival=RivalSnapshot.of(rival),
            player_wealth=state.wealth,
            player_reputation=state.reputation,
            player_heat=state.heat,
        )

    @property
    def rival_is_stronger(self) -> bool:
        return self.rival.strength > 70

    @property
    def rival_is_weaker(self) -> bool:
        return self.rival.strength < 40

    @property
    def rival_is_angry(self) -> bool:
        return self.rival.hostility > 70

    @property
    def rival_is_neutral(self) -> bool:
        return self.rival.hostility < 30

    @property
    def player_is_weak(self) -> bool:
        return self.player_wealth < 100_000 or self.player_reputation < 40

    @property
    def player_is_strong(self) -> bool:
        return self.player_wealth > 300_000 and self.player_reputation > 70

    @property
    def player_is_distracted(self) -> bool:
        return self.player_heat > 70

    @property
    def should_attack(self) -> bool:
        return self.rival_is_stronger and self.player_is_weak and not self.player_is_distracted

    @property
    def should_make_peace(self) -> bool:
        return self.rival_is_weaker and self.player_is_strong

    @property
    def should_wait(self) -> bool:
        return self.rival_is_neutral or (self.player_is_distracted and not self.rival_is_angry)

    @property
    def should_form_alliance(self) -> bool:
        return self.player_is_strong and self.rival_is_stronger


class DifficultyContext(BaseModel):
    """How the run is going, for keeping the game challenging."""

    model_config = ConfigDict(frozen=True)

    week: int
    wealth: float
    reputation: int
    average_weekly_income: float
    win_streak: int
    loss_streak: int

    @classmethod
    def from_state(cls, state: GameState, window: int = 4) -> "DifficultyContext":
        recent = state.income_history[-window:]
        average = sum(recent) / len(recent) if recent else state.weekly_income
        return cls(
            week=state.week,
            wealth=state.wealth,
            reputation=state.reputation,
            average_weekly_income=average,
            win_streak=state.win_streak,
            loss_streak=state.loss_streak,
        )

    @property
    def player_dominating(self) -> bool:
        return self.wealth > 500_000 and self.reputation > 80

    @property
    def player_struggling(self) -> bool:
        return self.wealth < 50_000 or self.reputation < 30

    @property
    def steady_growth(self) -> bool:
        return self.average_weekly_income > 40_000

    @property
    def declining(self) -> bool:
        return self.average_weekly_income < 20_000

    @property
    def on_win_streak(self) -> bool:
        return self.win_streak >= 3

    @property
    def on_loss_streak(self) -> bool:
        return self.loss_streak >= 3

    @property
    def is_late_game(self) -> bool:
        return self.week >= 30


class ChainContext(BaseModel):
    """The state a chain reaction lands in, plus the trigger that set it off."""

    model_config = ConfigDict(frozen=True)

    trigger: str
    wealth: float
    reputation: int
    heat: int
    rivals: Tuple[RivalSnapshot, ...] = ()

    @classmethod
    def from_state(cls, state: GameState, trigger: str) -> "ChainContext":
        return cls(
            trigger=trigger,
            wealth=state.wealth,
            reputation=state.reputation,
            heat=state.heat,
            rivals=_rivals(state),
        )

    @property
    def high_tension(self) -> bool:
        return any(r.hostility > 80 for r in self.rivals)

    @property
    def unstable(self) -> bool:
        return self.reputation < 40 and self.heat > 60

    @property
    def crisis(self) -> bool:
        return self.wealth < 30_000 or self.heat > 85
