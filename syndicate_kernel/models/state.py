"""Game state: the mutable aggregate every decision module reads and writes."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from syndicate_kernel.models.persona import Persona


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    """Clamp a bounded stat into its documented range."""
    return max(low, min(high, value))


class TerritoryType(str, Enum):
    PROTECTION = "protection"
    GAMBLING = "gambling"
    SMUGGLING = "smuggling"
    LOANSHARKING = "loansharking"


class Territory(BaseModel):
    """A block of turf producing weekly revenue and police attention."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    owner_id: Optional[str] = "family"      # None once the turf is lost
    weekly_revenue: float = 0.0
    heat_generation: int = 0
    type: TerritoryType = TerritoryType.PROTECTION
    disputed: bool = False


class RivalFaction(BaseModel):
    """A competing family. Strength and hostility live on the 0-100 scale."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    strength: int = 50
    hostility: int = 0
    at_war: bool = False

    @field_validator("strength", "hostility")
    @classmethod
    def _clamp_scale(cls, v: int) -> int:
        return clamp(v)


class LogEntry(BaseModel):
    """One line of the append-only session log."""

    week: int
    kind: str                               # e.g., "command", "decision", "chain"
    message: str
    recorded_at: datetime


class GameState(BaseModel):
    """
    Mutable aggregate root for one session.

    Wealth is signed with no floor. Reputation and heat are clamped to
    [0, 100] on every assignment, so effects may apply raw deltas.
    """

    model_config = ConfigDict(validate_assignment=True)

    wealth: float = 100_000.0
    previous_wealth: Optional[float] = None
    reputation: int = 50
    heat: int = 0
    previous_heat: Optional[int] = None
    week: int = Field(ge=1, default=1)
    soldier_count: int = Field(ge=0, default=5)
    territories: Dict[str, Territory] = {}
    rivals: Dict[str, RivalFaction] = {}
    agents: Dict[str, Persona] = {}
    agent_cooldowns: Dict[str, int] = {}     # Agent id -> weeks left idle
    event_log: List[LogEntry] = []
    income_history: List[float] = []
    win_streak: int = 0
    loss_streak: int = 0
    game_over: bool = False
    outcome: Optional[str] = None

    @field_validator("reputation", "heat")
    @classmethod
    def _clamp_scale(cls, v: int) -> int:
        return clamp(v)

    @field_validator("soldier_count", mode="before")
    @classmethod
    def _floor_headcount(cls, v: int) -> int:
        return max(0, v)

    @property
    def weekly_income(self) -> float:
        """Sum of revenue from territories the family still owns."""
        return sum(
            t.weekly_revenue for t in self.territories.values()
            if t.owner_id is not None
        )

    @property
    def max_rival_hostility(self) -> int:
        return max((r.hostility for r in self.rivals.values()), default=0)

    def log(self, kind: str, message: str, recorded_at: datetime) -> LogEntry:
        """Append an entry to the session log and return it."""
        entry = LogEntry(
            week=self.week,
            kind=kind,
            message=message,
            recorded_at=recorded_at,
        )
        self.event_log.append(entry)
        return entry

    def find_rival(self, name_or_id: str) -> Optional[RivalFaction]:
        """Match a rival by id or by case-insensitive name fragment."""
        if name_or_id in self.rivals:
            return self.rivals[name_or_id]
        needle = name_or_id.strip().lower()
        if not needle:
            return None
        for rival in self.rivals.values():
            if needle in rival.name.lower() or needle in rival.id.lower():
                return rival
        return None
