"""Engine configuration, passed explicitly to every component that needs it."""

from typing import Optional

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Tunables for one session."""

    victory_week: int = 52
    max_cascade_depth: int = Field(ge=0, default=3)
    max_events_per_turn: int = Field(ge=0, default=2)
    recent_event_window_weeks: int = 2
    turn_interval_seconds: float = 5.0
    seed: Optional[int] = None

    bribe_cost: float = 10_000
    bribe_heat_reduction: int = 20
    expand_cost: float = 50_000
    expand_revenue: float = 10_000
    expand_heat_generation: int = 5
    hit_cost: float = 25_000
    peace_cost: float = 30_000
    upkeep_heat_decay: int = 2
    revenue_variance_percent: int = 20
