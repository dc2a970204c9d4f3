"""
Chain reaction events, one closed variant per trigger.

Each case carries only the payload its cascade needs. Parse inbound
name/payload pairs with ChainEventAdapter.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class PoliceRaid(BaseModel):
    trigger: Literal["police_raid"] = "police_raid"
    territory_id: Optional[str] = None


class Hit(BaseModel):
    trigger: Literal["hit"] = "hit"
    rival_id: Optional[str] = None


class Betrayal(BaseModel):
    trigger: Literal["betrayal"] = "betrayal"
    headcount_loss: int = Field(ge=0, default=0)
    source: str = "insider"


class TerritoryLost(BaseModel):
    trigger: Literal["territory_lost"] = "territory_lost"
    territory_id: Optional[str] = None


class MissionFailed(BaseModel):
    trigger: Literal["mission_failed"] = "mission_failed"
    mission_id: Optional[str] = None


ChainEvent = Annotated[
    Union[PoliceRaid, Hit, Betrayal, TerritoryLost, MissionFailed],
    Field(discriminator="trigger"),
]

ChainEventAdapter = TypeAdapter(ChainEvent)

TRIGGER_NAMES = ("police_raid", "hit", "betrayal", "territory_lost", "mission_failed")
