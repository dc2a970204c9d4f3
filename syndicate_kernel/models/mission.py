"""Missions and the player career profile they are judged against."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from syndicate_kernel.models.events import MissionFailed
from syndicate_kernel.models.persona import Persona, PersonaKind

SKILL_NAMES = ("intimidation", "negotiation", "streetsmarts", "leadership", "business")


class MissionType(str, Enum):
    COLLECTION = "collection"
    INTIMIDATION = "intimidation"
    INFORMATION = "information"
    NEGOTIATION = "negotiation"
    HIT = "hit"
    TERRITORY = "territory"
    RECRUITMENT = "recruitment"


class PlayerRank(int, Enum):
    ASSOCIATE = 0
    SOLDIER = 1
    CAPO = 2
    UNDERBOSS = 3
    DON = 4


# Respect needed to hold each rank above Associate.
PROMOTION_THRESHOLDS: Dict[PlayerRank, int] = {
    PlayerRank.SOLDIER: 40,
    PlayerRank.CAPO: 70,
    PlayerRank.UNDERBOSS: 85,
    PlayerRank.DON: 95,
}


class Mission(BaseModel):
    """A job offered to the player."""

    id: str
    title: str = ""
    type: MissionType = MissionType.COLLECTION
    assigned_by: str = ""
    minimum_rank: PlayerRank = PlayerRank.ASSOCIATE
    skill_requirements: Dict[str, int] = {}
    risk_level: int = Field(ge=1, le=10, default=1)
    respect_reward: int = 0
    money_reward: float = 0.0
    heat_generated: int = 0


def _default_skills() -> Dict[str, int]:
    return {
        "intimidation": 10,
        "negotiation": 10,
        "streetsmarts": 10,
        "leadership": 5,
        "business": 5,
    }


def _default_player_persona() -> Persona:
    return Persona(
        kind=PersonaKind.PLAYER,
        ambition=50,
        loyalty=70,
        ruthlessness=30,
        caution=50,
    )


class PlayerProfile(BaseModel):
    """The player's standing, skills and temperament."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = ""
    rank: PlayerRank = PlayerRank.ASSOCIATE
    respect: int = 10
    money: float = 1000.0
    heat: int = 0
    skills: Dict[str, int] = Field(default_factory=_default_skills)
    personality: Persona = Field(default_factory=_default_player_persona)
    completed_missions: List[str] = []

    @field_validator("respect", "heat")
    @classmethod
    def _clamp_scale(cls, v: int) -> int:
        return max(0, min(100, v))

    def skill(self, name: str) -> int:
        """Skill level by case-insensitive name. Unknown skills are 0."""
        return self.skills.get(name.lower(), 0)

    def earned_rank(self) -> PlayerRank:
        """Highest rank whose respect threshold the player meets."""
        earned = PlayerRank.ASSOCIATE
        for rank, threshold in PROMOTION_THRESHOLDS.items():
            if self.respect >= threshold:
                earned = rank
        return earned


class MissionOutcome(BaseModel):
    """Result of attempting a mission."""

    mission_id: str
    success: bool
    success_chance: int
    roll: int
    respect_gained: int
    money_gained: float
    heat_gained: int
    skill_gains: Dict[str, int] = {}
    promoted_to: Optional[PlayerRank] = None
    applied_rules: List[str] = []
    chain_event: Optional[MissionFailed] = None     # Set on failure
