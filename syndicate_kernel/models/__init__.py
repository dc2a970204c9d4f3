"""Syndicate Kernel data models."""

from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.decision import CANNOT_AFFORD, NOT_FOUND, Decision
from syndicate_kernel.models.dialogue import (
    Question,
    QuestionType,
    QuestionUrgency,
    ResponseDecision,
    ResponseType,
)
from syndicate_kernel.models.events import (
    Betrayal,
    ChainEvent,
    ChainEventAdapter,
    Hit,
    MissionFailed,
    PoliceRaid,
    TerritoryLost,
)
from syndicate_kernel.models.mission import (
    Mission,
    MissionOutcome,
    MissionType,
    PlayerProfile,
    PlayerRank,
)
from syndicate_kernel.models.persona import (
    CommunicationStyle,
    Experience,
    Persona,
    PersonaKind,
    Situation,
)
from syndicate_kernel.models.state import (
    GameState,
    LogEntry,
    RivalFaction,
    Territory,
    TerritoryType,
)

__all__ = [
    "Betrayal",
    "CANNOT_AFFORD",
    "ChainEvent",
    "ChainEventAdapter",
    "CommunicationStyle",
    "Decision",
    "EngineConfig",
    "Experience",
    "GameState",
    "Hit",
    "LogEntry",
    "Mission",
    "MissionFailed",
    "MissionOutcome",
    "MissionType",
    "NOT_FOUND",
    "Persona",
    "PersonaKind",
    "PlayerProfile",
    "PlayerRank",
    "PoliceRaid",
    "Question",
    "QuestionType",
    "QuestionUrgency",
    "ResponseDecision",
    "ResponseType",
    "RivalFaction",
    "Situation",
    "Territory",
    "TerritoryLost",
    "TerritoryType",
]
