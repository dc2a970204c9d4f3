"""
Persona — the single trait bag shared by family agents, the player and
story characters.

Behavioral Contract:
- Every trait lives on the 0-100 scale and is clamped on assignment
- apply_experience() nudges fixed traits by experience-specific deltas;
  unknown experiences change nothing
- reaction_bias() maps a named situation to a value in [-1, 1];
  unknown situations return 0.0
"""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, field_validator

TRAIT_HIGH = 70

TRAIT_NAMES = (
    "ambition",
    "caution",
    "aggression",
    "loyalty",
    "trust",
    "empathy",
    "cunning",
    "patience",
    "pride",
    "verbosity",
    "honesty",
    "greed",
    "ruthlessness",
)


class PersonaKind(str, Enum):
    AGENT = "agent"             # Family member acting on its own each week
    PLAYER = "player"           # The player's career character
    CHARACTER = "character"     # Story NPC answering questions


class CommunicationStyle(str, Enum):
    NEUTRAL = "neutral"
    FORMAL = "formal"
    CASUAL = "casual"
    THREATENING = "threatening"
    DIPLOMATIC = "diplomatic"
    CRYPTIC = "cryptic"
    BLUNT = "blunt"


class Experience(str, Enum):
    BETRAYED = "betrayed"
    SUCCESS = "success"
    FAILURE = "failure"
    HELPED = "helped"
    THREATENED = "threatened"


class Situation(str, Enum):
    OPPORTUNITY = "opportunity"
    THREAT = "threat"
    BETRAYAL = "betrayal"
    ALLIANCE = "alliance"
    NEGOTIATION = "negotiation"


class Persona(BaseModel):
    """Named trait sliders plus the derived predicates built on them."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = ""
    name: str = ""
    role: str = ""
    kind: PersonaKind = PersonaKind.CHARACTER

    ambition: int = 50
    caution: int = 50
    aggression: int = 50
    loyalty: int = 50
    trust: int = 50
    empathy: int = 50
    cunning: int = 50
    patience: int = 50
    pride: int = 50
    verbosity: int = 50
    honesty: int = 50
    greed: int = 50
    ruthlessness: int = 50

    style: CommunicationStyle = CommunicationStyle.NEUTRAL
    faction_biases: Dict[str, int] = {}     # Subject id -> loyalty toward it

    @field_validator(*TRAIT_NAMES)
    @classmethod
    def _clamp_trait(cls, v: int) -> int:
        return max(0, min(100, v))

    # --- Trait access ---

    def trait(self, name: str) -> int:
        """Look up a trait by name. Unknown names read as the neutral 50."""
        if name not in TRAIT_NAMES:
            return 50
        return getattr(self, name)

    def is_high(self, name: str) -> bool:
        return self.trait(name) > TRAIT_HIGH

    @property
    def is_ambitious(self) -> bool:
        return self.is_high("ambition")

    @property
    def is_cautious(self) -> bool:
        return self.is_high("caution")

    @property
    def is_aggressive(self) -> bool:
        return self.is_high("aggression")

    @property
    def is_loyal(self) -> bool:
        return self.is_high("loyalty")

    @property
    def is_trusting(self) -> bool:
        return self.is_high("trust")

    @property
    def is_cunning(self) -> bool:
        return self.is_high("cunning")

    @property
    def is_proud(self) -> bool:
        return self.is_high("pride")

    @property
    def is_ruthless(self) -> bool:
        return self.is_high("ruthlessness")

    @property
    def is_reckless(self) -> bool:
        return self.caution < 30

    def loyalty_to(self, subject_id: str) -> int:
        return self.faction_biases.get(subject_id, 0)

    # --- Drift ---

    def apply_experience(self, experience: str, intensity: int) -> List[str]:
        """
        Nudge traits after a named experience. Partial deltas truncate toward
        zero. Returns the trait names that were touched.
        """
        i = int(intensity)
        try:
            kind = Experience(experience)
        except ValueError:
            return []

        if kind == Experience.BETRAYED:
            deltas = {"trust": -i, "caution": int(i / 2)}
        elif kind == Experience.SUCCESS:
            deltas = {"ambition": int(i / 3)}
        elif kind == Experience.FAILURE:
            deltas = {"caution": int(i / 2), "pride": -int(i / 3)}
        elif kind == Experience.HELPED:
            deltas = {"trust": int(i / 2), "loyalty": int(i / 3)}
        else:
            deltas = {"aggression": int(i / 2), "trust": -int(i / 2)}

        for name, delta in deltas.items():
            setattr(self, name, getattr(self, name) + delta)
        return list(deltas)

    def reaction_bias(self, situation: str) -> float:
        """Signed lean toward a situation, from -1.0 (recoil) to 1.0 (embrace)."""
        try:
            kind = Situation(situation)
        except ValueError:
            return 0.0

        if kind == Situation.OPPORTUNITY:
            return (self.ambition - self.caution) / 100.0
        if kind == Situation.THREAT:
            return (self.aggression - self.patience) / 100.0
        if kind == Situation.BETRAYAL:
            return (self.pride + (100 - self.trust)) / 200.0
        if kind == Situation.ALLIANCE:
            return (self.loyalty + self.trust) / 200.0
        return (self.cunning + self.patience) / 200.0
