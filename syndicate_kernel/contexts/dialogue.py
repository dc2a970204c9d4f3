"""
Dialogue context: who is asking, what they ask, and how the responder
feels about both.

Relationship bands: enemy below -30, stranger from -30 to 20, friend
above 20, close friend above 70. Close friends are also friends.
"""

from pydantic import BaseModel, ConfigDict

from syndicate_kernel.models.dialogue import Question, QuestionType, QuestionUrgency
from syndicate_kernel.models.persona import CommunicationStyle, Persona

ENEMY_THRESHOLD = -30
FRIEND_THRESHOLD = 20
CLOSE_FRIEND_THRESHOLD = 70


class DialogueContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_type: QuestionType
    urgency: QuestionUrgency = QuestionUrgency.NORMAL
    sensitive: bool = False
    relationship: int = 0
    relevant_memories: int = 0
    secret_memories: int = 0
    loyalty_to_subject: int = 0

    pride: int = 50
    caution: int = 50
    loyalty: int = 50
    cunning: int = 50
    trust: int = 50
    aggression: int = 50
    honesty: int = 50
    empathy: int = 50
    style: CommunicationStyle = CommunicationStyle.NEUTRAL

    @classmethod
    def build(
        cls,
        persona: Persona,
        question: Question,
        relationship: int = 0,
        relevant_memories: int = 0,
        secret_memories: int = 0,
    ) -> "DialogueContext":
        loyalty_to_subject = (
            persona.loyalty_to(question.subject_id) if question.subject_id else 0
        )
        return cls(
            question_type=question.type,
            urgency=question.urgency,
            sensitive=question.sensitive,
            relationship=max(-100, min(100, relationship)),
            relevant_memories=relevant_memories,
            secret_memories=secret_memories,
            loyalty_to_subject=loyalty_to_subject,
            pride=persona.pride,
            caution=persona.caution,
            loyalty=persona.loyalty,
            cunning=persona.cunning,
            trust=persona.trust,
            aggression=persona.aggression,
            honesty=persona.honesty,
            empathy=persona.empathy,
            style=persona.style,
        )

    # --- Relationship ---

    @property
    def is_enemy(self) -> bool:
        return self.relationship < ENEMY_THRESHOLD

    @property
    def is_stranger(self) -> bool:
        return ENEMY_THRESHOLD <= self.relationship <= FRIEND_THRESHOLD

    @property
    def is_friend(self) -> bool:
        return self.relationship > FRIEND_THRESHOLD

    @property
    def is_close_friend(self) -> bool:
        return self.relationship > CLOSE_FRIEND_THRESHOLD

    # --- Persona ---

    @property
    def is_proud(self) -> bool:
        return self.pride > 70

    @property
    def is_cautious(self) -> bool:
        return self.caution > 70

    @property
    def is_loyal(self) -> bool:
        return self.loyalty > 70

    @property
    def is_cunning(self) -> bool:
        return self.cunning > 70

    @property
    def is_trusting(self) -> bool:
        return self.trust > 70

    # --- Knowledge ---

    @property
    def has_relevant_memories(self) -> bool:
        return self.relevant_memories > 0

    @property
    def has_secret_memories(self) -> bool:
        return self.secret_memories > 0

    @property
    def is_critical(self) -> bool:
        return self.urgency == QuestionUrgency.CRITICAL

    @property
    def is_protecting_subject(self) -> bool:
        return self.loyalty_to_subject > 50 and not self.is_friend
