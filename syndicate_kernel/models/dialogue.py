"""Dialogue questions and the response decision reached for them."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class QuestionType(str, Enum):
    WHAT_DO_YOU_KNOW = "what_do_you_know"
    WHO_CONTROLS = "who_controls"
    WHERE_DO_YOU_STAND = "where_do_you_stand"
    CAN_WE_TRUST = "can_we_trust"
    WILL_YOU_HELP = "will_you_help"
    WHAT_HAPPENED = "what_happened"
    WHERE_IS = "where_is"


class QuestionUrgency(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"


class ResponseType(str, Enum):
    ANSWER = "answer"
    PARTIAL = "partial"
    REDIRECT = "redirect"
    BARGAIN = "bargain"
    REFUSE = "refuse"


class Question(BaseModel):
    """A question put to a character."""

    asker_id: str
    type: QuestionType
    subject_id: Optional[str] = None        # Who or what the question is about
    urgency: QuestionUrgency = QuestionUrgency.NORMAL
    sensitive: bool = False


class ResponseDecision(BaseModel):
    """Whether and how a character answers. Text generation happens elsewhere."""

    will_answer: bool = True
    will_lie: bool = False
    will_bargain: bool = False
    refusal_reason: Optional[str] = None
    lie_reason: Optional[str] = None
    relationship_modifier: int = 0
    forced_response_type: Optional[ResponseType] = None
    custom_response: Optional[str] = None
    matched_rule: Optional[str] = None
