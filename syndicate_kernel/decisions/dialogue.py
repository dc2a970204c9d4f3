"""
Dialogue Response — whether a character answers, lies, bargains or refuses.

Rules fall into bands and a higher band always beats a lower one:
bargains, then refusals, then lies, then honest answers, then the
"don't know" responses. Inside a band the declared order is kept.
No text is generated here beyond fixed refusal and bargain lines.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from syndicate_kernel.contexts.dialogue import DialogueContext
from syndicate_kernel.models.decision import Decision
from syndicate_kernel.models.dialogue import Question, QuestionType, ResponseDecision, ResponseType
from syndicate_kernel.models.persona import CommunicationStyle, Persona
from syndicate_kernel.rules.confidence import ConfidenceScorer
from syndicate_kernel.rules.table import RuleTable

ANSWER = "answer"
REFUSE = "refuse"
LIE = "lie"
BARGAIN = "bargain"
REDIRECT = "redirect"
PARTIAL = "partial"


class DialogueRuling(BaseModel):
    decision: Decision
    response: ResponseDecision


def _refuse(rule_id: str, reason: str):
    def effect(r: ResponseDecision, ctx: DialogueContext) -> List[str]:
        r.will_answer = False
        r.refusal_reason = reason
        r.forced_response_type = ResponseType.REFUSE
        r.matched_rule = rule_id
        return [f"Refuses: {reason}"]
    return effect


def _lie(rule_id: str, reason: str):
    def effect(r: ResponseDecision, ctx: DialogueContext) -> List[str]:
        r.will_lie = True
        r.lie_reason = reason
        r.matched_rule = rule_id
        return [f"Lies ({reason})"]
    return effect


def _bargain(rule_id: str, line: str):
    def effect(r: ResponseDecision, ctx: DialogueContext) -> List[str]:
        r.will_bargain = True
        r.forced_response_type = ResponseType.BARGAIN
        r.custom_response = line
        r.matched_rule = rule_id
        return ["Wants something in return"]
    return effect


def _honest(rule_id: str, modifier: int = 0):
    def effect(r: ResponseDecision, ctx: DialogueContext) -> List[str]:
        r.will_answer = True
        r.will_lie = False
        r.relationship_modifier = modifier
        r.matched_rule = rule_id
        return [f"Answers honestly (relationship {modifier:+d})"] if modifier else []
    return effect


def _unknown(rule_id: str, response_type: ResponseType, line: str):
    def effect(r: ResponseDecision, ctx: DialogueContext) -> List[str]:
        r.will_answer = True
        r.forced_response_type = response_type
        r.custom_response = line
        r.matched_rule = rule_id
        return []
    return effect


def _dialogue_scorer() -> ConfidenceScorer:
    scorer = ConfidenceScorer(base=50)
    scorer.support(REFUSE, "enemy", lambda c: c.is_enemy, 25)
    scorer.support(REFUSE, "proud", lambda c: c.is_proud, 10)
    scorer.support(REFUSE, "cautious", lambda c: c.is_cautious, 10)
    scorer.support(LIE, "low_honesty", lambda c: c.honesty < 40, 20)
    scorer.support(LIE, "not_friend", lambda c: not c.is_friend, 10)
    scorer.support(LIE, "cunning", lambda c: c.is_cunning, 10)
    scorer.support(BARGAIN, "cunning", lambda c: c.is_cunning, 20)
    scorer.support(ANSWER, "friend", lambda c: c.is_friend, 20)
    scorer.support(ANSWER, "close_friend", lambda c: c.is_close_friend, 10)
    scorer.support(ANSWER, "high_honesty", lambda c: c.honesty > 80, 15)
    return scorer


def _is_dangerous_topic(ctx: DialogueContext) -> bool:
    return ctx.question_type in (QuestionType.WHO_CONTROLS, QuestionType.WHERE_DO_YOU_STAND)


def build_dialogue_table() -> RuleTable:
    t = RuleTable(
        "dialogue_response",
        default_verdict=ANSWER,
        default_reason="Nothing to hide and nothing to add",
        scorer=_dialogue_scorer(),
    )

    # Refusals
    t.add_rule("REFUSE_ENEMY_TRUST_QUESTION", "Enemy Asks About Trust",
               lambda c: c.is_enemy and c.question_type == QuestionType.CAN_WE_TRUST,
               REFUSE, 550,
               effect=_refuse("REFUSE_ENEMY_TRUST_QUESTION",
                              "I don't discuss such matters with you."))
    t.add_rule("REFUSE_PROUD_DEMANDS", "Proud Persona Refuses Demands",
               lambda c: c.is_proud and c.is_critical and not c.is_close_friend,
               REFUSE, 540,
               effect=_refuse("REFUSE_PROUD_DEMANDS",
                              "Don't presume to demand answers from me."))
    t.add_rule("REFUSE_CAUTIOUS_DANGEROUS_INFO", "Cautious Persona Protects Dangerous Info",
               lambda c: c.is_cautious and c.sensitive and _is_dangerous_topic(c),
               REFUSE, 530,
               effect=_refuse("REFUSE_CAUTIOUS_DANGEROUS_INFO",
                              "Some things are better left unsaid."))
    t.add_rule("REFUSE_STRANGER_HELP", "Won't Help Strangers or Enemies",
               lambda c: c.relationship < 0 and c.question_type == QuestionType.WILL_YOU_HELP,
               REFUSE, 520,
               effect=_refuse("REFUSE_STRANGER_HELP", "Why would I help you?"))
    t.add_rule("REFUSE_PROTECTING_ALLY", "Protect Ally from Enemy Questions",
               lambda c: c.is_protecting_subject and c.is_enemy,
               REFUSE, 510,
               effect=_refuse("REFUSE_PROTECTING_ALLY", "I have nothing to say about that."))

    # Lies
    t.add_rule("LIE_CUNNING_STRATEGIC", "Cunning Persona Lies Strategically",
               lambda c: (c.is_cunning and c.honesty < 40
                          and c.has_relevant_memories and not c.is_friend),
               LIE, 450, effect=_lie("LIE_CUNNING_STRATEGIC", "strategic_advantage"))
    t.add_rule("LIE_ENEMY_INFO_REQUEST", "Lie to Enemy Seeking Information",
               lambda c: (c.is_enemy and c.question_type == QuestionType.WHAT_DO_YOU_KNOW
                          and c.has_relevant_memories and c.honesty < 70),
               LIE, 440, effect=_lie("LIE_ENEMY_INFO_REQUEST", "distrust"))
    t.add_rule("LIE_PROTECT_ALLY", "Lie to Protect Loyal Ally",
               lambda c: c.is_loyal and c.is_protecting_subject and c.has_relevant_memories,
               LIE, 430, effect=_lie("LIE_PROTECT_ALLY", "protecting_ally"))
    t.add_rule("LIE_LOW_HONESTY_STRANGER", "Dishonest Persona Lies to Strangers",
               lambda c: c.honesty < 30 and c.is_stranger and c.has_relevant_memories,
               LIE, 420, effect=_lie("LIE_LOW_HONESTY_STRANGER", "habitual"))
    t.add_rule("LIE_ABOUT_SECRETS", "Lie About Secrets to Non-Friends",
               lambda c: c.has_secret_memories and not c.is_friend,
               LIE, 410, effect=_lie("LIE_ABOUT_SECRETS", "protecting_secrets"))

    # Bargains
    t.add_rule("BARGAIN_CUNNING_VALUABLE_INFO", "Cunning Persona Bargains with Valuable Info",
               lambda c: c.is_cunning and c.has_secret_memories and c.is_stranger,
               BARGAIN, 650,
               effect=_bargain("BARGAIN_CUNNING_VALUABLE_INFO",
                               "That information has value. What's it worth to you?"))
    t.add_rule("BARGAIN_ENEMY_NEEDS_HELP", "Bargain When Enemy Needs Help",
               lambda c: (c.is_enemy and c.question_type == QuestionType.WILL_YOU_HELP
                          and c.honesty > 50),
               BARGAIN, 640,
               effect=_bargain("BARGAIN_ENEMY_NEEDS_HELP", "Maybe. But you'll owe me."))

    # Honest answers
    t.add_rule("HONEST_CLOSE_FRIEND", "Always Honest with Close Friends",
               lambda c: c.is_close_friend and c.has_relevant_memories,
               ANSWER, 290, effect=_honest("HONEST_CLOSE_FRIEND", 5))
    t.add_rule("HONEST_HIGH_INTEGRITY", "High Honesty Persona Tells Truth",
               lambda c: c.honesty > 80 and c.has_relevant_memories,
               ANSWER, 280, effect=_honest("HONEST_HIGH_INTEGRITY"))
    t.add_rule("HONEST_TRUSTING_FRIEND", "Trusting Persona Honest with Friends",
               lambda c: c.is_trusting and c.is_friend and c.has_relevant_memories,
               ANSWER, 270, effect=_honest("HONEST_TRUSTING_FRIEND", 3))
    t.add_rule("HONEST_DEFAULT", "Default Honest Response",
               lambda c: c.has_relevant_memories,
               ANSWER, 200, effect=_honest("HONEST_DEFAULT"))

    # Nothing to tell
    t.add_rule("UNKNOWN_REDIRECT_HELPFUL", "Helpful Redirect When Unknown",
               lambda c: not c.has_relevant_memories and c.is_friend and c.empathy > 50,
               REDIRECT, 120,
               effect=_unknown("UNKNOWN_REDIRECT_HELPFUL", ResponseType.REDIRECT,
                               "I don't know, but you might ask around the docks."))
    t.add_rule("UNKNOWN_BLUNT", "Blunt Unknown Response",
               lambda c: not c.has_relevant_memories and c.style == CommunicationStyle.BLUNT,
               PARTIAL, 110,
               effect=_unknown("UNKNOWN_BLUNT", ResponseType.PARTIAL, "Don't know."))
    return t


class DialogueResponder:
    def __init__(self, table: Optional[RuleTable] = None):
        self.table = table or build_dialogue_table()

    def respond(
        self,
        persona: Persona,
        question: Question,
        relationship: int = 0,
        relevant_memories: int = 0,
        secret_memories: int = 0,
        now: Optional[datetime] = None,
    ) -> DialogueRuling:
        ctx = DialogueContext.build(
            persona,
            question,
            relationship=relationship,
            relevant_memories=relevant_memories,
            secret_memories=secret_memories,
        )
        response = ResponseDecision()
        decision = self.table.evaluate(response, ctx, now=now)
        return DialogueRuling(decision=decision, response=response)
