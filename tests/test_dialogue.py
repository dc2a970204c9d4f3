"""Tests for dialogue response decisions."""

from syndicate_kernel.decisions.dialogue import DialogueResponder
from syndicate_kernel.models.dialogue import Question, QuestionType, QuestionUrgency, ResponseType
from syndicate_kernel.models.persona import CommunicationStyle, Persona


def _ask(
    question_type: QuestionType = QuestionType.WHAT_DO_YOU_KNOW,
    subject_id=None,
    urgency: QuestionUrgency = QuestionUrgency.NORMAL,
) -> Question:
    return Question(asker_id="player", type=question_type, subject_id=subject_id, urgency=urgency)


class TestDialogueResponder:
    def setup_method(self):
        self.responder = DialogueResponder()

    def test_enemy_asking_about_trust_is_refused(self):
        ruling = self.responder.respond(Persona(), _ask(QuestionType.CAN_WE_TRUST), relationship=-50)
        assert ruling.decision.matched_rule_id == "REFUSE_ENEMY_TRUST_QUESTION"
        assert ruling.decision.verdict == "refuse"
        assert ruling.decision.confidence == 75
        assert ruling.response.will_answer is False
        assert ruling.response.refusal_reason == "I don't discuss such matters with you."
        assert ruling.response.forced_response_type == ResponseType.REFUSE

    def test_refusal_beats_lie(self):
        persona = Persona(cunning=80, honesty=20)
        ruling = self.responder.respond(
            persona, _ask(QuestionType.CAN_WE_TRUST), relationship=-50, relevant_memories=2,
        )
        assert ruling.decision.verdict == "refuse"
        assert ruling.response.will_lie is False

    def test_cunning_stranger_lies(self):
        persona = Persona(cunning=80, honesty=30)
        ruling = self.responder.respond(persona, _ask(), relevant_memories=1)
        assert ruling.decision.matched_rule_id == "LIE_CUNNING_STRATEGIC"
        assert ruling.response.will_lie
        assert ruling.response.lie_reason == "strategic_advantage"

    def test_cunning_keeper_of_secrets_bargains(self):
        ruling = self.responder.respond(Persona(cunning=80), _ask(), secret_memories=1)
        assert ruling.decision.matched_rule_id == "BARGAIN_CUNNING_VALUABLE_INFO"
        assert ruling.response.will_bargain
        assert ruling.response.forced_response_type == ResponseType.BARGAIN
        assert ruling.response.custom_response == "That information has value. What's it worth to you?"

    def test_honest_enemy_bargains_for_help(self):
        ruling = self.responder.respond(
            Persona(honesty=60), _ask(QuestionType.WILL_YOU_HELP), relationship=-40,
        )
        assert ruling.decision.matched_rule_id == "BARGAIN_ENEMY_NEEDS_HELP"
        assert ruling.response.custom_response == "Maybe. But you'll owe me."

    def test_cold_stranger_refuses_help(self):
        ruling = self.responder.respond(Persona(), _ask(QuestionType.WILL_YOU_HELP), relationship=-10)
        assert ruling.decision.matched_rule_id == "REFUSE_STRANGER_HELP"
        assert ruling.response.refusal_reason == "Why would I help you?"

    def test_proud_persona_refuses_demands(self):
        ruling = self.responder.respond(
            Persona(pride=80), _ask(urgency=QuestionUrgency.CRITICAL), relevant_memories=1,
        )
        assert ruling.decision.matched_rule_id == "REFUSE_PROUD_DEMANDS"

    def test_protecting_ally_from_enemy_and_stranger(self):
        persona = Persona(loyalty=80, faction_biases={"capo": 70})
        question = _ask(QuestionType.WHO_CONTROLS, subject_id="capo")

        from_enemy = self.responder.respond(persona, question, relationship=-40, relevant_memories=1)
        assert from_enemy.decision.matched_rule_id == "REFUSE_PROTECTING_ALLY"

        from_stranger = self.responder.respond(persona, question, relationship=0, relevant_memories=1)
        assert from_stranger.decision.matched_rule_id == "LIE_PROTECT_ALLY"
        assert from_stranger.response.lie_reason == "protecting_ally"

    def test_close_friend_gets_the_truth(self):
        ruling = self.responder.respond(Persona(), _ask(), relationship=80, relevant_memories=1)
        assert ruling.decision.matched_rule_id == "HONEST_CLOSE_FRIEND"
        assert ruling.decision.verdict == "answer"
        assert ruling.response.relationship_modifier == 5

    def test_trusting_friend(self):
        ruling = self.responder.respond(Persona(trust=80), _ask(), relationship=30, relevant_memories=1)
        assert ruling.decision.matched_rule_id == "HONEST_TRUSTING_FRIEND"
        assert ruling.response.relationship_modifier == 3

    def test_helpful_redirect_when_nothing_is_known(self):
        ruling = self.responder.respond(Persona(empathy=60), _ask(), relationship=30)
        assert ruling.decision.verdict == "redirect"
        assert ruling.response.forced_response_type == ResponseType.REDIRECT

    def test_blunt_unknown(self):
        persona = Persona(style=CommunicationStyle.BLUNT)
        ruling = self.responder.respond(persona, _ask())
        assert ruling.decision.matched_rule_id == "UNKNOWN_BLUNT"
        assert ruling.response.custom_response == "Don't know."

    def test_default_is_an_honest_answer(self):
        ruling = self.responder.respond(Persona(), _ask())
        assert ruling.decision.defaulted
        assert ruling.decision.verdict == "answer"
        assert ruling.response.will_answer
        assert ruling.response.matched_rule is None
