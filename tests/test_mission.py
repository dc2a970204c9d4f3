"""Tests for mission acceptance and mission attempts."""

from syndicate_kernel.decisions.mission import MissionDesk
from syndicate_kernel.models.decision import NOT_FOUND
from syndicate_kernel.models.events import MissionFailed
from syndicate_kernel.models.mission import Mission, PlayerProfile, PlayerRank
from syndicate_kernel.models.persona import Persona, PersonaKind
from syndicate_kernel.session.providers import ScriptedRandom


def _make_mission(**overrides) -> Mission:
    data = dict(id="m-1", title="Collect from the bakery", risk_level=3)
    data.update(overrides)
    return Mission(**data)


class TestMissionAcceptance:
    def setup_method(self):
        self.desk = MissionDesk(ScriptedRandom([50]))

    def test_desperation_outranks_being_underqualified(self):
        player = PlayerProfile(money=300)
        mission = _make_mission(skill_requirements={"intimidation": 50})
        decision = self.desk.decide(player, mission)
        assert decision.matched_rule_id == "ACCEPT_DESPERATE"
        assert decision.verdict == "accept"
        assert decision.confidence == 85

    def test_underqualified_rejects(self):
        mission = _make_mission(risk_level=5, skill_requirements={"intimidation": 50})
        decision = self.desk.decide(PlayerProfile(), mission)
        assert decision.matched_rule_id == "REJECT_UNDERQUALIFIED"
        assert decision.verdict == "reject"
        assert decision.confidence == 90

    def test_ambition_and_caution_tie_goes_to_declared_first(self):
        player = PlayerProfile(
            respect=50,
            money=5000,
            personality=Persona(kind=PersonaKind.PLAYER, ambition=80, caution=80),
        )
        decision = self.desk.decide(player, _make_mission(risk_level=8))
        assert decision.matched_rule_id == "ACCEPT_AMBITIOUS"

    def test_no_compelling_reason(self):
        decision = self.desk.decide(PlayerProfile(heat=70), _make_mission(risk_level=5))
        assert decision.defaulted
        assert decision.verdict == "reject"
        assert decision.reason == "No compelling reason to take this mission"

    def test_missing_mission_is_not_found(self):
        assert self.desk.decide(PlayerProfile(), None).verdict == NOT_FOUND


class TestSuccessChance:
    def setup_method(self):
        self.desk = MissionDesk(ScriptedRandom([50]))

    def test_baseline_with_low_heat(self):
        assert self.desk.success_chance(PlayerProfile(), _make_mission()) == 60

    def test_high_heat_penalty(self):
        assert self.desk.success_chance(PlayerProfile(heat=80), _make_mission()) == 30

    def test_skill_shortfall(self):
        mission = _make_mission(skill_requirements={"intimidation": 40})
        assert self.desk.success_chance(PlayerProfile(), mission) == 30

    def test_capped_at_ninety_five(self):
        player = PlayerProfile(skills={"intimidation": 60})
        mission = _make_mission(skill_requirements={"intimidation": 20})
        assert self.desk.success_chance(player, mission) == 95

    def test_floored_at_ten(self):
        player = PlayerProfile(heat=90, skills={})
        mission = _make_mission(skill_requirements={"intimidation": 80})
        assert self.desk.success_chance(player, mission) == 10


class TestMissionAttempt:
    def test_success_pays_out(self):
        desk = MissionDesk(ScriptedRandom([1]))
        player = PlayerProfile()
        mission = _make_mission(
            respect_reward=10, money_reward=500, heat_generated=5,
            skill_requirements={"intimidation": 5},
        )
        outcome = desk.attempt(player, mission)

        assert outcome.success
        assert outcome.roll == 1
        assert player.respect == 20
        assert player.money == 1500
        assert player.heat == 5
        assert player.skills["intimidation"] == 12
        assert player.completed_missions == ["m-1"]
        assert outcome.promoted_to is None
        assert outcome.chain_event is None

    def test_failure_costs_respect_and_reports_chain_event(self):
        desk = MissionDesk(ScriptedRandom([100]))
        player = PlayerProfile()
        mission = _make_mission(heat_generated=5, skill_requirements={"intimidation": 5})
        outcome = desk.attempt(player, mission)

        assert not outcome.success
        assert outcome.respect_gained == -5
        assert player.respect == 5
        assert player.money == 1000
        assert player.skills["intimidation"] == 11
        assert player.completed_missions == []
        assert outcome.chain_event == MissionFailed(mission_id="m-1")

    def test_promotion(self):
        desk = MissionDesk(ScriptedRandom([1]))
        player = PlayerProfile(respect=35)
        outcome = desk.attempt(player, _make_mission(respect_reward=10))
        assert outcome.promoted_to == PlayerRank.SOLDIER
        assert player.rank == PlayerRank.SOLDIER

    def test_high_risk_bonus_on_success(self):
        desk = MissionDesk(ScriptedRandom([1]))
        player = PlayerProfile()
        mission = _make_mission(risk_level=8, respect_reward=10, money_reward=1000)
        outcome = desk.attempt(player, mission)
        assert outcome.respect_gained == 20
        assert outcome.money_gained == 1500
        assert outcome.applied_rules == ["LOW_HEAT_BONUS", "HIGH_RISK_HIGH_REWARD"]
