"""
Missions — whether the player takes a job, and how the job goes.

Behavioral Contract:
- Acceptance is a single-winner table: when an accept rule and a reject
  rule both hold, declared priority alone decides
- Confidence is scored from the evidence for the chosen verdict only
- Attempting a mission rolls once against the injected random source and
  applies the result to the player profile
"""

from datetime import datetime
from typing import List, Optional

from syndicate_kernel.contexts.mission import MissionContext
from syndicate_kernel.models.decision import NOT_FOUND, Decision
from syndicate_kernel.models.events import MissionFailed
from syndicate_kernel.models.mission import Mission, MissionOutcome, PlayerProfile
from syndicate_kernel.rules.confidence import ConfidenceScorer
from syndicate_kernel.rules.table import RuleTable
from syndicate_kernel.session.providers import RandomSource, seeded_random

ACCEPT = "accept"
REJECT = "reject"

MIN_SUCCESS_CHANCE = 10
MAX_SUCCESS_CHANCE = 95
FAILURE_RESPECT_PENALTY = -5


def _acceptance_scorer() -> ConfidenceScorer:
    scorer = ConfidenceScorer(base=50)
    scorer.support(ACCEPT, "overqualified", lambda c: c.is_overqualified, 30)
    scorer.support(ACCEPT, "mission_safe", lambda c: c.mission_is_safe, 20)
    scorer.support(ACCEPT, "safe_operations", lambda c: c.has_safe_operations, 15)
    scorer.support(ACCEPT, "high_reward", lambda c: c.mission_is_high_reward, 10)
    scorer.support(REJECT, "skill_deficit", lambda c: not c.meets_skill_requirements, 40)
    scorer.support(REJECT, "under_heat", lambda c: c.is_under_heat, 30)
    scorer.support(REJECT, "mission_risky", lambda c: c.mission_is_risky, 20)
    return scorer


def build_acceptance_table() -> RuleTable:
    t = RuleTable(
        "mission_acceptance",
        default_verdict=REJECT,
        default_reason="No compelling reason to take this mission",
        scorer=_acceptance_scorer(),
    )
    t.add_rule("ACCEPT_DESPERATE", "Desperate for Money",
               lambda c: c.is_low_on_money and c.mission_is_safe, ACCEPT, 1000,
               description="Need money badly, and this one is safe")
    t.add_rule("REJECT_UNDERQUALIFIED", "Underqualified",
               lambda c: not c.meets_skill_requirements, REJECT, 950,
               description="Not skilled enough for this job")
    t.add_rule("REJECT_TOO_HOT", "Too Much Heat",
               lambda c: c.is_under_heat and c.mission_is_risky, REJECT, 900,
               description="Too much heat to risk a job like this")
    t.add_rule("ACCEPT_HIGH_REWARD", "High Reward",
               lambda c: c.mission_is_high_reward and c.can_afford_risk, ACCEPT, 850,
               description="The payoff is worth the risk")
    t.add_rule("ACCEPT_AMBITIOUS", "Ambitious",
               lambda c: c.is_ambitious and c.can_afford_risk, ACCEPT, 800,
               description="Ambition says take it")
    t.add_rule("REJECT_CAUTIOUS", "Cautious",
               lambda c: c.is_cautious and c.mission_is_risky, REJECT, 800,
               description="Too risky for a careful operator")
    t.add_rule("ACCEPT_SAFE_BUILDING", "Building Respect",
               lambda c: c.has_low_respect and c.mission_is_safe, ACCEPT, 700,
               description="A safe way to build respect")
    t.add_rule("ACCEPT_DEFAULT", "Qualified",
               lambda c: c.meets_skill_requirements and not c.is_under_heat, ACCEPT, 500,
               description="Qualified and not too hot")
    return t


class _Attempt:
    """Running figures for one mission attempt."""

    def __init__(self):
        self.chance = 50
        self.success: Optional[bool] = None
        self.bonus_respect = 0
        self.bonus_money = 0.0
        self.heat_penalty = 0


def build_chance_table() -> RuleTable:
    """Modifiers applied before the roll. Every matching rule applies."""

    def auto_success(a: _Attempt, c: MissionContext) -> List[str]:
        a.chance = 100
        return ["Overqualified: success all but certain"]

    def skill_bonus(a: _Attempt, c: MissionContext) -> List[str]:
        a.chance += c.skill_advantage
        return [f"Skill advantage: {c.skill_advantage:+d}%"]

    def skill_penalty(a: _Attempt, c: MissionContext) -> List[str]:
        a.chance += c.skill_advantage
        return [f"Skill shortfall: {c.skill_advantage:+d}%"]

    def low_heat(a: _Attempt, c: MissionContext) -> List[str]:
        a.chance += 10
        return ["Operating under the radar: +10%"]

    def high_heat(a: _Attempt, c: MissionContext) -> List[str]:
        a.chance -= 20
        return ["Police attention: -20%"]

    t = RuleTable("mission_chance", default_verdict="base")
    t.add_rule("AUTO_SUCCESS_OVERQUALIFIED", "Automatic Success - Overqualified",
               lambda c: c.skill_advantage > 30, priority=1000, effect=auto_success)
    t.add_rule("SKILL_BONUS", "Skill Bonus",
               lambda c: c.skill_advantage > 10, priority=800, effect=skill_bonus)
    t.add_rule("SKILL_PENALTY", "Insufficient Skills",
               lambda c: c.skill_advantage < -10, priority=800, effect=skill_penalty)
    t.add_rule("LOW_HEAT_BONUS", "Operating Under Radar",
               lambda c: c.heat < 30, priority=600, effect=low_heat)
    t.add_rule("HIGH_HEAT_PENALTY", "Police Attention",
               lambda c: c.heat > 70, priority=600, effect=high_heat)
    return t


def build_payout_table(money_reward: float) -> RuleTable:
    """Modifiers applied after the roll. Bonuses keep the largest value offered."""

    def auto_success(a: _Attempt, c: MissionContext) -> List[str]:
        a.bonus_respect = max(a.bonus_respect, 5)
        return []

    def skill_bonus(a: _Attempt, c: MissionContext) -> List[str]:
        a.bonus_respect = max(a.bonus_respect, c.skill_advantage // 5)
        return []

    def skill_penalty(a: _Attempt, c: MissionContext) -> List[str]:
        a.heat_penalty = max(a.heat_penalty, abs(c.skill_advantage) // 2)
        return []

    def high_risk(a: _Attempt, c: MissionContext) -> List[str]:
        if not a.success:
            return []
        a.bonus_respect = max(a.bonus_respect, 10)
        a.bonus_money = money_reward * 0.5
        return ["High-risk job pulled off: bonus respect and cash"]

    def high_heat(a: _Attempt, c: MissionContext) -> List[str]:
        a.heat_penalty = max(a.heat_penalty, 10)
        return []

    t = RuleTable("mission_payout", default_verdict="base")
    t.add_rule("AUTO_SUCCESS_OVERQUALIFIED", "Automatic Success - Overqualified",
               lambda c: c.skill_advantage > 30, priority=1000, effect=auto_success)
    t.add_rule("SKILL_BONUS", "Skill Bonus",
               lambda c: c.skill_advantage > 10, priority=800, effect=skill_bonus)
    t.add_rule("SKILL_PENALTY", "Insufficient Skills",
               lambda c: c.skill_advantage < -10, priority=800, effect=skill_penalty)
    t.add_rule("HIGH_RISK_HIGH_REWARD", "High Risk Mission",
               lambda c: c.risk_level >= 8, priority=700, effect=high_risk)
    t.add_rule("HIGH_HEAT_PENALTY", "Police Attention",
               lambda c: c.heat > 70, priority=600, effect=high_heat)
    return t


class MissionDesk:
    """Decides on mission offers and resolves attempts for the player."""

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = rng or seeded_random(None)
        self.acceptance = build_acceptance_table()
        self.chance = build_chance_table()

    def decide(
        self,
        player: PlayerProfile,
        mission: Optional[Mission],
        now: Optional[datetime] = None,
    ) -> Decision:
        if mission is None:
            return Decision(
                table=self.acceptance.name,
                verdict=NOT_FOUND,
                confidence=100,
                reason="No mission offered",
                decided_at=now,
            )
        ctx = MissionContext.build(player, mission)
        return self.acceptance.evaluate(player, ctx, now=now)

    def success_chance(self, player: PlayerProfile, mission: Mission) -> int:
        ctx = MissionContext.build(player, mission)
        attempt = _Attempt()
        self.chance.apply_all(attempt, ctx)
        return max(MIN_SUCCESS_CHANCE, min(MAX_SUCCESS_CHANCE, attempt.chance))

    def attempt(self, player: PlayerProfile, mission: Mission) -> MissionOutcome:
        """Roll for the mission and apply the result to the player."""
        ctx = MissionContext.build(player, mission)
        attempt = _Attempt()
        applied = [rule.id for rule, _ in self.chance.apply_all(attempt, ctx)]

        attempt.chance = max(MIN_SUCCESS_CHANCE, min(MAX_SUCCESS_CHANCE, attempt.chance))
        roll = self.rng.randint(1, 100)
        attempt.success = roll <= attempt.chance

        payout = build_payout_table(mission.money_reward)
        for rule, _ in payout.apply_all(attempt, ctx):
            if rule.id not in applied:
                applied.append(rule.id)

        if attempt.success:
            respect = mission.respect_reward + attempt.bonus_respect
            money = mission.money_reward + attempt.bonus_money
            heat = mission.heat_generated
        else:
            respect = FAILURE_RESPECT_PENALTY
            money = 0.0
            heat = mission.heat_generated + attempt.heat_penalty

        gain = 2 if attempt.success else 1
        skill_gains = {name.lower(): gain for name in mission.skill_requirements}

        player.respect += respect
        player.money += money
        player.heat += heat
        for name, amount in skill_gains.items():
            player.skills[name] = min(100, player.skill(name) + amount)
        if attempt.success:
            player.completed_missions.append(mission.id)

        promoted_to = None
        earned = player.earned_rank()
        if earned > player.rank:
            player.rank = earned
            promoted_to = earned

        return MissionOutcome(
            mission_id=mission.id,
            success=attempt.success,
            success_chance=attempt.chance,
            roll=roll,
            respect_gained=respect,
            money_gained=money,
            heat_gained=heat,
            skill_gains=skill_gains,
            promoted_to=promoted_to,
            applied_rules=applied,
            chain_event=None if attempt.success else MissionFailed(mission_id=mission.id),
        )
