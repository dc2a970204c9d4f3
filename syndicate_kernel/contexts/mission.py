"""The player's standing weighed against one job offer."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from syndicate_kernel.models.mission import Mission, PlayerProfile


class MissionContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    respect: int
    money: float
    heat: int
    skills: Dict[str, int] = {}
    ambition: int = 50
    caution: int = 50

    has_mission: bool = True
    risk_level: int = 1
    respect_reward: int = 0
    money_reward: float = 0.0
    skill_requirements: Dict[str, int] = {}

    @classmethod
    def build(cls, player: PlayerProfile, mission: Optional[Mission]) -> "MissionContext":
        fields = dict(
            respect=player.respect,
            money=player.money,
            heat=player.heat,
            skills={k.lower(): v for k, v in player.skills.items()},
            ambition=player.personality.ambition,
            caution=player.personality.caution,
        )
        if mission is None:
            return cls(has_mission=False, **fields)
        return cls(
            risk_level=mission.risk_level,
            respect_reward=mission.respect_reward,
            money_reward=mission.money_reward,
            skill_requirements={k.lower(): v for k, v in mission.skill_requirements.items()},
            **fields,
        )

    def skill(self, name: str) -> int:
        return self.skills.get(name.lower(), 0)

    # --- Player ---

    @property
    def is_low_on_money(self) -> bool:
        return self.money < 500

    @property
    def is_rich(self) -> bool:
        return self.money > 10_000

    @property
    def has_low_respect(self) -> bool:
        return self.respect < 30

    @property
    def has_high_respect(self) -> bool:
        return self.respect > 70

    @property
    def is_under_heat(self) -> bool:
        return self.heat > 60

    @property
    def has_safe_operations(self) -> bool:
        return self.heat < 30

    @property
    def is_ambitious(self) -> bool:
        return self.ambition > 70

    @property
    def is_cautious(self) -> bool:
        return self.caution > 70

    @property
    def can_afford_risk(self) -> bool:
        return self.respect > 40 and self.money > 2000

    # --- Mission ---

    @property
    def mission_is_safe(self) -> bool:
        return self.has_mission and self.risk_level < 4

    @property
    def mission_is_risky(self) -> bool:
        return self.has_mission and self.risk_level >= 7

    @property
    def mission_is_high_reward(self) -> bool:
        return self.has_mission and (self.respect_reward > 10 or self.money_reward > 1000)

    @property
    def meets_skill_requirements(self) -> bool:
        return all(
            self.skill(name) >= needed
            for name, needed in self.skill_requirements.items()
        )

    @property
    def is_overqualified(self) -> bool:
        if not self.has_mission:
            return False
        return all(
            self.skill(name) >= needed + 20
            for name, needed in self.skill_requirements.items()
        )

    @property
    def skill_advantage(self) -> int:
        """Sum of (skill - requirement) across the mission's requirements."""
        return sum(
            self.skill(name) - needed
            for name, needed in self.skill_requirements.items()
        )

    @property
    def skill_deficit(self) -> int:
        return sum(
            max(0, needed - self.skill(name))
            for name, needed in self.skill_requirements.items()
        )
