"""
Agent Action Selection — what a family member does this week.

Behavioral Contract:
- Reads the family's situation through an AgentContext built from the
  current state and the agent's persona
- Exactly one action wins per call; with no match the agent waits
- Deciding never mutates the game state; AgentActions carries out the
  chosen action and sets the agent's cooldown
"""

from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Optional

from syndicate_kernel.contexts.agent import AgentContext
from syndicate_kernel.models.decision import NOT_FOUND, Decision
from syndicate_kernel.models.persona import Persona
from syndicate_kernel.models.state import GameState
from syndicate_kernel.rules.confidence import ConfidenceScorer
from syndicate_kernel.rules.definitions import RuleDefinition, build_rule
from syndicate_kernel.rules.table import RuleTable
from syndicate_kernel.session.providers import RandomSource


class AgentAction(str, Enum):
    COLLECTION = "collection"
    INTIMIDATE = "intimidate"
    EXPAND = "expand"
    RECRUIT = "recruit"
    BRIBE = "bribe"
    LAYLOW = "laylow"
    NEGOTIATE = "negotiate"
    WAIT = "wait"


COLLECTION = AgentAction.COLLECTION.value
INTIMIDATE = AgentAction.INTIMIDATE.value
EXPAND = AgentAction.EXPAND.value
RECRUIT = AgentAction.RECRUIT.value
BRIBE = AgentAction.BRIBE.value
LAYLOW = AgentAction.LAYLOW.value
WAIT = AgentAction.WAIT.value


def _intimidation_opening(ctx: AgentContext) -> bool:
    """Any of the three intimidation triggers."""
    return (
        (ctx.in_dominance_mode and ctx.rival_is_weak)
        or (ctx.family_under_threat and ctx.is_aggressive and not ctx.heat_is_critical)
        or ctx.opportunistic_strike
    )


def _safe_collection_window(ctx: AgentContext) -> bool:
    """All three safe-collection prerequisites."""
    return (
        ctx.has_heat_budget
        and not ctx.rival_attack_imminent
        and (not ctx.in_survival_mode or ctx.wealth > 20_000)
    )


def _agent_scorer() -> ConfidenceScorer:
    scorer = ConfidenceScorer(base=50)
    scorer.support(LAYLOW, "heat_critical", lambda c: c.heat_is_critical, 30)
    scorer.support(LAYLOW, "heat_dangerous", lambda c: c.heat_is_dangerous, 15)
    scorer.support(LAYLOW, "heat_rising", lambda c: c.heat_is_rising, 5)
    scorer.support(BRIBE, "can_afford_bribe", lambda c: c.can_afford_bribe, 20)
    scorer.support(BRIBE, "heat_rising", lambda c: c.heat_is_rising, 10)
    scorer.support(COLLECTION, "needs_money", lambda c: c.family_needs_money, 15)
    scorer.support(COLLECTION, "heat_budget", lambda c: c.has_heat_budget, 10)
    scorer.support(INTIMIDATE, "aggressive", lambda c: c.is_aggressive, 15)
    scorer.support(INTIMIDATE, "rival_weak", lambda c: c.rival_is_weak, 15)
    scorer.support(EXPAND, "can_take_risks", lambda c: c.can_take_risks, 20)
    scorer.support(EXPAND, "wealth_growing", lambda c: c.wealth_is_growing, 10)
    scorer.support(RECRUIT, "needs_soldiers", lambda c: c.needs_more_soldiers, 20)
    scorer.support(RECRUIT, "attack_imminent", lambda c: c.rival_attack_imminent, 10)
    return scorer


def build_agent_table() -> RuleTable:
    """The built-in agent rules, declared in tie-breaking order."""
    t = RuleTable("agent_action", default_verdict=WAIT, scorer=_agent_scorer())

    # Emergencies
    t.add_rule("EMERGENCY_LAYLOW", "Emergency Heat Reduction",
               lambda c: c.emergency_lay_low, LAYLOW, 1000)
    t.add_rule("EMERGENCY_BRIBE", "Emergency Bribery",
               lambda c: c.heat_is_critical and c.wealth > 15_000, BRIBE, 995)

    # Phases
    t.add_rule("SURVIVAL_COLLECTION", "Survival Mode Collection",
               lambda c: c.in_survival_mode and not c.heat_is_dangerous, COLLECTION, 980)
    t.add_rule("SURVIVAL_LAYLOW", "Survival Mode Safety",
               lambda c: c.in_survival_mode and c.needs_heat_reduction, LAYLOW, 985)
    t.add_rule("DOMINANCE_STRIKE", "Dominance Opportunistic Strike",
               lambda c: c.opportunistic_strike and c.is_aggressive, INTIMIDATE, 920)
    t.add_rule("GROWTH_EXPAND", "Growth Phase Expansion",
               lambda c: c.aggressive_opportunity, EXPAND, 910)

    # Defense
    t.add_rule("DEFENSIVE_LAYLOW", "Defensive Posture",
               lambda c: c.defensive_posture and c.is_cautious, LAYLOW, 900)
    t.add_rule("DEFENSIVE_BRIBE", "Defensive Bribery",
               lambda c: c.needs_heat_reduction and c.can_afford_bribe, BRIBE, 895)
    t.add_rule("DEFENSIVE_RECRUIT", "Defensive Recruitment",
               lambda c: (c.rival_attack_imminent and c.needs_more_soldiers
                          and c.wealth > 10_000), RECRUIT, 890)

    # Personality
    t.add_rule("LOYAL_PROTECT", "Family Protection",
               lambda c: c.is_family_first and c.heat_is_dangerous, LAYLOW, 850)
    t.add_rule("GREEDY_COLLECTION", "Greedy Agent Collection",
               lambda c: (c.is_greedy and c.family_needs_money
                          and not c.heat_is_dangerous), COLLECTION, 800)
    t.add_rule("AGGRESSIVE_RETALIATE", "Aggressive Retaliation",
               lambda c: (c.is_aggressive and c.family_under_threat
                          and not c.heat_is_critical), INTIMIDATE, 750)
    t.add_rule("HOTHEADED_VIOLENCE", "Hot-headed Violence",
               lambda c: c.is_hotheaded and c.heat_risk_worth_it, INTIMIDATE, 700)
    t.add_rule("AMBITIOUS_EXPAND", "Ambitious Expansion",
               lambda c: (c.is_ambitious and c.good_time_to_expand
                          and c.wealth > 100_000), EXPAND, 650)
    t.add_rule("AMBITIOUS_RECRUIT", "Ambitious Recruitment",
               lambda c: (c.is_ambitious and c.needs_more_soldiers
                          and not c.should_conserve and c.wealth > 50_000), RECRUIT, 625)
    t.add_rule("CALCULATING_BRIBE", "Strategic Bribe",
               lambda c: c.is_calculating and c.can_afford_bribe and c.heat_is_rising,
               BRIBE, 600)
    t.add_rule("CALCULATING_STRATEGY", "Strategic Planning",
               lambda c: c.is_calculating and c.rivals_are_peaceful and c.has_heat_budget,
               COLLECTION, 550)
    t.add_rule("CAUTIOUS_AVOID_RISK", "Cautious Risk Avoidance",
               lambda c: c.is_cautious and c.heat_is_rising and not c.in_survival_mode,
               LAYLOW, 780)
    t.add_rule("CAUTIOUS_SAFE_COLLECT", "Cautious Collection",
               lambda c: c.is_cautious and c.heat_is_falling and c.rivals_are_peaceful,
               COLLECTION, 720)
    t.add_rule("CAUTIOUS_RECRUIT", "Cautious Recruitment",
               lambda c: (c.is_cautious and c.soldier_count < 5
                          and c.rival_is_threatening and c.wealth > 100_000), RECRUIT, 710)
    t.add_rule("FAMILY_FIRST_STABILITY", "Family First Stability",
               lambda c: c.is_family_first and c.heat_is_rising, BRIBE, 840)
    t.add_rule("FAMILY_FIRST_STRENGTHEN", "Family First Strengthening",
               lambda c: (c.is_family_first and c.needs_more_soldiers
                          and c.wealth > 30_000), RECRUIT, 820)
    t.add_rule("HOTHEADED_RECKLESS", "Hot-headed Recklessness",
               lambda c: c.is_hotheaded and not c.heat_is_critical and c.wealth > 50_000,
               INTIMIDATE, 680)
    t.add_rule("HOTHEADED_DEFIANT", "Hot-headed Defiance",
               lambda c: (c.is_hotheaded and c.rival_is_threatening
                          and not c.heat_is_critical), INTIMIDATE, 760)

    # Phase and personality
    t.add_rule("SURVIVAL_AGGRESSIVE", "Aggressive Survival",
               lambda c: c.in_survival_mode and c.is_aggressive and c.rival_is_weak,
               INTIMIDATE, 970)
    t.add_rule("SURVIVAL_CAUTIOUS", "Cautious Survival",
               lambda c: c.in_survival_mode and c.is_cautious, LAYLOW, 975)
    t.add_rule("GROWTH_CAUTIOUS", "Cautious Growth",
               lambda c: (c.in_growth_mode and c.is_cautious and c.has_heat_budget
                          and c.wealth > 200_000), EXPAND, 905)
    t.add_rule("DOMINANCE_GREEDY", "Greedy Dominance",
               lambda c: c.in_dominance_mode and c.is_greedy and c.has_heat_budget,
               COLLECTION, 915)

    # Rivals
    t.add_rule("RIVAL_WEAK_AMBITIOUS", "Seize Weak Rival Opportunity",
               lambda c: c.rival_is_weak and c.is_ambitious and c.can_take_risks, EXPAND, 640)
    t.add_rule("RIVAL_WEAK_AGGRESSIVE", "Attack Weak Rival",
               lambda c: c.rival_is_weak and c.is_aggressive and c.has_heat_budget,
               INTIMIDATE, 660)
    t.add_rule("RIVAL_THREATENING_LOYAL", "Loyal Defense Against Threat",
               lambda c: c.rival_is_threatening and c.is_loyal and c.needs_more_soldiers,
               RECRUIT, 830)
    t.add_rule("RIVAL_THREATENING_CALCULATING", "Strategic Threat Response",
               lambda c: c.rival_is_threatening and c.is_calculating and c.heat < 60,
               BRIBE, 810)

    # Heat trends
    t.add_rule("HEAT_RISING_WEALTHY", "Proactive Wealthy Bribe",
               lambda c: c.heat_is_rising and c.wealth > 100_000 and not c.is_aggressive,
               BRIBE, 870)
    t.add_rule("HEAT_RISING_AGGRESSIVE", "Aggressive Heat Ignore",
               lambda c: c.heat_is_rising and c.is_aggressive and not c.heat_is_dangerous,
               COLLECTION, 740)
    t.add_rule("HEAT_FALLING_PRODUCTIVE", "Productive Low Heat Period",
               lambda c: c.heat_is_falling and c.has_heat_budget and not c.in_survival_mode,
               COLLECTION, 580)
    t.add_rule("HEAT_CRITICAL_EMERGENCY", "Critical Heat Emergency",
               lambda c: c.heat_is_critical and c.wealth < 20_000, LAYLOW, 990)

    # Wealth trends
    t.add_rule("WEALTH_GROWING_AMBITIOUS", "Ambitious Wealth Growth",
               lambda c: c.wealth_is_growing and c.is_ambitious and c.can_take_risks,
               EXPAND, 630)
    t.add_rule("WEALTH_GROWING_GREEDY", "Greedy Wealth Maximization",
               lambda c: c.wealth_is_growing and c.is_greedy and c.has_heat_budget,
               COLLECTION, 620)
    t.add_rule("WEALTH_SHRINKING_CAUTIOUS", "Cautious Wealth Conservation",
               lambda c: c.wealth_is_shrinking and c.is_cautious, LAYLOW, 860)
    t.add_rule("WEALTH_SHRINKING_GREEDY", "Desperate Greedy Collection",
               lambda c: (c.wealth_is_shrinking and c.is_greedy
                          and not c.heat_is_dangerous), COLLECTION, 855)

    # Opportunism
    t.add_rule("OPPORTUNISTIC_COLLECTION", "Opportunistic Collection",
               lambda c: c.rivals_are_peaceful and c.has_heat_budget and c.heat_is_falling,
               COLLECTION, 400)
    t.add_rule("OPPORTUNISTIC_EXPAND", "Opportunistic Expansion",
               lambda c: (c.can_afford_expensive and c.has_heat_budget
                          and not c.rival_is_threatening), EXPAND, 350)
    t.add_rule("COMPOSITE_INTIMIDATE_ACTION", "Composite Intimidation Strategy",
               _intimidation_opening, INTIMIDATE, 500)
    t.add_rule("COMPOSITE_SAFE_COLLECT_ACTION", "Safe Collection Strategy",
               lambda c: _safe_collection_window(c) and c.is_greedy, COLLECTION, 450)

    # Fallbacks
    t.add_rule("DEFAULT_ACCUMULATION", "Default Accumulation",
               lambda c: c.in_accumulation_mode and not c.heat_is_dangerous, COLLECTION, 100)
    t.add_rule("DEFAULT_WAIT", "Cautious Waiting", lambda c: True, WAIT, 1)
    return t


class AgentDecider:
    """Chooses weekly actions for family agents."""

    def __init__(self, table: Optional[RuleTable] = None):
        self.table = table or build_agent_table()

    def register_definition(self, definition: RuleDefinition) -> None:
        """Add a data-defined rule alongside the built-in ones."""
        self.table.add(build_rule(definition, AgentContext))

    def context(self, state: GameState, persona: Persona) -> AgentContext:
        return AgentContext.from_state(state, persona)

    def decide(
        self,
        state: GameState,
        persona: Persona,
        now: Optional[datetime] = None,
    ) -> Decision:
        ctx = self.context(state, persona)
        return self.table.evaluate(state, ctx, now=now)

    def decide_for(
        self,
        state: GameState,
        agent_id: str,
        now: Optional[datetime] = None,
    ) -> Decision:
        """Decide for an agent registered on the state, by id."""
        persona = state.agents.get(agent_id)
        if persona is None:
            return Decision(
                table=self.table.name,
                verdict=NOT_FOUND,
                confidence=100,
                reason=f"Agent '{agent_id}' not found",
                decided_at=now,
            )
        return self.decide(state, persona, now=now)


ActionHandler = Callable[[GameState, str], Optional[str]]


class AgentActions:
    """
    Carries out the action an agent chose.

    Handlers mutate the state and return a log line, or None when the
    action had no effect. After acting, an agent sits out 1-2 weeks.
    """

    def __init__(self, rng: RandomSource):
        self.rng = rng
        self._handlers: Dict[str, ActionHandler] = {}
        self._register_default_actions()

    def _register_default_actions(self) -> None:
        self._handlers[INTIMIDATE] = self._intimidate
        self._handlers[COLLECTION] = self._collection
        self._handlers[EXPAND] = self._expand

    def register_action(self, verdict: str, handler: ActionHandler) -> None:
        """Register a custom action handler."""
        self._handlers[verdict] = handler

    def execute(self, state: GameState, agent_id: str, verdict: str) -> Optional[str]:
        handler = self._handlers.get(verdict)
        if handler is None:
            return None
        return handler(state, agent_id)

    def cooldown(self) -> int:
        return self.rng.randint(1, 2)

    # --- Handlers ---

    def _intimidate(self, state: GameState, agent_id: str) -> Optional[str]:
        state.heat += 3
        return f"{agent_id} intimidates local businesses - Heat +3"

    def _collection(self, state: GameState, agent_id: str) -> Optional[str]:
        amount = self.rng.randint(1_000, 4_999)
        state.wealth += amount
        return f"{agent_id} makes an extra collection: ${amount:,}"

    def _expand(self, state: GameState, agent_id: str) -> Optional[str]:
        if state.wealth <= 50_000:
            return None
        state.wealth -= 10_000
        state.reputation += 5
        return f"{agent_id} expands operations - Reputation +5"
