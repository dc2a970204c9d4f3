"""
Game-level rules: victory, defeat, warnings and weekly consequences.

Terminal outcomes are ordinary top-priority rules: a winning VICTORY_* or
DEFEAT_* rule marks the state game-over. Nothing here raises.
"""

from datetime import datetime
from typing import List, Optional

from syndicate_kernel.contexts.world import GameContext
from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.decision import Decision
from syndicate_kernel.models.state import GameState
from syndicate_kernel.rules.confidence import ConfidenceScorer
from syndicate_kernel.rules.table import RuleTable

VICTORY = "victory"
DEFEAT = "defeat"
WARNING = "warning"
CONSEQUENCE = "consequence"
OPPORTUNITY = "opportunity"
CONTINUE = "continue"


def _end_game(outcome: str, message: str):
    def effect(state: GameState, ctx: GameContext) -> List[str]:
        state.game_over = True
        state.outcome = outcome
        return [message]
    return effect


def _dispute_first_territory(state: GameState, ctx: GameContext) -> List[str]:
    first = next(iter(state.territories.values()), None)
    if first is None:
        return []
    first.disputed = True
    return [f"Rivals smell weakness: {first.name} is now disputed"]


def _dominance_bonus(state: GameState, ctx: GameContext) -> List[str]:
    state.reputation += 5
    return ["Your dominance grows: reputation +5"]


def _heat_decay(state: GameState, ctx: GameContext) -> List[str]:
    state.heat -= 3
    return ["Quiet week: heat -3"]


def _heat_creep(state: GameState, ctx: GameContext) -> List[str]:
    state.heat += 2
    return ["Aggressive operations draw attention: heat +2"]


def build_game_table() -> RuleTable:
    scorer = ConfidenceScorer(base=100)
    t = RuleTable(
        "game",
        default_verdict=CONTINUE,
        default_reason="Nothing notable this week",
        scorer=scorer,
    )

    t.add_rule("VICTORY_EMPIRE", "Empire Victory",
               lambda c: c.reached_victory_week and c.is_rich and c.has_high_reputation,
               VICTORY, 1000,
               effect=_end_game("empire", "You built an empire. The city is yours."))
    t.add_rule("DEFEAT_BANKRUPTCY", "Bankruptcy",
               lambda c: c.wealth <= 0, DEFEAT, 1000,
               effect=_end_game("bankruptcy", "The family is broke. It's over."))
    t.add_rule("DEFEAT_FEDERAL", "Federal Indictment",
               lambda c: c.heat >= 100, DEFEAT, 1000,
               effect=_end_game("federal", "The Feds moved in. Everyone is indicted."))
    t.add_rule("DEFEAT_BETRAYAL", "Betrayed",
               lambda c: c.reputation <= 10, DEFEAT, 1000,
               effect=_end_game("betrayal", "Nobody respects the family anymore. You were betrayed."))
    t.add_rule("VICTORY_SURVIVAL", "Survival Victory",
               lambda c: c.reached_victory_week and c.wealth > 150_000, VICTORY, 900,
               effect=_end_game("survival", "You survived the year with the family intact."))

    t.add_rule("WARNING_HEAT", "Heat Warning",
               lambda c: 80 < c.heat < 100, WARNING, 800,
               description="The Feds are closing in. Lay low.")
    t.add_rule("WARNING_MONEY", "Money Warning",
               lambda c: 0 < c.wealth < 30_000, WARNING, 800,
               description="The family is running out of money.")

    t.add_rule("CONSEQUENCE_VULNERABLE", "Vulnerable Family",
               lambda c: c.is_vulnerable and c.territory_count > 0 and c.disputed_count == 0,
               CONSEQUENCE, 700, effect=_dispute_first_territory)
    t.add_rule("CONSEQUENCE_DOMINANT", "Dominant Family",
               lambda c: c.is_dominant and c.reputation < 100,
               CONSEQUENCE, 700, effect=_dominance_bonus)

    t.add_rule("OPPORTUNITY_EXPANSION", "Expansion Opportunity",
               lambda c: c.can_expand and c.week % 5 == 0, OPPORTUNITY, 500,
               description="Conditions are right to expand.")

    t.add_rule("HEAT_DECAY_PEACEFUL", "Peaceful Heat Decay",
               lambda c: c.heat > 0 and not c.should_be_aggressive, CONSEQUENCE, 300,
               effect=_heat_decay)
    t.add_rule("HEAT_INCREASE_AGGRESSIVE", "Aggressive Heat Increase",
               lambda c: c.should_be_aggressive and c.week % 2 == 0, CONSEQUENCE, 300,
               effect=_heat_creep)
    return t


class GameRules:
    """Checks the family's position once per week."""

    def __init__(self, config: Optional[EngineConfig] = None, table: Optional[RuleTable] = None):
        self.config = config or EngineConfig()
        self.table = table or build_game_table()

    def check(self, state: GameState, now: Optional[datetime] = None) -> Decision:
        ctx = GameContext.from_state(state, self.config)
        return self.table.evaluate(state, ctx, now=now)
