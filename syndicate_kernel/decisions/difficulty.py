"""
Difficulty adjustment keeps the run challenging without stacking the deck.

Rivals may only get stronger here; a struggling player gets a small lift
instead of rivals being weakened.
"""

from datetime import datetime
from typing import List, Optional

from syndicate_kernel.contexts.world import DifficultyContext
from syndicate_kernel.models.decision import Decision
from syndicate_kernel.models.state import GameState
from syndicate_kernel.rules.table import RuleTable

RAMP_UP = "ramp_up"
ASSIST = "assist"
ENDGAME = "endgame"
BALANCED = "balanced"


def _ramp_up(state: GameState, ctx: DifficultyContext) -> List[str]:
    for rival in state.rivals.values():
        rival.strength += 10
        rival.hostility += 15
    return ["The other families are getting nervous about your success"]


def _assist(state: GameState, ctx: DifficultyContext) -> List[str]:
    state.wealth += 20_000
    state.heat -= 20
    return ["Lucky break! An old debt has been repaid: +$20,000 and heat -20"]


def _endgame(state: GameState, ctx: DifficultyContext) -> List[str]:
    state.heat += 5
    for rival in state.rivals.values():
        rival.hostility += 5
    return ["The endgame approaches: all families are on edge"]


def build_difficulty_table() -> RuleTable:
    t = RuleTable(
        "difficulty",
        default_verdict=BALANCED,
        default_reason="No adjustment needed",
    )
    t.add_rule("DIFFICULTY_RAMP_UP", "Increase Challenge",
               lambda c: c.player_dominating and c.on_win_streak, RAMP_UP, 1000,
               effect=_ramp_up)
    t.add_rule("DIFFICULTY_ASSIST", "Provide Assistance",
               lambda c: c.player_struggling and c.on_loss_streak and not c.is_late_game,
               ASSIST, 1000, effect=_assist)
    t.add_rule("DIFFICULTY_ENDGAME", "Endgame Challenge",
               lambda c: c.is_late_game and c.week % 5 == 0, ENDGAME, 900,
               effect=_endgame)
    t.add_rule("DIFFICULTY_BALANCED", "Maintain Balance",
               lambda c: (c.steady_growth and not c.player_dominating
                          and not c.player_struggling), BALANCED, 500)
    return t


class DifficultyAdjuster:
    def __init__(self, table: Optional[RuleTable] = None):
        self.table = table or build_difficulty_table()

    def adjust(self, state: GameState, now: Optional[datetime] = None) -> Decision:
        ctx = DifficultyContext.from_state(state)
        return self.table.evaluate(state, ctx, now=now)
