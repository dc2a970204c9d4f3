"""
Rival Strategy — how one rival family moves against the player this week.

A rival attacks when it is strong and the player is weak, sues for peace
when it is weak, at war, and the player is strong, and otherwise holds.
"""

from datetime import datetime
from typing import List, Optional

from syndicate_kernel.contexts.world import RivalContext
from syndicate_kernel.models.decision import NOT_FOUND, Decision
from syndicate_kernel.models.state import GameState, RivalFaction
from syndicate_kernel.rules.confidence import ConfidenceScorer
from syndicate_kernel.rules.table import RuleTable
from syndicate_kernel.session.providers import RandomSource, seeded_random

ATTACK = "attack"
PEACE = "peace"
ALLIANCE = "alliance"
PROVOKE = "provoke"
OBSERVE = "observe"
HOLD = "hold"

ATTACK_DAMAGE_RANGE = (10_000, 25_000)


class _RivalMove:
    """The state a rival rule acts on: the player's family plus the acting rival."""

    def __init__(self, state: GameState, rival: RivalFaction):
        self.state = state
        self.rival = rival


def _rival_scorer() -> ConfidenceScorer:
    scorer = ConfidenceScorer(base=50)
    scorer.support(ATTACK, "rival_stronger", lambda c: c.rival_is_stronger, 20)
    scorer.support(ATTACK, "player_weak", lambda c: c.player_is_weak, 20)
    scorer.support(PEACE, "rival_weaker", lambda c: c.rival_is_weaker, 20)
    scorer.support(PEACE, "player_strong", lambda c: c.player_is_strong, 20)
    scorer.support(HOLD, "rival_neutral", lambda c: c.rival_is_neutral, 10)
    return scorer


def build_rival_table(rng: RandomSource) -> RuleTable:
    def attack(move: _RivalMove, ctx: RivalContext) -> List[str]:
        damage = rng.randint(*ATTACK_DAMAGE_RANGE)
        move.state.wealth -= damage
        move.rival.hostility -= 15
        return [f"The {move.rival.name} hit your operations: -${damage:,}"]

    def sue_for_peace(move: _RivalMove, ctx: RivalContext) -> List[str]:
        move.rival.hostility -= 40
        move.rival.at_war = False
        return [f"The {move.rival.name} sues for peace"]

    def alliance(move: _RivalMove, ctx: RivalContext) -> List[str]:
        move.rival.hostility -= 20
        move.state.reputation += 5
        return [f"The {move.rival.name} proposes an alliance: reputation +5"]

    def provoke(move: _RivalMove, ctx: RivalContext) -> List[str]:
        move.state.heat += 10
        return [f"The {move.rival.name} tips off the cops while you're hot: heat +10"]

    def observe(move: _RivalMove, ctx: RivalContext) -> List[str]:
        move.rival.hostility -= 5
        return [f"The {move.rival.name} watches and waits"]

    t = RuleTable(
        "rival_strategy",
        default_verdict=HOLD,
        default_reason="Rival holds its position",
        scorer=_rival_scorer(),
    )
    t.add_rule("RIVAL_ATTACK_WEAK", "Attack Weak Player",
               lambda c: c.should_attack, ATTACK, 1000, effect=attack)
    t.add_rule("RIVAL_SUE_FOR_PEACE", "Sue for Peace",
               lambda c: c.should_make_peace and c.rival.at_war, PEACE, 950, effect=sue_for_peace)
    t.add_rule("RIVAL_ALLIANCE", "Form Alliance",
               lambda c: (c.should_form_alliance and not c.rival.at_war
                          and c.rival.hostility < 40), ALLIANCE, 900, effect=alliance)
    t.add_rule("RIVAL_PROVOKE", "Provoke Distracted Player",
               lambda c: c.player_is_distracted and c.rival_is_angry, PROVOKE, 850, effect=provoke)
    t.add_rule("RIVAL_OBSERVE", "Observe and Wait",
               lambda c: c.should_wait, OBSERVE, 500, effect=observe)
    return t


class RivalStrategist:
    def __init__(self, rng: Optional[RandomSource] = None, table: Optional[RuleTable] = None):
        self.rng = rng or seeded_random(None)
        self.table = table or build_rival_table(self.rng)

    def decide(
        self,
        state: GameState,
        rival_id: str,
        now: Optional[datetime] = None,
    ) -> Decision:
        """Let one rival act. Unknown rival ids come back as a not-found verdict."""
        rival = state.rivals.get(rival_id)
        if rival is None:
            return Decision(
                table=self.table.name,
                verdict=NOT_FOUND,
                confidence=100,
                reason=f"Rival family '{rival_id}' not found",
                decided_at=now,
            )
        ctx = RivalContext.from_state(state, rival)
        return self.table.evaluate(_RivalMove(state, rival), ctx, now=now)
