"""Tests for the data models: clamping, persona drift and chain events."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from syndicate_kernel.models.decision import Decision
from syndicate_kernel.models.events import (
    TRIGGER_NAMES,
    Betrayal,
    ChainEventAdapter,
    Hit,
    PoliceRaid,
)
from syndicate_kernel.models.mission import PlayerProfile, PlayerRank
from syndicate_kernel.models.persona import Persona
from syndicate_kernel.models.state import GameState, RivalFaction, Territory


def _make_state() -> GameState:
    state = GameState()
    state.territories["docks"] = Territory(id="docks", name="Brooklyn Docks", weekly_revenue=20_000)
    state.territories["lost"] = Territory(
        id="lost", name="Lost Block", weekly_revenue=5_000, owner_id=None,
    )
    state.rivals["barzini"] = RivalFaction(id="barzini", name="Barzini Family", strength=70)
    return state


class TestGameState:
    def test_defaults(self):
        state = GameState()
        assert state.wealth == 100_000
        assert state.reputation == 50
        assert state.heat == 0
        assert state.week == 1
        assert state.game_over is False

    def test_constructor_clamps(self):
        state = GameState(heat=150, reputation=-20)
        assert state.heat == 100
        assert state.reputation == 0

    def test_assignment_clamps_under_repeated_extremes(self):
        state = GameState()
        for _ in range(10):
            state.heat += 500
            state.reputation -= 500
        assert state.heat == 100
        assert state.reputation == 0

    def test_wealth_is_unbounded(self):
        state = GameState()
        state.wealth -= 1_000_000
        assert state.wealth == -900_000

    def test_soldier_count_floors_at_zero(self):
        state = GameState(soldier_count=2)
        state.soldier_count -= 5
        assert state.soldier_count == 0

    def test_weekly_income_skips_lost_territory(self):
        state = _make_state()
        assert state.weekly_income == 20_000

    def test_find_rival_by_id_and_name_fragment(self):
        state = _make_state()
        assert state.find_rival("barzini").id == "barzini"
        assert state.find_rival("BARZ").id == "barzini"
        assert state.find_rival("tattaglia") is None
        assert state.find_rival("  ") is None

    def test_log_appends_with_current_week(self):
        state = _make_state()
        state.week = 7
        entry = state.log("command", "Paid off the captain", datetime(2024, 1, 1))
        assert state.event_log == [entry]
        assert entry.week == 7


class TestRivalFaction:
    def test_strength_and_hostility_clamp(self):
        rival = RivalFaction(id="r", name="R", strength=120, hostility=-5)
        assert rival.strength == 100
        assert rival.hostility == 0
        rival.hostility += 300
        assert rival.hostility == 100


class TestPersona:
    def test_traits_default_to_neutral(self):
        persona = Persona()
        assert persona.trust == 50
        assert persona.trait("nonexistent") == 50

    def test_traits_clamp(self):
        persona = Persona(aggression=140)
        assert persona.aggression == 100
        persona.trust -= 200
        assert persona.trust == 0

    def test_named_predicates(self):
        persona = Persona(ambition=80, caution=20)
        assert persona.is_ambitious
        assert persona.is_reckless
        assert not persona.is_cautious

    def test_betrayed_drift(self):
        persona = Persona(trust=50, caution=50)
        changed = persona.apply_experience("betrayed", 20)
        assert persona.trust == 30
        assert persona.caution == 60
        assert set(changed) == {"trust", "caution"}

    def test_betrayed_drift_clamps_at_zero(self):
        persona = Persona(trust=10)
        persona.apply_experience("betrayed", 30)
        assert persona.trust == 0

    def test_failure_and_helped_drift(self):
        persona = Persona()
        persona.apply_experience("failure", 30)
        assert persona.caution == 65
        assert persona.pride == 40
        persona.apply_experience("helped", 30)
        assert persona.trust == 65
        assert persona.loyalty == 60

    def test_negative_intensity_truncates_toward_zero(self):
        persona = Persona()
        persona.apply_experience("helped", -5)
        assert persona.trust == 48
        assert persona.loyalty == 49

    def test_unknown_experience_is_noop(self):
        persona = Persona()
        assert persona.apply_experience("abducted_by_aliens", 50) == []
        assert persona.model_dump() == Persona().model_dump()

    def test_reaction_bias(self):
        persona = Persona(ambition=80, caution=20, loyalty=90, trust=70)
        assert persona.reaction_bias("opportunity") == pytest.approx(0.6)
        assert persona.reaction_bias("alliance") == pytest.approx(0.8)
        assert persona.reaction_bias("unknown") == 0.0

    def test_reaction_bias_stays_in_range(self):
        persona = Persona(ambition=0, caution=100, aggression=100, patience=0)
        assert persona.reaction_bias("opportunity") == -1.0
        assert persona.reaction_bias("threat") == 1.0

    def test_loyalty_to_subject(self):
        persona = Persona(faction_biases={"tattaglia": 80})
        assert persona.loyalty_to("tattaglia") == 80
        assert persona.loyalty_to("barzini") == 0


class TestPlayerProfile:
    def test_earned_rank_follows_respect(self):
        assert PlayerProfile(respect=10).earned_rank() == PlayerRank.ASSOCIATE
        assert PlayerProfile(respect=40).earned_rank() == PlayerRank.SOLDIER
        assert PlayerProfile(respect=86).earned_rank() == PlayerRank.UNDERBOSS
        assert PlayerProfile(respect=100).earned_rank() == PlayerRank.DON

    def test_skill_lookup_is_case_insensitive(self):
        player = PlayerProfile()
        assert player.skill("Intimidation") == 10
        assert player.skill("forgery") == 0


class TestDecision:
    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            Decision(table="t", verdict="x", confidence=150)

    def test_defaulted(self):
        assert Decision(table="t", verdict="wait").defaulted
        assert not Decision(table="t", verdict="wait", matched_rule_id="R").defaulted


class TestChainEvents:
    def test_adapter_picks_variant_by_trigger(self):
        event = ChainEventAdapter.validate_python({"trigger": "hit", "rival_id": "barzini"})
        assert isinstance(event, Hit)
        assert event.rival_id == "barzini"

    def test_adapter_rejects_unknown_trigger(self):
        with pytest.raises(ValidationError):
            ChainEventAdapter.validate_python({"trigger": "alien_invasion"})

    def test_betrayal_headcount_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            Betrayal(headcount_loss=-1)

    def test_trigger_names_cover_variants(self):
        assert PoliceRaid().trigger in TRIGGER_NAMES
        assert len(TRIGGER_NAMES) == 5
