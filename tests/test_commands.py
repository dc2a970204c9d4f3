"""Tests for player commands."""

from datetime import datetime

from syndicate_kernel.decisions.commands import UNKNOWN_COMMAND, CommandRunner
from syndicate_kernel.models.decision import CANNOT_AFFORD, NOT_FOUND, Decision
from syndicate_kernel.session.providers import FixedClock
from syndicate_kernel.world.store import new_game

NOW = datetime(2024, 1, 1)


class TestCommandRunner:
    def setup_method(self):
        self.runner = CommandRunner()
        self.state = new_game()

    def test_bribe(self):
        self.state.heat = 50
        decision = self.runner.run(self.state, "bribe", now=NOW)

        assert decision.verdict == "bribe"
        assert decision.reason == "Paid $10,000 in bribes. Heat reduced by 20."
        assert self.state.wealth == 90_000
        assert self.state.heat == 30
        assert self.state.event_log[-1].kind == "command"
        assert self.state.event_log[-1].message == decision.reason

    def test_bribe_heat_floors_at_zero(self):
        self.state.heat = 5
        self.runner.run(self.state, "bribe", now=NOW)
        assert self.state.heat == 0

    def test_cannot_afford_leaves_state_untouched(self):
        self.state.wealth = 5_000
        self.state.heat = 50
        decision = self.runner.run(self.state, "bribe", now=NOW)

        assert decision.verdict == CANNOT_AFFORD
        assert decision.reason == "Not enough money (need $10,000)"
        assert self.state.wealth == 5_000
        assert self.state.heat == 50
        assert self.state.event_log == []

    def test_expand(self):
        decision = self.runner.run(self.state, "expand", now=NOW)

        assert decision.verdict == "expand"
        assert decision.reason == "Expanded into new territory! (+$10,000/week)"
        assert self.state.wealth == 50_000
        territory = self.state.territories["new-territory-1"]
        assert territory.weekly_revenue == 10_000
        assert territory.heat_generation == 5

    def test_second_expansion_in_a_week_gets_its_own_id(self):
        self.runner.run(self.state, "expand", now=NOW)
        self.runner.run(self.state, "expand", now=NOW)
        assert "new-territory-1-2" in self.state.territories
        assert self.state.wealth == 0

    def test_hit(self):
        decision = self.runner.run(self.state, "hit tattaglia", now=NOW)
        rival = self.state.rivals["tattaglia"]

        assert decision.verdict == "hit"
        assert rival.strength == 40
        assert rival.hostility == 50
        assert self.state.wealth == 75_000
        assert self.state.heat == 25
        assert self.state.reputation == 60

    def test_hit_by_full_name(self):
        self.runner.run(self.state, "hit Barzini Family", now=NOW)
        assert self.state.rivals["barzini"].strength == 50

    def test_hit_unknown_rival(self):
        decision = self.runner.run(self.state, "hit corleone", now=NOW)
        assert decision.verdict == NOT_FOUND
        assert decision.reason == "Rival family not found"
        assert self.state.wealth == 100_000
        assert self.state.event_log == []

    def test_hit_without_target(self):
        assert self.runner.run(self.state, "hit", now=NOW).verdict == NOT_FOUND

    def test_peace(self):
        rival = self.state.rivals["barzini"]
        rival.at_war = True
        decision = self.runner.run(self.state, "peace barzini", now=NOW)

        assert decision.verdict == "peace"
        assert rival.hostility == 0
        assert rival.at_war is False
        assert self.state.wealth == 70_000

    def test_unknown_command(self):
        decision = self.runner.run(self.state, "dance", now=NOW)
        assert decision.verdict == UNKNOWN_COMMAND
        assert decision.reason == "Unknown command: dance"

    def test_empty_line(self):
        decision = self.runner.run(self.state, "   ", now=NOW)
        assert decision.verdict == UNKNOWN_COMMAND
        assert decision.reason == "No command given"

    def test_commands_are_case_insensitive(self):
        assert self.runner.run(self.state, "BRIBE", now=NOW).verdict == "bribe"

    def test_register_custom_command(self):
        def lay_low(state, args, now):
            state.heat -= 5
            return Decision(table="commands", verdict="lay_low", reason="Laying low", decided_at=now)

        self.state.heat = 10
        self.runner.register_command("LayLow", lay_low)

        assert "laylow" in self.runner.commands
        assert self.runner.run(self.state, "laylow", now=NOW).verdict == "lay_low"
        assert self.state.heat == 5
        assert self.state.event_log[-1].message == "Laying low"

    def test_timestamps_come_from_the_injected_clock(self):
        clock = FixedClock(datetime(2031, 6, 1))
        runner = CommandRunner(clock=clock)
        decision = runner.run(self.state, "bribe")
        assert decision.decided_at == datetime(2031, 6, 1)
        assert self.state.event_log[-1].recorded_at == datetime(2031, 6, 1)
