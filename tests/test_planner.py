"""Tests for the target planner in backend_logic.py."""

import pytest

from cgpa_tracker.backend_logic import InputMode, PlanOutcome, nearest_symbol, solve_target
from cgpa_tracker.errors import InvalidCreditsError, InvalidTargetError
from cgpa_tracker.grading_scales import GradingScalePreset, build_symbol_table
from cgpa_tracker.roster import Roster


class TestSolveTarget:
    def test_empty_record(self, ugc):
        plan = solve_target(3.5, 30, [], ugc)
        assert plan.required_average == 3.5
        assert plan.outcome is PlanOutcome.ACHIEVABLE
        assert plan.nearest_symbol == "A-"

    def test_already_exceeded(self, ugc):
        roster = Roster()
        for i in range(6):
            roster.add_subject(f"S{i}", 3, InputMode.LETTER, "A+", ugc)
        assert roster.weighted_average() == 4.0

        plan = solve_target(3.0, 3, roster.subjects, ugc)
        assert plan.outcome is PlanOutcome.ALREADY_EXCEEDED
        assert plan.required_average < 0
        assert plan.nearest_symbol is None

    def test_unachievable_still_reports_required(self, ugc):
        roster = Roster()
        roster.add_subject("Weak", 6, InputMode.LETTER, "F", ugc)
        plan = solve_target(3.9, 3, roster.subjects, ugc)
        assert plan.outcome is PlanOutcome.UNACHIEVABLE
        assert plan.required_average == pytest.approx((3.9 * 9) / 3)

    def test_required_average_formula(self, ugc):
        roster = Roster()
        roster.add_subject("A", 3, InputMode.LETTER, "B", ugc)  # 9 points
        plan = solve_target(3.5, 3, roster.subjects, ugc)
        assert plan.required_average == 4.0
        assert plan.nearest_symbol == "A+"

    def test_text_inputs(self, ugc):
        plan = solve_target("3.0", "15", [], ugc)
        assert plan.required_average == 3.0
        assert plan.nearest_symbol == "B"

    @pytest.mark.parametrize("target", [0, -1, 4.01, "x", None])
    def test_invalid_target(self, ugc, target):
        with pytest.raises(InvalidTargetError):
            solve_target(target, 30, [], ugc)

    @pytest.mark.parametrize("remaining", [0, -5, "many"])
    def test_invalid_remaining(self, ugc, remaining):
        with pytest.raises(InvalidCreditsError):
            solve_target(3.0, remaining, [], ugc)


class TestNearestSymbol:
    def test_closest(self, ugc):
        assert nearest_symbol(ugc, 3.6).token == "A-"
        assert nearest_symbol(ugc, 1.2).token == "D"

    def test_tie_goes_to_first_declared(self):
        preset = GradingScalePreset("t", "Tie", build_symbol_table([
            ("HIGH", 3.0, 50, 100),
            ("LOW", 2.0, 0, 49),
        ]))
        assert nearest_symbol(preset, 2.5).token == "HIGH"
