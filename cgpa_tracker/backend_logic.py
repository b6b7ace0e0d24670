import logging
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, NamedTuple, Optional, Tuple, Type

import numpy as np

from cgpa_tracker import config
from cgpa_tracker.errors import (
    GradeTrackerError,
    InvalidCreditsError,
    InvalidTargetError,
    MalformedNumberError,
    NoMatchingBandError,
    OutOfRangeError,
    UnknownGradeSymbolError,
    ValidationError,
)
from cgpa_tracker.grading_scales import GradeSymbol, GradingScalePreset

logger = logging.getLogger(__name__)

# ------------------------
# Number helpers
# ------------------------

def round_2dp_half_up(x: float) -> float:
    return float(Decimal(str(x)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_gpa(x: float) -> str:
    return f"{round_2dp_half_up(x):.2f}"


def parse_number(value, error_cls: Type[GradeTrackerError] = MalformedNumberError,
                 what: str = "value") -> float:
    """Parse user input into a finite float, raising ``error_cls`` otherwise."""
    if isinstance(value, bool):
        raise error_cls(f"{what} must be a number (got {value!r})")
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise error_cls(f"{what} must be a number (got {value!r})") from None
    if not math.isfinite(number):
        raise error_cls(f"{what} must be a finite number (got {value!r})")
    return number


# ------------------------
# Grade resolution
# ------------------------

class InputMode(str, Enum):
    LETTER = "letter"
    PERCENTAGE = "percentage"
    GPA = "gpa"


class Resolution(NamedTuple):
    grade_point: float
    label: str


def coerce_mode(mode) -> InputMode:
    try:
        return InputMode(mode)
    except ValueError:
        raise ValidationError(f"Unknown input mode: {mode!r}") from None


def _match_band(value: float, preset: GradingScalePreset) -> GradeSymbol:
    # Highest band first so boundary values land in the better grade.
    # Integer bands (75-79, 80-100) leave gaps like 79.5; a value in such a gap
    # belongs to the band below it.
    banded = [s for s in preset.ordered_symbols() if s.has_band()]
    banded.sort(key=lambda s: s.min_percent, reverse=True)

    ceiling = None
    for symbol in banded:
        if symbol.min_percent <= value and (
            value <= symbol.max_percent or (ceiling is not None and value < ceiling)
        ):
            return symbol
        ceiling = symbol.min_percent

    raise NoMatchingBandError(
        f"No grade band in {preset.display_name} covers {value:g}%"
    )


def resolve(raw_value, mode, preset: GradingScalePreset) -> Resolution:
    mode = coerce_mode(mode)

    if mode is InputMode.LETTER:
        symbol = preset.lookup(raw_value) if raw_value is not None else None
        if symbol is None:
            raise UnknownGradeSymbolError(
                f"Invalid letter grade {raw_value!r} for {preset.display_name}"
            )
        return Resolution(symbol.grade_point, symbol.token)

    if mode is InputMode.PERCENTAGE:
        value = parse_number(raw_value, what="Percentage")
        if value < 0 or value > 100:
            raise OutOfRangeError(f"Percentage must be between 0 and 100 (got {value:g})")
        symbol = _match_band(value, preset)
        return Resolution(symbol.grade_point, symbol.token)

    value = parse_number(raw_value, what="GPA")
    if value < 0 or value > config.MAX_GRADE_POINT:
        logger.warning("GPA value %s is outside 0-%.2f; keeping it as entered",
                       value, config.MAX_GRADE_POINT)
    return Resolution(value, format_gpa(value))


def detect_input_mode(text) -> Tuple[InputMode, str]:
    """
    Guess the input mode of a free-form grade cell (CSV import).

    "85%" or a number above 4 -> percentage, a number up to 4 -> gpa,
    anything else -> letter. A bare "4" is therefore read as GPA 4.00.
    returns: (mode, value with any percent sign removed)
    """
    s = str(text).strip()
    if "%" in s:
        return InputMode.PERCENTAGE, s.replace("%", "").strip()

    try:
        number = float(s)
    except ValueError:
        return InputMode.LETTER, s
    if not math.isfinite(number):
        return InputMode.LETTER, s

    if number > config.MAX_GRADE_POINT:
        return InputMode.PERCENTAGE, s
    return InputMode.GPA, s


# ------------------------
# Aggregation
# ------------------------

def _credit_point_arrays(entries) -> Tuple[np.ndarray, np.ndarray]:
    entries = list(entries)
    credits = np.array([e.credit_hours for e in entries], dtype=float)
    points = np.array([e.grade_point for e in entries], dtype=float)
    return credits, points


def total_credits(entries) -> float:
    credits, _ = _credit_point_arrays(entries)
    return float(credits.sum())


def total_grade_points(entries) -> float:
    """Sum of credit hours x grade point."""
    credits, points = _credit_point_arrays(entries)
    if credits.size == 0:
        return 0.0
    return float(np.dot(credits, points))


def weighted_average(entries) -> float:
    """
    Credit-weighted mean grade point.
    returns 0.0 for an empty list or zero total credits
    """
    credits, points = _credit_point_arrays(entries)
    total = float(credits.sum())
    if credits.size == 0 or total == 0:
        return 0.0
    return float(np.dot(credits, points) / total)


def simple_average(entries: Iterable) -> float:
    """Unweighted mean of semester grade points (0.0 when there are none)."""
    points = np.array([e.grade_point for e in entries], dtype=float)
    if points.size == 0:
        return 0.0
    return float(points.mean())


# ------------------------
# Target planning
# ------------------------

class PlanOutcome(str, Enum):
    ALREADY_EXCEEDED = "already_exceeded"
    UNACHIEVABLE = "unachievable"
    ACHIEVABLE = "achievable"


@dataclass(frozen=True)
class PlanResult:
    target_average: float
    remaining_credits: float
    required_average: float
    outcome: PlanOutcome
    nearest_symbol: Optional[str] = None


def required_forward_average(target_mean: float,
                             credits_outstanding: float,
                             current_points: float,
                             credits_completed: float) -> float:
    Ca = credits_completed
    Cr = credits_outstanding

    required_points = target_mean * (Ca + Cr) - current_points
    return required_points / Cr


def nearest_symbol(preset: GradingScalePreset, grade_point: float) -> GradeSymbol:
    """Symbol closest to ``grade_point``; ties go to the first in declared order."""
    best = None
    best_diff = math.inf
    for symbol in preset.ordered_symbols():
        diff = abs(symbol.grade_point - grade_point)
        if diff < best_diff:
            best, best_diff = symbol, diff
    return best


def solve_target(target_average, remaining_credits, entries,
                 preset: GradingScalePreset) -> PlanResult:
    target = parse_number(target_average, InvalidTargetError, "Target average")
    if target <= 0 or target > config.MAX_GRADE_POINT:
        raise InvalidTargetError(
            f"Target average must be above 0 and at most {config.MAX_GRADE_POINT:.2f}"
        )

    remaining = parse_number(remaining_credits, InvalidCreditsError, "Remaining credits")
    if remaining <= 0:
        raise InvalidCreditsError("Remaining credits must be greater than 0")

    entries = list(entries)
    required = required_forward_average(
        target_mean=target,
        credits_outstanding=remaining,
        current_points=total_grade_points(entries),
        credits_completed=total_credits(entries),
    )

    if required < 0:
        return PlanResult(target, remaining, required, PlanOutcome.ALREADY_EXCEEDED)
    if required > config.MAX_GRADE_POINT:
        return PlanResult(target, remaining, required, PlanOutcome.UNACHIEVABLE)

    symbol = nearest_symbol(preset, required)
    return PlanResult(
        target, remaining, required, PlanOutcome.ACHIEVABLE,
        symbol.token if symbol is not None else None,
    )
