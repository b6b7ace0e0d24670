import logging
import uuid
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from cgpa_tracker import config
from cgpa_tracker.backend_logic import (
    InputMode,
    coerce_mode,
    parse_number,
    resolve,
    simple_average,
    total_credits,
    weighted_average,
)
from cgpa_tracker.errors import (
    EmptyNameError,
    GradeTrackerError,
    InvalidCreditError,
    UnknownGradeSymbolError,
)
from cgpa_tracker.grading_scales import GradingScalePreset

logger = logging.getLogger(__name__)


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def _clean_name(name, what: str = "Subject name") -> str:
    cleaned = str(name).strip() if name is not None else ""
    if not cleaned:
        raise EmptyNameError(f"{what} is required")
    return cleaned


def validate_credit(credit) -> float:
    value = parse_number(credit, InvalidCreditError, "Credit hours")
    if not (config.MIN_CREDIT <= value <= config.MAX_CREDIT):
        raise InvalidCreditError(
            f"Credit must be between {config.MIN_CREDIT} and {config.MAX_CREDIT} (got {value:g})"
        )
    return value


# ------------------------
# Entries
# ------------------------

@dataclass(frozen=True)
class SubjectEntry:
    id: str
    name: str
    credit_hours: float
    input_mode: InputMode
    raw_value: Any
    grade_point: float
    label: str

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["input_mode"] = self.input_mode.value
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SubjectEntry":
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            credit_hours=float(d["credit_hours"]),
            input_mode=InputMode(d["input_mode"]),
            raw_value=d["raw_value"],
            grade_point=float(d["grade_point"]),
            label=str(d["label"]),
        )


@dataclass(frozen=True)
class SemesterEntry:
    id: str
    name: str
    grade_token: str
    grade_point: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SemesterEntry":
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            grade_token=str(d["grade_token"]),
            grade_point=float(d["grade_point"]),
        )


@dataclass(frozen=True)
class RecomputeWarning:
    subject_id: str
    subject_name: str
    message: str


# ------------------------
# Roster
# ------------------------

class Roster:
    """Ordered subjects and semesters; insertion order is display and export order."""

    def __init__(self, subjects: Optional[List[SubjectEntry]] = None,
                 semesters: Optional[List[SemesterEntry]] = None):
        self._subjects: List[SubjectEntry] = list(subjects or [])
        self._semesters: List[SemesterEntry] = list(semesters or [])

    @property
    def subjects(self) -> Tuple[SubjectEntry, ...]:
        return tuple(self._subjects)

    @property
    def semesters(self) -> Tuple[SemesterEntry, ...]:
        return tuple(self._semesters)

    def __len__(self) -> int:
        return len(self._subjects)

    def get_subject(self, subject_id: str) -> Optional[SubjectEntry]:
        for subject in self._subjects:
            if subject.id == subject_id:
                return subject
        return None

    # ---- subjects ----

    def add_subject(self, name, credit_hours, input_mode, raw_value,
                    preset: GradingScalePreset) -> SubjectEntry:
        # Validate everything before touching the list
        clean_name = _clean_name(name)
        credit = validate_credit(credit_hours)
        mode = coerce_mode(input_mode)
        resolution = resolve(raw_value, mode, preset)

        if mode is InputMode.LETTER:
            stored_raw = str(raw_value).strip()
        else:
            stored_raw = parse_number(raw_value)

        entry = SubjectEntry(
            id=generate_id("subject"),
            name=clean_name,
            credit_hours=credit,
            input_mode=mode,
            raw_value=stored_raw,
            grade_point=resolution.grade_point,
            label=resolution.label,
        )
        self._subjects.append(entry)
        logger.info("Added subject %r (%g cr, %s %s -> %.2f)",
                    entry.name, entry.credit_hours, mode.value, entry.label, entry.grade_point)
        return entry

    def remove_subject(self, subject_id: str) -> bool:
        for idx, subject in enumerate(self._subjects):
            if subject.id == subject_id:
                del self._subjects[idx]
                logger.info("Removed subject %r", subject.name)
                return True
        return False

    def clear_subjects(self) -> None:
        self._subjects = []

    def replace_subjects(self, subjects) -> None:
        self._subjects = list(subjects)

    def recompute_all_for_preset_change(self, preset: GradingScalePreset) -> List[RecomputeWarning]:
        """
        Re-resolve letter and percentage entries against ``preset``.

        Entries that fail keep their previous grade and are reported back.
        The roster is swapped in one assignment once every entry is done.
        """
        updated: List[SubjectEntry] = []
        warnings: List[RecomputeWarning] = []

        for subject in self._subjects:
            if subject.input_mode is InputMode.GPA:
                updated.append(subject)
                continue
            try:
                resolution = resolve(subject.raw_value, subject.input_mode, preset)
            except GradeTrackerError as e:
                logger.warning("Failed to recalculate subject %r: %s", subject.name, e)
                warnings.append(RecomputeWarning(subject.id, subject.name, str(e)))
                updated.append(subject)
                continue
            updated.append(replace(subject, grade_point=resolution.grade_point,
                                   label=resolution.label))

        self._subjects = updated
        return warnings

    def weighted_average(self) -> float:
        return weighted_average(self._subjects)

    def total_credits(self) -> float:
        return total_credits(self._subjects)

    # ---- semesters ----

    def add_semester(self, name, grade_token, preset: GradingScalePreset) -> SemesterEntry:
        clean_name = _clean_name(name, "Semester name")
        symbol = preset.lookup(grade_token) if grade_token is not None else None
        if symbol is None:
            raise UnknownGradeSymbolError(f"Invalid grade {grade_token!r} selected")

        entry = SemesterEntry(generate_id("semester"), clean_name, symbol.token, symbol.grade_point)
        self._semesters.append(entry)
        logger.info("Added semester %r (%s)", entry.name, entry.grade_token)
        return entry

    def remove_semester(self, semester_id: str) -> bool:
        for idx, semester in enumerate(self._semesters):
            if semester.id == semester_id:
                del self._semesters[idx]
                logger.info("Removed semester %r", semester.name)
                return True
        return False

    def semester_average(self) -> float:
        return simple_average(self._semesters)
