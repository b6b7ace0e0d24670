"""
Application state owned by one user session.

Holds the roster, the scenario table and the active grading scale, and
mirrors them to a store after each change. The in-memory state is the
source of truth; a failed save never rolls anything back.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from cgpa_tracker import config
from cgpa_tracker.backend_logic import PlanResult, solve_target
from cgpa_tracker.grading_scales import GradingScalePreset, PRESETS, get_preset
from cgpa_tracker.roster import RecomputeWarning, Roster, SemesterEntry, SubjectEntry
from cgpa_tracker.scenarios import ScenarioManager, ScenarioSnapshot

logger = logging.getLogger(__name__)


class AppState:
    def __init__(self, store=None, preset_id: Optional[str] = None):
        self.store = store
        self.roster = Roster()
        self.scenarios = ScenarioManager()
        self.active_preset_id = self._known_preset(preset_id or config.DEFAULT_PRESET_ID)

    @staticmethod
    def _known_preset(preset_id) -> str:
        if isinstance(preset_id, str) and preset_id in PRESETS:
            return preset_id
        logger.warning("Unknown preset %r; using %r", preset_id, config.DEFAULT_PRESET_ID)
        return config.DEFAULT_PRESET_ID

    # ------------------------
    # Lifecycle
    # ------------------------

    @classmethod
    def create(cls, store=None) -> "AppState":
        """Build the state from the store's last snapshot, or start empty."""
        data = store.load() if store is not None else None
        if data is None:
            return cls(store)
        state = cls.from_dict(data)
        state.store = store
        return state

    def persist(self) -> bool:
        if self.store is None:
            return True
        try:
            return bool(self.store.save(self.to_dict()))
        except Exception:
            logger.exception("Store raised while saving; keeping in-memory state")
            return False

    def reset(self) -> None:
        self.roster = Roster()
        self.scenarios = ScenarioManager()
        self.active_preset_id = config.DEFAULT_PRESET_ID

    @property
    def preset(self) -> GradingScalePreset:
        return get_preset(self.active_preset_id)

    # ------------------------
    # Subjects
    # ------------------------

    def add_subject(self, name, credit_hours, input_mode, raw_value) -> SubjectEntry:
        return self.roster.add_subject(name, credit_hours, input_mode, raw_value, self.preset)

    def remove_subject(self, subject_id: str) -> bool:
        return self.roster.remove_subject(subject_id)

    def clear_subjects(self) -> None:
        self.roster.clear_subjects()

    def change_preset(self, preset_id: str) -> List[RecomputeWarning]:
        preset = get_preset(preset_id)
        warnings = self.roster.recompute_all_for_preset_change(preset)
        self.active_preset_id = preset.id
        logger.info("Active grading scale is now %s", preset.display_name)
        return warnings

    # ------------------------
    # Semesters
    # ------------------------

    def add_semester(self, name, grade_token) -> SemesterEntry:
        return self.roster.add_semester(name, grade_token, self.preset)

    def remove_semester(self, semester_id: str) -> bool:
        return self.roster.remove_semester(semester_id)

    # ------------------------
    # Planner and scenarios
    # ------------------------

    def plan_target(self, target_average, remaining_credits) -> PlanResult:
        return solve_target(target_average, remaining_credits, self.roster.subjects, self.preset)

    def save_scenario(self, name) -> ScenarioSnapshot:
        return self.scenarios.save(
            name,
            self.roster.subjects,
            self.active_preset_id,
            {
                "weighted_gpa": self.roster.weighted_average(),
                "total_credits": self.roster.total_credits(),
            },
        )

    def preview_scenario(self, name) -> ScenarioSnapshot:
        return self.scenarios.load(name)

    def apply_scenario(self, name) -> ScenarioSnapshot:
        snapshot = self.scenarios.load(name)
        preset = get_preset(snapshot.active_preset_id)
        self.roster.replace_subjects(copy.deepcopy(list(snapshot.subjects)))
        self.active_preset_id = preset.id
        return snapshot

    # ------------------------
    # Results
    # ------------------------

    def summary(self) -> Dict[str, Any]:
        return {
            "weighted_gpa": self.roster.weighted_average(),
            "total_credits": self.roster.total_credits(),
            "subject_count": len(self.roster.subjects),
            "semester_average": self.roster.semester_average(),
            "semester_count": len(self.roster.semesters),
            "preset_name": self.preset.display_name,
        }

    # ------------------------
    # Serialisation
    # ------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subjects": [s.to_dict() for s in self.roster.subjects],
            "scenarios": self.scenarios.to_dict(),
            "active_preset_id": self.active_preset_id,
            "semesters": [s.to_dict() for s in self.roster.semesters],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppState":
        state = cls(preset_id=data.get("active_preset_id"))

        subjects = _load_entries(data.get("subjects"), SubjectEntry.from_dict, "subject")
        semesters = _load_entries(data.get("semesters"), SemesterEntry.from_dict, "semester")
        state.roster = Roster(subjects, semesters)

        raw_scenarios = data.get("scenarios")
        if not isinstance(raw_scenarios, dict):
            if raw_scenarios is not None:
                logger.warning("Ignoring saved scenarios: expected an object, got %s",
                               type(raw_scenarios).__name__)
            raw_scenarios = {}

        snapshots = {}
        for name, raw in raw_scenarios.items():
            try:
                snapshot = ScenarioSnapshot.from_dict(raw)
                get_preset(snapshot.active_preset_id)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                # UnknownPresetError is a ValueError as well
                logger.warning("Skipping unreadable scenario %r: %s", name, e)
                continue
            snapshots[snapshot.name] = snapshot
        state.scenarios = ScenarioManager(snapshots)
        return state


def _load_entries(rows, loader, what: str) -> list:
    if not isinstance(rows, list):
        if rows is not None:
            logger.warning("Ignoring saved %ss: expected a list, got %s", what, type(rows).__name__)
        return []

    entries = []
    for row in rows:
        try:
            entries.append(loader(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping unreadable %s %r: %s", what, row, e)
    return entries
