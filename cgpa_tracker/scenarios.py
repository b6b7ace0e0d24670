import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from cgpa_tracker.backend_logic import total_credits, weighted_average
from cgpa_tracker.errors import EmptyNameError, NotFoundError
from cgpa_tracker.roster import SubjectEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioSnapshot:
    name: str
    subjects: Tuple[SubjectEntry, ...]
    active_preset_id: str
    computed_at: datetime
    cached_results: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "subjects": [s.to_dict() for s in self.subjects],
            "active_preset_id": self.active_preset_id,
            "computed_at": self.computed_at.isoformat(),
            "cached_results": dict(self.cached_results),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScenarioSnapshot":
        return cls(
            name=str(d["name"]),
            subjects=tuple(SubjectEntry.from_dict(s) for s in d.get("subjects", [])),
            active_preset_id=str(d["active_preset_id"]),
            computed_at=datetime.fromisoformat(d["computed_at"]),
            cached_results=MappingProxyType(
                {k: float(v) for k, v in (d.get("cached_results") or {}).items()}
            ),
        )


class ScenarioManager:
    """Named what-if snapshots of the subject list; the name is the only key."""

    def __init__(self, snapshots: Optional[Dict[str, ScenarioSnapshot]] = None):
        self._snapshots: Dict[str, ScenarioSnapshot] = dict(snapshots or {})

    def __len__(self) -> int:
        return len(self._snapshots)

    def save(self, name, subjects, preset_id: str,
             computed_results: Optional[Dict[str, float]] = None,
             now: Optional[datetime] = None) -> ScenarioSnapshot:
        clean_name = str(name).strip() if name is not None else ""
        if not clean_name:
            raise EmptyNameError("Please enter a scenario name")

        subjects = tuple(copy.deepcopy(list(subjects)))
        if computed_results is None:
            computed_results = {
                "weighted_gpa": weighted_average(subjects),
                "total_credits": total_credits(subjects),
            }

        snapshot = ScenarioSnapshot(
            name=clean_name,
            subjects=subjects,
            active_preset_id=preset_id,
            computed_at=now or datetime.now(),
            cached_results=MappingProxyType(dict(computed_results)),
        )
        if clean_name in self._snapshots:
            logger.info("Overwriting scenario %r", clean_name)
        self._snapshots[clean_name] = snapshot
        return snapshot

    def load(self, name) -> ScenarioSnapshot:
        key = str(name).strip() if name is not None else ""
        try:
            return self._snapshots[key]
        except KeyError:
            raise NotFoundError(f"No saved scenario named {name!r}") from None

    def list(self) -> List[str]:
        return list(self._snapshots.keys())

    def to_dict(self) -> Dict[str, Any]:
        return {name: snap.to_dict() for name, snap in self._snapshots.items()}
