from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from cgpa_tracker.errors import UnknownPresetError

# ------------------------
# Grade symbols
# ------------------------

@dataclass(frozen=True)
class GradeSymbol:
    token: str
    grade_point: float
    min_percent: Optional[float] = None
    max_percent: Optional[float] = None

    def has_band(self) -> bool:
        return self.min_percent is not None and self.max_percent is not None


@dataclass(frozen=True)
class GradingScalePreset:
    id: str
    display_name: str
    symbols: Mapping[str, GradeSymbol]
    description: str = ""

    def ordered_symbols(self) -> List[GradeSymbol]:
        """Symbols in declared order (best grade first)."""
        return list(self.symbols.values())

    def lookup(self, token: str) -> Optional[GradeSymbol]:
        return self.symbols.get(str(token).strip().upper())


def build_symbol_table(rows) -> Mapping[str, GradeSymbol]:
    """
    rows: iterable of (token, grade_point, min_percent, max_percent)
    returns: read-only mapping keyed by upper-case token, declared order kept
    """
    table = {}
    for token, gp, lo, hi in rows:
        table[token.upper()] = GradeSymbol(token, float(gp), lo, hi)
    return MappingProxyType(table)


# UGC (University Grants Commission, Bangladesh) 4.00 scale
DEFAULT_SYMBOLS = build_symbol_table([
    ("A+", 4.00, 80, 100),
    ("A", 3.75, 75, 79),
    ("A-", 3.50, 70, 74),
    ("B+", 3.25, 65, 69),
    ("B", 3.00, 60, 64),
    ("B-", 2.75, 55, 59),
    ("C+", 2.50, 50, 54),
    ("C", 2.25, 45, 49),
    ("D", 2.00, 40, 44),
    ("F", 0.00, 0, 39),
])

# ------------------------
# Preset registry
# ------------------------

# Every shipped preset uses the UGC table; only names and notes differ.
_PRESET_ROWS: List[Tuple[str, str, str]] = [
    ("ugc", "UGC Standard",
     "A+ (4.00), A (3.75), A- (3.50), B+ (3.25), B (3.00), B- (2.75), "
     "C+ (2.50), C (2.25), D (2.00), F (0.00)"),
    ("du", "University of Dhaka (DU)", "Follows UGC standard with 4.00 scale"),
    ("buet", "BUET", "BUET follows UGC grading system"),
    ("nsu", "North South University (NSU)", "NSU uses 4.00 scale with UGC mapping"),
    ("brac", "BRAC University", "BRAC follows standard UGC grading"),
    ("iub", "Independent University Bangladesh (IUB)", "IUB uses 4.00 point scale"),
    ("ruet", "RUET", "RUET follows UGC standard grading"),
    ("aust", "AUST", "AUST uses standard 4.00 scale"),
    ("iut", "Islamic University of Technology (IUT)", "IUT follows UGC grading system"),
    ("custom", "Custom Grading Scale", "Define your own grading scale"),
]

PRESETS: Mapping[str, GradingScalePreset] = MappingProxyType({
    pid: GradingScalePreset(pid, name, DEFAULT_SYMBOLS, info)
    for pid, name, info in _PRESET_ROWS
})


def get_preset(preset_id: str) -> GradingScalePreset:
    try:
        return PRESETS[preset_id]
    except KeyError:
        raise UnknownPresetError(f"Unknown grading scale preset: {preset_id!r}") from None


def list_presets() -> List[Tuple[str, str]]:
    return [(p.id, p.display_name) for p in PRESETS.values()]
