import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from cgpa_tracker.backend_logic import InputMode, detect_input_mode, format_gpa
from cgpa_tracker.errors import GradeTrackerError, ValidationError

logger = logging.getLogger(__name__)

NAME_COLUMNS = ("subject", "name", "course")
CREDIT_COLUMNS = ("credit", "credits", "hour", "hours")
VALUE_COLUMNS = ("grade", "mark", "marks", "gpa", "percentage")

EXPORT_HEADER = ["Subject Name", "Credit Hours", "Grade", "GPA", "Mode"]

# ------------------------
# CSV import
# ------------------------

@dataclass(frozen=True)
class ImportRow:
    name: str
    credit_text: str
    value_text: str
    mode: InputMode


def _normalise_cols(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    return df


def _read(source) -> pd.DataFrame:
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise ValidationError(f"Failed to parse CSV: {e}") from None
    return _normalise_cols(df)


def read_csv_text(text: str) -> pd.DataFrame:
    if text is None or not text.strip():
        raise ValidationError("Please paste CSV data first")
    return _read(io.StringIO(text.strip()))


def read_csv_upload(uploaded_file) -> pd.DataFrame:
    return _read(uploaded_file)


def _cell(row: pd.Series, columns) -> str:
    # first non-empty aliased column wins
    for col in columns:
        value = row.get(col)
        if value is None or pd.isna(value):
            continue
        value = str(value).strip()
        if value:
            return value
    return ""


def parse_import_rows(df: pd.DataFrame) -> List[ImportRow]:
    rows = []
    for _, row in df.iterrows():
        mode, value = detect_input_mode(_cell(row, VALUE_COLUMNS))
        rows.append(ImportRow(
            name=_cell(row, NAME_COLUMNS),
            credit_text=_cell(row, CREDIT_COLUMNS),
            value_text=value,
            mode=mode,
        ))
    return rows


def import_rows(state, rows: List[ImportRow]) -> Tuple[int, int]:
    """
    Add each row as a subject; rows that fail validation are skipped.
    returns: (imported, errors)
    """
    imported = 0
    errors = 0
    for row in rows:
        if not row.name or not row.value_text:
            errors += 1
            continue
        try:
            state.add_subject(row.name, row.credit_text, row.mode, row.value_text)
        except GradeTrackerError as e:
            logger.info("Skipping CSV row %r: %s", row.name, e)
            errors += 1
            continue
        imported += 1

    logger.info("CSV import: %d imported, %d errors", imported, errors)
    return imported, errors


def import_csv_text(state, text: str) -> Tuple[int, int]:
    return import_rows(state, parse_import_rows(read_csv_text(text)))


# ------------------------
# Export
# ------------------------

def _plain_number(x: float) -> str:
    x = float(x)
    return str(int(x)) if x.is_integer() else str(x)


def subjects_frame(subjects) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Subject Name": s.name,
                "Credit Hours": _plain_number(s.credit_hours),
                "Grade": s.label,
                "GPA": _plain_number(s.grade_point),
                "Mode": s.input_mode.value,
            }
            for s in subjects
        ],
        columns=EXPORT_HEADER,
    )


def export_csv(state, today: Optional[date] = None) -> str:
    today = today or date.today()
    summary = state.summary()

    out = io.StringIO()
    out.write(",".join(EXPORT_HEADER) + "\n")
    subjects_frame(state.roster.subjects).to_csv(
        out, header=False, index=False, quoting=csv.QUOTE_ALL, lineterminator="\n"
    )

    out.write("\nSUMMARY\n")
    out.write(f"Total Credits,{_plain_number(summary['total_credits'])}\n")
    out.write(f"Semester GPA,{format_gpa(summary['weighted_gpa'])}\n")
    out.write(f"Cumulative CGPA,{format_gpa(summary['weighted_gpa'])}\n")
    out.write(f"Overall CGPA (semesters),{format_gpa(summary['semester_average'])}\n")
    out.write(f"University,{summary['preset_name']}\n")
    out.write(f"Export Date,{today.isoformat()}\n")
    return out.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    return f"cgpa-export-{(today or date.today()).isoformat()}.csv"


def summary_text(state, today: Optional[date] = None) -> str:
    today = today or date.today()
    summary = state.summary()

    lines = [
        "CGPA Tracker - Academic Summary",
        "===============================",
        "",
        f"University: {summary['preset_name']}",
        f"Semester GPA: {format_gpa(summary['weighted_gpa'])}",
        f"Cumulative CGPA: {format_gpa(summary['weighted_gpa'])}",
        f"Total Credits: {summary['total_credits']:.1f}",
        "",
        "Subject Details:",
    ]
    for s in state.roster.subjects:
        lines.append(f"{s.name} | {s.credit_hours:.1f} cr | {s.label} | {format_gpa(s.grade_point)} GPA")
    lines += ["", f"Generated: {today.isoformat()}"]
    return "\n".join(lines)
