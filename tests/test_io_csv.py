"""Tests for io_csv.py: CSV import, export and the text summary."""

from datetime import date

import pytest

from cgpa_tracker.backend_logic import InputMode
from cgpa_tracker.errors import ValidationError
from cgpa_tracker.io_csv import (
    export_csv,
    export_filename,
    import_csv_text,
    parse_import_rows,
    read_csv_text,
    summary_text,
)


class TestImport:
    def test_aliases_and_modes(self):
        df = read_csv_text(
            "Course, Hours, Marks\n"
            "Physics,3,A+\n"
            "Chemistry,3,78%\n"
            "Math,4,85\n"
            "Art,1,3.5\n"
        )
        rows = parse_import_rows(df)
        assert [r.name for r in rows] == ["Physics", "Chemistry", "Math", "Art"]
        assert [r.mode for r in rows] == [
            InputMode.LETTER, InputMode.PERCENTAGE, InputMode.PERCENTAGE, InputMode.GPA,
        ]
        assert rows[1].value_text == "78"
        assert rows[2].credit_text == "4"

    def test_import_counts_errors(self, state):
        imported, errors = import_csv_text(
            state,
            "subject,credit,grade\n"
            "Physics,3,A\n"
            "Chemistry,9,B\n"
            ",3,A\n"
            "Biology,3,Z\n"
            "Math,3.5,72%\n",
        )
        assert (imported, errors) == (2, 3)
        assert [s.name for s in state.roster.subjects] == ["Physics", "Math"]
        assert state.roster.subjects[1].label == "A-"

    def test_bare_four_is_gpa(self, state):
        import_csv_text(state, "name,credits,gpa\nThesis,3,4\n")
        entry = state.roster.subjects[0]
        assert entry.input_mode is InputMode.GPA
        assert entry.label == "4.00"

    def test_empty_text(self, state):
        with pytest.raises(ValidationError):
            import_csv_text(state, "   ")

    def test_header_only(self, state):
        assert import_csv_text(state, "subject,credit,grade\n") == (0, 0)


class TestExport:
    def test_export_layout(self, state):
        state.add_subject("Physics", 3, InputMode.LETTER, "A")
        state.add_subject("Math", 1.5, InputMode.GPA, 3)
        state.add_semester("Spring", "B")

        text = export_csv(state, today=date(2024, 6, 1))
        lines = text.splitlines()

        assert lines[0] == "Subject Name,Credit Hours,Grade,GPA,Mode"
        assert lines[1] == '"Physics","3","A","3.75","letter"'
        assert lines[2] == '"Math","1.5","3.00","3","gpa"'
        assert lines[3] == ""
        assert lines[4] == "SUMMARY"
        assert "Total Credits,4.5" in lines
        assert "Semester GPA,3.50" in lines
        assert "Cumulative CGPA,3.50" in lines
        assert "Overall CGPA (semesters),3.00" in lines
        assert "University,UGC Standard" in lines
        assert lines[-1] == "Export Date,2024-06-01"

    def test_filename(self):
        assert export_filename(date(2024, 6, 1)) == "cgpa-export-2024-06-01.csv"

    def test_summary_text(self, state):
        state.add_subject("Physics", 3, InputMode.LETTER, "A+")
        text = summary_text(state, today=date(2024, 6, 1))
        assert "University: UGC Standard" in text
        assert "Total Credits: 3.0" in text
        assert "Physics | 3.0 cr | A+ | 4.00 GPA" in text
        assert text.endswith("Generated: 2024-06-01")
