from typing import Optional

import streamlit as st

from cgpa_tracker.backend_logic import InputMode, PlanOutcome, format_gpa
from cgpa_tracker.errors import GradeTrackerError
from cgpa_tracker.grading_scales import list_presets
from cgpa_tracker.io_csv import (
    export_csv,
    export_filename,
    import_rows,
    import_csv_text,
    parse_import_rows,
    read_csv_upload,
    subjects_frame,
    summary_text,
)
from cgpa_tracker.logging_config import init_logging
from cgpa_tracker.state import AppState
from cgpa_tracker.storage import JsonFileStore


# ------------------------
# Streamlit UI
# ------------------------

st.set_page_config(
    page_title="CGPA Tracker | Weighted GPA, Target Planner & Scenarios",
    page_icon="🎓",
    layout="wide",
)

if "app_state" not in st.session_state:
    init_logging()
    st.session_state["app_state"] = AppState.create(JsonFileStore())

state: AppState = st.session_state["app_state"]


def notify(message: str, severity: str = "info") -> None:
    {
        "success": st.success,
        "error": st.error,
        "warning": st.warning,
    }.get(severity, st.info)(message)


def commit(message: Optional[str] = None) -> None:
    """Mirror the state to disk, then report the outcome."""
    if not state.persist():
        notify("Failed to save data", "error")
    if message:
        notify(message, "success")


st.title("🎓 CGPA Tracker")
st.write(
    "Record your subjects with letter grades, percentages or GPA values, pick your "
    "university's grading scale, and get a credit-weighted GPA. Plan the grades you "
    "need for a target CGPA and keep what-if scenarios side by side."
)

results_box = st.container()

# ------------------------
# Grading scale
# ------------------------

st.markdown("---")
st.subheader("1. Choose your grading scale")

preset_options = list_presets()
preset_ids = [pid for pid, _ in preset_options]
preset_names = dict(preset_options)

chosen_preset = st.selectbox(
    "University",
    preset_ids,
    index=preset_ids.index(state.active_preset_id),
    format_func=lambda pid: preset_names[pid],
)
if chosen_preset != state.active_preset_id:
    for warning in state.change_preset(chosen_preset):
        notify(f"Could not recalculate {warning.subject_name}: {warning.message}", "warning")
    commit()

st.info(f"**{state.preset.display_name}:** {state.preset.description}")

# ------------------------
# Subjects
# ------------------------

st.subheader("2. Add your subjects")

MODE_LABELS = {
    InputMode.LETTER: "Letter grade",
    InputMode.PERCENTAGE: "Percentage",
    InputMode.GPA: "GPA",
}

mode = st.radio(
    "Grade input",
    list(InputMode),
    format_func=lambda m: MODE_LABELS[m],
    horizontal=True,
)

with st.form("add_subject_form", clear_on_submit=True):
    c1, c2, c3 = st.columns([3, 1, 2])
    with c1:
        name = st.text_input("Subject name")
    with c2:
        credit = st.number_input("Credit hours", min_value=0.5, max_value=6.0, value=3.0, step=0.5)
    with c3:
        if mode is InputMode.LETTER:
            raw_value = st.selectbox("Grade", [s.token for s in state.preset.ordered_symbols()])
        elif mode is InputMode.PERCENTAGE:
            raw_value = st.number_input("Percentage", min_value=0.0, max_value=100.0, value=75.0, step=1.0)
        else:
            raw_value = st.number_input("GPA", value=3.0, step=0.25, format="%.2f")

    if st.form_submit_button("Add subject", type="primary"):
        try:
            entry = state.add_subject(name, credit, mode, raw_value)
        except GradeTrackerError as e:
            notify(str(e), "error")
        else:
            commit(f"Added {entry.name}")

subjects = state.roster.subjects
if subjects:
    st.dataframe(subjects_frame(subjects), use_container_width=True, hide_index=True)

    r1, r2 = st.columns([3, 1])
    with r1:
        to_remove = st.selectbox(
            "Remove a subject",
            [s.id for s in subjects],
            format_func=lambda sid: state.roster.get_subject(sid).name,
        )
    with r2:
        st.write("")
        if st.button("Remove"):
            state.remove_subject(to_remove)
            commit()
            st.rerun()

    if st.button("Clear all subjects"):
        state.clear_subjects()
        commit("All subjects cleared")
        st.rerun()
else:
    st.info("No subjects yet. Add one above or import a CSV below.")

# ------------------------
# Target planner
# ------------------------

st.markdown("---")
st.subheader("3. Target planner")

with st.form("target_form"):
    t1, t2 = st.columns(2)
    with t1:
        target = st.number_input("Target CGPA", min_value=0.0, max_value=4.0, value=3.5, step=0.05)
    with t2:
        remaining = st.number_input("Remaining credit hours", min_value=0.0, value=30.0, step=0.5)
    planned = st.form_submit_button("Calculate required grades")

if planned:
    try:
        plan = state.plan_target(target, remaining)
    except GradeTrackerError as e:
        notify(str(e), "error")
    else:
        if plan.outcome is PlanOutcome.ALREADY_EXCEEDED:
            st.success(f"**Good news!** You've already exceeded your target CGPA of {format_gpa(plan.target_average)}.")
        elif plan.outcome is PlanOutcome.UNACHIEVABLE:
            st.error(
                f"**Target not achievable.** You would need an average GPA of "
                f"{format_gpa(plan.required_average)} in remaining courses, which exceeds the maximum of 4.00."
            )
        else:
            st.info(
                f"**Target achievable!** Required average GPA: **{format_gpa(plan.required_average)}**. "
                f"Nearest letter grade: **{plan.nearest_symbol}**. You need to maintain approximately "
                f"{plan.nearest_symbol} in your remaining {plan.remaining_credits:g} credits."
            )

# ------------------------
# Scenarios
# ------------------------

st.markdown("---")
st.subheader("4. What-if scenarios")

s1, s2 = st.columns(2)
with s1:
    with st.form("scenario_form", clear_on_submit=True):
        scenario_name = st.text_input("Scenario name")
        if st.form_submit_button("Save scenario"):
            try:
                snapshot = state.save_scenario(scenario_name)
            except GradeTrackerError as e:
                notify(str(e), "warning")
            else:
                commit(f'"{snapshot.name}" saved!')

with s2:
    names = state.scenarios.list()
    if names:
        selected = st.selectbox("Saved scenarios", names)
        preview = state.preview_scenario(selected)
        st.caption(
            f"{len(preview.subjects)} subjects, GPA {format_gpa(preview.cached_results.get('weighted_gpa', 0.0))}, "
            f"saved {preview.computed_at:%Y-%m-%d %H:%M}"
        )
        if st.button("Load scenario"):
            try:
                state.apply_scenario(selected)
            except GradeTrackerError as e:
                notify(str(e), "error")
            else:
                commit(f'"{selected}" loaded!')
                st.rerun()
    else:
        st.caption("No saved scenarios yet.")

# ------------------------
# Import / export
# ------------------------

st.markdown("---")
st.subheader("5. Import & export")

# Widgets are keyed on a counter so a finished import starts the next run empty
import_round = st.session_state.setdefault("import_round", 0)


def run_import(load) -> None:
    try:
        imported, errors = load()
    except GradeTrackerError as e:
        notify(str(e), "error")
    else:
        st.session_state["import_round"] = import_round + 1
        commit()
        notify(f"Imported {imported} subjects" + (f", {errors} errors" if errors else ""), "success")


i1, i2 = st.columns(2)
with i1:
    csv_text = st.text_area(
        "Paste CSV (columns: Subject, Credit, Grade)",
        placeholder="Subject,Credit,Grade\nPhysics,3,A\nChemistry,3,78%",
        key=f"csv_text_{import_round}",
    )
    if st.button("Import pasted CSV"):
        run_import(lambda: import_csv_text(state, csv_text))

    uploaded = st.file_uploader("…or upload a CSV file", type=["csv"], key=f"csv_upload_{import_round}")
    if st.button("Import file"):
        if uploaded is None:
            notify("Please choose a CSV file first", "error")
        else:
            run_import(lambda: import_rows(state, parse_import_rows(read_csv_upload(uploaded))))

with i2:
    # re-read: an import above may have just filled an empty roster
    if state.roster.subjects:
        st.download_button(
            "Export CSV",
            data=export_csv(state).encode("utf-8"),
            file_name=export_filename(),
            mime="text/csv",
        )
        with st.expander("Plain-text summary"):
            st.code(summary_text(state), language=None)
    else:
        st.caption("No subjects to export.")

# ------------------------
# Multi-semester calculator
# ------------------------

st.markdown("---")
st.subheader("6. Overall CGPA from semesters")
st.caption("A simple average of each semester's GPA; credits are not weighted here.")

with st.form("semester_form", clear_on_submit=True):
    m1, m2 = st.columns([3, 2])
    with m1:
        semester_name = st.text_input("Semester name")
    with m2:
        semester_grade = st.selectbox("Semester grade", [s.token for s in state.preset.ordered_symbols()])
    if st.form_submit_button("Add semester"):
        try:
            semester = state.add_semester(semester_name, semester_grade)
        except GradeTrackerError as e:
            notify(str(e), "error")
        else:
            commit(f"Added {semester.name}")

for semester in state.roster.semesters:
    n1, n2 = st.columns([5, 1])
    n1.write(f"**{semester.name}**: {semester.grade_token} ({semester.grade_point:.2f})")
    if n2.button("✕", key=f"remove_semester_{semester.id}"):
        state.remove_semester(semester.id)
        commit()
        st.rerun()

# ------------------------
# Results (rendered last so they reflect this run's changes)
# ------------------------

summary = state.summary()
with results_box:
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Semester GPA", format_gpa(summary["weighted_gpa"]))
    with col2:
        st.metric("Total credits", f"{summary['total_credits']:.1f}")
    with col3:
        st.metric("Overall CGPA (semesters)", format_gpa(summary["semester_average"]))
    with col4:
        st.metric("Semesters", summary["semester_count"])


st.header("FAQ")

st.subheader("How is the GPA calculated?")
st.write(
    "Each subject's grade point is multiplied by its credit hours; the sum is divided by "
    "the total credit hours. An empty list shows 0.00."
)

st.subheader("How are percentages converted?")
st.write(
    "Percentages are matched to the highest grade band that contains them, so 80 is an A+ "
    "and 79 an A on the UGC scale."
)

st.subheader("What data do you store?")
st.write(
    "Subjects, semesters, scenarios and your chosen grading scale are saved to a local JSON "
    "file next to the app so they survive a restart. Nothing is sent anywhere else."
)
