"""Exercise set assignment wizard - Streamlit shell.

Run with:
    streamlit run streamlit_app/app.py

Talks to the clinic API when CLINIC_API_URL is set; otherwise runs on a
small demo catalogue and assignments are only logged.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import streamlit as st

from assignment_engine.engine import AssignmentEngine
from assignment_engine.math.dosage import exercise_estimates, format_estimated_time
from assignment_engine.math.schedule import session_dates
from assignment_engine.models.enums import (
    PRESET_LABELS,
    WEEKDAYS,
    AssignmentMode,
    SchedulePreset,
    StepId,
)
from assignment_engine.models.exercise import ExerciseMapping, ExerciseSet, Patient
from assignment_engine.models.frequency import Frequency
from assignment_engine.overrides.resolver import OverrideResolver

import config
from helpers import (
    DAY_NAMES,
    STEP_TITLES,
    TYPE_LABELS,
    demo_exercise_sets,
    demo_patients,
    exercise_table,
    format_duration,
    format_frequency,
    side_indicator,
    submission_message,
)

from clinic_client import ClinicClient, ClinicClientError, map_exercise_set, map_patient

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Assign Exercise Set",
    page_icon="🏋️",
    layout="wide",
)

# Template values with no per-patient override, for "is this a change?" checks
_TEMPLATE = OverrideResolver({})

_EDITABLE_FIELDS = (
    ("sets", "Sets"),
    ("reps", "Reps"),
    ("duration", "Duration (s)"),
    ("rest_sets", "Rest between sets (s)"),
    ("execution_time", "Seconds per rep"),
)


# ---------------------------------------------------------------------------
# Data access
# ---------------------------------------------------------------------------


@st.cache_resource
def get_client() -> ClinicClient | None:
    if not config.CLINIC_API_URL:
        return None
    return ClinicClient(
        config.CLINIC_API_URL,
        token=config.CLINIC_API_TOKEN or None,
        timeout=config.HTTP_TIMEOUT_S,
    )


@st.cache_data(ttl=300)
def load_catalogue() -> tuple[list[ExerciseSet], list[Patient]]:
    client = get_client()
    if client is None:
        logger.info("CLINIC_API_URL not set, using demo catalogue")
        return demo_exercise_sets(), demo_patients()

    sets = [map_exercise_set(raw) for raw in client.list_exercise_sets(config.ORGANIZATION_ID)]
    patients = [
        p
        for p in (
            map_patient(raw)
            for raw in client.list_therapist_patients(
                config.THERAPIST_ID, config.ORGANIZATION_ID
            )
        )
        if p is not None
    ]
    logger.info("Loaded %d sets and %d patients", len(sets), len(patients))
    return sets, patients


class _LoggingGateway:
    """Stands in for the clinic API when none is configured."""

    def assign_exercise_set(self, variables: dict[str, Any]) -> str:
        logger.info("Dry run assignment: %s", variables)
        return f"dry-run-{variables['patientId']}"


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------


def _bump_widget_version() -> None:
    """Force Streamlit to recreate every keyed widget for a new wizard."""
    st.session_state["_wv"] = st.session_state.get("_wv", 0) + 1


def _wk(name: str) -> str:
    """Return a versioned widget key like ``start_v0``."""
    v = st.session_state.get("_wv", 0)
    return f"{name}_v{v}"


def _engine() -> AssignmentEngine | None:
    return st.session_state.get("engine")


def _open_wizard(
    mode: AssignmentMode, exercise_set: ExerciseSet | None, patient: Patient | None
) -> None:
    st.session_state["engine"] = AssignmentEngine(
        mode,
        preselected_set=exercise_set,
        preselected_patient=patient,
        today=date.today(),
    )
    st.session_state.pop("last_result", None)
    _bump_widget_version()


def _close_wizard() -> None:
    st.session_state.pop("engine", None)
    _bump_widget_version()


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _render_indicator(engine: AssignmentEngine) -> None:
    state = engine.indicator()
    cols = st.columns(len(state.steps))
    for col, step in zip(cols, state.steps):
        if step.id == state.current_step:
            marker = "🔵"
        elif step.id in state.completed_steps:
            marker = "✅"
        else:
            marker = "⚪"
        with col:
            clickable = state.allow_navigation and step.id != state.current_step
            if st.button(
                f"{marker} {step.label}",
                key=_wk(f"nav_{step.id.value}"),
                disabled=not clickable,
                use_container_width=True,
            ):
                engine.go_to_step(step.id)
                st.rerun()
            st.caption(step.description)


def _render_select_set(engine: AssignmentEngine, sets: list[ExerciseSet]) -> None:
    if not sets:
        st.info("No active exercise sets in this organization.")
        return
    current = engine.draft.selected_set
    labels = [s.name for s in sets]
    index = next((i for i, s in enumerate(sets) if current and s.id == current.id), None)
    choice = st.radio("Exercise set", labels, index=index, key=_wk("set_choice"))
    if choice is not None:
        chosen = sets[labels.index(choice)]
        engine.draft.select_set(chosen)
        if chosen.description:
            st.caption(chosen.description)
        st.write(f"{len(chosen.mappings)} exercises")


def _render_select_patients(engine: AssignmentEngine, patients: list[Patient]) -> None:
    by_id = {p.id: p for p in patients}
    selected_ids = st.multiselect(
        "Patients",
        options=list(by_id),
        default=[p.id for p in engine.draft.selected_patients if p.id in by_id],
        format_func=lambda pid: by_id[pid].name,
        key=_wk("patients"),
    )
    engine.draft.set_patients(by_id[pid] for pid in selected_ids)
    if not selected_ids:
        st.caption("Select at least one patient to continue.")


def _render_mapping_editor(engine: AssignmentEngine, mapping: ExerciseMapping) -> None:
    draft = engine.draft
    resolver = engine.resolver
    icon, side_label, show_badge = side_indicator(
        resolver.get_effective_value(mapping, "exercise_side")
    )
    excluded = mapping.id in draft.excluded
    title = mapping.display_name
    if show_badge:
        title += f" [{icon}]"
    if resolver.has_override(mapping.id):
        title += " ✏️"
    if excluded:
        title += " (excluded)"

    with st.expander(title, expanded=False):
        if mapping.exercise is not None and mapping.exercise.exercise_type is not None:
            st.caption(f"{TYPE_LABELS[mapping.exercise.exercise_type]} · {side_label}")

        include = st.checkbox("Include for these patients", value=not excluded, key=_wk(f"inc_{mapping.id}"))
        if include == excluded:
            draft.excluded.toggle(mapping.id)

        cols = st.columns(len(_EDITABLE_FIELDS))
        for col, (field_name, label) in zip(cols, _EDITABLE_FIELDS):
            current = resolver.get_effective_value(mapping, field_name) or 0
            with col:
                value = st.number_input(
                    label,
                    min_value=0,
                    value=int(current),
                    step=1,
                    key=_wk(f"{field_name}_{mapping.id}"),
                )
            template_value = _TEMPLATE.get_effective_value(mapping, field_name) or 0
            resolver.update_override(
                mapping.id,
                field_name,
                None if value == template_value else int(value),
            )

        notes = st.text_input(
            "Notes for the patient",
            value=resolver.get_effective_value(mapping, "notes") or "",
            key=_wk(f"notes_{mapping.id}"),
        )
        template_notes = _TEMPLATE.get_effective_value(mapping, "notes") or ""
        resolver.update_override(
            mapping.id, "notes", None if notes == template_notes else notes
        )

        if resolver.has_override(mapping.id) and st.button(
            "Reset to template", key=_wk(f"reset_{mapping.id}")
        ):
            resolver.reset_override(mapping.id)
            _bump_widget_version()
            st.rerun()


def _render_customize(engine: AssignmentEngine) -> None:
    exercise_set = engine.draft.selected_set
    if exercise_set is None:
        st.warning("No exercise set selected.")
        return
    total_slot = st.empty()
    for mapping in exercise_set.mappings:
        _render_mapping_editor(engine, mapping)
    # Filled after the editors so the total reflects this run's edits
    estimates = exercise_estimates(exercise_set.mappings, engine.resolver, engine.draft.excluded)
    total_slot.metric("Estimated session time", format_estimated_time(sum(e.seconds for e in estimates)))


def _render_frequency(engine: AssignmentEngine) -> None:
    freq = engine.draft.frequency
    mode = st.radio(
        "Frequency",
        ["Flexible", "Specific days"],
        index=1 if freq.is_specific_days else 0,
        horizontal=True,
        key=_wk("freq_mode"),
    )

    if mode == "Flexible":
        freq = freq.with_no_days()
        per_week = st.slider(
            "Times per week", 1, 7, value=freq.times_per_week or 3, key=_wk("per_week")
        )
        freq = Frequency(
            times_per_day=freq.times_per_day,
            times_per_week=per_week,
            break_between_sets=freq.break_between_sets,
        )
    else:
        cols = st.columns(7)
        for col, day, short in zip(cols, WEEKDAYS, DAY_NAMES):
            with col:
                on = st.checkbox(short, value=getattr(freq, day), key=_wk(f"day_{day}"))
            freq = freq.with_day(day, on)
        if not freq.is_specific_days:
            st.caption("No day selected: the plan stays flexible.")

    c1, c2 = st.columns(2)
    with c1:
        per_day = st.number_input(
            "Times per day", min_value=1, max_value=10, value=freq.times_per_day, key=_wk("per_day")
        )
    with c2:
        gap = st.number_input(
            "Break between sessions (h)",
            min_value=0,
            max_value=24,
            value=freq.break_between_sets,
            key=_wk("gap"),
        )
    engine.draft.set_frequency(
        Frequency(
            times_per_day=int(per_day),
            times_per_week=freq.times_per_week,
            break_between_sets=int(gap),
            **{day: getattr(freq, day) for day in WEEKDAYS},
        )
    )


def _render_schedule(engine: AssignmentEngine) -> None:
    draft = engine.draft

    preset_cols = st.columns(len(SchedulePreset))
    for col, preset in zip(preset_cols, SchedulePreset):
        with col:
            kind = "primary" if draft.active_preset == preset else "secondary"
            if st.button(PRESET_LABELS[preset], key=_wk(f"preset_{preset.name}"), type=kind):
                draft.apply_preset(preset)
                _bump_widget_version()
                st.rerun()

    c1, c2 = st.columns(2)
    with c1:
        start = st.date_input("Start date", value=draft.start_date, key=_wk("start"))
    with c2:
        end = st.date_input("End date", value=draft.end_date, key=_wk("end"))

    if start != draft.start_date:
        draft.set_start_date(start)
        _bump_widget_version()
        st.rerun()
    if end != draft.end_date:
        draft.set_end_date(end)
        _bump_widget_version()
        st.rerun()

    summary = engine.summary()
    st.write(f"Duration: {format_duration(summary.duration_days, summary.duration_weeks)}")

    _render_frequency(engine)

    dates = session_dates(draft.start_date, draft.end_date, draft.frequency)
    if dates:
        st.caption(f"First sessions: {', '.join(d.isoformat() for d in dates[:5])}")


def _render_summary(engine: AssignmentEngine) -> None:
    s = engine.summary()
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Exercises", s.exercise_count, delta=f"-{s.excluded_count} excluded" if s.excluded_count else None)
    c2.metric("Session time", s.estimated_time)
    c3.metric("Duration", format_duration(s.duration_days, s.duration_weeks))
    c4.metric("Total sessions", s.total_sessions)

    st.write(f"**Set:** {s.set_name}")
    st.write(f"**Patients:** {', '.join(s.patient_names)}")
    st.write(f"**Frequency:** {format_frequency(engine.draft.frequency)}")
    if s.customized_count:
        st.write(f"**Customized exercises:** {s.customized_count}")

    st.dataframe(exercise_table(engine), use_container_width=True, hide_index=True)


# ---------------------------------------------------------------------------
# Sidebar: open a wizard
# ---------------------------------------------------------------------------

try:
    all_sets, all_patients = load_catalogue()
except ClinicClientError as e:
    st.error(f"Could not load data from the clinic API: {e}")
    st.stop()

st.sidebar.title("Assign exercises")
mode_label = st.sidebar.radio("Start from", ["Exercise set", "Patient"])
mode = AssignmentMode.FROM_SET if mode_label == "Exercise set" else AssignmentMode.FROM_PATIENT

set_names = ["(none)"] + [s.name for s in all_sets]
patient_names = ["(none)"] + [p.name for p in all_patients]
set_pick = st.sidebar.selectbox("Preselected set", set_names)
patient_pick = st.sidebar.selectbox("Preselected patient", patient_names)

preselected_set = all_sets[set_names.index(set_pick) - 1] if set_pick != "(none)" else None
preselected_patient = (
    all_patients[patient_names.index(patient_pick) - 1] if patient_pick != "(none)" else None
)

if mode is AssignmentMode.FROM_SET and preselected_set is None:
    st.sidebar.caption("Opening from a set requires choosing the set here.")

if st.sidebar.button(
    "Open wizard",
    type="primary",
    disabled=mode is AssignmentMode.FROM_SET and preselected_set is None,
):
    _open_wizard(mode, preselected_set, preselected_patient)
    st.rerun()

if not config.CLINIC_API_URL:
    st.sidebar.info("Demo mode: assignments are logged, not saved.")

# ---------------------------------------------------------------------------
# Main: wizard
# ---------------------------------------------------------------------------

engine = _engine()
if engine is None:
    st.title("Assign Exercise Set")
    st.write("Choose where to start in the sidebar and open the wizard.")
    result_msg = st.session_state.get("last_result")
    if result_msg:
        getattr(st, result_msg[0])(result_msg[1])
    st.stop()

step = engine.current_step
st.title(STEP_TITLES[step])
_render_indicator(engine)
st.progress(engine.machine.progress)
st.divider()

if step is StepId.SELECT_SET:
    _render_select_set(engine, all_sets)
elif step is StepId.SELECT_PATIENTS:
    _render_select_patients(engine, all_patients)
elif step is StepId.CUSTOMIZE:
    _render_customize(engine)
elif step is StepId.SCHEDULE:
    _render_schedule(engine)
else:
    _render_summary(engine)

st.divider()
back_col, cancel_col, next_col = st.columns([1, 1, 2])

with back_col:
    if st.button("Back", disabled=engine.machine.is_first_step, key=_wk("back")):
        engine.go_back()
        st.rerun()

with cancel_col:
    if st.button("Cancel", key=_wk("cancel")):
        if engine.draft.has_changes:
            logger.info("Wizard closed with unsaved changes")
        _close_wizard()
        st.rerun()

with next_col:
    if engine.machine.is_last_step:
        if st.button("Assign", type="primary", disabled=not engine.machine.can_submit(), key=_wk("submit")):
            gateway = get_client() or _LoggingGateway()
            with st.spinner("Assigning…"):
                result = engine.submit(gateway)
            level, text = submission_message(result, engine.summary().set_name or "")
            if result.ok:
                st.session_state["last_result"] = (level, text)
                _close_wizard()
                st.rerun()
            getattr(st, level)(text)
    else:
        if st.button("Next", type="primary", disabled=not engine.machine.can_proceed(), key=_wk("next")):
            engine.go_next()
            st.rerun()
