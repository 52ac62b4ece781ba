import datetime
import os
import warnings

import streamlit as st
from altair.utils.deprecation import AltairDeprecationWarning

warnings.filterwarnings("ignore", category=AltairDeprecationWarning)

from algorithms import CalendarTools
from auth_service import AuthService
from charts import daily_volume_chart, monthly_volume_chart
from client import MomentumClient
from errors import APIError
from formatting import format_short_date, format_volume, format_workout_date
from library import ALL_GROUPS, ExerciseLibrary, filter_exercises, search_exercises
from models import Exercise, MuscleGroup
from progress_service import ProgressService
from session import SessionContext
from settings_schema import load_settings
from template_service import TemplateService, workout_from_template
from validation import login_errors, password_errors, profile_errors, register_errors
from workout_form import WorkoutForm
from workout_service import WorkoutService

PAGES = [
    "Dashboard",
    "Exercises",
    "New Workout",
    "Workouts",
    "Progress",
    "Templates",
    "Profile",
]


class MomentumApp:
    """Streamlit client for logging workouts and following progress."""

    def __init__(self, settings_path: str = "settings.yaml") -> None:
        self.settings = load_settings(settings_path)
        self.session = SessionContext(self.settings.session_path).load()
        self.client = MomentumClient(
            self.settings.api_base_url,
            session=self.session,
            timeout=self.settings.request_timeout,
        )
        self.auth = AuthService(self.client, self.session)
        self.library = ExerciseLibrary(self.client)
        self.workouts = WorkoutService(self.client)
        self.templates = TemplateService(self.client)
        self.progress = ProgressService(
            self.client,
            week_starts_on=self.settings.week_starts_on,
            max_workers=self.settings.max_workers,
        )
        st.set_page_config(page_title="Muscle Momentum", layout="wide")

    def _volume(self, value: float) -> str:
        return format_volume(value, self.settings.weight_unit)

    def _show_errors(self, errors: dict) -> bool:
        for message in errors.values():
            st.error(message)
        return bool(errors)

    def _exercises(self) -> list[Exercise]:
        try:
            return self.library.all()
        except APIError as exc:
            st.error(exc.message)
            return []

    def _form(self) -> WorkoutForm:
        if "workout_form" not in st.session_state:
            st.session_state.workout_form = WorkoutForm()
        return st.session_state.workout_form

    def _go(self, page: str) -> None:
        st.session_state.nav_target = page
        st.rerun()

    def run(self) -> None:
        if not self.session.is_authenticated:
            self._auth_pages()
            return
        if "nav_target" in st.session_state:
            st.session_state.page = st.session_state.pop("nav_target")
        with st.sidebar:
            st.title("Muscle Momentum")
            if self.session.user is not None:
                st.caption(self.session.user.username)
            page = st.radio("Navigate", PAGES, key="page")
            if st.button("Logout", key="logout"):
                self.auth.logout()
                st.session_state.pop("workout_form", None)
                st.rerun()
        {
            "Dashboard": self._dashboard_page,
            "Exercises": self._exercises_page,
            "New Workout": self._new_workout_page,
            "Workouts": self._workouts_page,
            "Progress": self._progress_page,
            "Templates": self._templates_page,
            "Profile": self._profile_page,
        }[page]()

    def _auth_pages(self) -> None:
        st.title("Welcome back")
        st.caption("Enter your credentials to access your account")
        email = st.text_input("Email", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")
        if st.button("Sign in", key="login_submit"):
            if not self._show_errors(login_errors(email, password)):
                try:
                    self.auth.login(email, password)
                    st.success("Login successful")
                    st.rerun()
                except APIError as exc:
                    st.error(exc.message)
        with st.expander("Create an account"):
            username = st.text_input("Username", key="reg_username")
            reg_email = st.text_input("Email", key="reg_email")
            reg_password = st.text_input("Password", type="password", key="reg_password")
            confirm = st.text_input("Confirm Password", type="password", key="reg_confirm")
            if st.button("Register", key="reg_submit"):
                errors = register_errors(username, reg_email, reg_password, confirm)
                if not self._show_errors(errors):
                    try:
                        self.auth.register(username, reg_email, reg_password, confirm)
                        st.success("Registration successful. Please log in.")
                    except APIError as exc:
                        st.error(exc.message)

    def _dashboard_page(self) -> None:
        st.header("Dashboard")
        summary = self.progress.weekly_summary()
        cols = st.columns(3)
        cols[0].metric("Weekly Volume", self._volume(summary["volume"]))
        cols[1].metric("Total Sets", summary["sets"])
        cols[2].metric("Workouts", summary["workout_count"])
        st.subheader("This Week")
        if not summary["workouts"]:
            st.info("No workouts logged this week")
        for w in summary["workouts"]:
            st.write(f"**{format_workout_date(w.date)}** · {len(w.exercises)} exercises")
        if st.button("Log Workout", key="dash_new_workout"):
            self._go("New Workout")

    def _exercises_page(self) -> None:
        st.header("Exercises")
        exercises = self._exercises()
        groups = [ALL_GROUPS] + [g.value for g in MuscleGroup]
        group = st.selectbox("Muscle Group", groups, key="lib_group")
        query = st.text_input("Search", key="lib_search")
        for ex in filter_exercises(exercises, group, query):
            with st.expander(f"{ex.name} · {ex.muscle_group.label}"):
                st.write(ex.description or "No description")
                if st.checkbox("Show progress", key=f"lib_prog_{ex.id}"):
                    self._exercise_detail(ex.id)
                if st.button("Add to workout", key=f"lib_add_{ex.id}"):
                    self._form().add_exercise(ex.id, ex.name)
                    self._go("New Workout")
        with st.expander("New Exercise"):
            name = st.text_input("Name", key="new_ex_name")
            new_group = st.selectbox(
                "Group", [g.value for g in MuscleGroup], key="new_ex_group"
            )
            description = st.text_area("Description", key="new_ex_desc")
            weighted = st.checkbox("Requires weight", value=True, key="new_ex_weighted")
            if st.button("Create Exercise", key="new_ex_submit"):
                try:
                    self.library.create(name, new_group, description, weighted)
                    st.success("Exercise created successfully")
                except ValueError as exc:
                    st.error(str(exc))
                except APIError as exc:
                    st.error(exc.message)
        if not exercises and st.button("Initialize default exercises", key="lib_init"):
            try:
                self.library.initialize_defaults()
                st.success("Default exercises initialized successfully")
                st.rerun()
            except APIError as exc:
                st.error(exc.message)

    def _exercise_detail(self, exercise_id: str) -> None:
        days = self.settings.progress_days
        try:
            detail = self.progress.exercise_progress(exercise_id, days=days)
        except APIError as exc:
            st.error(exc.message)
            return
        last = detail["last"]
        if last is None:
            st.info(f"No volume data in the last {days} days")
            return
        st.metric("Last Recorded Volume", self._volume(last.volume))
        st.caption(format_short_date(last.date))
        st.altair_chart(
            daily_volume_chart(detail["series"], detail["exercise"].name),
            use_container_width=True,
        )

    def _new_workout_page(self) -> None:
        st.header("New Workout")
        form = self._form()
        day = st.date_input("Date", value=form.date, key="nw_date")
        form.set_date(day)
        label = form.day_of_week.value.title()
        st.caption(label)
        exercises = self._exercises()
        names = {e.id: e.name for e in exercises}
        if st.button(f"Load previous {label} workout", key="nw_prev"):
            try:
                previous = self.workouts.previous_for(form)
            except APIError as exc:
                st.error(exc.message)
            else:
                if previous is None:
                    st.info(f"No previous {label} workout found")
                else:
                    form.load_exercises(previous)
                    st.rerun()
        query = st.text_input("Find exercise", key="nw_search")
        options = search_exercises(exercises, query)
        if options:
            picked = st.selectbox(
                "Exercise",
                [e.id for e in options],
                format_func=lambda i: names.get(i, i),
                key="nw_pick",
            )
            if st.button("Add Exercise", key="nw_add"):
                form.add_exercise(picked, names.get(picked))
        for i, entry in enumerate(list(form.exercises)):
            ek = form.entry_keys[i]
            with st.container(border=True):
                st.subheader(names.get(entry.exercise_id, entry.name or "Select an exercise"))
                if entry.exercise_id not in names and names:
                    choice = st.selectbox(
                        "Select an exercise",
                        [""] + list(names),
                        format_func=lambda x: names.get(x, "-"),
                        key=f"nw_sel_{ek}",
                    )
                    if choice:
                        form.update_exercise(i, choice, names[choice])
                        st.rerun()
                for j, s in enumerate(list(entry.sets)):
                    sk = form.set_keys[i][j]
                    c1, c2, c3 = st.columns([2, 2, 1])
                    reps = c1.number_input(
                        "Reps", min_value=1, value=s.reps or 1, step=1, key=f"nw_r_{sk}"
                    )
                    weight = c2.number_input(
                        "Weight (lbs)",
                        min_value=0.0,
                        value=float(s.weight or 0.0),
                        step=2.5,
                        key=f"nw_w_{sk}",
                    )
                    form.update_set(i, j, int(reps), float(weight))
                    if c3.button("Remove Set", key=f"nw_rs_{sk}"):
                        form.remove_set(i, j)
                        st.rerun()
                st.write(f"Total Volume: {self._volume(form.exercise_volume(i))}")
                c1, c2 = st.columns(2)
                if c1.button("Add Set", key=f"nw_as_{ek}"):
                    form.add_set(i)
                    st.rerun()
                if c2.button("Remove", key=f"nw_rm_{ek}"):
                    form.remove_exercise(i)
                    st.rerun()
        st.write(f"{form.total_sets} sets · {self._volume(form.total_volume)}")
        if st.button("Save Workout", key="nw_save"):
            if not form.is_valid():
                st.error("Please fill in all required fields")
                return
            try:
                self.workouts.save(form)
                st.session_state.pop("workout_form", None)
                st.success("Workout saved successfully")
            except APIError as exc:
                st.error(exc.message)

    def _workouts_page(self) -> None:
        st.header("Workouts")
        keys = CalendarTools.recent_month_keys(datetime.date.today(), 12)
        key = st.selectbox("Month", keys, format_func=CalendarTools.month_label, key="wk_month")
        try:
            workouts = self.workouts.list_month(key)
        except APIError as exc:
            st.error(exc.message)
            return
        if not workouts:
            st.info(f"You don't have any workouts logged for {CalendarTools.month_label(key)}.")
        for w in workouts:
            form = WorkoutForm.from_workout(w)
            with st.expander(format_workout_date(w.date)):
                st.write(f"{form.total_sets} sets · {self._volume(form.total_volume)} total volume")
                for i, ex in enumerate(w.exercises):
                    st.write(f"**{ex.name or ex.exercise_id}** · {self._volume(form.exercise_volume(i))}")
                target = st.date_input("Copy to", key=f"wk_target_{w.id}")
                c1, c2 = st.columns(2)
                if c1.button("Copy", key=f"wk_copy_{w.id}"):
                    try:
                        self.workouts.copy_to(w.id, target)
                        st.success("Workout copied")
                    except APIError as exc:
                        st.error(exc.message)
                if c2.button("Delete", key=f"wk_del_{w.id}"):
                    try:
                        self.workouts.delete(w.id)
                    except APIError as exc:
                        st.error(exc.message)
                    else:
                        st.rerun()

    def _progress_page(self) -> None:
        st.header("Progress")
        exercises = self._exercises()
        if not exercises:
            st.info("No exercises available")
            return
        names = {e.id: e.name for e in exercises}
        exercise_id = st.selectbox(
            "Exercise", list(names), format_func=lambda i: names[i], key="prog_ex"
        )
        daily = self.progress.daily_series(exercise_id, days=self.settings.progress_days)
        monthly = self.progress.monthly_series(exercise_id, months=self.settings.progress_months)
        chart = daily_volume_chart(daily)
        if chart is None:
            st.info(
                f"No volume data for this exercise in the last {self.settings.progress_days} days"
            )
        else:
            st.altair_chart(chart, use_container_width=True)
            last = daily[-1]
            st.caption(
                f"Last recorded: {self._volume(last.volume)} on {format_short_date(last.date)}"
            )
        bars = monthly_volume_chart(monthly)
        if bars is None:
            st.info("No monthly volume yet")
        else:
            st.altair_chart(bars, use_container_width=True)

    def _templates_page(self) -> None:
        st.header("Templates")
        try:
            system, custom = self.templates.system(), self.templates.custom()
        except APIError as exc:
            st.error(exc.message)
            return
        tabs = st.tabs(["System", "My Templates"])
        for tab, templates, own in ((tabs[0], system, False), (tabs[1], custom, True)):
            with tab:
                if not templates:
                    st.info("No templates")
                for t in templates:
                    with st.expander(t.name):
                        st.write(t.description)
                        for d in t.days:
                            st.write(f"**{d.name}**: " + ", ".join(e.name for e in d.exercises))
                        if not own and st.button("Copy", key=f"tpl_copy_{t.id}"):
                            try:
                                self.templates.copy(t)
                                st.success("Template copied to your collection")
                            except APIError as exc:
                                st.error(exc.message)
                        if own and st.button("Delete", key=f"tpl_del_{t.id}"):
                            try:
                                self.templates.delete(t.id)
                            except APIError as exc:
                                st.error(exc.message)
                            else:
                                st.rerun()
                        target = st.date_input("Date", key=f"tpl_date_{t.id}")
                        if st.button("Use Template", key=f"tpl_use_{t.id}"):
                            draft = workout_from_template(t, target, self._exercises())
                            st.session_state.workout_form = WorkoutForm.from_workout(draft)
                            self._go("New Workout")

    def _profile_page(self) -> None:
        st.header("Profile")
        user = self.session.user
        username = st.text_input("Username", value=user.username if user else "", key="pf_user")
        weight = st.text_input(
            "Weight", value="" if not user or user.weight is None else str(user.weight), key="pf_weight"
        )
        height = st.text_input(
            "Height", value="" if not user or user.height is None else str(user.height), key="pf_height"
        )
        if st.button("Save Profile", key="pf_save"):
            if not self._show_errors(profile_errors(username, weight, height)):
                try:
                    self.auth.update_profile(username, weight, height)
                    st.success("Profile updated successfully")
                except APIError as exc:
                    st.error(exc.message)
        st.subheader("Change Password")
        old = st.text_input("Current Password", type="password", key="pw_old")
        new = st.text_input("New Password", type="password", key="pw_new")
        confirm = st.text_input("Confirm Password", type="password", key="pw_confirm")
        if st.button("Update Password", key="pw_save"):
            if not self._show_errors(password_errors(old, new, confirm)):
                try:
                    self.auth.update_password(old, new, confirm)
                    st.success("Password updated successfully")
                except APIError as exc:
                    st.error(exc.message)


if __name__ == "__main__":
    MomentumApp(settings_path=os.environ.get("SETTINGS_PATH", "settings.yaml")).run()
