import argparse
import datetime
import functools
import getpass
import logging
import sys
from typing import Callable, List, Optional, Sequence, Tuple

import altair as alt

from algorithms import CalendarTools
from auth_service import AuthService
from charts import daily_volume_chart, monthly_volume_chart
from client import MomentumClient
from errors import APIError, NotAuthenticatedError
from formatting import format_volume, format_workout_date
from library import ALL_GROUPS, ExerciseLibrary, filter_exercises
from models import DayOfWeek, Workout
from progress_service import ProgressService
from session import SessionContext
from settings_schema import Settings, load_settings
from template_service import TemplateService, workout_from_template
from validation import parse_set
from workout_form import WorkoutForm
from workout_service import WorkoutService

logger = logging.getLogger(__name__)


class CLIContext:
    """Settings, session and API client shared by the commands."""

    def __init__(self, settings: Settings, client: Optional[MomentumClient] = None) -> None:
        self.settings = settings
        self.session = SessionContext(settings.session_path).load()
        self.client = client or MomentumClient(
            settings.api_base_url, session=self.session, timeout=settings.request_timeout
        )
        if self.client.session is None:
            self.client.session = self.session
        self.auth = AuthService(self.client, self.session)
        self.library = ExerciseLibrary(self.client)
        self.workouts = WorkoutService(self.client)
        self.templates = TemplateService(self.client)
        self.progress = ProgressService(
            self.client,
            week_starts_on=settings.week_starts_on,
            max_workers=settings.max_workers,
        )

    def volume(self, value: float) -> str:
        return format_volume(value, self.settings.weight_unit)


def login_required(func: Callable) -> Callable:
    """Refuse to run ``func`` unless the context holds a session token."""

    @functools.wraps(func)
    def wrapper(ctx: CLIContext, *args, **kwargs):
        ctx.session.require_auth()
        return func(ctx, *args, **kwargs)

    return wrapper


def parse_set_spec(spec: str) -> Tuple[str, int, float]:
    """Parse ``EXERCISE_ID:REPSxWEIGHT`` (weight optional) into its parts."""
    if ":" not in spec:
        raise ValueError(f"invalid set '{spec}', expected EXERCISE_ID:REPSxWEIGHT")
    exercise_id, body = spec.rsplit(":", 1)
    reps, _, weight = body.lower().partition("x")
    parsed_reps, parsed_weight = parse_set(reps, weight or 0)
    return exercise_id, parsed_reps, parsed_weight


def login(ctx: CLIContext, email: str, password: Optional[str]) -> None:
    if password is None:
        password = getpass.getpass("Password: ")
    user = ctx.auth.login(email, password)
    print(f"Logged in as {user.username}")


def register(
    ctx: CLIContext, username: str, email: str, password: str, confirm: str
) -> None:
    ctx.auth.register(username, email, password, confirm)
    print("Registration successful. Please log in.")


def logout(ctx: CLIContext) -> None:
    ctx.auth.logout()
    print("Logged out successfully")


@login_required
def whoami(ctx: CLIContext) -> None:
    user = ctx.session.user
    if user is None:
        print("Unknown user")
        return
    print(f"{user.username} <{user.email}>")


@login_required
def list_exercises(ctx: CLIContext, group: str = "ALL", search: str = "") -> None:
    if group and group != ALL_GROUPS:
        exercises = ctx.library.by_muscle_group(group)
    else:
        exercises = ctx.library.all()
    for ex in filter_exercises(exercises, ALL_GROUPS, search):
        print(f"{ex.id}\t{ex.name}\t{ex.muscle_group.label}")


@login_required
def add_exercise(
    ctx: CLIContext, name: str, group: str, description: str, bodyweight: bool
) -> None:
    ctx.library.create(name, group, description, not bodyweight)
    print("Exercise created successfully")


@login_required
def init_exercises(ctx: CLIContext) -> None:
    exercises = ctx.library.initialize_defaults()
    print(f"Default exercises initialized ({len(exercises)} total)")


@login_required
def list_workouts(
    ctx: CLIContext, month: Optional[str] = None, day: Optional[str] = None
) -> None:
    if day:
        workouts = ctx.workouts.by_day(day)
        empty = f"No workouts logged on a {day.title()}"
    else:
        key = month or CalendarTools.month_key(datetime.date.today())
        workouts = ctx.workouts.list_month(key)
        empty = f"No workouts logged for {CalendarTools.month_label(key)}"
    if not workouts:
        print(empty)
        return
    for w in workouts:
        print(f"{w.id}\t{format_workout_date(w.date)}\t{len(w.exercises)} exercises")


@login_required
def show_workout(ctx: CLIContext, workout_id: str) -> None:
    workout = ctx.workouts.get(workout_id)
    form = WorkoutForm.from_workout(workout)
    print(format_workout_date(workout.date))
    print(f"{form.total_sets} sets · {ctx.volume(form.total_volume)} total volume")
    for i, ex in enumerate(workout.exercises):
        print(f"  {ex.name or ex.exercise_id}: {ctx.volume(form.exercise_volume(i))}")
        for s in ex.sets:
            print(f"    {s.reps} x {s.weight}")


def _add_sets(form: WorkoutForm, sets: Sequence[str]) -> None:
    index_by_id: dict[str, int] = {}
    for spec in sets:
        exercise_id, reps, weight = parse_set_spec(spec)
        if exercise_id not in index_by_id:
            index_by_id[exercise_id] = form.add_exercise(exercise_id)
            form.update_set(index_by_id[exercise_id], 0, reps, weight)
        else:
            form.add_set(index_by_id[exercise_id], reps, weight)


@login_required
def log_workout(ctx: CLIContext, date: Optional[str], sets: Sequence[str]) -> None:
    form = WorkoutForm(date)
    _add_sets(form, sets)
    saved = ctx.workouts.save(form)
    print(f"Workout saved successfully ({saved.id})")


@login_required
def edit_workout(
    ctx: CLIContext, workout_id: str, date: Optional[str], sets: Sequence[str]
) -> None:
    """Move a workout to another date and/or replace its sets."""
    form = WorkoutForm.from_workout(ctx.workouts.get(workout_id))
    if date:
        form.set_date(date)
    if sets:
        form.load_exercises(Workout(date=form.date))
        _add_sets(form, sets)
    updated = ctx.workouts.update(form)
    print(f"Workout updated ({updated.id}, {format_workout_date(updated.date)})")


@login_required
def copy_workout(ctx: CLIContext, workout_id: str, date: str) -> None:
    copied = ctx.workouts.copy_to(workout_id, date)
    print(f"Workout copied to {format_workout_date(copied.date)} ({copied.id})")


@login_required
def delete_workout(ctx: CLIContext, workout_id: str) -> None:
    ctx.workouts.delete(workout_id)
    print("Workout deleted")


@login_required
def list_templates(ctx: CLIContext, custom: bool = False) -> None:
    templates = ctx.templates.custom() if custom else ctx.templates.system()
    for t in templates:
        print(f"{t.id}\t{t.name}\t{len(t.days)} days")


@login_required
def copy_template(ctx: CLIContext, template_id: str) -> None:
    template = next((t for t in ctx.templates.system() if t.id == template_id), None)
    if template is None:
        raise ValueError(f"template {template_id} not found")
    ctx.templates.copy(template)
    print("Template copied to your collection")


@login_required
def delete_template(ctx: CLIContext, template_id: str) -> None:
    if not any(t.id == template_id for t in ctx.templates.custom()):
        raise ValueError(f"custom template {template_id} not found")
    ctx.templates.delete(template_id)
    print("Template deleted")


@login_required
def use_template(
    ctx: CLIContext, template_id: str, date: str, day: int = 0, save: bool = False
) -> None:
    templates = ctx.templates.system() + ctx.templates.custom()
    template = next((t for t in templates if t.id == template_id), None)
    if template is None:
        raise ValueError(f"template {template_id} not found")
    form = WorkoutForm.from_workout(
        workout_from_template(template, date, ctx.library.all(), day)
    )
    for ex in form.exercises:
        label = ex.name if ex.exercise_id else f"{ex.name} (no matching exercise)"
        print(f"  {label}: {len(ex.sets)} x {ex.sets[0].reps if ex.sets else 0}")
    if save:
        saved = ctx.workouts.save(form)
        print(f"Workout saved successfully ({saved.id})")


@login_required
def week_summary(ctx: CLIContext, date: Optional[str] = None) -> None:
    reference = CalendarTools.parse_date(date) if date else None
    summary = ctx.progress.weekly_summary(reference)
    print(f"Week {summary['start']} - {summary['end']}")
    print(f"Workouts: {summary['workout_count']}")
    print(f"Sets: {summary['sets']}")
    print(f"Weekly Volume: {ctx.volume(summary['volume'])}")


@login_required
def exercise_detail(ctx: CLIContext, exercise_id: str, chart: Optional[str] = None) -> None:
    detail = ctx.progress.exercise_progress(exercise_id, days=ctx.settings.progress_days)
    exercise = detail["exercise"]
    print(f"{exercise.name} · {exercise.muscle_group.label}")
    if exercise.description:
        print(exercise.description)
    last = detail["last"]
    if last is None:
        print(f"No volume data in the last {ctx.settings.progress_days} days")
        return
    print(f"Last Recorded Volume: {ctx.volume(last.volume)} on {last.date}")
    for point in detail["series"]:
        print(f"{point.date}\t{ctx.volume(point.volume)}")
    if chart:
        daily_volume_chart(detail["series"], exercise.name).save(chart)
        print(f"Chart written to {chart}")


@login_required
def progress(
    ctx: CLIContext,
    exercise_id: str,
    days: Optional[int] = None,
    months: Optional[int] = None,
    chart: Optional[str] = None,
    per_day: bool = False,
) -> None:
    days = days or ctx.settings.progress_days
    months = months or ctx.settings.progress_months
    if per_day:
        window = CalendarTools.trailing_days(datetime.date.today(), days)
        daily = ctx.progress.daily_series_per_day(exercise_id, window)
    else:
        daily = ctx.progress.daily_series(exercise_id, days=days)
    monthly = ctx.progress.monthly_series(exercise_id, months=months)
    if not daily:
        print("No volume recorded in this period")
    for point in daily:
        print(f"{point.date}\t{ctx.volume(point.volume)}")
    for row in monthly:
        print(f"{CalendarTools.month_label(row.month)}\t{ctx.volume(row.volume)}")
    if chart:
        charts = [
            c for c in (daily_volume_chart(daily), monthly_volume_chart(monthly)) if c is not None
        ]
        if not charts:
            print("Nothing to chart")
            return
        alt.vconcat(*charts).save(chart)
        print(f"Chart written to {chart}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Workout tracker client")
    parser.add_argument("--settings", default="settings.yaml")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    lgn = sub.add_parser("login")
    lgn.add_argument("--email", required=True)
    lgn.add_argument("--password")

    reg = sub.add_parser("register")
    reg.add_argument("--username", required=True)
    reg.add_argument("--email", required=True)
    reg.add_argument("--password", required=True)
    reg.add_argument("--confirm", required=True)

    sub.add_parser("logout")
    sub.add_parser("whoami")

    exs = sub.add_parser("exercises")
    exs.add_argument("--group", default="ALL", type=str.upper)
    exs.add_argument("--search", default="")

    exa = sub.add_parser("exercise-add")
    exa.add_argument("--name", required=True)
    exa.add_argument("--group", required=True, type=str.upper)
    exa.add_argument("--description", default="")
    exa.add_argument("--bodyweight", action="store_true")

    sub.add_parser("exercises-init")

    wks = sub.add_parser("workouts")
    wks.add_argument("--month", help="YYYY-MM, defaults to the current month")
    wks.add_argument("--day", type=str.upper, choices=[d.value for d in DayOfWeek])

    wk = sub.add_parser("workout")
    wk.add_argument("id")

    ed = sub.add_parser("edit")
    ed.add_argument("id")
    ed.add_argument("--date")
    ed.add_argument(
        "--set",
        dest="sets",
        action="append",
        default=[],
        help="EXERCISE_ID:REPSxWEIGHT, replaces every set when given",
    )

    log = sub.add_parser("log")
    log.add_argument("--date")
    log.add_argument(
        "--set",
        dest="sets",
        action="append",
        required=True,
        help="EXERCISE_ID:REPSxWEIGHT, repeat for each set",
    )

    cp = sub.add_parser("copy")
    cp.add_argument("id")
    cp.add_argument("--date", required=True)

    rm = sub.add_parser("delete")
    rm.add_argument("id")

    tpl = sub.add_parser("templates")
    tpl.add_argument("--custom", action="store_true")

    tcp = sub.add_parser("template-copy")
    tcp.add_argument("id")

    tdl = sub.add_parser("template-delete")
    tdl.add_argument("id")

    tus = sub.add_parser("template-use")
    tus.add_argument("id")
    tus.add_argument("--date", required=True)
    tus.add_argument("--day", type=int, default=0)
    tus.add_argument("--save", action="store_true")

    wkly = sub.add_parser("week")
    wkly.add_argument("--date")

    exd = sub.add_parser("exercise")
    exd.add_argument("id")
    exd.add_argument("--chart", help="write the chart to this HTML file")

    prg = sub.add_parser("progress")
    prg.add_argument("--exercise", required=True)
    prg.add_argument("--days", type=int)
    prg.add_argument("--months", type=int)
    prg.add_argument("--chart", help="write the charts to this HTML file")
    prg.add_argument("--per-day", action="store_true")
    return parser


def run(args: argparse.Namespace, ctx: CLIContext) -> None:
    if args.cmd == "login":
        login(ctx, args.email, args.password)
    elif args.cmd == "register":
        register(ctx, args.username, args.email, args.password, args.confirm)
    elif args.cmd == "logout":
        logout(ctx)
    elif args.cmd == "whoami":
        whoami(ctx)
    elif args.cmd == "exercises":
        list_exercises(ctx, args.group, args.search)
    elif args.cmd == "exercise-add":
        add_exercise(ctx, args.name, args.group, args.description, args.bodyweight)
    elif args.cmd == "exercises-init":
        init_exercises(ctx)
    elif args.cmd == "workouts":
        list_workouts(ctx, args.month, args.day)
    elif args.cmd == "workout":
        show_workout(ctx, args.id)
    elif args.cmd == "log":
        log_workout(ctx, args.date, args.sets)
    elif args.cmd == "edit":
        edit_workout(ctx, args.id, args.date, args.sets)
    elif args.cmd == "copy":
        copy_workout(ctx, args.id, args.date)
    elif args.cmd == "delete":
        delete_workout(ctx, args.id)
    elif args.cmd == "templates":
        list_templates(ctx, args.custom)
    elif args.cmd == "template-copy":
        copy_template(ctx, args.id)
    elif args.cmd == "template-delete":
        delete_template(ctx, args.id)
    elif args.cmd == "template-use":
        use_template(ctx, args.id, args.date, args.day, args.save)
    elif args.cmd == "week":
        week_summary(ctx, args.date)
    elif args.cmd == "exercise":
        exercise_detail(ctx, args.id, args.chart)
    elif args.cmd == "progress":
        progress(ctx, args.exercise, args.days, args.months, args.chart, args.per_day)


def main(argv: Optional[List[str]] = None, client: Optional[MomentumClient] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx = CLIContext(load_settings(args.settings), client=client)
        run(args, ctx)
    except NotAuthenticatedError:
        print("Please log in first", file=sys.stderr)
        return 1
    except (APIError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
