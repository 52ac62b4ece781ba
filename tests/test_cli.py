import contextlib
import datetime
import io
import os
import sys
import unittest
from unittest import mock

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from cli import main, parse_set_spec
from models import AuthResponse, Exercise, Template, User, Workout
from session import SessionContext


def _workout(day: datetime.date, sets: list, exercise_id: str = "bench") -> Workout:
    return Workout.model_validate(
        {
            "id": f"w-{day.isoformat()}",
            "date": day.isoformat(),
            "exercises": [
                {"exerciseId": exercise_id, "sets": [{"reps": r, "weight": w} for r, w in sets]}
            ],
        }
    )


class CLITest(unittest.TestCase):
    def setUp(self) -> None:
        self.session_path = "test_cli_session.yaml"
        self.chart_path = "test_cli_chart.html"
        for path in (self.session_path, self.chart_path):
            if os.path.exists(path):
                os.remove(path)
        os.environ["MOMENTUM_SESSION_PATH"] = self.session_path
        self.client = mock.Mock()
        self.user = User(id="u1", username="joe", email="joe@example.com")

    def tearDown(self) -> None:
        for path in (self.session_path, self.chart_path):
            if os.path.exists(path):
                os.remove(path)
        os.environ.pop("MOMENTUM_SESSION_PATH", None)

    def _run(self, *argv: str) -> tuple:
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(["--settings", "missing_settings.yaml", *argv], client=self.client)
        return code, out.getvalue(), err.getvalue()

    def _login(self) -> None:
        SessionContext(self.session_path).save("tok", self.user)

    def test_parse_set_spec(self) -> None:
        self.assertEqual(parse_set_spec("bench:5x100"), ("bench", 5, 100.0))
        self.assertEqual(parse_set_spec("pull-up:8"), ("pull-up", 8, 0.0))
        with self.assertRaises(ValueError):
            parse_set_spec("bench")
        with self.assertRaises(ValueError):
            parse_set_spec("bench:fivex100")

    def test_commands_require_login(self) -> None:
        code, _, err = self._run("week")
        self.assertEqual(code, 1)
        self.assertIn("Please log in first", err)
        self.client.get_workouts_by_date_range.assert_not_called()

    def test_login_then_whoami(self) -> None:
        self.client.login.return_value = AuthResponse(token="tok", user=self.user)
        code, out, _ = self._run("login", "--email", "joe@example.com", "--password", "secret")
        self.assertEqual(code, 0)
        self.assertIn("Logged in as joe", out)
        code, out, _ = self._run("whoami")
        self.assertIn("joe <joe@example.com>", out)
        self._run("logout")
        self.assertFalse(os.path.exists(self.session_path))

    def test_week_summary(self) -> None:
        self._login()
        today = datetime.date.today()
        self.client.get_workouts_by_date_range.return_value = [
            _workout(today, [(5, 100), (5, 100)]),
            _workout(today, [(5, 110)]),
        ]
        code, out, _ = self._run("week")
        self.assertEqual(code, 0)
        self.assertIn("Weekly Volume: 1,550 lbs", out)
        self.assertIn("Sets: 3", out)

    def test_log_workout(self) -> None:
        self._login()
        self.client.create_workout.return_value = _workout(datetime.date(2024, 1, 1), [(5, 100)])
        code, out, _ = self._run(
            "log", "--date", "2024-01-01", "--set", "bench:5x100", "--set", "bench:5x110", "--set", "squat:3x200"
        )
        self.assertEqual(code, 0)
        sent = self.client.create_workout.call_args.args[0]
        self.assertEqual([ex.exercise_id for ex in sent.exercises], ["bench", "squat"])
        self.assertEqual([(s.reps, s.weight) for s in sent.exercises[0].sets], [(5, 100.0), (5, 110.0)])
        self.assertIn("Workout saved successfully", out)

    def test_log_rejects_bad_set(self) -> None:
        self._login()
        code, _, err = self._run("log", "--set", "bench:0x100")
        self.assertEqual(code, 1)
        self.assertIn("reps must be positive", err)
        self.client.create_workout.assert_not_called()

    def test_progress_writes_chart(self) -> None:
        self._login()
        today = datetime.date.today()
        self.client.get_workouts_by_date_range.return_value = [
            _workout(today - datetime.timedelta(days=1), [(5, 100)]),
            _workout(today, [(5, 110)]),
        ]
        code, out, _ = self._run("progress", "--exercise", "bench", "--chart", self.chart_path)
        self.assertEqual(code, 0)
        self.assertIn("550 lbs", out)
        self.assertTrue(os.path.exists(self.chart_path))

    def test_exercises_group_queries_server(self) -> None:
        self._login()
        self.client.get_exercises_by_muscle_group.return_value = [
            Exercise(id="1", name="Bench Press", muscle_group="CHEST"),
            Exercise(id="4", name="Cable Fly", muscle_group="CHEST"),
        ]
        code, out, _ = self._run("exercises", "--group", "chest", "--search", "fly")
        self.assertEqual(code, 0)
        self.client.get_exercises_by_muscle_group.assert_called_once_with("CHEST")
        self.client.get_exercises.assert_not_called()
        self.assertIn("Cable Fly", out)
        self.assertNotIn("Bench Press", out)

    def test_workouts_by_weekday(self) -> None:
        self._login()
        self.client.get_workouts_by_day.return_value = [
            _workout(datetime.date(2024, 1, 1), [(5, 100)]),
            _workout(datetime.date(2024, 1, 8), [(5, 100)]),
        ]
        code, out, _ = self._run("workouts", "--day", "monday")
        self.assertEqual(code, 0)
        self.client.get_workouts_by_day.assert_called_once_with("MONDAY")
        lines = out.splitlines()
        self.assertTrue(lines[0].startswith("w-2024-01-08"))
        self.assertTrue(lines[1].startswith("w-2024-01-01"))

    def test_edit_replaces_sets(self) -> None:
        self._login()
        stored = _workout(datetime.date(2024, 1, 1), [(5, 100)])
        self.client.get_workout.return_value = stored
        self.client.update_workout.return_value = stored
        code, out, _ = self._run("edit", "w-2024-01-01", "--date", "2024-01-02", "--set", "squat:3x200")
        self.assertEqual(code, 0)
        workout_id, sent = self.client.update_workout.call_args.args
        self.assertEqual(workout_id, "w-2024-01-01")
        self.assertEqual(sent.date, datetime.date(2024, 1, 2))
        self.assertEqual([ex.exercise_id for ex in sent.exercises], ["squat"])
        self.assertIn("Workout updated", out)

    def test_template_delete_only_custom(self) -> None:
        self._login()
        self.client.get_custom_templates.return_value = [Template(id="c1", name="Mine")]
        code, out, _ = self._run("template-delete", "c1")
        self.assertEqual(code, 0)
        self.client.delete_template.assert_called_once_with("c1")
        code, _, err = self._run("template-delete", "sys1")
        self.assertEqual(code, 1)
        self.assertIn("not found", err)

    def test_exercise_detail(self) -> None:
        self._login()
        today = datetime.date.today()
        self.client.get_exercise.return_value = Exercise(id="bench", name="Bench Press", muscle_group="CHEST")
        self.client.get_workouts_by_date_range.return_value = [_workout(today, [(5, 110)])]
        code, out, _ = self._run("exercise", "bench")
        self.assertEqual(code, 0)
        self.assertIn("Bench Press · Chest", out)
        self.assertIn("Last Recorded Volume: 550 lbs", out)
        start, end = self.client.get_workouts_by_date_range.call_args.args
        self.assertEqual((end - start).days, 29)


if __name__ == "__main__":
    unittest.main()
