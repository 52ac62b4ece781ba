import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from validation import (
    exercise_errors,
    login_errors,
    parse_set,
    password_errors,
    profile_errors,
    register_errors,
)


class ValidationTest(unittest.TestCase):
    def test_login(self) -> None:
        self.assertEqual(
            login_errors("", ""),
            {"email": "Email is required", "password": "Password is required"},
        )
        self.assertEqual(login_errors("a@b.co", "secret"), {})

    def test_register(self) -> None:
        errors = register_errors("", "not-an-email", "abc", "abd")
        self.assertEqual(set(errors), {"username", "email", "password", "confirmPassword"})
        self.assertEqual(register_errors("joe", "joe@example.com", "secret1", "secret1"), {})

    def test_profile(self) -> None:
        self.assertEqual(profile_errors("joe", "80.5", ""), {})
        errors = profile_errors("", "heavy", "tall")
        self.assertEqual(errors["username"], "Username is required")
        self.assertEqual(errors["weight"], "Weight must be a number")
        self.assertEqual(errors["height"], "Height must be a number")

    def test_password(self) -> None:
        errors = password_errors("", "123", "124")
        self.assertEqual(errors["oldPassword"], "Current password is required")
        self.assertEqual(errors["newPassword"], "Password must be at least 6 characters")
        self.assertEqual(errors["confirmPassword"], "Passwords do not match")
        self.assertEqual(password_errors("old", "newpass", "newpass"), {})

    def test_exercise(self) -> None:
        self.assertEqual(exercise_errors("Curl", "ARMS"), {})
        self.assertEqual(set(exercise_errors(" ", "NECK")), {"name", "muscleGroup"})

    def test_parse_set(self) -> None:
        self.assertEqual(parse_set("5", "102.5"), (5, 102.5))
        self.assertEqual(parse_set(10, ""), (10, 0.0))
        with self.assertRaises(ValueError):
            parse_set("five", 100)
        with self.assertRaises(ValueError):
            parse_set(5, "heavy")
        with self.assertRaises(ValueError):
            parse_set(0, 100)
        with self.assertRaises(ValueError):
            parse_set(2.5, 100)
        with self.assertRaises(ValueError):
            parse_set(5, -1)


if __name__ == "__main__":
    unittest.main()
