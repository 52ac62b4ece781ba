"""Field checks for the login, register, profile, password and exercise forms.

Each ``*_errors`` helper returns a mapping of field name to message and is
empty when the form may be submitted.
"""

import re
from typing import Any, Dict, Optional, Tuple

from models import MuscleGroup

MIN_PASSWORD_LENGTH = 6
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_number(value: Any) -> bool:
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


def login_errors(email: str, password: str) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not email:
        errors["email"] = "Email is required"
    if not password:
        errors["password"] = "Password is required"
    return errors


def register_errors(
    username: str, email: str, password: str, confirm_password: str
) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not username:
        errors["username"] = "Username is required"
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Email is invalid"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if password != confirm_password:
        errors["confirmPassword"] = "Passwords do not match"
    return errors


def profile_errors(
    username: str, weight: Optional[Any] = None, height: Optional[Any] = None
) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not username:
        errors["username"] = "Username is required"
    if weight not in (None, "") and not _is_number(weight):
        errors["weight"] = "Weight must be a number"
    if height not in (None, "") and not _is_number(height):
        errors["height"] = "Height must be a number"
    return errors


def password_errors(
    old_password: str, new_password: str, confirm_password: str
) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not old_password:
        errors["oldPassword"] = "Current password is required"
    if not new_password:
        errors["newPassword"] = "New password is required"
    elif len(new_password) < MIN_PASSWORD_LENGTH:
        errors["newPassword"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if new_password != confirm_password:
        errors["confirmPassword"] = "Passwords do not match"
    return errors


def exercise_errors(name: str, muscle_group: Any) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not name or not str(name).strip():
        errors["name"] = "Name is required"
    try:
        MuscleGroup(muscle_group)
    except ValueError:
        errors["muscleGroup"] = "Unknown muscle group"
    return errors


def optional_number(value: Any) -> Optional[float]:
    """Return ``value`` as float, ``None`` for blank input."""
    if value in (None, ""):
        return None
    return float(value)


def parse_set(reps: Any, weight: Any) -> Tuple[int, float]:
    """Coerce raw reps/weight input, rejecting anything not numeric."""
    try:
        reps_f = float(reps)
    except (TypeError, ValueError):
        raise ValueError("reps must be a number")
    try:
        weight_f = float(weight) if weight not in (None, "") else 0.0
    except (TypeError, ValueError):
        raise ValueError("weight must be a number")
    if not reps_f.is_integer():
        raise ValueError("reps must be a whole number")
    if reps_f < 1:
        raise ValueError("reps must be positive")
    if weight_f < 0:
        raise ValueError("weight must be non-negative")
    return int(reps_f), weight_f
