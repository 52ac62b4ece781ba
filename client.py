from __future__ import annotations

import datetime
import logging
from typing import Any, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from errors import APIError, AuthenticationError
from models import (
    AuthResponse,
    DayOfWeek,
    Exercise,
    MuscleGroup,
    Template,
    User,
    Workout,
)
from session import SessionContext
from settings_schema import DEFAULT_API_URL

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "An error occurred"

M = TypeVar("M", bound=BaseModel)


def _iso(day: datetime.date | str) -> str:
    return day.isoformat() if isinstance(day, datetime.date) else str(day)


class MomentumClient:
    """REST client for the workout API.

    Requests carry the session's bearer token when one is held. A 401 answer
    clears the session before :class:`AuthenticationError` is raised.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        session: Optional[SessionContext] = None,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self.http = http or requests.Session()

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.session is not None and self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return DEFAULT_ERROR
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return DEFAULT_ERROR

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request %s %s failed: %s", method, path, exc)
            raise APIError(DEFAULT_ERROR) from exc
        if resp.status_code >= 400:
            message = self._error_message(resp)
            logger.error("API error %s on %s %s: %s", resp.status_code, method, path, message)
            if resp.status_code == 401:
                if self.session is not None:
                    self.session.clear()
                raise AuthenticationError(message, resp.status_code)
            raise APIError(message, resp.status_code)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("Unreadable response to %s %s: %s", method, path, exc)
            raise APIError(DEFAULT_ERROR, resp.status_code) from exc

    @staticmethod
    def _parse(model: Type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            logger.error("Malformed %s in response: %s", model.__name__, exc)
            raise APIError(DEFAULT_ERROR) from exc

    @classmethod
    def _parse_list(cls, model: Type[M], data: Any) -> List[M]:
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error("Expected a list of %s, got %s", model.__name__, type(data).__name__)
            raise APIError(DEFAULT_ERROR)
        return [cls._parse(model, item) for item in data]

    # auth
    def register(self, username: str, email: str, password: str) -> Any:
        return self._request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> AuthResponse:
        data = self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        return self._parse(AuthResponse, data)

    def update_password(self, old_password: str, new_password: str) -> Any:
        return self._request(
            "PUT",
            "/users/password",
            json={"oldPassword": old_password, "newPassword": new_password},
        )

    # users
    def get_profile(self) -> User:
        return self._parse(User, self._request("GET", "/users/profile"))

    def update_profile(self, **fields: Any) -> dict:
        payload = {k: v for k, v in fields.items() if v is not None}
        return self._request("PUT", "/users/profile", json=payload) or {}

    # exercises
    def get_exercises(self) -> List[Exercise]:
        return self._parse_list(Exercise, self._request("GET", "/exercises"))

    def get_exercises_by_muscle_group(self, muscle_group: MuscleGroup | str) -> List[Exercise]:
        group = MuscleGroup(muscle_group).value
        data = self._request("GET", f"/exercises/muscle-group/{group}")
        return self._parse_list(Exercise, data)

    def get_exercise(self, exercise_id: str) -> Exercise:
        return self._parse(Exercise, self._request("GET", f"/exercises/{exercise_id}"))

    def create_exercise(
        self,
        name: str,
        muscle_group: MuscleGroup | str,
        description: str = "",
        requires_weight: bool = True,
    ) -> Any:
        return self._request(
            "POST",
            "/exercises",
            json={
                "name": name,
                "muscleGroup": MuscleGroup(muscle_group).value,
                "description": description,
                "requiresWeight": requires_weight,
            },
        )

    def initialize_exercises(self) -> Any:
        return self._request("POST", "/exercises/initialize")

    # workouts
    def create_workout(self, workout: Workout) -> Workout:
        payload = workout.to_wire()
        payload.pop("id", None)
        return self._parse(Workout, self._request("POST", "/workouts", json=payload))

    def get_workout(self, workout_id: str) -> Workout:
        return self._parse(Workout, self._request("GET", f"/workouts/{workout_id}"))

    def get_workouts_by_date_range(
        self, start: datetime.date | str, end: datetime.date | str
    ) -> List[Workout]:
        data = self._request(
            "GET",
            "/workouts/date-range",
            params={"startDate": _iso(start), "endDate": _iso(end)},
        )
        return self._parse_list(Workout, data)

    def get_workouts_by_day(self, day: DayOfWeek | str) -> List[Workout]:
        data = self._request("GET", f"/workouts/day/{DayOfWeek(day).value}")
        return self._parse_list(Workout, data)

    def update_workout(self, workout_id: str, workout: Workout) -> Workout:
        data = self._request("PUT", f"/workouts/{workout_id}", json=workout.to_wire())
        return self._parse(Workout, data)

    def delete_workout(self, workout_id: str) -> None:
        self._request("DELETE", f"/workouts/{workout_id}")

    def get_volume(self, exercise_id: str, day: datetime.date | str) -> float:
        """Return the recorded volume of one exercise on one day, 0 if none."""
        data = self._request(
            "GET",
            "/workouts/volume",
            params={"exerciseId": exercise_id, "date": _iso(day)},
        )
        if not isinstance(data, dict):
            return 0.0
        try:
            return float(data.get("volume") or 0)
        except (TypeError, ValueError) as exc:
            logger.error("Malformed volume for %s on %s: %r", exercise_id, day, data)
            raise APIError(DEFAULT_ERROR) from exc

    def copy_workout(self, workout_id: str, target_date: datetime.date | str) -> Workout:
        data = self._request(
            "POST",
            f"/workouts/{workout_id}/copy",
            params={"targetDate": _iso(target_date)},
        )
        return self._parse(Workout, data)

    def get_previous_by_day_of_week(
        self, day: DayOfWeek | str, before_date: datetime.date | str
    ) -> Optional[Workout]:
        data = self._request(
            "GET",
            f"/workouts/previous/{DayOfWeek(day).value}",
            params={"beforeDate": _iso(before_date)},
        )
        return self._parse(Workout, data) if data else None

    # templates
    def get_templates(self) -> List[Template]:
        return self._parse_list(Template, self._request("GET", "/templates"))

    def get_system_templates(self) -> List[Template]:
        data = self._request("GET", "/templates/system")
        return self._parse_list(Template, data)

    def get_custom_templates(self) -> List[Template]:
        data = self._request("GET", "/templates/custom")
        return self._parse_list(Template, data)

    def create_template(self, template: Template) -> Template:
        payload = template.to_wire()
        payload.pop("id", None)
        return self._parse(Template, self._request("POST", "/templates", json=payload))

    def update_template(self, template_id: str, template: Template) -> Template:
        data = self._request("PUT", f"/templates/{template_id}", json=template.to_wire())
        return self._parse(Template, data)

    def delete_template(self, template_id: str) -> None:
        self._request("DELETE", f"/templates/{template_id}")

    def copy_template(self, template_id: str) -> Template:
        return self._parse(Template, self._request("POST", f"/templates/{template_id}/copy"))
