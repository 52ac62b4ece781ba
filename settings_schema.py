import os
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from models import DayOfWeek

DEFAULT_API_URL = "https://muscle-momentum-api.onrender.com/api"


class Settings(BaseModel):
    api_base_url: str = DEFAULT_API_URL
    request_timeout: float = Field(10.0, gt=0)
    weight_unit: Literal["lb", "kg"] = "lb"
    week_starts_on: DayOfWeek = DayOfWeek.MONDAY
    progress_days: int = Field(30, ge=1)
    progress_months: int = Field(3, ge=1)
    max_workers: int = Field(8, ge=1)
    session_path: str = "session.yaml"


ENV_OVERRIDES = {
    "MOMENTUM_API_URL": "api_base_url",
    "MOMENTUM_SESSION_PATH": "session_path",
}


def validate_settings(data: dict) -> None:
    try:
        Settings(**data)
    except ValidationError as e:
        raise ValueError(str(e))


def load_settings(path: str = "settings.yaml") -> Settings:
    """Read settings from ``path`` with environment overrides applied."""
    data: dict = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data[key] = value
    validate_settings(data)
    return Settings(**data)
