import os
import yaml
import keyring
from keyring.errors import PasswordDeleteError


class YamlConfig:
    """Load and save a YAML mapping, keeping secrets in the OS keyring.

    Secrets only go to the keyring when ``ENCRYPT_SETTINGS=1``; the file then
    records ``True`` in their place.
    """

    SENSITIVE_KEYS = {
        "token",
    }

    def __init__(self, path: str = "session.yaml") -> None:
        self.path = path
        self.encrypt = os.environ.get("ENCRYPT_SETTINGS") == "1"
        self.service = "muscle_momentum"

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if self.encrypt:
            for key in list(data.keys()):
                if key in self.SENSITIVE_KEYS:
                    secret = keyring.get_password(self.service, key)
                    if secret is not None:
                        data[key] = secret
                    else:
                        data.pop(key, None)
        return data

    def save(self, data: dict) -> None:
        out = dict(data)
        if self.encrypt:
            for key in self.SENSITIVE_KEYS:
                if key in out:
                    keyring.set_password(self.service, key, str(out[key]))
                    out[key] = True
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(out, f)

    def clear(self) -> None:
        if self.encrypt:
            for key in self.SENSITIVE_KEYS:
                try:
                    keyring.delete_password(self.service, key)
                except PasswordDeleteError:
                    pass
        if os.path.exists(self.path):
            os.remove(self.path)
