import os
import sys
import unittest

import keyring
import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig
from errors import NotAuthenticatedError
from models import User
from session import SessionContext


class DummyKeyring(keyring.backend.KeyringBackend):
    priority = 1

    def __init__(self):
        self.store = {}

    def get_password(self, service, username):
        return self.store.get((service, username))

    def set_password(self, service, username, password):
        self.store[(service, username)] = password

    def delete_password(self, service, username):
        self.store.pop((service, username), None)


class SessionContextTest(unittest.TestCase):
    def setUp(self) -> None:
        self.path = "test_session.yaml"
        if os.path.exists(self.path):
            os.remove(self.path)
        self.user = User(id="u1", username="joe", email="joe@example.com")

    def tearDown(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
        os.environ.pop("ENCRYPT_SETTINGS", None)

    def test_empty_session(self) -> None:
        session = SessionContext(self.path).load()
        self.assertFalse(session.is_authenticated)
        self.assertIsNone(session.user)
        with self.assertRaises(NotAuthenticatedError):
            session.require_auth()

    def test_save_load_clear(self) -> None:
        SessionContext(self.path).save("tok-123", self.user)
        session = SessionContext(self.path).load()
        self.assertTrue(session.is_authenticated)
        self.assertEqual(session.require_auth(), "tok-123")
        self.assertEqual(session.user.username, "joe")
        session.clear()
        self.assertFalse(os.path.exists(self.path))
        self.assertFalse(SessionContext(self.path).load().is_authenticated)

    def test_update_user(self) -> None:
        session = SessionContext(self.path)
        session.save("tok", self.user)
        session.update_user(self.user.model_copy(update={"weight": 80.0}))
        self.assertEqual(SessionContext(self.path).load().user.weight, 80.0)

    def test_token_kept_in_keyring(self) -> None:
        keyring.set_keyring(DummyKeyring())
        os.environ["ENCRYPT_SETTINGS"] = "1"
        session = SessionContext(self.path)
        session.save("secret-token", self.user)
        with open(self.path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
        self.assertIs(raw["token"], True)
        self.assertEqual(SessionContext(self.path).load().token, "secret-token")
        session.clear()
        self.assertIsNone(keyring.get_password(YamlConfig(self.path).service, "token"))


if __name__ == "__main__":
    unittest.main()
