import unittest

from fastapi.testclient import TestClient

from authapi.app import create_app
from authapi.config import get_settings
from authapi.db import InMemoryAccountStore
from authapi.dependencies import get_account_store

GRAPHQL_PATH = "/api/graphql"

REGISTER = """
mutation Register($options: UsernamePasswordInput!) {
  register(options: $options) {
    errors { field message }
    user { id username createdAt }
  }
}
"""

LOGIN = """
mutation Login($options: UsernamePasswordInput!) {
  login(options: $options) {
    errors { field message }
    user { id username }
  }
}
"""

ME = "query { me { id username } }"


class GraphQLApiTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app())
        db = get_account_store()
        if isinstance(db, InMemoryAccountStore):
            db.reset()

    def _post(self, query, variables=None):
        response = self.client.post(
            GRAPHQL_PATH, json={"query": query, "variables": variables or {}}
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertNotIn("errors", payload)
        return response, payload["data"]

    def register(self, username, password):
        _, data = self._post(
            REGISTER, {"options": {"username": username, "password": password}}
        )
        return data["register"]

    def login(self, username, password):
        response, data = self._post(
            LOGIN, {"options": {"username": username, "password": password}}
        )
        return response, data["login"]

    def test_me_without_session_is_null(self):
        _, data = self._post(ME)
        self.assertIsNone(data["me"])

    def test_register_and_login_flow(self):
        result = self.register("ab", "abcd")
        self.assertIsNone(result["user"])
        self.assertEqual(
            result["errors"],
            [{"field": "username", "message": "Length must be greater than 2."}],
        )

        result = self.register("abc", "ab")
        self.assertEqual(
            result["errors"],
            [{"field": "password", "message": "Length must be greater than 3."}],
        )

        result = self.register("alice", "secret123")
        self.assertIsNone(result["errors"])
        self.assertEqual(result["user"]["username"], "alice")
        self.assertTrue(result["user"]["createdAt"])
        alice_id = result["user"]["id"]

        result = self.register("alice", "other456")
        self.assertEqual(
            result["errors"],
            [{"field": "username", "message": "Username already taken."}],
        )

        response, result = self.login("alice", "wrong")
        self.assertEqual(
            result["errors"], [{"field": "password", "message": "Incorrect password."}]
        )
        self.assertNotIn(get_settings().session_cookie_name, response.cookies)

        response, result = self.login("bob", "x")
        self.assertEqual(
            result["errors"],
            [{"field": "username", "message": "Username doesn't exist."}],
        )
        self.assertNotIn(get_settings().session_cookie_name, response.cookies)

        _, data = self._post(ME)
        self.assertIsNone(data["me"])

        response, result = self.login("alice", "secret123")
        self.assertIsNone(result["errors"])
        self.assertEqual(result["user"]["id"], alice_id)
        self.assertIn(get_settings().session_cookie_name, response.cookies)

        _, data = self._post(ME)
        self.assertEqual(data["me"], {"id": alice_id, "username": "alice"})

    def test_password_hash_is_not_exposed(self):
        response = self.client.post(
            GRAPHQL_PATH, json={"query": "query { me { passwordHash } }"}
        )
        self.assertIn("errors", response.json())

    def test_session_from_before_store_reset_is_anonymous(self):
        self.register("alice", "secret123")
        self.login("alice", "secret123")
        _, data = self._post(ME)
        self.assertEqual(data["me"]["username"], "alice")

        get_account_store().reset()

        response, data = self._post(ME)
        self.assertIsNone(data["me"])
        set_cookie = response.headers.get("set-cookie", "")
        self.assertIn(get_settings().session_cookie_name, set_cookie)
        self.assertIn("Max-Age=0", set_cookie)

    def test_forged_session_cookie_is_anonymous(self):
        self.client.cookies.set(get_settings().session_cookie_name, "forged.token.value")
        _, data = self._post(ME)
        self.assertIsNone(data["me"])


if __name__ == "__main__":
    unittest.main()
