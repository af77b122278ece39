import unittest

from authapi.sessions import SessionSigner


class SessionSignerTests(unittest.TestCase):
    def setUp(self):
        self.signer = SessionSigner("s3cret", salt="test.session", max_age_seconds=3600)

    def test_issue_and_read(self):
        token = self.signer.issue("abc123")
        self.assertNotIn("s3cret", token)
        data = self.signer.read(token)
        self.assertIsNotNone(data)
        self.assertEqual(data.account_id, "abc123")

    def test_missing_token(self):
        self.assertIsNone(self.signer.read(None))
        self.assertIsNone(self.signer.read(""))

    def test_tampered_token_is_rejected(self):
        token = self.signer.issue("abc123")
        self.assertIsNone(self.signer.read(token[:-2] + "xx"))

    def test_token_from_other_secret_is_rejected(self):
        other = SessionSigner("different", salt="test.session", max_age_seconds=3600)
        self.assertIsNone(self.signer.read(other.issue("abc123")))

    def test_expired_token_is_rejected(self):
        token = self.signer.issue("abc123")
        strict = SessionSigner("s3cret", salt="test.session", max_age_seconds=-1)
        self.assertIsNone(strict.read(token))

    def test_secret_is_required(self):
        with self.assertRaises(RuntimeError):
            SessionSigner("", salt="test.session", max_age_seconds=3600)


if __name__ == "__main__":
    unittest.main()
