import unittest

from application.authenticator import Authenticator
from application.results import AuthErrorCode
from application.services import INTERNAL_ERROR_MESSAGE, request_signin, request_signup
from doubles import FakeClock, FakeCrypto, InMemoryAccountStore


class BrokenStore(InMemoryAccountStore):
    def find_by_name(self, name):
        raise ConnectionError("store unavailable")


class ApplicationServicesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryAccountStore()
        self.auth = Authenticator(self.store, FakeCrypto(), clock=FakeClock())

    def test_signup_then_signin(self):
        signup = request_signup("alice", "password1", self.auth)
        self.assertTrue(signup.success)

        signin = request_signin("alice", "password1", self.auth)
        self.assertTrue(signin.success)
        self.assertEqual(signin.user.id, signup.user.id)

    def test_invalid_signup_never_reaches_store(self):
        result = request_signup("a!", "password1", self.auth)

        self.assertEqual(result.code, AuthErrorCode.VALIDATION_ERROR)
        self.assertEqual(result.message, "Username must be at least 3 characters")
        self.assertEqual(self.store.inserts, 0)

    def test_empty_signin_is_a_validation_error(self):
        result = request_signin("alice", "", self.auth)
        self.assertEqual(result.code, AuthErrorCode.VALIDATION_ERROR)
        self.assertEqual(result.message, "Password is required")

    def test_business_failures_pass_through(self):
        request_signup("alice", "password1", self.auth)
        result = request_signup("alice", "password1", self.auth)
        self.assertEqual(result.code, AuthErrorCode.USERNAME_EXISTS)

    def test_infrastructure_failures_become_internal_errors(self):
        auth = Authenticator(BrokenStore(), FakeCrypto())

        with self.assertLogs("application.services", level="ERROR") as logs:
            signup = request_signup("alice", "password1", auth)
            signin = request_signin("alice", "password1", auth)

        for result in (signup, signin):
            self.assertEqual(result.code, AuthErrorCode.INTERNAL_ERROR)
            self.assertEqual(result.message, INTERNAL_ERROR_MESSAGE)
        self.assertEqual(len(logs.records), 2)
        self.assertNotIn("password1", "\n".join(logs.output))


if __name__ == "__main__":
    unittest.main()
