import unittest

from application.results import AuthErrorCode, AuthFailure, AuthSuccess, UserInfo
from interfaces.replies import format_auth_reply
from interfaces.telegram.command_args import command_name, parse_credentials


class CommandNameTests(unittest.TestCase):
    def test_strips_slash_and_bot_suffix(self):
        self.assertEqual(command_name("/signin@MyBot alice pw"), "signin")
        self.assertEqual(command_name("/signup alice pw"), "signup")

    def test_empty_text(self):
        self.assertEqual(command_name(""), "")
        self.assertEqual(command_name(None), "")


class ParseCredentialsTests(unittest.TestCase):
    def test_name_and_password(self):
        self.assertEqual(parse_credentials("/signin alice password1"), ("alice", "password1"))

    def test_password_may_contain_spaces(self):
        self.assertEqual(
            parse_credentials("/signup alice correct horse battery"),
            ("alice", "correct horse battery"),
        )

    def test_missing_arguments(self):
        for text in ("/signin", "/signin alice", "", None, "signin alice pw"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_credentials(text)


class FormatAuthReplyTests(unittest.TestCase):
    def test_failure(self):
        reply = format_auth_reply(
            AuthFailure(message="Invalid username or password", code=AuthErrorCode.INVALID_CREDENTIALS)
        )
        self.assertEqual(reply, "Invalid username or password [INVALID_CREDENTIALS]")

    def test_signup_success_has_no_token_line(self):
        reply = format_auth_reply(
            AuthSuccess(message="User created successfully", user=UserInfo(id="1", name="alice"))
        )
        self.assertEqual(reply, "User created successfully\nUser: alice (id 1)")

    def test_signin_success_includes_token(self):
        reply = format_auth_reply(
            AuthSuccess(message="Login successful", user=UserInfo(id="1", name="alice"), token="abc")
        )
        self.assertTrue(reply.endswith("Token: abc"))


if __name__ == "__main__":
    unittest.main()
