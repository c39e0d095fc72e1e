import unittest

from application.validation import validate_signin_input, validate_signup_input


class SignupValidationTests(unittest.TestCase):
    def test_valid_input(self):
        self.assertEqual(validate_signup_input("alice_01", "password1"), [])

    def test_name_length_bounds(self):
        self.assertEqual(
            validate_signup_input("ab", "password1"),
            ["Username must be at least 3 characters"],
        )
        self.assertEqual(validate_signup_input("a" * 50, "password1"), [])
        self.assertEqual(
            validate_signup_input("a" * 51, "password1"),
            ["Username must be at most 50 characters"],
        )

    def test_name_charset(self):
        for name in ("alice!", "al ice", "alice\n", "älice"):
            with self.subTest(name=name):
                self.assertIn(
                    "Username can only contain letters, numbers, and underscores",
                    validate_signup_input(name, "password1"),
                )

    def test_password_length_bounds(self):
        self.assertEqual(
            validate_signup_input("alice", "short"),
            ["Password must be at least 8 characters"],
        )
        self.assertEqual(validate_signup_input("alice", "p" * 100), [])
        self.assertEqual(
            validate_signup_input("alice", "p" * 101),
            ["Password must be at most 100 characters"],
        )

    def test_collects_all_errors(self):
        self.assertEqual(len(validate_signup_input("a!", "x")), 3)


class SigninValidationTests(unittest.TestCase):
    def test_requires_both_fields(self):
        self.assertEqual(
            validate_signin_input("", ""),
            ["Username is required", "Password is required"],
        )

    def test_does_not_apply_signup_format_rules(self):
        self.assertEqual(validate_signin_input("a", "x"), [])


if __name__ == "__main__":
    unittest.main()
