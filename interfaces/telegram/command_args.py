from __future__ import annotations


def command_name(text: str) -> str:
    """
    Return the bare command of a message.

    "/signin@MyBot alice pw" -> "signin"
    """

    parts = (text or "").split(maxsplit=1)
    if not parts:
        return ""
    return parts[0].lstrip("/").split("@")[0]


def parse_credentials(text: str) -> tuple[str, str]:
    """
    Parse a credential command.

    Format: /{command} {name} {password}

    The password is everything after the name, so it may contain spaces.
    """

    parts = (text or "").strip().split(maxsplit=2)
    if len(parts) != 3 or not parts[0].startswith("/"):
        raise ValueError("Expected: /<command> <name> <password>")

    name = parts[1]
    password = parts[2]
    return name, password
