from __future__ import annotations

from application.results import AuthResult


def format_auth_reply(result: AuthResult) -> str:
    """Render an auth result as a chat message, shared by all bot front ends."""

    if not result.success:
        return f"{result.message} [{result.code.value}]"

    lines = [result.message, f"User: {result.user.name} (id {result.user.id})"]
    if result.token:
        lines.append(f"Token: {result.token}")
    return "\n".join(lines)
