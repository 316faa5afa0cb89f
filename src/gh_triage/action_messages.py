"""User-facing copy builders for errors and in-flight status lines."""

from __future__ import annotations


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_status_error(action: str, error: str) -> str:
    """Build the single-line failure shown above the footer."""
    line = f"Could not {action.strip()}"
    if error.strip():
        line = f"{line}: {error.strip()}"
    return f"{_ensure_sentence(line)} Press R to retry."


def build_in_flight_status(*, marking_as_read: bool, unsubscribing: bool, unwatching: bool) -> str:
    """Status text shown in place of the selected item while an action runs."""
    if marking_as_read:
        return "Marking as read."
    if unsubscribing:
        return "Unsubscribing."
    if unwatching:
        return "Unwatching."
    return ""


__all__ = [
    "build_actionable_error",
    "build_in_flight_status",
    "build_next_step_hint",
    "build_status_error",
]
