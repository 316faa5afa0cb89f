"""Turns the model into the styled frame shown on screen.

The frame is a list of ``rich.text.Text`` lines cut to the terminal height
with ``viewport``. The last ``MENU_HEIGHT`` rows of the terminal belong to
the status line and the footer widget, so pages are windowed to
``body_height(model)`` rows.
"""

from __future__ import annotations

from datetime import datetime

from rich.emoji import Emoji
from rich.style import Style
from rich.text import Text

from gh_triage.action_messages import build_in_flight_status
from gh_triage.inputs import OptionInput, OptionsInput, TextInput
from gh_triage.markdown import render_markdown
from gh_triage.parsing import format_relative_time
from gh_triage.query import visible_notifications
from gh_triage.services.interfaces import AppContext
from gh_triage.state import Model, Page
from gh_triage.themes import THEME_COLORS
from gh_triage.ui_constants import (
    COMMENT_SHORTCUTS,
    LABELS_SHORTCUTS,
    NOTIFICATION_SHORTCUTS,
    NOTIFICATIONS_SHORTCUTS,
    PRIORITIES_SHORTCUTS,
    SEARCHING_SHORTCUTS,
)
from gh_triage.viewport import clamp_scroll, viewport

# Status line + footer
MENU_HEIGHT = 2

INDENT = "    "
HR_WIDTH = 90

# Sticky header rows on the list page when the search line is shown
SEARCH_STICKY = 3

# Sticky header rows on the detail page, without and with label chips
DETAIL_STICKY = 7
DETAIL_STICKY_WITH_LABELS = 8

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def body_height(model: Model) -> int:
    """Rows available to the page above the status line and footer."""
    return max(0, model.height - MENU_HEIGHT)


def _blank() -> Text:
    return Text()


def _hr() -> Text:
    return Text(INDENT + "─" * HR_WIDTH, style=THEME_COLORS["rule"])


def _indent(lines: tuple[Text, ...] | list[Text]) -> list[Text]:
    return [Text(INDENT) + line for line in lines]


def _centered(model: Model, message: str) -> list[Text]:
    lines = [_blank() for _ in range(max(0, model.height // 2 - 1))]
    x = max(0, model.width // 2 - len(message) // 2)
    lines.append(Text(" " * x + message))
    return lines


def _loading(model: Model) -> list[Text]:
    if model.height == 0:
        return []
    return _centered(model, "Loading")


def _valid_hex(color: str) -> bool:
    return len(color) == 6 and all(c in HEX_DIGITS for c in color)


def render_text_input(text_input: TextInput, *, focused: bool = True) -> Text:
    """Render a text buffer, highlighting the cursor cell when focused."""
    value = text_input.value
    if not focused:
        return Text(value)
    cursor = max(0, min(text_input.cursor, len(value)))
    rendered = Text(value[:cursor])
    rendered.append(value[cursor : cursor + 1] or " ", style="reverse")
    rendered.append(value[cursor + 1 :])
    return rendered


def render_options_input(options: OptionsInput) -> list[Text]:
    lines = []
    accent = THEME_COLORS["accent"]
    for i, name in enumerate(options.options):
        marker = "◉" if i in options.selected else "○"
        if i == options.cursor:
            lines.append(Text(f"  ❯ {marker} {name}", style=f"bold {accent}"))
        else:
            lines.append(Text(f"    {marker} {name}"))
    return lines


def render_option_input(option: OptionInput) -> list[Text]:
    lines = []
    accent = THEME_COLORS["accent"]
    for i, name in enumerate(option.options):
        if i == option.cursor:
            lines.append(Text(f"  ❯ {name}", style=f"bold {accent}"))
        else:
            lines.append(Text(f"    {name}"))
    return lines


def render_label_chips(model: Model) -> Text:
    """Colored chips for the issue's labels; labels with bad colors are skipped."""
    chips = Text(INDENT)
    for label in model.labels:
        if not _valid_hex(label.color):
            continue
        chips.append(
            f" {Emoji.replace(label.name)} ",
            style=Style(color="black", bgcolor=f"#{label.color}"),
        )
        chips.append(" ")
    return chips


# -- notifications page --------------------------------------------------------


def notifications_lines(model: Model, now: datetime | None = None) -> tuple[list[Text], int]:
    """Lines of the list page and the number of sticky header rows."""
    if model.loading:
        return _loading(model), 0
    if not model.notifications:
        return _centered(model, "Looks like you're all done 😊"), 0

    lines = [_blank()]
    sticky = 0
    if model.search_visible:
        search = Text("  Searching: ")
        search.append_text(render_text_input(model.search, focused=model.searching))
        lines.extend([search, _blank()])
        sticky = SEARCH_STICKY

    in_flight = build_in_flight_status(
        marking_as_read=model.marking_as_read,
        unsubscribing=model.unsubscribing,
        unwatching=model.unwatching,
    )
    for i, notification in enumerate(visible_notifications(model.notifications, model.search_text)):
        selected = i == model.selected
        repo = Text("  * " if selected else INDENT)
        repo.append(notification.repository.full_name, style="bold")
        lines.append(repo)

        if in_flight and notification.id == model.in_flight_id:
            lines.append(Text(INDENT + in_flight, style=THEME_COLORS["green"]))
            lines.extend([_blank(), _blank()])
            continue

        lines.append(Text(INDENT + notification.subject.title))
        updated = format_relative_time(notification.updated_at, now)
        lines.append(Text(f"{INDENT}Updated {updated} ({notification.reason})"))
        lines.append(_blank())
    lines.append(_blank())
    return lines, sticky


# -- notification page ---------------------------------------------------------


def _markdown_width(model: Model) -> int:
    return min(HR_WIDTH, max(0, model.width - 2 * len(INDENT)))


def notification_lines(
    ctx: AppContext, model: Model, now: datetime | None = None
) -> tuple[list[Text], int]:
    """Lines of the detail page and the number of sticky header rows."""
    notification = model.notification
    if notification is None:
        return [], 0
    issue = model.issue

    lines = [_blank()]
    repo = Text(INDENT)
    repo.append(notification.repository.full_name, style="bold")
    lines.append(repo)
    lines.append(Text(INDENT + notification.subject.title))
    if issue is None:
        lines.append(_blank())
    else:
        opened = format_relative_time(issue.created_at, now)
        lines.append(Text(f"{INDENT}Opened {opened} by @{issue.user.login}"))

    pending = ""
    if model.loading_issue:
        pending = "Loading"
    elif model.marking_as_read:
        pending = "Marking as read"
    elif model.unsubscribing:
        pending = "Unsubscribing"
    elif model.unwatching:
        pending = "Unwatching"
    if pending:
        lines.extend([_blank(), _hr(), _blank(), Text(INDENT + pending)])
        return lines, DETAIL_STICKY

    sticky = DETAIL_STICKY
    if model.labels:
        lines.append(render_label_chips(model))
        sticky = DETAIL_STICKY_WITH_LABELS

    lines.extend([_blank(), _hr(), _blank()])
    theme = ctx.config.code_theme
    width = _markdown_width(model)
    body = issue.body if issue is not None else ""
    if body.strip():
        lines.extend(_indent(render_markdown(body, theme, width)))
    else:
        lines.append(Text(INDENT + "No description provided."))

    lines.extend([_blank(), _hr()])
    for i, comment in enumerate(model.comments):
        lines.append(_blank())
        author = Text(INDENT)
        author.append(f"@{comment.user.login}", style="bold")
        author.append(f" {format_relative_time(comment.created_at, now)}")
        lines.extend([author, _blank()])
        lines.extend(_indent(render_markdown(comment.body, theme, width)))
        if i < len(model.comments) - 1:
            lines.append(_hr())
    lines.append(_blank())
    return lines, sticky


def clamp_notification_scroll(ctx: AppContext, model: Model, offset: int) -> int:
    lines, sticky = notification_lines(ctx, model)
    return clamp_scroll(offset, len(lines) - sticky, max(0, body_height(model) - sticky))


# -- input pages ---------------------------------------------------------------


def labels_lines(model: Model) -> list[Text]:
    if model.loading or model.loading_labels:
        return _loading(model)
    lines = [_blank(), Text("  Press space to select labels:"), _blank()]
    lines.extend(render_options_input(model.label_options))
    return lines


def priorities_lines(model: Model) -> list[Text]:
    lines = [_blank(), Text("  Select a priority:"), _blank()]
    lines.extend(render_option_input(model.priority_options))
    return lines


def comment_lines(model: Model) -> list[Text]:
    prompt = Text("  ")
    prompt.append_text(render_text_input(model.comment))
    return [_blank(), Text("  Press enter to save your comment:"), _blank(), prompt]


# -- frame ---------------------------------------------------------------------


def page_lines(ctx: AppContext, model: Model, now: datetime | None = None) -> list[Text]:
    """The visible body rows of the current page."""
    height = body_height(model)
    if model.page is Page.NOTIFICATIONS:
        lines, sticky = notifications_lines(model, now)
        return viewport(lines, model.notifications_scroll, height, sticky)
    if model.page is Page.NOTIFICATION:
        lines, sticky = notification_lines(ctx, model, now)
        return viewport(lines, model.notification_scroll, height, sticky)
    if model.page is Page.LABELS:
        return viewport(labels_lines(model), 0, height)
    if model.page is Page.PRIORITIES:
        return viewport(priorities_lines(model), 0, height)
    if model.page is Page.COMMENT:
        return viewport(comment_lines(model), 0, height)
    raise ValueError(f"unhandled page: {model.page!r}")


def status_line(model: Model) -> Text:
    if not model.status:
        return _blank()
    return Text(f"  {model.status}", style=f"bold {THEME_COLORS['pink']}")


def render(ctx: AppContext, model: Model, now: datetime | None = None) -> Text:
    """Render the body frame: the page padded to height, then the status line."""
    if model.height == 0:
        return Text()
    lines = page_lines(ctx, model, now)
    lines.extend(_blank() for _ in range(body_height(model) - len(lines)))
    lines.append(status_line(model))
    return Text("\n").join(lines)


def shortcuts(model: Model) -> list[tuple[str, str]]:
    """Footer key hints for the current page."""
    if model.page is Page.NOTIFICATIONS:
        return SEARCHING_SHORTCUTS if model.searching else NOTIFICATIONS_SHORTCUTS
    if model.page is Page.NOTIFICATION:
        return NOTIFICATION_SHORTCUTS
    if model.page is Page.LABELS:
        return LABELS_SHORTCUTS
    if model.page is Page.PRIORITIES:
        return PRIORITIES_SHORTCUTS
    return COMMENT_SHORTCUTS


__all__ = [
    "MENU_HEIGHT",
    "body_height",
    "clamp_notification_scroll",
    "notification_lines",
    "notifications_lines",
    "page_lines",
    "render",
    "render_text_input",
    "shortcuts",
    "status_line",
]
