"""The reducer: ``update(ctx, msg, model) -> (model, commands)``.

Routing happens in two tiers. The active page gets the first look at every
message; a page handler returns ``None`` when the message is not part of its
vocabulary, and the page-independent handler then decides. Anything neither
tier understands is a stale result from a page the user has left and is
dropped unchanged.

The reducer performs no I/O. Work that needs the network is returned as
``Command`` values for the event loop to run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from gh_triage import commands
from gh_triage.action_messages import build_status_error
from gh_triage.commands import QUIT, Command
from gh_triage.inputs import OptionInput, OptionsInput, TextInput
from gh_triage.messages import (
    CommandFailed,
    CommentAdded,
    GotDimensions,
    KeyPressed,
    LabelsLoaded,
    MarkedAsRead,
    Message,
    NotificationCommentsLoaded,
    NotificationIssueLoaded,
    NotificationLabelsLoaded,
    NotificationLabelsUpdated,
    NotificationPriorityUpdated,
    NotificationsLoaded,
    Resized,
    Unsubscribed,
    Unwatched,
)
from gh_triage.models import Notification
from gh_triage.query import (
    clamp_selected,
    filter_priority_labels,
    label_names,
    labels_selected,
    list_height,
    notifications_by_repo,
    remove_notification,
    scroll_notifications,
    sort_notifications,
    visible_notifications,
)
from gh_triage.services.interfaces import AppContext
from gh_triage.state import Model, Page
from gh_triage.view import body_height, clamp_notification_scroll
from gh_triage.viewport import clamp_scroll

logger = logging.getLogger(__name__)

Result = tuple[Model, list[Command]]
PageHandler = Callable[[AppContext, Message, Model], "Result | None"]


def _is_quit_key(msg: KeyPressed) -> bool:
    return msg.key == "escape" or msg.rune == "q"


def _is_current(model: Model, notification_id: str) -> bool:
    """Whether a detail-page result belongs to the notification on screen."""
    return model.notification is not None and model.notification.id == notification_id


def _visible(model: Model) -> list[Notification]:
    return visible_notifications(model.notifications, model.search_text)


def _clamp_list(model: Model) -> Model:
    """Re-clamp selection and list scroll after the list or its filter changed."""
    count = len(_visible(model))
    total = list_height(count, model.search_visible)
    return replace(
        model,
        selected=clamp_selected(model.selected, count),
        notifications_scroll=clamp_scroll(
            model.notifications_scroll, total, body_height(model)
        ),
    )


def _open_notification(model: Model, notification: Notification) -> Result:
    model = replace(
        model,
        page=Page.NOTIFICATION,
        notification=notification,
        notification_scroll=0,
        issue=None,
        labels=(),
        comments=(),
        loading_issue=True,
        loading_labels=True,
        loading_comments=True,
    )
    return model, [commands.load_notification_issue(notification)]


# -- notifications page --------------------------------------------------------


def _update_search(model: Model, msg: KeyPressed) -> Result:
    if msg.key == "escape":
        return _clamp_list(replace(model, searching=False, search=TextInput())), []
    if msg.key in ("enter", "down"):
        return replace(model, searching=False), []
    search = model.search.update(msg.key, msg.character)
    return replace(model, search=search, selected=0, notifications_scroll=0), []


def _update_notifications(ctx: AppContext, msg: Message, model: Model) -> Result | None:
    if isinstance(msg, NotificationsLoaded):
        model = replace(
            model, notifications=tuple(sort_notifications(msg.notifications)), loading=False
        )
        return _clamp_list(model), []

    if not isinstance(msg, KeyPressed):
        return None
    if model.searching:
        return _update_search(model, msg)
    if model.loading:
        return None

    key, rune = msg.key, msg.rune
    visible = _visible(model)

    if not visible:
        if rune == "R":
            return replace(model, loading=True), [commands.load_notifications()]
        if rune == "/":
            return replace(model, searching=True), []
        if key == "escape" and model.search_text:
            return _clamp_list(replace(model, search=TextInput())), []
        return model, [QUIT]

    count = len(visible)
    height = body_height(model)
    selected = clamp_selected(model.selected, count)
    notification = visible[selected]

    if key == "up":
        searching = model.searching
        if selected > 0:
            selected -= 1
        elif model.search_text:
            searching = True
        scroll = scroll_notifications(selected, count, height, 1, model.search_visible)
        return replace(
            model, selected=selected, searching=searching, notifications_scroll=scroll
        ), []
    if key == "down":
        selected = min(selected + 1, count - 1)
        scroll = scroll_notifications(selected, count, height, -1, model.search_visible)
        return replace(model, selected=selected, notifications_scroll=scroll), []
    if key in ("enter", "right"):
        return _open_notification(replace(model, selected=selected), notification)

    if key == "backspace" or rune in ("r", "u", "U"):
        if model.busy:
            logger.debug("Ignoring %r while an action is in flight", key)
            return model, []
        model = replace(model, in_flight_id=notification.id)
        if rune == "u":
            return replace(model, unsubscribing=True), [commands.unsubscribe(notification)]
        if rune == "U":
            owner = notification.repository.owner
            repo = notification.repository.name
            batch = [commands.unwatch(owner, repo)]
            batch.extend(
                commands.mark_as_read(n)
                for n in notifications_by_repo(model.notifications, owner, repo)
            )
            return replace(model, unwatching=True), batch
        return replace(model, marking_as_read=True), [commands.mark_as_read(notification)]

    if rune == "o":
        return model, [commands.open_in_browser(notification)]
    if rune == "R":
        return replace(model, loading=True), [commands.load_notifications()]
    if rune == "/":
        return replace(model, searching=True), []
    if key == "escape" and model.search_text:
        return _clamp_list(replace(model, search=TextInput())), []
    return None


# -- notification page ---------------------------------------------------------


def _update_notification(ctx: AppContext, msg: Message, model: Model) -> Result | None:
    notification = model.notification
    if notification is None:
        return None

    if isinstance(msg, NotificationIssueLoaded):
        if not _is_current(model, msg.notification_id):
            return model, []
        model = replace(model, issue=msg.issue, loading_issue=False)
        return model, [
            commands.load_notification_labels(notification, msg.issue),
            commands.load_notification_comments(notification, msg.issue),
        ]
    if isinstance(msg, NotificationLabelsLoaded):
        if not _is_current(model, msg.notification_id):
            return model, []
        return replace(model, labels=msg.labels, loading_labels=False), []
    if isinstance(msg, NotificationCommentsLoaded):
        if not _is_current(model, msg.notification_id):
            return model, []
        return replace(model, comments=msg.comments, loading_comments=False), []
    if isinstance(msg, (NotificationLabelsUpdated, NotificationPriorityUpdated)):
        if not _is_current(model, msg.notification_id) or model.issue is None:
            return model, []
        return replace(model, loading_labels=True), [
            commands.load_notification_labels(notification, model.issue)
        ]
    if isinstance(msg, CommentAdded):
        if not _is_current(model, msg.notification_id) or model.issue is None:
            return model, []
        return replace(model, loading_comments=True), [
            commands.load_notification_comments(notification, model.issue)
        ]

    if not isinstance(msg, KeyPressed):
        return None

    key, rune = msg.key, msg.rune
    step = model.height // 4

    if key == "left":
        return replace(model, page=Page.NOTIFICATIONS, notification_scroll=0), []
    if key == "up":
        scroll = clamp_notification_scroll(ctx, model, model.notification_scroll - step)
        return replace(model, notification_scroll=scroll), []
    if key == "down":
        scroll = clamp_notification_scroll(ctx, model, model.notification_scroll + step)
        return replace(model, notification_scroll=scroll), []

    if key == "backspace" or rune in ("r", "u"):
        if model.busy:
            return model, []
        model = replace(model, in_flight_id=notification.id)
        if key == "backspace":
            model = replace(model, page=Page.NOTIFICATIONS, marking_as_read=True)
            return model, [commands.mark_as_read(notification)]
        if rune == "r":
            return replace(model, marking_as_read=True), [commands.mark_as_read(notification)]
        return replace(model, unsubscribing=True), [commands.unsubscribe(notification)]

    if rune == "o":
        return model, [commands.open_in_browser(notification)]
    if rune == "R":
        return _open_notification(model, notification)

    if rune in ("l", "p", "c"):
        if model.issue is None:
            return model, []
        if rune == "l":
            model = replace(
                model,
                page=Page.LABELS,
                loading=True,
                loading_labels=True,
                repo_labels=(),
                label_options=OptionsInput(),
            )
            return model, [commands.load_repo_labels(notification)]
        if rune == "p":
            options = OptionInput(options=tuple(p.name for p in ctx.config.priorities))
            return replace(model, page=Page.PRIORITIES, priority_options=options), []
        return replace(model, page=Page.COMMENT, comment=TextInput()), []
    return None


# -- labels page ---------------------------------------------------------------


def _update_labels(ctx: AppContext, msg: Message, model: Model) -> Result | None:
    notification, issue = model.notification, model.issue
    if notification is None or issue is None:
        return None

    if isinstance(msg, LabelsLoaded):
        if not _is_current(model, msg.notification_id):
            return model, []
        repo_labels = tuple(filter_priority_labels(msg.labels, ctx.config.priorities))
        model = replace(model, repo_labels=repo_labels, loading=False)
        return model, [commands.load_notification_labels(notification, issue)]
    if isinstance(msg, NotificationLabelsLoaded):
        if not _is_current(model, msg.notification_id):
            return model, []
        options = OptionsInput(
            options=tuple(label_names(model.repo_labels)),
            selected=labels_selected(model.repo_labels, msg.labels),
        )
        return replace(model, label_options=options, labels=msg.labels, loading_labels=False), []

    if not isinstance(msg, KeyPressed):
        return None

    if msg.key == "enter":
        if model.loading or model.loading_labels:
            # Options are not built yet; saving now would strip every label
            model = replace(model, page=Page.NOTIFICATION, loading=False, loading_labels=False)
            return model, []
        names = model.label_options.value()
        model = replace(model, page=Page.NOTIFICATION, label_options=OptionsInput())
        return model, [commands.update_notification_labels(notification, issue, names)]
    if msg.key == "escape":
        model = replace(
            model,
            page=Page.NOTIFICATION,
            label_options=OptionsInput(),
            loading=False,
            loading_labels=False,
        )
        return model, []
    return replace(model, label_options=model.label_options.update(msg.key, msg.character)), []


# -- priorities page -----------------------------------------------------------


def _update_priorities(ctx: AppContext, msg: Message, model: Model) -> Result | None:
    notification, issue = model.notification, model.issue
    if notification is None or issue is None or not isinstance(msg, KeyPressed):
        return None

    if msg.key == "enter":
        name = model.priority_options.value()
        model = replace(model, page=Page.NOTIFICATION, priority_options=OptionInput())
        if not name:
            return model, []
        return model, [commands.update_notification_priority(notification, issue, name)]
    if msg.key == "escape":
        return replace(model, page=Page.NOTIFICATION, priority_options=OptionInput()), []
    options = model.priority_options.update(msg.key, msg.character)
    return replace(model, priority_options=options), []


# -- comment page --------------------------------------------------------------


def _update_comment(ctx: AppContext, msg: Message, model: Model) -> Result | None:
    notification, issue = model.notification, model.issue
    if notification is None or issue is None or not isinstance(msg, KeyPressed):
        return None

    if msg.key == "enter":
        body = model.comment.value
        model = replace(model, page=Page.NOTIFICATION, comment=TextInput())
        if not body.strip():
            return model, []
        return model, [commands.add_comment(notification, issue, body)]
    if msg.key == "escape":
        return replace(model, page=Page.NOTIFICATION, comment=TextInput()), []
    return replace(model, comment=model.comment.update(msg.key, msg.character)), []


# -- page-independent ----------------------------------------------------------


def _removed(model: Model, notification_id: str, **flags: bool) -> Model:
    model = replace(
        model,
        page=Page.NOTIFICATIONS,
        notifications=remove_notification(model.notifications, notification_id),
        notification_scroll=0,
        **flags,
    )
    return _clamp_list(model)


def _failed(model: Model, msg: CommandFailed) -> Model:
    """Report a failure and release only the flags its command owned."""
    model = replace(model, status=build_status_error(msg.action, msg.error))
    if msg.notification_id is not None:
        if model.page is Page.NOTIFICATIONS or not _is_current(model, msg.notification_id):
            logger.debug("Dropping flags of stale failure: %s", msg.action)
            return model
    model = replace(model, **dict.fromkeys(msg.clears, False))
    if model.page is Page.LABELS and "loading_labels" in msg.clears:
        # Without the label list there is nothing to edit
        model = replace(model, page=Page.NOTIFICATION, label_options=OptionsInput())
    return model


def _update_shared(ctx: AppContext, msg: Message, model: Model) -> Result:
    if isinstance(msg, GotDimensions):
        model = replace(model, width=msg.width, height=msg.height, loading=True)
        return model, [commands.load_notifications()]
    if isinstance(msg, Resized):
        model = _clamp_list(replace(model, width=msg.width, height=msg.height))
        if model.notification is not None:
            scroll = clamp_notification_scroll(ctx, model, model.notification_scroll)
            model = replace(model, notification_scroll=scroll)
        return model, []
    if isinstance(msg, MarkedAsRead):
        return _removed(model, msg.notification.id, marking_as_read=False), []
    if isinstance(msg, Unsubscribed):
        return _removed(model, msg.notification.id, unsubscribing=False), []
    if isinstance(msg, Unwatched):
        model = replace(model, page=Page.NOTIFICATIONS, unwatching=False, notification_scroll=0)
        return _clamp_list(model), []
    if isinstance(msg, CommandFailed):
        return _failed(model, msg), []
    if isinstance(msg, KeyPressed) and _is_quit_key(msg):
        return model, [QUIT]
    return model, []


PAGE_HANDLERS: dict[Page, PageHandler] = {
    Page.NOTIFICATIONS: _update_notifications,
    Page.NOTIFICATION: _update_notification,
    Page.LABELS: _update_labels,
    Page.PRIORITIES: _update_priorities,
    Page.COMMENT: _update_comment,
}


def update(ctx: AppContext, msg: Message, model: Model) -> Result:
    """Apply one message to the model.

    Returns the new model and the commands to run. The input model is never
    modified.
    """
    if isinstance(msg, KeyPressed) and model.status:
        model = replace(model, status="")
    result = PAGE_HANDLERS[model.page](ctx, msg, model)
    if result is not None:
        return result
    return _update_shared(ctx, msg, model)


__all__ = [
    "PAGE_HANDLERS",
    "update",
]
