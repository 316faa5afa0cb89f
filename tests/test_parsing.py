"""Tests for GitHub payload parsing and time formatting."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from gh_triage.parsing import (
    EPOCH,
    format_relative_time,
    parse_comment,
    parse_issue,
    parse_label,
    parse_list,
    parse_notification,
    parse_repository,
    parse_timestamp,
)


class TestParseTimestamp:
    def test_zulu_suffix(self) -> None:
        assert parse_timestamp("2024-01-15T10:00:00Z") == datetime(2024, 1, 15, 10, tzinfo=UTC)

    def test_offset_is_kept(self) -> None:
        parsed = parse_timestamp("2024-01-15T10:00:00+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)

    def test_naive_is_assumed_utc(self) -> None:
        assert parse_timestamp("2024-01-15T10:00:00").tzinfo is UTC

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", 12345])
    def test_invalid_values_map_to_epoch(self, value) -> None:
        assert parse_timestamp(value) == EPOCH


class TestFormatRelativeTime:
    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            (timedelta(seconds=30), "now"),
            (timedelta(minutes=1), "1 minute ago"),
            (timedelta(minutes=5), "5 minutes ago"),
            (timedelta(hours=3), "3 hours ago"),
            (timedelta(days=1), "1 day ago"),
            (timedelta(days=15), "2 weeks ago"),
            (timedelta(days=65), "2 months ago"),
            (timedelta(days=800), "2 years ago"),
        ],
    )
    def test_past(self, now, delta, expected) -> None:
        assert format_relative_time(now - delta, now) == expected

    def test_future(self, now) -> None:
        assert format_relative_time(now + timedelta(hours=2), now) == "2 hours from now"

    def test_mixed_offsets(self, now) -> None:
        plus_two = timezone(timedelta(hours=2))
        when = (now - timedelta(hours=1)).astimezone(plus_two)
        assert format_relative_time(when, now) == "1 hour ago"


class TestParsers:
    def test_notification(self) -> None:
        payload = {
            "id": 99,
            "reason": "review_requested",
            "unread": False,
            "updated_at": "2024-01-15T10:00:00Z",
            "repository": {"name": "up", "full_name": "apex/up", "owner": {"login": "apex"}},
            "subject": {
                "title": "Add flag",
                "url": "https://api.github.com/repos/apex/up/pulls/3",
                "type": "PullRequest",
                "latest_comment_url": None,
            },
        }
        notification = parse_notification(payload)
        assert notification.id == "99"
        assert notification.reason == "review_requested"
        assert not notification.unread
        assert notification.repository.full_name == "apex/up"
        assert notification.subject.type == "PullRequest"
        assert notification.subject.latest_comment_url == ""

    def test_notification_missing_fields(self) -> None:
        notification = parse_notification({})
        assert notification.id == ""
        assert notification.updated_at == EPOCH
        assert notification.repository.full_name == ""

    def test_repository_full_name_fallback(self) -> None:
        repo = parse_repository({"name": "up", "owner": {"login": "apex"}})
        assert repo.full_name == "apex/up"

    def test_issue_with_null_body(self) -> None:
        issue = parse_issue({"number": 3, "title": "T", "body": None, "user": None})
        assert issue.body == ""
        assert issue.user.login == ""
        assert issue.state == "open"

    def test_label_strips_hash(self) -> None:
        label = parse_label({"id": 5, "name": "bug", "color": "#d73a4a"})
        assert label.color == "d73a4a"
        assert label.description == ""

    def test_comment(self) -> None:
        comment = parse_comment(
            {
                "id": 1,
                "body": "hi",
                "user": {"login": "hubot"},
                "created_at": "2024-01-15T10:00:00Z",
            }
        )
        assert comment.user.login == "hubot"
        assert comment.created_at.year == 2024

    def test_parse_list_skips_non_objects(self) -> None:
        labels = parse_list([{"id": 1, "name": "a", "color": "fff000"}, 3, None], parse_label, "x")
        assert [label.name for label in labels] == ["a"]

    def test_parse_list_non_list_payload(self) -> None:
        assert parse_list({"message": "nope"}, parse_label, "x") == []
        assert parse_list(None, parse_label, "x") == []
