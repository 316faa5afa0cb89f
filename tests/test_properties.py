"""Property-based tests using Hypothesis.

Verifies invariants of the scrolling, list pipeline, and input modules.
Each test runs 50 examples in CI, 200 in dev.

Run:
    pytest tests/test_properties.py -v
    pytest tests/test_properties.py -v --hypothesis-seed=0  # reproducible
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import hypothesis.strategies as st
from hypothesis import given, settings

from gh_triage.inputs import OptionsInput, TextInput
from gh_triage.models import Notification, Repository, Subject
from gh_triage.query import (
    clamp_selected,
    filter_notifications,
    list_height,
    scroll_notifications,
    sort_notifications,
)
from gh_triage.viewport import bounded, viewport

# ── Hypothesis profiles ─────────────────────────────────────────────
settings.register_profile("ci", max_examples=50, deadline=None)
settings.register_profile("dev", max_examples=200, deadline=None)
settings.load_profile("ci")

# ── Custom strategies ────────────────────────────────────────────────

_BASE = datetime(2024, 1, 1, tzinfo=UTC)
_REPOS = ["tj/triage", "tj/other", "apex/up", "apex/apex", "octo/cat"]


@st.composite
def notifications(draw: st.DrawFn) -> Notification:
    repo = draw(st.sampled_from(_REPOS))
    owner, _, name = repo.partition("/")
    return Notification(
        id=str(draw(st.integers(min_value=1, max_value=10_000))),
        reason="mention",
        updated_at=_BASE + timedelta(hours=draw(st.integers(min_value=0, max_value=48))),
        repository=Repository(full_name=repo, name=name, owner=owner),
        subject=Subject(title="t", url="u", type="Issue"),
    )


_KEYS = st.sampled_from(["left", "right", "home", "end", "backspace", "delete", "ctrl+u", "x"])


# ── Viewport ─────────────────────────────────────────────────────────


@given(
    size=st.integers(min_value=0, max_value=60),
    scroll=st.integers(min_value=-20, max_value=100),
    height=st.integers(min_value=-5, max_value=50),
    sticky=st.integers(min_value=0, max_value=12),
)
def test_viewport_never_exceeds_height(size: int, scroll: int, height: int, sticky: int) -> None:
    lines = list(range(size))
    window = viewport(lines, scroll, height, sticky)
    assert len(window) <= max(0, height)
    assert all(line in lines for line in window)


@given(
    size=st.integers(min_value=0, max_value=30),
    start=st.integers(min_value=-50, max_value=50),
    stop=st.integers(min_value=-50, max_value=50),
)
def test_bounded_is_a_contiguous_slice(size: int, start: int, stop: int) -> None:
    items = list(range(size))
    result = bounded(items, start, stop)
    assert result == sorted(result)
    if result:
        assert result == list(range(result[0], result[-1] + 1))


# ── List pipeline ────────────────────────────────────────────────────


@given(
    count=st.integers(min_value=0, max_value=80),
    height=st.integers(min_value=1, max_value=60),
    direction=st.sampled_from([-1, 1]),
    search_visible=st.booleans(),
    data=st.data(),
)
def test_scroll_stays_in_range(
    count: int, height: int, direction: int, search_visible: bool, data: st.DataObject
) -> None:
    selected = data.draw(st.integers(min_value=0, max_value=max(0, count - 1)))
    offset = scroll_notifications(selected, count, height, direction, search_visible)
    assert 0 <= offset <= max(0, list_height(count, search_visible) - height)


@given(
    items=st.lists(notifications(), max_size=20, unique_by=lambda n: n.id),
    text=st.sampled_from(["", "tj", "apex/", "x"]),
)
def test_filter_preserves_order(items: list[Notification], text: str) -> None:
    kept = filter_notifications(items, text)
    positions = [items.index(n) for n in kept]
    assert positions == sorted(positions)
    assert all(text in n.repository.full_name for n in kept)


@given(items=st.lists(notifications(), max_size=20, unique_by=lambda n: n.id))
def test_sort_is_descending_and_stable(items: list[Notification]) -> None:
    ordered = sort_notifications(items)
    assert sorted(ordered, key=lambda n: n.updated_at, reverse=True) == ordered
    for a, b in zip(ordered, ordered[1:], strict=False):
        if a.updated_at == b.updated_at:
            assert items.index(a) <= items.index(b)


@given(selected=st.integers(min_value=-10, max_value=100), count=st.integers(0, 50))
def test_clamp_selected_in_range(selected: int, count: int) -> None:
    result = clamp_selected(selected, count)
    assert 0 <= result <= max(0, count - 1)


# ── Inputs ───────────────────────────────────────────────────────────


@given(text=st.text(max_size=20), keys=st.lists(_KEYS, max_size=30))
def test_text_input_cursor_stays_in_bounds(text: str, keys: list[str]) -> None:
    text_input = TextInput(text, len(text))
    for key in keys:
        text_input = text_input.update(key, key if len(key) == 1 else None)
        assert 0 <= text_input.cursor <= len(text_input.value)


@given(
    size=st.integers(min_value=0, max_value=10),
    keys=st.lists(st.sampled_from(["up", "down", "space"]), max_size=30),
)
def test_options_selection_indexes_exist(size: int, keys: list[str]) -> None:
    options = OptionsInput(tuple(f"label-{i}" for i in range(size)))
    for key in keys:
        options = options.update(key)
    assert all(0 <= i < size for i in options.selected)
    assert len(options.value()) == len(options.selected)
