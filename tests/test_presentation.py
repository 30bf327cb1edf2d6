from __future__ import annotations

import pytest

from transition_watch.core.models import (
    RankedCandidate,
    ReadinessVote,
    Window,
    WindowRanking,
)
from transition_watch.core.processor import process_snapshot
from transition_watch.presentation import (
    ReadinessCell,
    luna_to_nim,
    online_line,
    popularity_lines,
    pretty_number,
    readiness_cell,
    render_text,
    short_candidate,
    shorten_address,
)
from transition_watch.schemas import parse_snapshot

H1 = "11" * 32
H2 = "22" * 32
NOW = 1_700_000_000_000
W1 = Window(1000, 1099)


def test_shorten_address():
    assert shorten_address("NQ07 ABCD EFGH 1234") == "NQ07...1234"
    assert shorten_address("single") == "single...single"


@pytest.mark.parametrize(
    "number, expected",
    [(0, "0"), (999.4, "999"), (1234.5, "1'235"), (1_234_567, "1'234'567")],
)
def test_pretty_number(number, expected):
    assert pretty_number(number) == expected


def test_luna_to_nim():
    assert luna_to_nim(150_000_000) == "1'500"


def test_short_candidate():
    value = "abcd" + "0" * 56 + "wxyz"

    assert short_candidate(value) == "abcd...wxyz"


def test_readiness_cell_states():
    ranking = WindowRanking(W1, (RankedCandidate(H1, 25), RankedCandidate(H2, 5)))

    assert readiness_cell(None, ranking) is ReadinessCell.NOT_READY
    assert readiness_cell(ReadinessVote(W1, H1, "t1"), ranking) is ReadinessCell.LEADING
    assert readiness_cell(ReadinessVote(W1, H2, "t2"), ranking) is ReadinessCell.DISSENTING


@pytest.fixture
def report(raw_snapshot, monitor_config):
    return process_snapshot(parse_snapshot(raw_snapshot), monitor_config, now_millis=NOW)


def test_online_line(report):
    fresh, stale, offline = report.validators

    assert online_line(fresh).startswith("NQ01...DDDD with a stake of 50 NIM (10.00%) was online 1.0h ago")
    assert "online (stale) 4.0h ago" in online_line(stale)
    assert online_line(offline).endswith("is offline")


def test_popularity_lines_use_last_window_with_votes(report):
    assert popularity_lines(report) == [f"{H1[:50]}... with 25.00%", f"{H2[:50]}... with 5.00%"]


def test_render_text_hides_online_section_once_votes_exist(report):
    text = render_text(report)

    assert "Consensus: established" in text
    assert "Total stake: 150 NIM" in text
    assert "Online:" not in text
    assert "Ready: 25.00%" in text
    assert "Validator | #1000 - #1099 | #1100 - #1199" in text
    assert "NQ03...LLLL (5.00%) | 2222...2222 ! | Not ready" in text
    assert "NQ01...DDDD (10.00%) | 1111...1111 * | Not ready" in text


def test_render_text_can_force_online_section(report):
    text = render_text(report, show_online=True)

    assert "Online: 10.00%" in text
    assert "NQ03...LLLL with a stake of 25 NIM (5.00%) is offline" in text
