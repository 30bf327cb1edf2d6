from __future__ import annotations

import pytest

from transition_watch.core.evaluator import (
    classify_recency,
    evaluate_online,
    evaluate_readiness,
    hours_since_heartbeat,
)
from transition_watch.core.models import MonitorConfig, OnlineStatus, RecencyBand, Window

ONLINE_HEX = "6f6e6c696e65"
HASH_1 = "11" * 32
HASH_2 = "22" * 32
NOW = 1_700_000_000_000
HOUR = 3_600_000


def test_offline_without_heartbeat(make_txn, make_validator, monitor_config):
    validator = make_validator("A", 10, [make_txn(block=600, data=HASH_1), make_txn(value=3)])

    status = evaluate_online(validator, monitor_config)

    assert status == OnlineStatus(is_online=False, last_heartbeat_millis=None)


def test_first_heartbeat_in_feed_order_wins(make_txn, make_validator, monitor_config):
    validator = make_validator(
        "A",
        10,
        [
            make_txn(block=700, timestamp=900, data=None),
            make_txn(block=600, timestamp=200, data=ONLINE_HEX),
            make_txn(block=800, timestamp=800, data=ONLINE_HEX),
        ],
    )

    status = evaluate_online(validator, monitor_config)

    assert status.is_online is True
    assert status.last_heartbeat_millis == 200_000



def test_heartbeat_log_includes_decoded_marker(make_txn, make_validator, monitor_config, caplog):
    validator = make_validator("NQ01 A", 10, [make_txn(block=600, data=ONLINE_HEX)])

    with caplog.at_level("DEBUG", logger="transition_watch.core.evaluator"):
        evaluate_online(validator, monitor_config)

    assert "heartbeat_found address=NQ01 A block=600 marker=online" in caplog.text

def test_heartbeat_below_floor_keeps_validator_offline(make_txn, make_validator, monitor_config):
    validator = make_validator("A", 10, [make_txn(block=499, data=ONLINE_HEX)])

    assert evaluate_online(validator, monitor_config).is_online is False


def test_readiness_has_one_entry_per_window(make_txn, make_validator, monitor_config):
    validator = make_validator("A", 10, [make_txn(block=1010, data=HASH_1, hash="vote-1")])

    votes = evaluate_readiness(validator, monitor_config)

    assert len(votes) == 2
    assert votes[0].candidate_value == HASH_1
    assert votes[0].transaction_reference == "vote-1"
    assert votes[0].window == Window(1000, 1099)
    assert votes[1] is None


def test_readiness_first_vote_in_feed_order_wins(make_txn, make_validator, monitor_config):
    validator = make_validator(
        "A",
        10,
        [
            make_txn(block=1090, data=HASH_2, hash="later-block"),
            make_txn(block=1005, data=HASH_1, hash="earlier-block"),
        ],
    )

    votes = evaluate_readiness(validator, monitor_config)

    assert votes[0].candidate_value == HASH_2
    assert votes[0].transaction_reference == "later-block"


def test_readiness_boundary_block_counts_for_overlapping_windows(make_txn, make_validator):
    config = MonitorConfig(
        windows=(Window(1000, 1100), Window(1100, 1200)),
        online_floor_block_height=0,
    )
    validator = make_validator("A", 10, [make_txn(block=1100, data=HASH_1)])

    votes = evaluate_readiness(validator, config)

    assert [vote.candidate_value for vote in votes] == [HASH_1, HASH_1]


def test_hours_since_heartbeat():
    assert hours_since_heartbeat(OnlineStatus(False), NOW) is None
    assert hours_since_heartbeat(OnlineStatus(True, NOW - 2 * HOUR), NOW) == pytest.approx(2.0)


@pytest.mark.parametrize(
    "age, expected",
    [
        (0, RecencyBand.FRESH),
        (3 * HOUR - 1, RecencyBand.FRESH),
        (3 * HOUR, RecencyBand.STALE),
        (5 * HOUR, RecencyBand.STALE),
        (6 * HOUR, RecencyBand.LIKELY_DOWN),
        (48 * HOUR, RecencyBand.LIKELY_DOWN),
    ],
)
def test_classify_recency_bands(age, expected):
    assert classify_recency(OnlineStatus(True, NOW - age), NOW) is expected


def test_classify_recency_custom_thresholds():
    status = OnlineStatus(True, NOW - 2 * HOUR)

    assert classify_recency(status, NOW, fresh_hours=1, stale_hours=4) is RecencyBand.STALE


def test_classify_recency_offline_is_none():
    assert classify_recency(OnlineStatus(False), NOW) is None
