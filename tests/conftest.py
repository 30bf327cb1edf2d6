"""Fixtures compartidas para construir snapshots de prueba.

English:
    Shared fixtures to build test snapshots.
"""

from __future__ import annotations

import itertools
from typing import Any, Callable, Dict, Optional, Sequence

import pytest

from transition_watch.core.models import BURN_ADDRESS, MonitorConfig, Transaction, Validator, Window

ONLINE_HEX = "6f6e6c696e65"
HASH_1 = "11" * 32
HASH_2 = "22" * 32
OTHER_ADDRESS = "NQ12 3456 7890 ABCD EFGH IJKL MNOP QRST"
NOW_MILLIS = 1_700_000_000_000


@pytest.fixture
def monitor_config() -> MonitorConfig:
    return MonitorConfig(
        windows=(Window(start=1000, end=1099), Window(start=1100, end=1199)),
        online_floor_block_height=500,
    )


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    counter = itertools.count(1)

    def _make(
        *,
        to: str = BURN_ADDRESS,
        block: int = 1000,
        timestamp: int = NOW_MILLIS // 1000,
        value: int = 1,
        data: Optional[str] = None,
        hash: Optional[str] = None,
    ) -> Transaction:
        return Transaction(
            hash=hash or f"tx{next(counter):04d}",
            recipient=to,
            block_height=block,
            timestamp_seconds=timestamp,
            value=value,
            payload=data,
        )

    return _make


@pytest.fixture
def make_validator() -> Callable[..., Validator]:
    def _make(
        address: str,
        portion: float,
        transactions: Sequence[Transaction] = (),
        deposit: float = 1_000_000,
        delegated: float = 0,
    ) -> Validator:
        return Validator(
            address=address,
            deposit_stake=deposit,
            delegated_stake=delegated,
            stake_portion=portion,
            transactions=tuple(transactions),
        )

    return _make


@pytest.fixture
def raw_snapshot() -> Dict[str, Any]:
    """Snapshot crudo con la forma del endpoint informativo.

    English: Raw snapshot shaped like the info endpoint response.
    """
    now_seconds = NOW_MILLIS // 1000
    return {
        "consensus": "established",
        "totalStake": 999,
        "validators": [
            {
                "address": "NQ01 AAAA BBBB CCCC DDDD",
                "deposit": 1_000_000,
                "delegatedStake": 4_000_000,
                "portion": 10,
                "transactions": [
                    {
                        "hash": "a-online",
                        "blockNumber": 900,
                        "timestamp": now_seconds - 3600,
                        "to": BURN_ADDRESS,
                        "value": 1,
                        "data": ONLINE_HEX,
                        "fee": 0,
                    },
                    {
                        "hash": "a-ready",
                        "blockNumber": 1010,
                        "timestamp": now_seconds - 60,
                        "to": BURN_ADDRESS,
                        "value": 1,
                        "data": HASH_1,
                    },
                ],
            },
            {
                "address": "NQ02 EEEE FFFF GGGG HHHH",
                "deposit": 2_000_000,
                "delegatedStake": 5_500_000,
                "portion": 15,
                "transactions": [
                    {
                        "hash": "b-ready",
                        "blockNumber": 1020,
                        "timestamp": now_seconds - 120,
                        "to": BURN_ADDRESS,
                        "value": 1,
                        "data": HASH_1,
                    },
                    {
                        "hash": "b-online",
                        "blockNumber": 950,
                        "timestamp": now_seconds - 4 * 3600,
                        "to": BURN_ADDRESS,
                        "value": 1,
                        "data": ONLINE_HEX,
                    },
                ],
            },
            {
                "address": "NQ03 IIII JJJJ KKKK LLLL",
                "deposit": 2_500_000,
                "delegatedStake": 0,
                "portion": 5,
                "transactions": [
                    {
                        "hash": "c-ready",
                        "blockNumber": 1050,
                        "timestamp": now_seconds - 30,
                        "to": BURN_ADDRESS,
                        "value": 1,
                        "data": HASH_2,
                    },
                    {
                        "hash": "c-transfer",
                        "blockNumber": 1060,
                        "timestamp": now_seconds - 10,
                        "to": OTHER_ADDRESS,
                        "value": 1,
                        "data": None,
                    },
                ],
            },
        ],
    }
