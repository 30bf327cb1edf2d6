"""Predicados puros para clasificar transacciones de señalización.

English:
    Pure predicates that classify signaling transactions.
"""

from __future__ import annotations

import binascii
import string
from typing import Optional

from transition_watch.core.models import BURN_ADDRESS, Transaction, Window

ONLINE_MARKER_HEX = b"online".hex()
SIGNAL_VALUE = 1
CANDIDATE_HEX_LENGTH = 64

_HEX_CHARS = frozenset(string.hexdigits)


def _is_hex(value: str) -> bool:
    return all(char in _HEX_CHARS for char in value)


def decode_payload(payload: Optional[str]) -> Optional[str]:
    """Decodifica un payload hexadecimal a texto ASCII.

    English: Decode a hex payload into ASCII text, ``None`` if impossible.
    """
    if not isinstance(payload, str) or len(payload) % 2:
        return None
    try:
        return binascii.unhexlify(payload).decode("ascii")
    except (binascii.Error, UnicodeDecodeError):
        return None


def _is_signal(txn: Transaction, burn_address: str) -> bool:
    return txn.recipient == burn_address and txn.value == SIGNAL_VALUE


def is_heartbeat(
    txn: Transaction,
    min_block_height: int,
    burn_address: str = BURN_ADDRESS,
) -> bool:
    """Indica si la transacción es un heartbeat "online".

    El payload debe comenzar con la codificación hex de ``online``; las
    transacciones por debajo de ``min_block_height`` se ignoran.

    English:
        Tell whether the transaction is an "online" heartbeat.

        The payload must start with the hex encoding of ``online``;
        transactions below ``min_block_height`` are ignored.
    """
    if not _is_signal(txn, burn_address) or txn.block_height < min_block_height:
        return False
    payload = txn.payload
    if not isinstance(payload, str):
        return False
    return payload.lower().startswith(ONLINE_MARKER_HEX)


def is_readiness_vote(
    txn: Transaction,
    window: Window,
    burn_address: str = BURN_ADDRESS,
) -> bool:
    """Indica si la transacción es un voto de preparación dentro de la ventana.

    English:
        Tell whether the transaction is a readiness vote inside the window.
    """
    if not _is_signal(txn, burn_address) or not window.contains(txn.block_height):
        return False
    payload = txn.payload
    if not isinstance(payload, str) or len(payload) != CANDIDATE_HEX_LENGTH:
        return False
    return _is_hex(payload)
