"""Evaluación por validador: estado online y votos por ventana.

English:
    Per-validator evaluation: online status and per-window votes.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from transition_watch.core.classifier import decode_payload, is_heartbeat, is_readiness_vote
from transition_watch.core.models import (
    MonitorConfig,
    OnlineStatus,
    ReadinessVote,
    RecencyBand,
    Validator,
)

logger = logging.getLogger(__name__)

MILLIS_PER_HOUR = 3_600_000


def evaluate_online(validator: Validator, config: MonitorConfig) -> OnlineStatus:
    """Determina si el validador envió algún heartbeat válido.

    Se toma la primera transacción que califica en el orden del feed, no la
    más reciente.

    English:
        Determine whether the validator sent any qualifying heartbeat.

        The first qualifying transaction in feed order is used, not the
        most recent one.
    """
    for txn in validator.transactions:
        if is_heartbeat(txn, config.online_floor_block_height, config.burn_address):
            logger.debug(
                "heartbeat_found address=%s block=%s marker=%s",
                validator.address,
                txn.block_height,
                decode_payload(txn.payload),
            )
            return OnlineStatus(is_online=True, last_heartbeat_millis=txn.timestamp_seconds * 1000)
    return OnlineStatus(is_online=False)


def evaluate_readiness(
    validator: Validator, config: MonitorConfig
) -> Tuple[Optional[ReadinessVote], ...]:
    """Devuelve un voto (o ``None``) por ventana, en el orden configurado.

    English:
        Return one vote (or ``None``) per window, in configured order.
    """
    votes = []
    for window in config.windows:
        vote = None
        for txn in validator.transactions:
            if is_readiness_vote(txn, window, config.burn_address):
                vote = ReadinessVote(
                    window=window,
                    candidate_value=txn.payload,
                    transaction_reference=txn.hash,
                )
                break
        votes.append(vote)
    return tuple(votes)


def hours_since_heartbeat(status: OnlineStatus, now_millis: int) -> Optional[float]:
    if not status.is_online or status.last_heartbeat_millis is None:
        return None
    return (now_millis - status.last_heartbeat_millis) / MILLIS_PER_HOUR


def classify_recency(
    status: OnlineStatus,
    now_millis: int,
    fresh_hours: float = 3.0,
    stale_hours: float = 6.0,
) -> Optional[RecencyBand]:
    """Clasifica el heartbeat en fresco, viejo o probablemente caído.

    English:
        Classify the heartbeat as fresh, stale or likely down.
    """
    hours = hours_since_heartbeat(status, now_millis)
    if hours is None:
        return None
    if hours < fresh_hours:
        return RecencyBand.FRESH
    if hours < stale_hours:
        return RecencyBand.STALE
    return RecencyBand.LIKELY_DOWN
