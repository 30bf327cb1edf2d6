# Aggregator Module
# AUTO-DOC-INDEX
#
# ES: Índice rápido
#   1) Propósito del módulo
#   2) Componentes principales
#   3) Puntos de extensión
#
# EN: Quick index
#   1) Module purpose
#   2) Main components
#   3) Extension points

"""Agregación ponderada por stake entre validadores.

English:
    Stake-weighted aggregation across validators.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from transition_watch.core.evaluator import hours_since_heartbeat
from transition_watch.core.models import (
    OnlineStatus,
    RankedCandidate,
    ReadinessVote,
    Validator,
    Window,
    WindowRanking,
)

WindowTally = Dict[str, float]
VoteRecord = Tuple[float, Optional[ReadinessVote]]


def tally_window(records: Iterable[VoteRecord], window: Window) -> WindowTally:
    """Acumula la porción de stake por valor candidato en una ventana.

    Cada registro es ``(stake_portion, vote)``; los votos ausentes o de otra
    ventana no aportan. La suma usa ``math.fsum`` para que el resultado no
    dependa del orden de los validadores.

    English:
        Accumulate stake portion per candidate value within one window.

        Each record is ``(stake_portion, vote)``; absent votes or votes for
        another window do not contribute. Summation uses ``math.fsum`` so
        the result does not depend on validator order.
    """
    portions: Dict[str, List[float]] = {}
    for stake_portion, vote in records:
        if vote is None or vote.window != window:
            continue
        portions.setdefault(vote.candidate_value, []).append(stake_portion)
    return {candidate: math.fsum(values) for candidate, values in portions.items()}


def rank_candidates(tally: WindowTally) -> Tuple[RankedCandidate, ...]:
    """Ordena por porción descendente y desempata por valor ascendente.

    English: Sort by portion descending, ties by ascending candidate value.
    """
    ordered = sorted(tally.items(), key=lambda item: (-item[1], item[0]))
    return tuple(RankedCandidate(candidate_value=value, portion=portion) for value, portion in ordered)


def aggregate_windows(
    validators: Sequence[Validator],
    readiness: Sequence[Sequence[Optional[ReadinessVote]]],
    windows: Sequence[Window],
) -> Tuple[WindowRanking, ...]:
    """Construye el ranking de cada ventana a partir de todos los votos.

    English:
        Build each window's ranking from the full vote set.
    """
    if len(validators) != len(readiness):
        raise ValueError("validators and readiness records must have the same length")

    rankings = []
    for index, window in enumerate(windows):
        records = (
            (validator.stake_portion, votes[index] if index < len(votes) else None)
            for validator, votes in zip(validators, readiness)
        )
        rankings.append(WindowRanking(window=window, candidates=rank_candidates(tally_window(records, window))))
    return tuple(rankings)


def online_percentage(
    validators: Sequence[Validator],
    statuses: Sequence[OnlineStatus],
    now_millis: int,
    fresh_hours: float = 3.0,
) -> float:
    """Suma la porción de los validadores con heartbeat fresco.

    Un validador con heartbeat viejo sigue figurando como online en su vista,
    pero no cuenta para este porcentaje.

    English:
        Sum the portion of validators with a fresh heartbeat.

        A validator with a stale heartbeat is still shown as online in its
        view but does not count toward this percentage.
    """
    if len(validators) != len(statuses):
        raise ValueError("validators and statuses must have the same length")
    fresh = []
    for validator, status in zip(validators, statuses):
        hours = hours_since_heartbeat(status, now_millis)
        if hours is not None and hours < fresh_hours:
            fresh.append(validator.stake_portion)
    return math.fsum(fresh)


def ready_percentage(rankings: Sequence[WindowRanking]) -> float:
    """Porción del líder en la última ventana que recibió votos.

    English: Leading portion in the last window that received votes.
    """
    for ranking in reversed(rankings):
        if ranking.leading is not None:
            return ranking.leading.portion
    return 0.0
