# Models Module
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

"""Modelos inmutables del snapshot y del reporte.

English:
    Immutable snapshot and report models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

BURN_ADDRESS = "0" * 40


@dataclass(frozen=True)
class Transaction:
    """Transacción tal como llega del feed.

    Attributes:
        hash (str): Hash de la transacción.
        recipient (str): Dirección destino.
        block_height (int): Altura del bloque.
        timestamp_seconds (int): Marca de tiempo unix en segundos.
        value (int): Valor en la unidad mínima.
        payload (Optional[str]): Datos en hexadecimal, si existen.

    English:
        Transaction as delivered by the feed.

    Attributes:
        hash (str): Transaction hash.
        recipient (str): Destination address.
        block_height (int): Block height.
        timestamp_seconds (int): Unix timestamp in seconds.
        value (int): Value in the smallest unit.
        payload (Optional[str]): Hex data, when present.
    """

    hash: str
    recipient: str
    block_height: int
    timestamp_seconds: int
    value: int
    payload: Optional[str] = None


@dataclass(frozen=True)
class Validator:
    """Validador con su stake y transacciones recientes.

    English:
        Validator with its stake and recent transactions.
    """

    address: str
    deposit_stake: float
    delegated_stake: float
    stake_portion: float
    transactions: Tuple[Transaction, ...] = ()

    @property
    def total_stake(self) -> float:
        return self.deposit_stake + self.delegated_stake


@dataclass(frozen=True)
class Snapshot:
    """Snapshot completo de la red.

    English:
        Full network snapshot.
    """

    consensus: str
    validators: Tuple[Validator, ...] = ()


@dataclass(frozen=True)
class Window:
    """Intervalo cerrado de alturas de bloque ``[start, end]``.

    English:
        Closed block-height interval ``[start, end]``.
    """

    start: int
    end: int

    def contains(self, block_height: int) -> bool:
        return self.start <= block_height <= self.end

    @property
    def label(self) -> str:
        return f"#{self.start} - #{self.end}"


@dataclass(frozen=True)
class MonitorConfig:
    """Parámetros de clasificación usados por el núcleo.

    English:
        Classification parameters used by the core.
    """

    windows: Tuple[Window, ...]
    online_floor_block_height: int
    burn_address: str = BURN_ADDRESS
    fresh_threshold_hours: float = 3.0
    stale_threshold_hours: float = 6.0


class RecencyBand(str, Enum):
    """Banda de recencia del último heartbeat."""

    FRESH = "fresh"
    STALE = "stale"
    LIKELY_DOWN = "likely_down"


@dataclass(frozen=True)
class OnlineStatus:
    is_online: bool
    last_heartbeat_millis: Optional[int] = None


@dataclass(frozen=True)
class ReadinessVote:
    """Voto de preparación de un validador para una ventana.

    English:
        A validator's readiness vote for one window.
    """

    window: Window
    candidate_value: str
    transaction_reference: str


@dataclass(frozen=True)
class RankedCandidate:
    candidate_value: str
    portion: float


@dataclass(frozen=True)
class WindowRanking:
    """Candidatos ordenados de una ventana.

    English:
        Ranked candidates for one window.
    """

    window: Window
    candidates: Tuple[RankedCandidate, ...] = ()

    @property
    def leading(self) -> Optional[RankedCandidate]:
        return self.candidates[0] if self.candidates else None


@dataclass(frozen=True)
class ValidatorView:
    """Vista derivada de un validador dentro del reporte.

    English:
        Derived per-validator view inside the report.
    """

    address: str
    total_stake: float
    stake_portion: float
    online: OnlineStatus
    hours_since_heartbeat: Optional[float] = None
    recency: Optional[RecencyBand] = None
    readiness: Tuple[Optional[ReadinessVote], ...] = ()


@dataclass(frozen=True)
class Report:
    """Reporte consolidado de un snapshot.

    Attributes:
        consensus (str): Estado de consenso informado por el nodo.
        total_stake (float): Stake total (depósito + delegado).
        online_percentage (float): Porción de stake con heartbeat fresco.
        ready_percentage (float): Porción del candidato líder en la última
            ventana con votos.
        generated_at_millis (int): Instante usado para la recencia.
        validators (Tuple[ValidatorView, ...]): Vistas por validador.
        rankings (Tuple[WindowRanking, ...]): Ranking por ventana.

    English:
        Consolidated report for one snapshot.

    Attributes:
        consensus (str): Consensus state reported by the node.
        total_stake (float): Total stake (deposit + delegated).
        online_percentage (float): Stake portion with a fresh heartbeat.
        ready_percentage (float): Leading candidate's portion in the last
            window with votes.
        generated_at_millis (int): Instant used for recency.
        validators (Tuple[ValidatorView, ...]): Per-validator views.
        rankings (Tuple[WindowRanking, ...]): Per-window rankings.
    """

    consensus: str
    total_stake: float
    online_percentage: float
    ready_percentage: float
    generated_at_millis: int
    validators: Tuple[ValidatorView, ...] = ()
    rankings: Tuple[WindowRanking, ...] = ()

    @property
    def has_readiness_votes(self) -> bool:
        return any(ranking.candidates for ranking in self.rankings)

    def to_dict(self) -> Dict[str, Any]:
        """Serializa el reporte a estructuras JSON.

        English: Serialize the report into JSON-ready structures.
        """
        return {
            "consensus": self.consensus,
            "total_stake": self.total_stake,
            "online_percentage": self.online_percentage,
            "ready_percentage": self.ready_percentage,
            "generated_at_millis": self.generated_at_millis,
            "validators": [_view_to_dict(view) for view in self.validators],
            "rankings": [_ranking_to_dict(ranking) for ranking in self.rankings],
        }


def _window_to_dict(window: Window) -> Dict[str, int]:
    return {"start": window.start, "end": window.end}


def _view_to_dict(view: ValidatorView) -> Dict[str, Any]:
    readiness: List[Optional[Dict[str, Any]]] = []
    for vote in view.readiness:
        if vote is None:
            readiness.append(None)
            continue
        readiness.append(
            {
                "window": _window_to_dict(vote.window),
                "candidate_value": vote.candidate_value,
                "transaction_reference": vote.transaction_reference,
            }
        )
    return {
        "address": view.address,
        "total_stake": view.total_stake,
        "stake_portion": view.stake_portion,
        "is_online": view.online.is_online,
        "last_heartbeat_millis": view.online.last_heartbeat_millis,
        "hours_since_heartbeat": view.hours_since_heartbeat,
        "recency": view.recency.value if view.recency else None,
        "readiness": readiness,
    }


def _ranking_to_dict(ranking: WindowRanking) -> Dict[str, Any]:
    leading = ranking.leading
    return {
        "window": _window_to_dict(ranking.window),
        "leading_candidate": leading.candidate_value if leading else None,
        "candidates": [
            {"candidate_value": item.candidate_value, "portion": item.portion}
            for item in ranking.candidates
        ],
    }
