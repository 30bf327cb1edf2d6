"""Orquestación del procesamiento de un snapshot completo.

English:
    Orchestration of a full snapshot pass.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Callable, Dict, Optional

from transition_watch.core.aggregator import aggregate_windows, online_percentage, ready_percentage
from transition_watch.core.evaluator import (
    classify_recency,
    evaluate_online,
    evaluate_readiness,
    hours_since_heartbeat,
)
from transition_watch.core.models import MonitorConfig, Report, Snapshot, ValidatorView
from transition_watch.schemas import parse_snapshot

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


def process_snapshot(
    snapshot: Snapshot,
    config: MonitorConfig,
    now_millis: Optional[int] = None,
) -> Report:
    """Procesa un snapshot y devuelve el reporte consolidado.

    La evaluación de cada validador es independiente; sólo la agregación por
    ventana combina validadores. Con ``now_millis`` fijo el resultado es
    reproducible.

    Args:
        snapshot: Snapshot ya validado.
        config: Parámetros de clasificación.
        now_millis: Instante de referencia; por defecto el reloj actual.

    Returns:
        Report inmutable.

    English:
        Process a snapshot and return the consolidated report.

        Each validator is evaluated independently; only the per-window
        aggregation combines validators. With a fixed ``now_millis`` the
        result is reproducible.

    Args:
        snapshot: Already validated snapshot.
        config: Classification parameters.
        now_millis: Reference instant; defaults to the current clock.

    Returns:
        Immutable Report.
    """
    if now_millis is None:
        now_millis = _now_millis()

    validators = snapshot.validators
    statuses = [evaluate_online(validator, config) for validator in validators]
    readiness = [evaluate_readiness(validator, config) for validator in validators]

    views = []
    for validator, status, votes in zip(validators, statuses, readiness):
        views.append(
            ValidatorView(
                address=validator.address,
                total_stake=validator.total_stake,
                stake_portion=validator.stake_portion,
                online=status,
                hours_since_heartbeat=hours_since_heartbeat(status, now_millis),
                recency=classify_recency(
                    status,
                    now_millis,
                    config.fresh_threshold_hours,
                    config.stale_threshold_hours,
                ),
                readiness=votes,
            )
        )

    rankings = aggregate_windows(validators, readiness, config.windows)
    report = Report(
        consensus=snapshot.consensus,
        total_stake=math.fsum(validator.total_stake for validator in validators),
        online_percentage=online_percentage(
            validators, statuses, now_millis, config.fresh_threshold_hours
        ),
        ready_percentage=ready_percentage(rankings),
        generated_at_millis=now_millis,
        validators=tuple(views),
        rankings=rankings,
    )
    logger.info(
        "snapshot_processed validators=%d online_pct=%.2f ready_pct=%.2f",
        len(validators),
        report.online_percentage,
        report.ready_percentage,
    )
    return report


class SnapshotProcessor:
    """Procesador con configuración fija y reloj inyectable.

    English:
        Processor bound to a fixed configuration and an injectable clock.
    """

    def __init__(self, config: MonitorConfig, clock: Callable[[], int] = _now_millis) -> None:
        self._config = config
        self._clock = clock

    @property
    def config(self) -> MonitorConfig:
        return self._config

    def process(self, snapshot: Snapshot) -> Report:
        return process_snapshot(snapshot, self._config, now_millis=self._clock())

    def process_payload(self, payload: Dict[str, Any] | bytes) -> Report:
        """Valida JSON crudo y lo procesa; rechaza snapshots malformados.

        English: Validate raw JSON and process it; malformed snapshots raise.
        """
        return self.process(parse_snapshot(payload))
