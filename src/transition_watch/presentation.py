"""Presentación en texto plano del reporte.

English:
    Plain-text presentation of the report.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from transition_watch.core.models import (
    ReadinessVote,
    RecencyBand,
    Report,
    ValidatorView,
    WindowRanking,
)

LUNAS_PER_NIM = 100_000
THOUSANDS_SEPARATOR = "'"
POPULARITY_HASH_CHARS = 50

RECENCY_LABELS = {
    RecencyBand.FRESH: "online",
    RecencyBand.STALE: "online (stale)",
    RecencyBand.LIKELY_DOWN: "online (likely down)",
}


class ReadinessCell(str, Enum):
    """Estado de una celda de preparación."""

    LEADING = "leading"
    DISSENTING = "dissenting"
    NOT_READY = "not_ready"


def shorten_address(address: str) -> str:
    parts = address.split(" ")
    return f"{parts[0]}...{parts[-1]}"


def pretty_number(number: float) -> str:
    """Redondea (mitades hacia arriba) y agrupa miles con ``'``.

    English: Round half up and group thousands with ``'``.
    """
    rounded = math.floor(number + 0.5)
    return f"{rounded:,}".replace(",", THOUSANDS_SEPARATOR)


def luna_to_nim(amount: float) -> str:
    return pretty_number(amount / LUNAS_PER_NIM)


def short_candidate(value: str) -> str:
    return f"{value[:4]}...{value[60:64]}"


def readiness_cell(vote: Optional[ReadinessVote], ranking: Optional[WindowRanking]) -> ReadinessCell:
    """Marca si el voto coincide con el candidato líder de la ventana.

    English: Tell whether the vote matches the window's leading candidate.
    """
    if vote is None:
        return ReadinessCell.NOT_READY
    leading = ranking.leading if ranking else None
    if leading is not None and leading.candidate_value == vote.candidate_value:
        return ReadinessCell.LEADING
    return ReadinessCell.DISSENTING


def _format_millis(millis: int) -> str:
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def online_line(view: ValidatorView) -> str:
    line = (
        f"{shorten_address(view.address)} with a stake of "
        f"{luna_to_nim(view.total_stake)} NIM ({view.stake_portion:.2f}%) "
    )
    if not view.online.is_online or view.recency is None:
        return line + "is offline"
    return line + (
        f"was {RECENCY_LABELS[view.recency]} {view.hours_since_heartbeat:.1f}h ago "
        f"({_format_millis(view.online.last_heartbeat_millis)})"
    )


def _cell_text(vote: Optional[ReadinessVote], ranking: Optional[WindowRanking]) -> str:
    state = readiness_cell(vote, ranking)
    if state is ReadinessCell.NOT_READY:
        return "Not ready"
    marker = "*" if state is ReadinessCell.LEADING else "!"
    return f"{short_candidate(vote.candidate_value)} {marker}"


def popularity_lines(report: Report) -> List[str]:
    """Líneas de popularidad para la última ventana con votos.

    English: Popularity lines for the last window with votes.
    """
    for ranking in reversed(report.rankings):
        if ranking.candidates:
            return [
                f"{item.candidate_value[:POPULARITY_HASH_CHARS]}... with {item.portion:.2f}%"
                for item in ranking.candidates
            ]
    return []


def render_text(report: Report, show_online: Optional[bool] = None) -> str:
    """Genera el reporte completo en texto plano.

    Por defecto la sección online se oculta cuando ya hay votos de
    preparación.

    English:
        Render the full report as plain text.

        By default the online section is hidden once readiness votes exist.
    """
    if show_online is None:
        show_online = not report.has_readiness_votes

    lines = [
        f"Consensus: {report.consensus}",
        f"Total stake: {luna_to_nim(report.total_stake)} NIM",
    ]

    if show_online:
        lines.append("")
        lines.append(f"Online: {report.online_percentage:.2f}%")
        lines.extend(online_line(view) for view in report.validators)

    lines.append("")
    lines.append(f"Ready: {report.ready_percentage:.2f}%")
    header = ["Validator"] + [ranking.window.label for ranking in report.rankings]
    lines.append(" | ".join(header))
    for view in report.validators:
        cells = [f"{shorten_address(view.address)} ({view.stake_portion:.2f}%)"]
        for ranking, vote in zip(report.rankings, view.readiness):
            cells.append(_cell_text(vote, ranking))
        lines.append(" | ".join(cells))

    popularity = popularity_lines(report)
    if popularity:
        lines.append("")
        lines.append("Genesis hash popularity:")
        lines.extend(popularity)

    return "\n".join(lines)
