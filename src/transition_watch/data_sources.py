"""Fuente de datos del snapshot: endpoint HTTP o archivo JSON.

Snapshot data source: HTTP endpoint or JSON file.

Example usage:
    settings = load_config()
    payload = fetch_snapshot(settings.INFO_URL, timeout=settings.TIMEOUT_SECONDS)
    report = SnapshotProcessor(settings.to_monitor_config()).process_payload(payload)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Accept": "application/json"}


class DataSourceError(Exception):
    """Error general de una fuente de datos.

    English: General data source error.
    """


def fetch_snapshot(
    url: str,
    *,
    timeout: float = 10.0,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """Descarga el snapshot JSON desde el endpoint informativo.

    Args:
        url: URL del endpoint.
        timeout: Tiempo máximo de espera en segundos.
        client: Cliente httpx opcional (tests o sesiones compartidas).

    Returns:
        Dict JSON sin validar.

    English:
        Download the JSON snapshot from the info endpoint.

    Args:
        url: Endpoint URL.
        timeout: Maximum wait in seconds.
        client: Optional httpx client (tests or shared sessions).

    Returns:
        Unvalidated JSON dict.
    """
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, headers=DEFAULT_HEADERS)
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as exc:
        logger.warning("snapshot_fetch_status url=%s status=%s", url, exc.response.status_code)
        raise DataSourceError(f"{url} responded with status {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        logger.warning("snapshot_fetch_failed url=%s error=%s", url, exc)
        raise DataSourceError(f"Unable to fetch {url}: {exc}") from exc
    except ValueError as exc:
        raise DataSourceError(f"{url} did not return JSON") from exc
    finally:
        if owns_client:
            http.close()

    if not isinstance(payload, dict):
        raise DataSourceError(f"{url} did not return a JSON object")
    logger.debug("snapshot_fetched url=%s validators=%s", url, len(payload.get("validators") or []))
    return payload


def load_snapshot_file(path: Path) -> Dict[str, Any]:
    """Lee un snapshot JSON desde disco.

    English: Read a JSON snapshot from disk.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataSourceError(f"Unable to read {path.as_posix()}: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DataSourceError(f"{path.name} is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise DataSourceError(f"{path.name} must contain a JSON object")
    return payload
