# Schemas Module
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

"""Esquemas Pydantic para validar el snapshot de validadores.

Pydantic schemas to validate the validator snapshot feed.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from transition_watch.core.models import Snapshot, Transaction, Validator

logger = logging.getLogger(__name__)


class MalformedSnapshotError(ValueError):
    """El snapshot no cumple el contrato de entrada.

    English: The snapshot does not meet the input contract.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class TransactionSchema(BaseModel):
    """Esquema de una transacción del feed.

    English: Feed transaction schema.
    """

    model_config = ConfigDict(extra="ignore")

    hash: StrictStr = Field(min_length=1)
    block_number: StrictInt = Field(alias="blockNumber", ge=0)
    timestamp: StrictInt
    to: StrictStr
    value: StrictInt
    data: Optional[StrictStr] = None

    @field_validator("data")
    @classmethod
    def empty_data_is_absent(cls, value: Optional[str]) -> Optional[str]:
        """Trata ``""`` como payload ausente.

        English: Treat ``""`` as an absent payload.
        """
        return value or None


class ValidatorSchema(BaseModel):
    """Esquema de un validador del feed.

    English: Feed validator schema.
    """

    model_config = ConfigDict(extra="ignore")

    address: StrictStr = Field(min_length=1)
    deposit: StrictFloat = Field(ge=0)
    delegated_stake: StrictFloat = Field(alias="delegatedStake", ge=0)
    portion: StrictFloat = Field(ge=0, le=100)
    transactions: List[TransactionSchema]


class SnapshotSchema(BaseModel):
    """Esquema completo del snapshot consumido por el procesador.

    English: Full snapshot schema consumed by the processor.
    """

    model_config = ConfigDict(extra="ignore")

    consensus: StrictStr
    validators: List[ValidatorSchema]


def _parse_payload(data: Dict[str, Any] | bytes | str) -> Dict[str, Any]:
    """Parsea payload dict, bytes o str a dict JSON.

    English: Parse dict, bytes or str payload into a JSON dict.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedSnapshotError("Snapshot is not valid UTF-8") from exc
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise MalformedSnapshotError("Snapshot is not valid JSON") from exc
    if not isinstance(data, dict):
        raise MalformedSnapshotError("Snapshot must be a JSON object")
    return data


def _error_locations(exc: ValidationError) -> List[str]:
    return [".".join(str(part) for part in error["loc"]) for error in exc.errors()]


def _to_transaction(schema: TransactionSchema) -> Transaction:
    return Transaction(
        hash=schema.hash,
        recipient=schema.to,
        block_height=schema.block_number,
        timestamp_seconds=schema.timestamp,
        value=schema.value,
        payload=schema.data,
    )


def _to_validator(schema: ValidatorSchema) -> Validator:
    return Validator(
        address=schema.address,
        deposit_stake=schema.deposit,
        delegated_stake=schema.delegated_stake,
        stake_portion=schema.portion,
        transactions=tuple(_to_transaction(txn) for txn in schema.transactions),
    )


def parse_snapshot(data: Dict[str, Any] | bytes | str) -> Snapshot:
    """Valida un snapshot crudo y lo convierte en modelos inmutables.

    Cualquier campo requerido ausente rechaza el snapshot completo; nunca se
    asumen valores por defecto.

    English:
        Validate a raw snapshot and convert it into immutable models.

        Any missing required field rejects the whole snapshot; defaults are
        never assumed.
    """
    payload = _parse_payload(data)
    try:
        model = SnapshotSchema.model_validate(payload)
    except ValidationError as exc:
        locations = _error_locations(exc)
        logger.warning("snapshot_rejected errors=%d first=%s", len(locations), locations[:1])
        raise MalformedSnapshotError(f"Snapshot validation failed: {exc}", locations) from exc
    return Snapshot(
        consensus=model.consensus,
        validators=tuple(_to_validator(validator) for validator in model.validators),
    )
