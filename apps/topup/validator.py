"""
Record Validator

Classifies raw JSON records as valid or rejected, per entity kind. Expected
validation failures are returned as a `Rejected` verdict, never raised.

Usage:
    from apps.topup.validator import validate
    from utils.schemas import EntityKind

    verdict = validate(raw, EntityKind.USER)
    if isinstance(verdict, Valid):
        user = verdict.record
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ValidationError

from utils.schemas import CompanyRecord, EntityKind, RejectedRecord, UserRecord

logger = logging.getLogger(__name__)

_MODELS: dict[EntityKind, type[BaseModel]] = {
    EntityKind.COMPANY: CompanyRecord,
    EntityKind.USER: UserRecord,
}


@dataclass(frozen=True)
class Valid:
    record: BaseModel


@dataclass(frozen=True)
class Rejected:
    reason: str


Verdict = Union[Valid, Rejected]


def _first_error(error: ValidationError) -> str:
    """Condense a pydantic error into `field: message` for the first failure."""
    details = error.errors()
    if not details:
        return str(error).split("\n")[0]

    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "record"
    return f"{location}: {first.get('msg', 'invalid value')}"


def validate(raw: Any, kind: EntityKind) -> Verdict:
    """
    Validate a single raw record.

    Args:
        raw: Parsed JSON value
        kind: Which schema to validate against

    Returns:
        Valid with the typed record, or Rejected with a short reason
    """
    if not isinstance(raw, Mapping):
        return Rejected("not a keyed record")

    try:
        return Valid(_MODELS[kind].model_validate(dict(raw)))
    except ValidationError as e:
        return Rejected(_first_error(e))


def _validate_all(
    raw_records: list[Any], kind: EntityKind
) -> tuple[list[tuple[int, Any]], list[RejectedRecord]]:
    valid = []
    rejected = []

    for index, raw in enumerate(raw_records):
        verdict = validate(raw, kind)
        if isinstance(verdict, Valid):
            valid.append((index, verdict.record))
            continue

        logger.warning(
            "Rejected %s record at index=%d: %s", kind.value, index, verdict.reason,
            extra={"kind": kind.value, "index": index, "error_reason": verdict.reason},
        )
        rejected.append(
            RejectedRecord(kind=kind, index=index, error_reason=verdict.reason, record=raw)
        )

    return valid, rejected


def validate_companies(
    raw_records: list[Any],
) -> tuple[list[tuple[int, CompanyRecord]], list[RejectedRecord]]:
    """Split raw companies into (index, record) pairs and dead-letter entries."""
    return _validate_all(raw_records, EntityKind.COMPANY)


def validate_users(
    raw_records: list[Any],
) -> tuple[list[tuple[int, UserRecord]], list[RejectedRecord]]:
    """Split raw users into (index, record) pairs and dead-letter entries."""
    return _validate_all(raw_records, EntityKind.USER)
