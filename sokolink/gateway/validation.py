"""Schema validation for gateway payloads.

Model output is never trusted to match the record shapes. A payload that is
not a list of objects fails as a whole; individual records that do not
validate are rejected and reported, the rest go through.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


@dataclass
class RejectedRecord:
    """A payload entry that failed validation."""

    index: int
    errors: list[dict[str, Any]]


@dataclass
class RecordValidation(Generic[M]):
    """Result of validating a gateway payload."""

    ok: bool
    records: list[M] = field(default_factory=list)
    rejected: list[RejectedRecord] = field(default_factory=list)
    error: Optional[str] = None


def _unwrap(payload: Any) -> Any:
    """Accept {"items": [...]} style wrappers holding exactly one list."""
    if isinstance(payload, dict):
        lists = [v for v in payload.values() if isinstance(v, list)]
        if len(lists) == 1:
            return lists[0]
    return payload


def validate_records(payload: Any, model: type[M]) -> RecordValidation[M]:
    """Validate every entry of a list payload against model."""
    payload = _unwrap(payload)
    if not isinstance(payload, list):
        return RecordValidation(
            ok=False,
            error=f"Expected a JSON array, got {type(payload).__name__}",
        )

    result: RecordValidation[M] = RecordValidation(ok=True)
    for index, raw in enumerate(payload):
        try:
            result.records.append(model.model_validate(raw))
        except ValidationError as e:
            result.rejected.append(
                RejectedRecord(
                    index=index,
                    errors=e.errors(include_url=False, include_input=False),
                )
            )
    return result
