"""
AssetVault Backend — Request Validation Layer
===============================================

What:  Turns raw JSON payloads into validated request models, or into a list
       of field-level violations.
Why:   Validation must finish before any store call, so an invalid request
       never causes a partial write. Every violation is reported in one
       response, not just the first.
How:   The rules are declared on the Pydantic schemas
       (assetvault.schemas.asset / .auth). This module runs them and
       translates `pydantic.ValidationError` into `Violation` records and the
       application's own `ValidationError`.
Who:   Called by AssetService and AuthService at the start of every write.

Violation paths:
    Pydantic locations become dot-joined paths with list indices as
    segments, e.g. ("images", 0, "url") → "images.0.url". Errors that belong
    to the payload as a whole (not an object, no recognized field) use the
    path "body".
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Tuple, Type, TypeVar

import pydantic
from pydantic import BaseModel

from assetvault.exceptions import ValidationError
from assetvault.schemas.asset import AssetCreate, AssetUpdate
from assetvault.services.update_document import flatten

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ROOT_FIELD = "body"


@dataclass(frozen=True)
class Violation:
    """One failed constraint: where, why, and a machine-readable kind."""

    field: str
    reason: str
    kind: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def _field_path(loc: Tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) if loc else ROOT_FIELD


def _to_violations(exc: pydantic.ValidationError) -> List[Violation]:
    return [
        Violation(
            field=_field_path(error["loc"]),
            reason=error["msg"],
            kind=error["type"],
        )
        for error in exc.errors(include_url=False)
    ]


def validate_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """
    Validate `payload` against `model`.

    The payload itself is never modified; Pydantic builds a new model instance.

    Raises:
        ValidationError: with every violation in `.violations`
    """
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        violations = _to_violations(exc)
        logger.debug("%s rejected with %d violation(s)", model.__name__, len(violations))
        raise ValidationError(
            message="Request body failed validation",
            violations=[v.to_dict() for v in violations],
        ) from exc


def collect_violations(payload: Any, partial: bool = False) -> List[Violation]:
    """
    Report every violation of the asset schema in `payload`.

    Args:
        payload: Decoded JSON body
        partial: True for PATCH semantics (any nonempty subset of fields)

    Returns:
        Empty list when the payload is valid
    """
    model = AssetUpdate if partial else AssetCreate
    try:
        model.model_validate(payload)
    except pydantic.ValidationError as exc:
        return _to_violations(exc)
    return []


def validate_asset_create(payload: Any) -> AssetCreate:
    return validate_payload(AssetCreate, payload)


def validate_asset_update(payload: Any) -> AssetUpdate:
    return validate_payload(AssetUpdate, payload)


def build_update_document(update: AssetUpdate) -> Dict[str, Any]:
    """
    Compile a validated PATCH body into a flat update document.

    Only fields the client actually sent are included. Enum members become
    their string values, and omitted optional image `type`s stay omitted.
    """
    return flatten(update.model_dump(mode="json", exclude_unset=True))
