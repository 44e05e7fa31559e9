"""
Typed records passed between pipeline stages, plus statements-page decoding.

Statements themselves stay plain dicts: xAPI statements are loosely
structured and only a handful of fields are ever read.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import DecodeError


@dataclass(frozen=True)
class ProgressFact:
    """One checkpoint event parsed from a statement."""

    module_id: str
    module_name: str
    checkpoints_completed: int
    total_checkpoints: int


@dataclass(frozen=True)
class ModuleCatalogEntry:
    module_id: str
    module_name: str
    total_checkpoints: int


@dataclass(frozen=True)
class ProgressSummary:
    """Per-module progress for one learner."""

    module_id: str
    module_name: str
    checkpoints_completed: int
    total_checkpoints: int


@dataclass
class LearnerReport:
    username: str
    progress: List[ProgressSummary] = field(default_factory=list)


@dataclass
class PageEnvelope:
    """One page of a statements query. Empty `more` means no further pages."""

    statements: List[Dict[str, Any]] = field(default_factory=list)
    more: str = ""


def validate_page(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Missing keys are allowed and decode as empty.
    """
    errors: List[str] = []

    if not isinstance(data, dict):
        return [f"Page must be a JSON object, got {type(data).__name__}"]

    more = data.get("more")
    if more is not None and not isinstance(more, str):
        errors.append("Field 'more' must be a string if provided")

    statements = data.get("statements")
    if statements is not None:
        if not isinstance(statements, list):
            errors.append("Field 'statements' must be a list if provided")
        elif not all(isinstance(s, dict) for s in statements):
            errors.append("Every entry in 'statements' must be an object")

    return errors


def decode_page(body: bytes) -> PageEnvelope:
    """Decode a response body into a PageEnvelope.

    Raises DecodeError when the body is not JSON or not page-shaped.
    """
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"unable to decode statements page: {e}") from e

    errors = validate_page(data)
    if errors:
        raise DecodeError(f"invalid statements page: {'; '.join(errors)}")

    return PageEnvelope(
        statements=data.get("statements") or [],
        more=data.get("more") or "",
    )
