"""
Statement parsing: xAPI statements -> ProgressFact.

Progress is encoded in two free-text activity fields:

    object.definition.description["en-US"] = "<moduleID>--<moduleName>"
    object.definition.name["en-US"]        = "<completed>--<total>"

Statements without a description are untagged and skipped. A description
without a name means the producer and this reader disagree on the schema,
so the whole request fails.
"""

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import DecodeError, MalformedRecord
from .logger import StructuredLogger, get_logger
from .schema import ProgressFact

DELIMITER = "--"
LANGUAGE = "en-US"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def coerce_int(text: str) -> int:
    """Parse a base-10 integer; anything that is not one becomes 0."""
    if _INTEGER.fullmatch(text):
        return int(text)
    return 0


def split_pair(text: str) -> Optional[Tuple[str, str]]:
    """Split `a--b` into (a, b). None unless there are exactly two parts."""
    parts = text.split(DELIMITER)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def _section(data: Any, key: str) -> Dict[str, Any]:
    value = data.get(key) if isinstance(data, dict) else None
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"statement field '{key}' must be an object")
    return value


def _language_text(definition: Dict[str, Any], key: str) -> str:
    value = _section(definition, key).get(LANGUAGE)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"statement field '{key}.{LANGUAGE}' must be a string")
    return value


def activity_fields(statement: Dict[str, Any]) -> Tuple[str, str]:
    """Return (description, name) text of the statement's target activity."""
    definition = _section(_section(statement, "object"), "definition")
    return _language_text(definition, "description"), _language_text(definition, "name")


def username_from_mbox(mbox: Any) -> str:
    """`mailto:alice@example.com` -> `alice`."""
    if not isinstance(mbox, str) or ":" not in mbox:
        raise MalformedRecord(f"actor mbox has no scheme prefix: {mbox!r}")
    address = mbox.split(":")[1]
    if "@" not in address:
        raise MalformedRecord(f"actor mbox has no '@': {mbox!r}")
    return address.split("@")[0]


def parse_statement(
    statement: Dict[str, Any],
    logger: Optional[StructuredLogger] = None,
) -> Optional[ProgressFact]:
    """Turn one statement into a ProgressFact, or None if it carries none.

    Raises:
        MalformedRecord: description present but name empty
    """
    logger = logger or get_logger()
    description, name = activity_fields(statement)

    if description == "":
        logger.record_skip("no_description")
        return None
    if name == "":
        raise MalformedRecord(f"statement for {description!r} has no activity name")

    module = split_pair(description)
    checkpoint = split_pair(name)
    if module is None or checkpoint is None:
        logger.record_skip("unsplittable")
        logger.debug("Skipping unstandardized statement", description=description, name=name)
        return None

    logger.record_fact()
    return ProgressFact(
        module_id=module[0],
        module_name=module[1],
        checkpoints_completed=coerce_int(checkpoint[0]),
        total_checkpoints=coerce_int(checkpoint[1]),
    )


def parse_progress(
    statements: Iterable[Dict[str, Any]],
    facts: List[ProgressFact],
    logger: Optional[StructuredLogger] = None,
) -> List[ProgressFact]:
    """Append the facts found in one page of a single learner's statements."""
    for statement in statements:
        fact = parse_statement(statement, logger)
        if fact is not None:
            facts.append(fact)
    return facts


def parse_mentor(
    statements: Iterable[Dict[str, Any]],
    learners: Dict[str, List[ProgressFact]],
    logger: Optional[StructuredLogger] = None,
) -> Dict[str, List[ProgressFact]]:
    """Append one page of statements to a username -> facts accumulator.

    Every actor is registered, even when none of its statements carry
    progress, so learners with no activity still get a report.
    """
    for statement in statements:
        username = username_from_mbox(_section(statement, "actor").get("mbox"))
        facts = learners.setdefault(username, [])
        fact = parse_statement(statement, logger)
        if fact is not None:
            facts.append(fact)
    return learners
