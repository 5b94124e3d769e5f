from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Type

from jsonschema import Draft4Validator

from .errors import SchemaValidationError

logger = logging.getLogger(__name__)

# Undecodable bytes, bad syntax, over-long integer literals (ValueError) and
# nesting deeper than the decoder's recursion limit.
DECODE_ERRORS = (ValueError, RecursionError)


def validate_instance(schema: Dict[str, Any], instance: Any) -> List[str]:
    """Return the schema violations of an already-decoded document, ordered by location."""
    validator = Draft4Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda err: err.json_path)
    return [f"{err.json_path}: {err.message}" for err in errors]


def decode_document(text: str | bytes) -> Any:
    if isinstance(text, bytes):
        text = text.decode("utf-8-sig")
    return json.loads(text)


def ensure_valid(
    schema: Dict[str, Any],
    text: str | bytes,
    label: str,
    error_cls: Type[SchemaValidationError] = SchemaValidationError,
) -> Any:
    """Decode ``text`` and check it against ``schema``; return the document or raise ``error_cls``."""
    try:
        document = decode_document(text)
    except DECODE_ERRORS as exc:
        violations = [f"invalid JSON: {exc}"]
    else:
        violations = validate_instance(schema, document)
    if violations:
        for violation in violations:
            logger.warning("%s: %s", label, violation)
        raise error_cls(f"Invalid {label}. JSON schema validation failed.", violations)
    return document
