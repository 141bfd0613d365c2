"""YAML to JSON re-serialization for copied OpenAPI documents."""

from __future__ import annotations

import datetime as _dt
import json
import logging
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from openapi_update.errors import ConversionError

logger = logging.getLogger(__name__)

JSON_INDENT = 2


def _json_default(value: Any) -> Any:
    # The safe loader turns unquoted dates and timestamps into date objects.
    if isinstance(value, (_dt.datetime, _dt.date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def load_yaml(text: str, *, document: str = "<string>") -> Any:
    """Parse ``text`` as YAML, keeping mapping keys in the order read."""
    yaml = YAML(typ="safe")
    try:
        return yaml.load(text)
    except YAMLError as exc:
        raise ConversionError(document, str(exc)) from exc


def dump_json(data: Any, *, document: str = "<string>") -> str:
    """Render ``data`` as stable, human-readable JSON with a trailing newline.

    Values JSON cannot represent (non-string keys such as dates, binary
    blobs, NaN and infinities) raise :class:`ConversionError`.
    """
    try:
        rendered = json.dumps(
            data,
            indent=JSON_INDENT,
            ensure_ascii=False,
            allow_nan=False,
            default=_json_default,
        )
    except (TypeError, ValueError) as exc:
        raise ConversionError(document, str(exc)) from exc
    return rendered + "\n"


def yaml_to_json(text: str, *, document: str = "<string>") -> str:
    """Convert a YAML document to its pretty-printed JSON equivalent."""
    data = load_yaml(text, document=document)
    rendered = dump_json(data, document=document)
    logger.debug("Converted %s (%d bytes of YAML)", document, len(text))
    return rendered


__all__ = ["JSON_INDENT", "load_yaml", "dump_json", "yaml_to_json"]
