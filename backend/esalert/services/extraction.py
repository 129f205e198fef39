"""Field extraction from matched documents."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from esalert.adapters.interfaces import DocumentRetrievalError
from esalert.domain.models import ExtractedFields

logger = logging.getLogger(__name__)

MESSAGE_FIELDS = ("@message", "message")
STACK_TRACE_FIELD = "@stackTrace"
APP_NAME_FIELD = "@appname"
ENV_FIELD = "@env"


class EmptyHitsError(DocumentRetrievalError):
    """Raised when a match produced no documents to build the alert from."""


def utf8_safe(value: str) -> str:
    """Replace lone surrogates so the value always encodes as UTF-8."""

    return value.encode("utf-8", "surrogatepass").decode("utf-8", "replace")


def truncate(value: str, limit: int) -> str:
    """Hard cut at `limit` characters."""

    return value[:limit]


def representative_source(hits: Sequence[Mapping[str, Any]]) -> Mapping[str, Any] | None:
    """Return the `_source` of the first hit, or None when it carries no source object."""

    if not hits:
        raise EmptyHitsError("search returned no documents for the matched ids")
    source = hits[0].get("_source")
    if not isinstance(source, Mapping):
        return None
    return source


def _string_field(source: Mapping[str, Any], key: str) -> str | None:
    value = source.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        logger.debug("field %s has type %s, treating as absent", key, type(value).__name__)
        return None
    return utf8_safe(value)


def extract_fields(source: Mapping[str, Any] | None, max_length: int = 1024) -> ExtractedFields:
    """Pull message, stack trace, app name, env and string extras out of a document source."""

    if source is None:
        return ExtractedFields()

    message = ""
    for key in MESSAGE_FIELDS:
        found = _string_field(source, key)
        if found is not None:
            message = found
            break

    return ExtractedFields(
        error_msg=truncate(message, max_length),
        stack_trace=truncate(_string_field(source, STACK_TRACE_FIELD) or "", max_length),
        app_name=truncate(_string_field(source, APP_NAME_FIELD) or "", max_length),
        env=truncate(_string_field(source, ENV_FIELD) or "", max_length),
        extras={utf8_safe(str(k)): utf8_safe(v) for k, v in source.items() if isinstance(v, str)},
    )
