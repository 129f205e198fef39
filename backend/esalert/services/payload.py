"""Notification payload assembly."""

import json
from typing import Any

from pydantic_core import PydanticSerializationError

from esalert.domain.models import AlertContent, AlertMessage, ExtractedFields, PostableAlert


class PayloadSerializationError(ValueError):
    """Raised when the assembled payload cannot be encoded as JSON."""


def build_render_context(content: AlertContent, generator_url: str, fields: ExtractedFields) -> dict[str, str]:
    """Merge sources for annotation templates; later entries win on key collisions."""

    data = dict(content.rule.query.labels)
    data["value"] = str(content.match.hits_number)
    data["generatorURL"] = generator_url
    data["newStackTrace"] = fields.stack_trace
    data["errorMsg"] = fields.error_msg
    data["appname"] = fields.app_name
    data["env"] = fields.env
    data.update(fields.extras)
    return data


def build_output_labels(content: AlertContent, fields: ExtractedFields) -> dict[str, str]:
    # Kept apart from the render context so stack traces and extras never become labels.
    labels = dict(content.rule.query.labels)
    labels["errorMsg"] = fields.error_msg
    return labels


def build_postable_alert(
    content: AlertContent,
    generator_url: str,
    fields: ExtractedFields,
    annotations: dict[str, str],
) -> PostableAlert:
    return PostableAlert(
        labels=build_output_labels(content, fields),
        annotations=annotations,
        starts_at=content.starts_at,
        ends_at=content.ends_at,
        generator_url=generator_url,
    )


def serialize_payload(alerts: list[PostableAlert]) -> str:
    """Compact JSON array; `endsAt` is dropped entirely when unset."""

    body: list[dict[str, Any]] = [alert.model_dump(by_alias=True, exclude_none=True) for alert in alerts]
    try:
        text = json.dumps(body, ensure_ascii=False, separators=(",", ":"), sort_keys=True)
        text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise PayloadSerializationError(f"failed to encode alert payload: {exc}") from exc
    return text


def build_alert_message(content: AlertContent, payload: str) -> AlertMessage:
    return AlertMessage(
        unique_id=content.rule.unique_id,
        path=content.rule.file_path,
        payload=payload,
        starts_at=content.starts_at,
    )


def serialize_message(message: AlertMessage) -> str:
    try:
        return message.to_json()
    except (PydanticSerializationError, ValueError) as exc:
        raise PayloadSerializationError(f"failed to encode alert message {message.unique_id}: {exc}") from exc
