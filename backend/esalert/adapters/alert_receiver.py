"""Alert receiver delivery."""

import logging

import httpx

from esalert.adapters.interfaces import AlertDeliveryError, AlertSink
from esalert.config import get_settings
from esalert.domain.models import AlertMessage

logger = logging.getLogger(__name__)


class LogSink(AlertSink):
    def send(self, message: AlertMessage) -> None:
        logger.info("alert %s compiled: %s", message.unique_id, message.payload)


class AlertReceiverSink(AlertSink):
    """POST the payload array to an Alertmanager-compatible receiver. One attempt only."""

    def __init__(self, url: str, transport: httpx.BaseTransport | None = None) -> None:
        self.url = url
        self.transport = transport
        self.settings = get_settings()

    def send(self, message: AlertMessage) -> None:
        try:
            with httpx.Client(timeout=self.settings.alert_receiver_timeout_seconds, transport=self.transport) as client:
                response = client.post(
                    self.url,
                    content=message.payload.encode("utf-8"),
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise AlertDeliveryError(f"delivery of alert {message.unique_id} to {self.url} failed: {exc}") from exc


def get_sink() -> AlertSink:
    settings = get_settings()
    if settings.alert_receiver_url:
        return AlertReceiverSink(settings.alert_receiver_url)
    return LogSink()
