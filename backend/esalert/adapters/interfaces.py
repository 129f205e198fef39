"""Adapter interface contracts."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from esalert.domain.models import AlertMessage


class DocumentRetrievalError(RuntimeError):
    """Raised when matched documents cannot be retrieved from the search backend."""


class AlertDeliveryError(RuntimeError):
    """Raised when a compiled alert cannot be handed to the receiver."""


class DocumentFetcher(ABC):
    """Fetch raw hit documents by id."""

    @abstractmethod
    def find_by_ids(self, index: str, ids: Sequence[str]) -> list[dict[str, Any]]:
        raise NotImplementedError


class AlertSink(ABC):
    """Deliver compiled alerts."""

    @abstractmethod
    def send(self, message: AlertMessage) -> None:
        raise NotImplementedError
