import os
from datetime import datetime, timezone

import pytest

os.environ.setdefault("REDIS_URL", "redis://localhost:6379/9")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("ALERT_RECEIVER_URL", "")

from esalert.config import get_settings  # noqa: E402
from esalert.domain.models import AlertContent, AlertSampleMessage, Match, Rule, RuleQuery  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeFetcher:
    """In-memory stand-in for the search backend."""

    def __init__(self, hits: list[dict] | None = None, error: Exception | None = None) -> None:
        self.hits = hits or []
        self.error = error
        self.calls: list[tuple[str, list[str]]] = []

    def find_by_ids(self, index: str, ids: list[str]) -> list[dict]:
        self.calls.append((index, list(ids)))
        if self.error is not None:
            raise self.error
        return self.hits


@pytest.fixture
def rule() -> Rule:
    return Rule(
        unique_id="payments-errors",
        file_path="rules/payments.yaml",
        query=RuleQuery(
            labels={"team": "infra", "severity": "critical"},
            annotations={
                "summary": "Error: {{ .errorMsg }}",
                "description": "{{ appname }} in {{ env }} matched {{ value }} docs",
            },
        ),
    )


@pytest.fixture
def pending_alert(rule: Rule) -> AlertContent:
    return AlertContent(
        rule=rule,
        match=Match(ids=["doc-1", "doc-2"], hits_number=2),
        starts_at=datetime(2026, 3, 1, 12, 30, 15, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample() -> AlertSampleMessage:
    return AlertSampleMessage(index="logs-payments-*", ids=["doc-1", "doc-2"])


@pytest.fixture
def payment_hit() -> dict:
    return {
        "_id": "doc-1",
        "_source": {
            "@message": "payment gateway timeout",
            "@stackTrace": "Traceback (most recent call last):\n  ...",
            "@appname": "payments-api",
            "@env": "prod",
            "region": "eu-west-1",
            "status": 504,
        },
    }


@pytest.fixture
def make_compiler():
    from esalert.config import Settings
    from esalert.services.compiler import AlertCompiler

    def _make(hits: list[dict] | None = None, error: Exception | None = None, **overrides):
        fetcher = FakeFetcher(hits=hits, error=error)
        compiler = AlertCompiler(settings=Settings(**overrides), fetcher_factory=lambda _es: fetcher)
        return compiler, fetcher

    return _make
