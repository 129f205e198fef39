from esalert.adapters.interfaces import AlertSink
from esalert.domain.models import AlertContent, AlertMessage, AlertSampleMessage, CompileAlertRequest


class _RecordingSink(AlertSink):
    def __init__(self) -> None:
        self.sent: list[AlertMessage] = []

    def send(self, message: AlertMessage) -> None:
        self.sent.append(message)


def test_compile_and_deliver_sends_to_sink(
    monkeypatch, pending_alert: AlertContent, sample: AlertSampleMessage, payment_hit: dict
) -> None:
    from esalert import tasks
    from esalert.adapters import alert_receiver
    from esalert.services import compiler

    class _Fetcher:
        def __init__(self, _config) -> None:
            pass

        def find_by_ids(self, index, ids):
            return [payment_hit]

    sink = _RecordingSink()
    monkeypatch.setattr(compiler, "ElasticsearchDocumentFetcher", _Fetcher)
    monkeypatch.setattr(alert_receiver, "get_sink", lambda: sink)

    request = CompileAlertRequest(alert=pending_alert, sample=sample, generator_url="http://gen")
    dedup_key = tasks.compile_and_deliver(request.model_dump(mode="json"))

    assert dedup_key == pending_alert.dedup_key()
    assert [m.unique_id for m in sink.sent] == ["payments-errors"]
