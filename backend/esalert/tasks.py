"""Celery wiring."""

from celery import Celery
from celery.result import AsyncResult

from esalert.config import get_settings
from esalert.domain.models import CompileAlertRequest

settings = get_settings()
celery_app = Celery("esalert", broker=settings.redis_url, backend=settings.redis_url)
celery_app.conf.update(
    task_always_eager=settings.celery_task_always_eager,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)


def enqueue_compile(request: CompileAlertRequest) -> AsyncResult:
    """Queue compilation and delivery of one alert."""

    return compile_and_deliver.apply_async(args=(request.model_dump(mode="json"),), kwargs={})


@celery_app.task(name="compile_and_deliver")
def compile_and_deliver(request: dict) -> str:
    """Compile one alert, hand it to the configured sink and return its dedup key."""

    from esalert.adapters.alert_receiver import get_sink
    from esalert.services.compiler import AlertCompiler

    parsed = CompileAlertRequest.model_validate(request)
    compiled = AlertCompiler().compile(parsed.alert, parsed.generator_url, parsed.sample)
    get_sink().send(compiled.message)
    return compiled.dedup_key
