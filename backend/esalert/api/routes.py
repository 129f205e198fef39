"""FastAPI routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from esalert.adapters.interfaces import DocumentRetrievalError
from esalert.domain.models import (
    AlertContent,
    CompileAlertRequest,
    CompileAlertResponse,
    DeliverAlertResponse,
    Rule,
    RuleAlertRequest,
)
from esalert.services.compiler import AlertCompiler
from esalert.services.extraction import EmptyHitsError
from esalert.services.payload import PayloadSerializationError, serialize_message
from esalert.services.rule_loader import RuleLoadError, RuleRegistry, UnknownRuleError
from esalert.tasks import enqueue_compile

router = APIRouter(prefix="/v1")


def get_compiler() -> AlertCompiler:
    return AlertCompiler()


def get_rule_registry() -> RuleRegistry:
    try:
        return RuleRegistry()
    except RuleLoadError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _compile(compiler: AlertCompiler, request: CompileAlertRequest) -> CompileAlertResponse:
    try:
        compiled = compiler.compile(request.alert, request.generator_url, request.sample)
        message = serialize_message(compiled.message)
    except EmptyHitsError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except DocumentRetrievalError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except PayloadSerializationError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return CompileAlertResponse(
        message=message,
        dedup_key=compiled.dedup_key,
        state=request.alert.state,
    )


@router.post("/alerts/compile", response_model=CompileAlertResponse)
def post_compile_alert(
    request: CompileAlertRequest,
    compiler: AlertCompiler = Depends(get_compiler),
):
    return _compile(compiler, request)


@router.post("/alerts/deliver", response_model=DeliverAlertResponse, status_code=status.HTTP_202_ACCEPTED)
def post_deliver_alert(request: CompileAlertRequest):
    result = enqueue_compile(request)
    return DeliverAlertResponse(
        dedup_key=request.alert.dedup_key(),
        state=request.alert.state,
        task_id=result.id,
    )


@router.get("/rules", response_model=list[Rule])
def list_rules(registry: RuleRegistry = Depends(get_rule_registry)):
    return registry.list_rules()


@router.post("/rules/{rule_id}/alerts/compile", response_model=CompileAlertResponse)
def post_compile_rule_alert(
    rule_id: str,
    request: RuleAlertRequest,
    compiler: AlertCompiler = Depends(get_compiler),
    registry: RuleRegistry = Depends(get_rule_registry),
):
    try:
        rule = registry.get(rule_id)
    except UnknownRuleError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    alert = AlertContent(rule=rule, match=request.match, starts_at=request.starts_at, ends_at=request.ends_at)
    return _compile(
        compiler,
        CompileAlertRequest(alert=alert, sample=request.sample, generator_url=request.generator_url),
    )
