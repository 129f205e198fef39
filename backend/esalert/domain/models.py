"""Domain schemas and enums."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from esalert.utils.hashing import dedup_key_for
from esalert.utils.timefmt import rfc3339_utc


class AlertState(str, Enum):
    """Alert lifecycle state."""

    pending = "pending"
    resolved = "resolved"


class RuleQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


class Rule(BaseModel):
    """Static alerting rule. Owned by the rule registry, only borrowed here."""

    model_config = ConfigDict(frozen=True)

    unique_id: str
    file_path: str = ""
    query: RuleQuery = Field(default_factory=RuleQuery)


class Match(BaseModel):
    """Document ids and hit count that satisfied a rule query."""

    ids: list[str] = Field(default_factory=list)
    hits_number: int = Field(default=0, ge=0)


class AlertContent(BaseModel):
    """A single firing or resolving event to compile into a notification."""

    rule: Rule
    match: Match
    starts_at: datetime
    ends_at: datetime | None = None

    @property
    def state(self) -> AlertState:
        # Resolution is derived from ends_at so the two can never disagree.
        return AlertState.resolved if self.ends_at is not None else AlertState.pending

    def has_resolved(self) -> bool:
        return self.state == AlertState.resolved

    def dedup_key(self) -> str:
        return dedup_key_for(self.match.ids)


class EsConfig(BaseModel):
    """Connection settings for the search backend holding the matched documents."""

    addresses: list[str] = Field(default_factory=lambda: ["http://localhost:9200"])
    username: str | None = None
    password: str | None = None
    timeout_seconds: float | None = None


class AlertSampleMessage(BaseModel):
    es: EsConfig = Field(default_factory=EsConfig)
    index: str
    ids: list[str] = Field(default_factory=list)


class ExtractedFields(BaseModel):
    """Well-known fields pulled from the representative document."""

    error_msg: str = ""
    app_name: str = ""
    env: str = ""
    stack_trace: str = ""
    extras: dict[str, str] = Field(default_factory=dict)


class PostableAlert(BaseModel):
    """One element of the alert receiver payload array."""

    model_config = ConfigDict(populate_by_name=True)

    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    starts_at: datetime = Field(alias="startsAt")
    ends_at: datetime | None = Field(default=None, alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")

    @field_serializer("starts_at", "ends_at")
    def serialize_time(self, value: datetime | None) -> str | None:
        if value is None:
            return None
        return rfc3339_utc(value)


class AlertMessage(BaseModel):
    """Envelope handed to downstream delivery."""

    model_config = ConfigDict(populate_by_name=True)

    unique_id: str = Field(alias="id")
    path: str
    payload: str
    starts_at: datetime = Field(alias="StartsAt")

    @field_serializer("starts_at")
    def serialize_time(self, value: datetime) -> str:
        return rfc3339_utc(value)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class CompiledAlert(BaseModel):
    message: AlertMessage
    dedup_key: str


class CompileAlertRequest(BaseModel):
    alert: AlertContent
    sample: AlertSampleMessage
    generator_url: str = ""


class CompileAlertResponse(BaseModel):
    message: str
    dedup_key: str
    state: AlertState


class RuleAlertRequest(BaseModel):
    """Compile request naming a rule loaded from the rules directory."""

    match: Match
    starts_at: datetime
    ends_at: datetime | None = None
    sample: AlertSampleMessage
    generator_url: str = ""


class DeliverAlertResponse(BaseModel):
    dedup_key: str
    state: AlertState
    task_id: str | None = None
