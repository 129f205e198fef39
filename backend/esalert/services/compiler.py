"""Alert compilation pipeline."""

import logging
from collections.abc import Callable

from esalert.adapters.elasticsearch import ElasticsearchDocumentFetcher
from esalert.adapters.interfaces import DocumentFetcher
from esalert.config import Settings, get_settings
from esalert.domain.models import AlertContent, AlertSampleMessage, CompiledAlert, EsConfig, ExtractedFields
from esalert.services.extraction import EmptyHitsError, extract_fields, representative_source
from esalert.services.payload import (
    build_alert_message,
    build_postable_alert,
    build_render_context,
    serialize_message,
    serialize_payload,
)
from esalert.services.rendering import render_templates

logger = logging.getLogger(__name__)

FetcherFactory = Callable[[EsConfig], DocumentFetcher]


class AlertCompiler:
    """Turn a fired rule and its matched documents into an alert receiver payload.

    Stateless between calls, so one instance can be shared by a worker pool.
    The rule is only read; every map taken from it is copied before mutation.
    """

    def __init__(self, settings: Settings | None = None, fetcher_factory: FetcherFactory | None = None) -> None:
        self.settings = settings or get_settings()
        self.fetcher_factory = fetcher_factory or ElasticsearchDocumentFetcher

    def fetch_fields(self, sample: AlertSampleMessage) -> ExtractedFields:
        fetcher = self.fetcher_factory(sample.es)
        hits = fetcher.find_by_ids(sample.index, sample.ids)
        try:
            source = representative_source(hits)
        except EmptyHitsError:
            if self.settings.require_hits:
                raise
            logger.warning("no documents found in %s for %d ids, compiling without fields", sample.index, len(sample.ids))
            return ExtractedFields()
        return extract_fields(source, self.settings.max_field_length)

    def compile(self, content: AlertContent, generator_url: str, sample: AlertSampleMessage) -> CompiledAlert:
        fields = self.fetch_fields(sample)

        context = build_render_context(content, generator_url, fields)
        annotations = render_templates(
            content.rule.query.annotations,
            context,
            autoescape=self.settings.template_autoescape,
        )
        alert = build_postable_alert(content, generator_url, fields, annotations)
        message = build_alert_message(content, serialize_payload([alert]))
        dedup_key = content.dedup_key()

        logger.info(
            "compiled alert rule=%s state=%s hits=%d dedup_key=%s",
            content.rule.unique_id,
            content.state.value,
            content.match.hits_number,
            dedup_key,
        )
        return CompiledAlert(message=message, dedup_key=dedup_key)

    def get_alert_message(self, content: AlertContent, generator_url: str, sample: AlertSampleMessage) -> str:
        """Serialized `AlertMessage` for downstream delivery."""

        return serialize_message(self.compile(content, generator_url, sample).message)
