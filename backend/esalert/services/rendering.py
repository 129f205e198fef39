"""Annotation template rendering."""

import logging
import re
from collections.abc import Mapping
from functools import lru_cache

from jinja2.sandbox import SandboxedEnvironment

logger = logging.getLogger(__name__)

_BLOCK = re.compile(r"(\{\{|\{%)(.*?)(\}\}|%\})", re.S)
_DOT_REF = re.compile(r"(^|[\s(,|])\.([A-Za-z_]\w*)")


@lru_cache(maxsize=2)
def _environment(autoescape: bool) -> SandboxedEnvironment:
    return SandboxedEnvironment(autoescape=autoescape, keep_trailing_newline=True)


def translate_dot_refs(source: str) -> str:
    """Accept Go-style `{{ .name }}` references by dropping the leading dot."""

    return _BLOCK.sub(lambda m: m.group(1) + _DOT_REF.sub(r"\1\2", m.group(2)) + m.group(3), source)


def render_template(source: str, context: Mapping[str, str], *, autoescape: bool = True) -> str:
    template = _environment(autoescape).from_string(translate_dot_refs(source))
    return template.render(dict(context))


def render_templates(
    templates: Mapping[str, str],
    context: Mapping[str, str],
    *,
    autoescape: bool = True,
) -> dict[str, str]:
    """Render every template on its own; a failing one keeps its raw source."""

    rendered: dict[str, str] = {}
    for name, source in templates.items():
        try:
            rendered[name] = render_template(source, context, autoescape=autoescape)
        except Exception as exc:  # noqa: BLE001
            logger.warning("annotation %r left unrendered: %s", name, exc)
            rendered[name] = source
    return rendered
