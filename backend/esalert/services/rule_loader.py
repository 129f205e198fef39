"""Rule file loader."""

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from esalert.config import get_settings
from esalert.domain.models import Rule, RuleQuery


class RuleLoadError(ValueError):
    """Raised when a rule file cannot be read or has the wrong shape."""


def load_rule(path: str | Path) -> Rule:
    """Load a rule definition; only identity, labels and annotations are used here."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        data = yaml.safe_load(os.path.expandvars(text)) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise RuleLoadError(f"cannot read rule {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise RuleLoadError(f"rule {path} must be a mapping")

    query = data.get("query") or {}
    if not isinstance(query, dict):
        raise RuleLoadError(f"rule {path}: query must be a mapping")
    try:
        return Rule(
            unique_id=str(data.get("unique_id") or path.stem),
            file_path=str(path),
            query=RuleQuery(
                labels={str(k): str(v) for k, v in (query.get("labels") or {}).items()},
                annotations={str(k): str(v) for k, v in (query.get("annotations") or {}).items()},
            ),
        )
    except (AttributeError, ValidationError) as exc:
        raise RuleLoadError(f"rule {path}: invalid labels or annotations: {exc}") from exc


def load_rules(directory: str | Path) -> list[Rule]:
    return [load_rule(p) for p in sorted(Path(directory).glob("*.y*ml"))]


class UnknownRuleError(LookupError):
    """Raised when no loaded rule carries the requested id."""


class RuleRegistry:
    """Rules loaded from the configured rules directory, keyed by unique id."""

    def __init__(self, directory: str | Path | None = None) -> None:
        directory = directory or get_settings().rules_path
        rules = load_rules(directory) if directory else []
        self._rules = {rule.unique_id: rule for rule in rules}

    def get(self, unique_id: str) -> Rule:
        rule = self._rules.get(unique_id)
        if rule is None:
            raise UnknownRuleError(f"no rule with id {unique_id!r}")
        return rule

    def list_rules(self) -> list[Rule]:
        return list(self._rules.values())
