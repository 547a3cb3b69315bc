"""Auto-discovery registry for rule evaluators."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from pathlib import Path
from typing import TYPE_CHECKING

from openapi_scorecard.core.config import RULE_KEYS

if TYPE_CHECKING:
    from openapi_scorecard.core.config import ScorecardConfig
    from openapi_scorecard.rules.base import BaseRule

logger = logging.getLogger(__name__)

_RULES: dict[str, type[BaseRule]] = {}
_discovered = False

# Modules in this package that hold infrastructure, not rules
_NON_RULE_MODULES = frozenset({"base", "helpers", "registry"})


def register_rule(rule_class: type[BaseRule]) -> type[BaseRule]:
    """Register a rule class. Can be used as a decorator or called directly."""
    if rule_class.key not in RULE_KEYS:
        raise ValueError(f"Unknown rule key '{rule_class.key}'. Known keys: {', '.join(RULE_KEYS)}")
    _RULES[rule_class.key] = rule_class
    return rule_class


def _discover_rules() -> None:
    """Auto-import all rule modules in this package."""
    global _discovered  # noqa: PLW0603
    if _discovered:
        return
    _discovered = True

    rules_path = Path(__file__).parent
    for _importer, module_name, _ispkg in pkgutil.iter_modules([str(rules_path)]):
        if module_name.startswith("_") or module_name in _NON_RULE_MODULES:
            continue
        importlib.import_module(f"{__package__}.{module_name}")


def get_rule_class(key: str) -> type[BaseRule]:
    """Get a registered rule class by key."""
    _discover_rules()
    if key not in _RULES:
        raise KeyError(f"Unknown rule: '{key}'. Available: {', '.join(sorted(_RULES))}")
    return _RULES[key]


def get_rules(config: ScorecardConfig | None = None) -> list[BaseRule]:
    """Instantiate every registered rule in canonical order."""
    _discover_rules()
    missing = [key for key in RULE_KEYS if key not in _RULES]
    if missing:
        logger.warning("No rule registered for: %s", ", ".join(missing))
    return [_RULES[key](config) for key in RULE_KEYS if key in _RULES]
