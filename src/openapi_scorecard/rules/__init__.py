"""Rule evaluators.

Each rule module registers its class with ``@register_rule``; the registry
imports every module in this package on first use.

Usage:
    from openapi_scorecard.rules import get_rules

    for rule in get_rules(config):
        result = rule.evaluate(spec)
"""

from openapi_scorecard.rules.base import BaseRule
from openapi_scorecard.rules.description_docs import DescriptionDocsRule
from openapi_scorecard.rules.examples import ExamplesRule
from openapi_scorecard.rules.miscellaneous import MiscellaneousRule
from openapi_scorecard.rules.paths_operations import PathsOperationsRule
from openapi_scorecard.rules.registry import get_rule_class, get_rules, register_rule
from openapi_scorecard.rules.response_codes import ResponseCodesRule
from openapi_scorecard.rules.schema_types import SchemaTypesRule
from openapi_scorecard.rules.security import SecurityRule

__all__ = [
    "BaseRule",
    "DescriptionDocsRule",
    "ExamplesRule",
    "MiscellaneousRule",
    "PathsOperationsRule",
    "ResponseCodesRule",
    "SchemaTypesRule",
    "SecurityRule",
    "get_rule_class",
    "get_rules",
    "register_rule",
]
