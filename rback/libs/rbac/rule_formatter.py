"""
Rule Formatter

Turns access rules into the one-line form shown in rules nodes, e.g.
`get,list pods "my-pod" (apps)`.
"""

from typing import Any, Iterable, Mapping, Union

from .models import PolicyRule


def _join(values: Iterable[str]) -> str:
    return ",".join(values or [])


def format_rule(rule: Union[PolicyRule, Mapping[str, Any]]) -> str:
    """
    Format one access rule as a single human-readable line.

    Args:
        rule: Decoded rule or raw rule mapping

    Returns:
        str: Rule line; empty fields contribute nothing
    """
    if not isinstance(rule, PolicyRule):
        rule = PolicyRule.from_dict(rule)

    line = _join(rule.verbs)
    resources = _join(rule.resources)
    if resources:
        line += f" {resources}"
    resource_names = _join(rule.resource_names)
    if resource_names:
        line += f' "{resource_names}"'
    non_resource_urls = _join(rule.non_resource_urls)
    if non_resource_urls:
        line += f" {non_resource_urls}"
    # [""] is the core API group and still renders as "()"
    if rule.api_groups:
        line += f" ({_join(rule.api_groups)})"
    return line


def format_rules(rules: Iterable[Union[PolicyRule, Mapping[str, Any]]]) -> str:
    """Format several rules, one line each, every line newline-terminated"""
    return "".join(format_rule(rule) + "\n" for rule in rules)
