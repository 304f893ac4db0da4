# -*- coding: utf-8 -*-
"""Where to find each field in a Niubiz authorization response.

The gateway has answered with several shapes over its API versions (``order``
+ ``dataMap``, the legacy ``data`` block, a flat body). Each logical field is
an ordered tuple of rules; the first rule whose path exists and whose value is
accepted wins. Supporting a new variant means adding a rule here.
"""
from collections import namedtuple
from typing import Any, Mapping, Optional, Sequence

APPROVAL_CODE = "000"

FieldRule = namedtuple("FieldRule", ["path", "accept"])

_MISSING = object()


def is_approval_code(value: Any) -> bool:
    return isinstance(value, str) and value == APPROVAL_CODE


def is_authorized_status(value: Any) -> bool:
    return isinstance(value, str) and value.casefold() == "authorized"


def is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


APPROVED_RULES = (
    FieldRule(("order", "actionCode"), is_approval_code),
    FieldRule(("dataMap", "ACTION_CODE"), is_approval_code),
    FieldRule(("dataMap", "STATUS"), is_authorized_status),
    FieldRule(("data", "ACTION_CODE"), is_approval_code),  # legacy
    FieldRule(("actionCode",), is_approval_code),  # flat
)

AUTHORIZATION_CODE_RULES = (
    FieldRule(("order", "authorizationCode"), is_text),
    FieldRule(("dataMap", "AUTHORIZATION_CODE"), is_text),
    FieldRule(("data", "AUTHORIZATION_CODE"), is_text),
    FieldRule(("authorizationCode",), is_text),
)

MASKED_CARD_RULES = (
    FieldRule(("dataMap", "CARD"), is_text),
    FieldRule(("data", "CARD", "CARDNUMBER"), is_text),
)


def resolve_path(document: Any, path: Sequence[str]) -> Any:
    """Walk nested objects; returns _MISSING as soon as a key is absent."""
    current = document
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return _MISSING
        current = current[key]
    return current


def first_match(document: Mapping[str, Any], rules: Sequence[FieldRule]) -> Optional[Any]:
    """Value of the first rule that matches, or None."""
    for rule in rules:
        value = resolve_path(document, rule.path)
        if value is not _MISSING and rule.accept(value):
            return value
    return None


def is_approved(document: Mapping[str, Any]) -> bool:
    return first_match(document, APPROVED_RULES) is not None


def authorization_code(document: Mapping[str, Any]) -> Optional[str]:
    return first_match(document, AUTHORIZATION_CODE_RULES)


def masked_card(document: Mapping[str, Any]) -> Optional[str]:
    return first_match(document, MASKED_CARD_RULES)
