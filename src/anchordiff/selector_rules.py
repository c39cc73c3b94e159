from __future__ import annotations

import re
from typing import Mapping

_CSS_IDENTIFIER_PATTERN = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")

_DYNAMIC_TOKEN_PATTERNS = (
    re.compile(r"^css-[a-z0-9_-]{4,}$", re.IGNORECASE),
    re.compile(r"^jss\d+$", re.IGNORECASE),
    re.compile(r"^sc-[a-z0-9]+$", re.IGNORECASE),
    re.compile(r"^[a-f0-9]{8,}$", re.IGNORECASE),
    re.compile(r"^[a-z]+__[a-z]+___[a-z0-9]{5,}$", re.IGNORECASE),
    re.compile(r"^[0-9]{4,}$"),
    re.compile(r"^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$", re.IGNORECASE),
)


def is_css_identifier(value: str) -> bool:
    return bool(_CSS_IDENTIFIER_PATTERN.fullmatch(value.strip()))


def escape_css_attribute_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def attribute_selector(name: str, value: str, operator: str = "=") -> str:
    return f'[{name}{operator}"{escape_css_attribute_value(value)}"]'


def id_selector(id_value: str) -> str:
    if is_css_identifier(id_value):
        return f"#{id_value}"
    return attribute_selector("id", id_value)


def class_selector(token: str) -> str:
    if is_css_identifier(token):
        return f".{token}"
    return attribute_selector("class", token, "~=")


def class_tokens(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [token for token in raw.split() if token]


def longest_class_token(raw: str | None) -> str | None:
    tokens = class_tokens(raw)
    if not tokens:
        return None
    # sorted() is stable, so the first of equally long tokens wins.
    return sorted(tokens, key=len, reverse=True)[0]


def first_data_attribute(attributes: Mapping[str, str]) -> tuple[str, str] | None:
    for name, value in attributes.items():
        if name.startswith("data-"):
            return name, value
    return None


def is_dynamic_token(token: str) -> bool:
    value = token.strip()
    if not value:
        return False
    if any(pattern.match(value) for pattern in _DYNAMIC_TOKEN_PATTERNS):
        return True
    if len(value) > 18 and re.search(r"\d", value):
        return True
    if value.count("-") >= 3 and re.search(r"\d", value):
        return True
    return False


def looks_generated_selector(selector: str | None) -> bool:
    """Return True when a class, id or attribute value in the selector looks machine-made."""
    if not selector:
        return False
    tokens = re.findall(r"[.#](-?[A-Za-z_][A-Za-z0-9_-]*)", selector)
    tokens.extend(re.findall(r'="((?:[^"\\]|\\.)*)"', selector))
    return any(is_dynamic_token(token) for token in tokens)
