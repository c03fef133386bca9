"""Template and slug utilities"""
import re
from typing import Dict

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    """Derive a URL slug from a title

    Lower-cases, collapses every run of characters outside [a-z0-9] into a
    single hyphen and trims leading/trailing hyphens.
    "Hello, World!! 2024" -> "hello-world-2024"
    """
    return _NON_SLUG_CHARS.sub("-", title.lower()).strip("-")


def process_template(template: str, variables: Dict[str, str]) -> str:
    """Replace {{name}} placeholders with their values

    Plain find/replace: values are not escaped and placeholders without a
    value are left as they are.
    """
    result = template or ""
    for key, value in variables.items():
        result = result.replace("{{" + key + "}}", "" if value is None else str(value))
    return result
