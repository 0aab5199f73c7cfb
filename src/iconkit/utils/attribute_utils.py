from __future__ import annotations

import re
from typing import Any, Mapping

from markupsafe import escape

# Same rule Jinja's xmlattr filter applies to keys
_INVALID_ATTR_NAME = re.compile(r"[\s/>=]", flags=re.ASCII)


def render_attributes(attributes: Mapping[str, Any] | None) -> str:
    """Serialize an attribute mapping for insertion into an opening tag.

    The result starts with a space so it can be glued right after a tag name.
    ``False`` and ``None`` values are omitted, ``True`` renders the bare
    attribute name and everything else is HTML-escaped.
    """
    if not attributes:
        return ""

    parts: list[str] = []
    for key, value in attributes.items():
        if value is None or value is False:
            continue
        if not key or _INVALID_ATTR_NAME.search(key) is not None:
            raise ValueError(f"Invalid character in attribute name: {key!r}")
        if value is True:
            parts.append(str(escape(key)))
        else:
            parts.append(f'{escape(key)}="{escape(value)}"')

    if not parts:
        return ""
    return " " + " ".join(parts)


def merge_classes(*classes: str | None) -> str:
    """Join CSS class strings, dropping blanks and repeated class names."""
    seen: list[str] = []
    for value in classes:
        if not value:
            continue
        for cls in str(value).split():
            if cls not in seen:
                seen.append(cls)
    return " ".join(seen)


def attribute_name(keyword: str) -> str:
    """Map a Python keyword argument name to an HTML attribute name."""
    if keyword.endswith("_") and not keyword.startswith("_"):
        keyword = keyword[:-1]
    return keyword.replace("_", "-")
