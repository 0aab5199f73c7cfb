"""Single-icon renderer.

Works on already loaded SVG text with plain string operations: attributes are
inserted right after the first ``<svg``, titles right after the first opening
root tag. Markup without a root tag passes through untouched.
"""

from __future__ import annotations

import hashlib
import logging
import re
import secrets
import string
from typing import Any, Callable, Mapping

from markupsafe import Markup, escape

from iconkit.exceptions import DeferralError
from iconkit.utils.attribute_utils import render_attributes
from iconkit.utils.deferred_stack import DEFAULT_STACK, DeferredStack

logger = logging.getLogger(__name__)

DEFER_PREFIX = "icon-"
TITLE_ID_PREFIX = "svg-inline--title-"

# Elements that survive when a deferred icon's body is extracted
DEFERRABLE_TAGS = frozenset(
    {"circle", "ellipse", "line", "path", "polygon", "polyline", "rect", "g", "mask", "defs", "use"}
)

_ALPHANUMERIC = string.ascii_letters + string.digits
_OPENING_TAG = re.compile(r"<svg[^>]*>")
_COMMENT = re.compile(r"<!--.*?-->", flags=re.S)
_DECLARATION = re.compile(r"<\?.*?\?>|<![^>]*>", flags=re.S)
_TAG = re.compile(r"</?\s*([A-Za-z][\w:.-]*)[^>]*>")


def strip_tags(markup: str, allowed: frozenset[str] = DEFERRABLE_TAGS) -> str:
    """Remove every tag not in ``allowed``; text between tags is kept."""
    text = _COMMENT.sub("", markup)
    text = _DECLARATION.sub("", text)
    return _TAG.sub(lambda m: m.group(0) if m.group(1).lower() in allowed else "", text)


def random_suffix(length: int = 10) -> str:
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


class IconRenderer:
    def __init__(
        self,
        name: str,
        markup: str,
        attributes: Mapping[str, Any] | None = None,
        *,
        stack: DeferredStack | None = None,
        stack_name: str = DEFAULT_STACK,
        attribute_renderer: Callable[[Mapping[str, Any]], str] = render_attributes,
    ) -> None:
        attrs = dict(attributes or {})
        defer = attrs.pop("defer", False)

        self._name = name
        self._stack = stack
        self._stack_name = stack_name
        self._render_attributes = attribute_renderer
        self._markup = self.defer_content(markup, defer)
        self.attributes: dict[str, Any] = attrs

    def name(self) -> str:
        return self._name

    def content(self) -> str:
        return self._markup

    contents = content

    def add_title(self, title: str) -> str:
        """Return the markup with an accessible ``<title>`` as the root's first child.

        The title's generated id is recorded as ``aria-labelledby`` on the
        renderer's attributes.
        """
        title_id = TITLE_ID_PREFIX + random_suffix()
        title_element = f'<title id="{title_id}">{escape(title)}</title>'

        self.attributes["aria-labelledby"] = title_id

        return _OPENING_TAG.sub(lambda m: m.group(0) + title_element, self._markup, count=1)

    def render(self) -> str:
        if "title" in self.attributes:
            title = self.attributes.pop("title")
            if title is not None and title is not False:
                self._markup = self.add_title(str(title))

        return self._markup.replace(
            "<svg", "<svg" + self._render_attributes(self.attributes), 1
        )

    def __html__(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"IconRenderer(name={self._name!r}, attributes={self.attributes!r})"

    def defer_content(self, markup: str, defer: bool | str | None = False) -> str:
        """Swap the drawable body for a ``<use>`` reference and hoist the body.

        ``defer`` may be True (identifier derived from an md5 of the body) or
        a string used verbatim as the identifier suffix.
        """
        if defer is False or defer is None:
            return markup

        body = strip_tags(markup)
        if not body.strip():
            logger.debug("Icon %s has nothing to defer", self._name)
            return markup

        if self._stack is None:
            raise DeferralError(f'Cannot defer icon "{self._name}" without a deferred stack.')

        hash_content = body.replace("\r\n", "\n").replace("\r", "\n")
        # An empty key falls back to the content hash rather than a bare "icon-"
        if isinstance(defer, str) and defer:
            identifier = DEFER_PREFIX + defer
        else:
            identifier = DEFER_PREFIX + hashlib.md5(hash_content.encode("utf-8")).hexdigest()

        deferred = markup.replace(body, f'<use href="#{identifier}"></use>', 1) + "\n"

        group_body = body.lstrip("\r\n")
        self._stack.register_once(
            identifier,
            lambda: Markup(f'<g id="{identifier}">{group_body}</g>'),
            stack=self._stack_name,
        )
        logger.debug("Deferred icon %s as %s", self._name, identifier)
        return deferred
