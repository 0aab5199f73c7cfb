from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, current_app, g
from markupsafe import Markup

from iconkit.icon_factory import IconFactory
from iconkit.utils.attribute_utils import attribute_name
from iconkit.utils.deferred_stack import DeferredStack

logger = logging.getLogger(__name__)

EXTENSION_KEY = "iconkit"


def get_stack() -> DeferredStack:
    """Return the deferred stack of the current request, creating it on first use."""
    stack = getattr(g, "iconkit_stack", None)
    if stack is None:
        stack = DeferredStack()
        g.iconkit_stack = stack
    return stack


def get_factory() -> IconFactory:
    return current_app.extensions[EXTENSION_KEY]


def svg(name: str, class_or_attributes: str | Mapping[str, Any] = "", **attributes: Any) -> Markup:
    """Jinja global: ``{{ svg('icon-bell', 'w-4', aria_hidden=True, defer=True) }}``."""
    attrs = {attribute_name(k): v for k, v in attributes.items()}
    icon = get_factory().svg(name, class_or_attributes, attrs, stack=get_stack())
    return Markup(icon.render())


def icon_defs() -> Markup:
    """Jinja global emitting the deferred icon bodies collected so far.

    Call it after the icons that use it, typically at the end of ``<body>``.
    """
    factory = get_factory()
    fragments = get_stack().render(factory.stack_name)
    if not fragments:
        return Markup("")
    return Markup('<svg hidden class="hidden">') + fragments + Markup("</svg>")


def render_icon(
    name: str,
    class_name: str = "icon-image",
    title: str | None = None,
    defer: bool | str = False,
) -> Markup:
    """Render an icon from the current app's factory outside a template."""
    attributes: dict[str, Any] = {}
    if title:
        attributes["title"] = title
    if defer:
        attributes["defer"] = defer
    return svg(name, class_name, **attributes)


def init_icons(app: Flask, factory: IconFactory) -> None:
    """Attach ``factory`` to ``app`` and expose the template helpers."""
    app.extensions[EXTENSION_KEY] = factory
    app.jinja_env.globals["svg"] = svg
    app.jinja_env.globals["icon_defs"] = icon_defs
    logger.debug("Icon helpers registered for sets: %s", ", ".join(factory.all()))
