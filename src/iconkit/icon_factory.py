from __future__ import annotations

import logging
import os
import re
import threading
from dataclasses import dataclass, field
from typing import Any, Mapping

from iconkit.exceptions import CannotRegisterIconSet, SvgNotFound
from iconkit.svg import IconRenderer
from iconkit.utils.attribute_utils import merge_classes
from iconkit.utils.deferred_stack import DEFAULT_STACK, DeferredStack

logger = logging.getLogger(__name__)

DEFAULT_SET = "default"

_XML_DECLARATION = re.compile(r"^(<\?xml.+?\?>)", flags=re.S)


@dataclass
class IconSet:
    """A named directory-backed collection of SVG icons."""

    name: str
    paths: list[str]
    prefix: str
    class_: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    fallback: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "paths": list(self.paths),
            "prefix": self.prefix,
            "class": self.class_,
            "attributes": dict(self.attributes),
            "fallback": self.fallback,
        }


class IconFactory:
    """Registry of icon sets that resolves names into ``IconRenderer`` objects."""

    def __init__(
        self,
        *,
        default_class: str = "",
        default_attributes: Mapping[str, Any] | None = None,
        fallback: str = "",
        stack_name: str = DEFAULT_STACK,
    ):
        self.default_class = default_class
        self.default_attributes = _without_defer(default_attributes)
        self.fallback = fallback
        self.stack_name = stack_name
        self._sets: dict[str, IconSet] = {}
        self._cache: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def add(
        self,
        name: str,
        *,
        paths: str | list[str],
        prefix: str,
        class_: str = "",
        attributes: Mapping[str, Any] | None = None,
        fallback: str = "",
    ) -> "IconFactory":
        if isinstance(paths, str):
            paths = [paths]
        if not prefix:
            raise CannotRegisterIconSet.invalid_prefix(name)
        for path in paths:
            if not os.path.isdir(path):
                raise CannotRegisterIconSet.non_existing_path(name, path)
        for other in self._sets.values():
            if other.name != name and other.prefix == prefix:
                raise CannotRegisterIconSet.prefix_taken(name, prefix)

        self._sets[name] = IconSet(
            name=name,
            paths=[os.path.abspath(p) for p in paths],
            prefix=prefix,
            class_=class_,
            attributes=_without_defer(attributes),
            fallback=fallback,
        )
        logger.debug("Registered icon set %s (prefix=%s, paths=%s)", name, prefix, paths)
        return self

    def all(self) -> dict[str, IconSet]:
        return dict(self._sets)

    def icon_names(self, set_name: str) -> list[str]:
        """List the icons of a set, nested directories joined with dots."""
        icon_set = self._sets[set_name]
        names: set[str] = set()
        for base in icon_set.paths:
            for root, _dirs, files in os.walk(base):
                rel = os.path.relpath(root, base)
                for filename in files:
                    if not filename.endswith(".svg"):
                        continue
                    stem = filename[: -len(".svg")]
                    names.add(stem if rel == "." else ".".join(rel.split(os.sep) + [stem]))
        return sorted(names)

    def contents(self, set_name: str, name: str) -> str:
        key = (set_name, name)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        icon_set = self._sets.get(set_name)
        if icon_set is None:
            raise SvgNotFound.missing_icon(name, set_name)

        relative = self._relative_icon_path(name)
        if relative is None:
            logger.warning("Rejected icon name %r for set %s", name, set_name)
            raise SvgNotFound.missing_icon(name, set_name)

        for base in icon_set.paths:
            root = os.path.realpath(base)
            path = os.path.realpath(os.path.join(root, relative))
            if os.path.commonpath([root, path]) != root:
                logger.warning("Icon %r resolves outside of %s", name, root)
                continue
            if os.path.isfile(path):
                logger.debug("Loading icon %s from %s", name, path)
                with open(path, "r", encoding="utf-8") as f:
                    text = _XML_DECLARATION.sub("", f.read()).strip()
                with self._lock:
                    self._cache[key] = text
                return text

        raise SvgNotFound.missing_icon(name, set_name)

    def svg(
        self,
        name: str,
        class_or_attributes: str | Mapping[str, Any] = "",
        attributes: Mapping[str, Any] | None = None,
        *,
        stack: DeferredStack | None = None,
    ) -> IconRenderer:
        """Resolve ``name`` to an icon and merge default classes and attributes.

        ``name`` may carry a set prefix (``"heroicon-o-bell"``); unprefixed names
        come from the ``default`` set. A missing icon falls back to the set's
        fallback icon, then to the factory-wide fallback.
        """
        if isinstance(class_or_attributes, str):
            caller_attrs = dict(attributes or {})
            caller_class = class_or_attributes
        else:
            caller_attrs = {**class_or_attributes, **(attributes or {})}
            caller_class = ""
        caller_class = merge_classes(caller_class, caller_attrs.pop("class", None))

        set_name, icon_name = self._split_set_and_icon(name)
        icon_set = self._sets.get(set_name) if set_name else None

        try:
            markup = self.contents(set_name, icon_name)
        except SvgNotFound:
            markup, icon_name = self._fallback_contents(icon_set, name)

        layers = [self.default_attributes, icon_set.attributes if icon_set else {}, caller_attrs]

        merged: dict[str, Any] = {}
        merged_class = merge_classes(
            self.default_class,
            self.default_attributes.get("class"),
            icon_set.class_ if icon_set else "",
            icon_set.attributes.get("class") if icon_set else "",
            caller_class,
        )
        if merged_class:
            merged["class"] = merged_class
        for layer in layers:
            merged.update((k, v) for k, v in layer.items() if k != "class")

        return IconRenderer(
            icon_name,
            markup,
            merged,
            stack=stack,
            stack_name=self.stack_name,
        )

    @staticmethod
    def _relative_icon_path(name: str) -> str | None:
        """Map a dotted icon name to a relative file path, or None if it is unsafe."""
        if not name or "/" in name or "\\" in name or os.sep in name:
            return None
        segments = name.split(".")
        if any(not segment for segment in segments):
            return None
        return os.path.join(*segments) + ".svg"

    def _split_set_and_icon(self, name: str) -> tuple[str, str]:
        # Longest prefix wins so "heroicon-o" beats "heroicon"
        for icon_set in sorted(self._sets.values(), key=lambda s: len(s.prefix), reverse=True):
            head = icon_set.prefix + "-"
            if name.startswith(head) and len(name) > len(head):
                return icon_set.name, name[len(head):]
        return DEFAULT_SET, name

    def _fallback_contents(self, icon_set: IconSet | None, requested: str) -> tuple[str, str]:
        if icon_set and icon_set.fallback:
            logger.debug("Icon %s missing, using set fallback %s", requested, icon_set.fallback)
            return self.contents(icon_set.name, icon_set.fallback), icon_set.fallback
        if self.fallback:
            logger.debug("Icon %s missing, using fallback %s", requested, self.fallback)
            set_name, icon_name = self._split_set_and_icon(self.fallback)
            return self.contents(set_name, icon_name), icon_name
        raise SvgNotFound.missing_icon(requested)


def _without_defer(attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    attrs = dict(attributes or {})
    if attrs.pop("defer", None) is not None:
        logger.warning("Ignoring 'defer' in default icon attributes; pass it per icon")
    return attrs
