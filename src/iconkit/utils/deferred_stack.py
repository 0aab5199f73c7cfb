"""Pass-scoped registry for deferred icon definitions.

A ``DeferredStack`` collects markup fragments under named stacks, keyed by an
identifier that is only ever registered once. Create one per document render
(the Flask integration keeps one on ``flask.g`` per request) and read the
collected fragments back when the page footer is rendered.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from markupsafe import Markup

logger = logging.getLogger(__name__)

DEFAULT_STACK = "iconkit"


class DeferredStack:
    """Thread-safe, once-per-identifier fragment collector."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seen: set[str] = set()
        self._stacks: dict[str, list[str]] = {}

    def register_once(
        self,
        identifier: str,
        render_fn: Callable[[], str],
        stack: str = DEFAULT_STACK,
    ) -> bool:
        """Run ``render_fn`` and push its output unless ``identifier`` was seen.

        Returns True when the fragment was registered, False for a repeat.
        """
        with self._lock:
            if identifier in self._seen:
                logger.debug("Deferred icon %s already registered", identifier)
                return False
            fragment = render_fn()
            self._seen.add(identifier)
            self._stacks.setdefault(stack, []).append(fragment)
        logger.debug("Registered deferred icon %s on stack %s", identifier, stack)
        return True

    def fragments(self, stack: str = DEFAULT_STACK) -> list[str]:
        with self._lock:
            return list(self._stacks.get(stack, []))

    def render(self, stack: str = DEFAULT_STACK) -> Markup:
        """Concatenate the fragments of a stack, in registration order."""
        return Markup("".join(self.fragments(stack)))

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()
            self._stacks.clear()

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
