"""Inline SVG icons with attributes, accessible titles and deferred bodies."""

from iconkit.exceptions import CannotRegisterIconSet, DeferralError, IconError, SvgNotFound
from iconkit.icon_factory import IconFactory, IconSet
from iconkit.svg import IconRenderer
from iconkit.utils.deferred_stack import DeferredStack

__version__ = "0.1.0"

__all__ = [
    "CannotRegisterIconSet",
    "DeferralError",
    "DeferredStack",
    "IconError",
    "IconFactory",
    "IconRenderer",
    "IconSet",
    "SvgNotFound",
]
