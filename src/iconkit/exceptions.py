from __future__ import annotations


class IconError(Exception):
    """Base class for icon lookup and rendering errors."""


class SvgNotFound(IconError):
    def __init__(self, message: str, name: str | None = None, set_name: str | None = None) -> None:
        super().__init__(message)
        self.name = name
        self.set_name = set_name

    @classmethod
    def missing_icon(cls, name: str, set_name: str | None = None) -> "SvgNotFound":
        if set_name:
            return cls(f'Svg by name "{name}" from set "{set_name}" not found.', name, set_name)
        return cls(f'Svg by name "{name}" not found.', name)


class CannotRegisterIconSet(IconError):
    @classmethod
    def non_existing_path(cls, set_name: str, path: str) -> "CannotRegisterIconSet":
        return cls(f'The [{path}] path for the "{set_name}" set does not exist.')

    @classmethod
    def prefix_taken(cls, set_name: str, prefix: str) -> "CannotRegisterIconSet":
        return cls(f'The [{prefix}] prefix for the "{set_name}" set is already used by another set.')

    @classmethod
    def invalid_prefix(cls, set_name: str) -> "CannotRegisterIconSet":
        return cls(f'The "{set_name}" set must define a non-empty prefix.')


class DeferralError(IconError):
    """Raised when an icon is deferred without a registry to hoist it into."""
