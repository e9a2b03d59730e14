"""Exceptions raised by the generator.

Every failure is fatal to the run: nothing is written once one of these is
raised. Errors raised by delegates are not wrapped and propagate as-is.
"""

from __future__ import annotations


class RouterGenError(Exception):
    """Base class for generator failures."""


class ConfigurationError(RouterGenError):
    """Generator options failed validation."""


class SchemaLoadError(RouterGenError):
    """The input document could not be read or has the wrong shape."""


class MissingClientGeneratorError(RouterGenError):
    """No prisma-client-js generator is declared next to this one."""

    def __init__(self, providers: list[str]):
        self.providers = providers
        declared = ", ".join(providers) if providers else "none"
        super().__init__(
            "Could not find a prisma-client-js generator among the declared "
            f"generators (declared: {declared}); entity types cannot be imported"
        )


class NamingCollisionError(RouterGenError):
    """Two entities resolve to the same router key or router symbol."""

    def __init__(self, key: str, first: str, second: str):
        self.key = key
        self.first = first
        self.second = second
        super().__init__(
            f"Entities {first!r} and {second!r} both resolve to {key!r} in the app router"
        )


class DelegateLoadError(RouterGenError):
    """A delegate reference could not be imported."""
