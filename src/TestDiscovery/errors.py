"""Custom exception hierarchy for discovery request creation."""
from __future__ import annotations


class DiscoveryError(Exception):
    """Base exception for building and executing discovery requests."""


class PreconditionViolationError(DiscoveryError, ValueError):
    """Raised when an argument is missing, blank, or malformed."""


class NameResolutionError(DiscoveryError):
    """Raised when a name denotes neither a class, a method, nor a package."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"'{name}' specifies neither a class, a method, nor a package."
        )


class ConfigurationError(DiscoveryError):
    """Raised when the launcher options cannot produce a request."""


class EngineExecutionError(DiscoveryError):
    """Raised when a request cannot be handed to the test engine."""


class ModuleImportError(DiscoveryError):
    """Raised when importing a module fails for a reason other than absence."""

    def __init__(self, module_name: str, cause: BaseException) -> None:
        self.module_name = module_name
        super().__init__(
            f"Importing module '{module_name}' failed: "
            f"{type(cause).__name__}: {cause}"
        )
