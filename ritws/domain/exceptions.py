"""
domain/exceptions.py
──────────────────────────────────────────────────────────────────────────────
Custom exception hierarchy.

All exceptions are rooted at RITError so callers can catch broadly
(except RITError) or narrowly (except DanglingParentError).

"Not found" is NOT an exception anywhere in this package: lookups by code
return None for absent codes.  The resolution errors below describe a
structurally inconsistent snapshot, which is a different situation.
"""
from __future__ import annotations


class RITError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(RITError):
    """Raised when required configuration is missing or invalid."""


class AuthenticationError(RITError):
    """Raised when the client certificate cannot be found or loaded."""


class WebserviceError(RITError):
    """Raised when a SOAP call fails (fault, transport or WSDL error)."""

    def __init__(self, message: str, service: str = "", operation: str = "") -> None:
        super().__init__(message)
        self.service = service
        self.operation = operation


class DecodingError(RITError):
    """Raised when a response does not have the expected shape."""


class CategoryResolutionError(RITError):
    """Base class for structural problems found while resolving categories."""


class EmptySnapshotError(CategoryResolutionError):
    """Raised when a lookup is attempted against an empty snapshot."""


class DanglingParentError(CategoryResolutionError):
    """Raised when a category's parent code is absent from the snapshot."""

    def __init__(self, code: str, parent_code: str) -> None:
        super().__init__(
            f"Category '{code}' references parent '{parent_code}' "
            "which is not present in the snapshot"
        )
        self.code = code
        self.parent_code = parent_code


class CategoryCycleError(CategoryResolutionError):
    """Raised when following parent codes leads back to a visited category."""

    def __init__(self, chain: list[str]) -> None:
        super().__init__("Cyclic category parent chain: " + " -> ".join(chain))
        self.chain = chain
