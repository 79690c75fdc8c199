"""
Module 01 - Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy across picopak.
Defines both a Pydantic model for structured error output (CLI --json)
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CONTENT_VALIDATION_ERROR = "CONTENT_VALIDATION_ERROR"
    INTEGRITY_ERROR = "INTEGRITY_ERROR"
    CHECKSUM_MISMATCH = "CHECKSUM_MISMATCH"
    NOT_FOUND = "NOT_FOUND"
    NO_ARTIFACT = "NO_ARTIFACT"
    VERSION_CONFLICT = "VERSION_CONFLICT"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    FORMAT_ERROR = "FORMAT_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class PicopakError(BaseModel):
    """
    Error model for structured error output.

    Produced from a raised PicopakException when a command reports its
    failure as JSON.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    errors: list[str] = Field(
        default_factory=list,
        description="Every individual violation, for accumulating failures",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(default=False, description="Whether the operation can be retried")


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class PicopakException(Exception):
    """
    Base exception for all picopak errors.

    Carries structured error information and can be converted to a
    PicopakError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "PICOPAK_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    @property
    def violations(self) -> list[str]:
        """Individual violations; a single-message error has one."""
        return [self.message]

    def to_error_model(self) -> PicopakError:
        """Convert this exception to a PicopakError model."""
        return PicopakError(
            code=self.code,
            message=self.message,
            errors=self.violations,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(PicopakException):
    """
    Raised when a document or package tree violates its schema.

    Always carries the complete list of violations, never just the first.
    """

    default_code = ErrorCodes.SCHEMA_VALIDATION_ERROR
    summary = "Validation failed"

    def __init__(
        self,
        errors: list[str],
        details: dict[str, Any] | None = None,
    ) -> None:
        self.errors = list(errors)
        message = self.summary + ":\n - " + "\n - ".join(self.errors)
        super().__init__(
            message=message,
            code=self.default_code,
            details=details,
            retryable=False,
        )

    @property
    def violations(self) -> list[str]:
        return list(self.errors)


class ManifestValidationError(ValidationError):
    """Raised when picopak.json fails manifest validation."""

    summary = "Invalid picopak.json manifest"


class MetadataValidationError(ValidationError):
    """Raised when a pack metadata sidecar is malformed."""

    summary = "Invalid pack metadata"


class ContentValidationError(ValidationError):
    """Raised when a package tree does not satisfy its distribution tier."""

    default_code = ErrorCodes.CONTENT_VALIDATION_ERROR
    summary = "Package content validation failed"


class IntegrityError(PicopakException):
    """
    Raised on a hash or size mismatch for a local binary or artifact.

    Never retried automatically.
    """

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
        code: str = ErrorCodes.INTEGRITY_ERROR,
    ) -> None:
        self.errors = list(errors) if errors else [message]
        super().__init__(message=message, code=code, details=details, retryable=False)

    @property
    def violations(self) -> list[str]:
        return list(self.errors)


class ChecksumMismatchError(IntegrityError):
    """Raised when downloaded bytes do not hash to the declared checksum."""

    def __init__(self, path: str, expected: str, actual: str) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum verification failed for {path}: expected {expected}, got {actual}",
            details={"path": path, "expected": expected, "actual": actual},
            code=ErrorCodes.CHECKSUM_MISMATCH,
        )


class NotFoundError(PicopakException):
    """Raised when a package or version is absent from the index."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.NOT_FOUND, details=details)


class NoArtifactError(PicopakException):
    """Raised when a release exists but has no artifact for the platform."""

    def __init__(
        self,
        package_name: str,
        version: str,
        platform: str,
    ) -> None:
        super().__init__(
            message=(
                f"No downloadable artifact found for {package_name}@{version} "
                f"on platform {platform}"
            ),
            code=ErrorCodes.NO_ARTIFACT,
            details={"package": package_name, "version": version, "platform": platform},
        )


class ConflictError(PicopakException):
    """Raised when republishing an existing (package, version) pair."""

    def __init__(self, package_name: str, version: str) -> None:
        self.package_name = package_name
        self.version = version
        super().__init__(
            message=f"Immutable version check failed: {package_name}@{version} already exists.",
            code=ErrorCodes.VERSION_CONFLICT,
            details={"package": package_name, "version": version},
        )


class TransportError(PicopakException):
    """Raised on network/HTTP failure, redirect overflow or unsupported checksum."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        retryable: bool = False,
    ) -> None:
        self.status_code = status_code
        self.url = url
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if url:
            details["url"] = url
        super().__init__(
            message=message,
            code=ErrorCodes.TRANSPORT_ERROR,
            details=details,
            retryable=retryable,
        )


class FormatError(PicopakException):
    """Raised when an index or metadata document matches no supported shape."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.FORMAT_ERROR, details=details)
