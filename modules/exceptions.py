"""Custom exception types for armforge.

This module defines the exception hierarchy for armforge errors, enabling
precise error handling and contextual error messages throughout the application.

Exception Hierarchy:
    ArmForgeError (base)
    ├── InputValidationError - Caller-supplied parameters rejected
    │   ├── MissingRequiredInputError - A required parameter was not supplied
    │   ├── ConflictingInputError - Mutually exclusive parameters both supplied
    │   ├── UnsupportedCombinationError - Parameter not allowed in this mode
    │   ├── MalformedProtocolError - Protocol text does not have protocol[:port] shape
    │   ├── UnsupportedProtocolError - Protocol name not in the allowlist
    │   ├── InvalidPortError - Port suffix is not a non-negative integer
    │   └── UnknownFqdnTagError - FQDN tag not in the allowed tag table
    ├── DocumentLoadError - Parameter document could not be read or parsed
    ├── ConfigurationError - Provider configuration could not be loaded
    └── ArmRequestError - Azure Resource Manager request failed
"""

from typing import Any, Dict, Optional


class ArmForgeError(Exception):
    """Base exception for all armforge-specific errors.

    Attributes:
        message: Human-readable error description
        context: Additional contextual information (e.g., parameter names, literals)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize ArmForgeError.

        Args:
            message: Human-readable error description
            context: Optional dict with additional context (parameter, value, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InputValidationError(ArmForgeError):
    """Base class for rejected caller input.

    Always carries the offending parameter name in ``context["parameter"]``.
    """

    def __init__(
        self,
        message: str,
        parameter: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        merged = {"parameter": parameter}
        merged.update(context or {})
        super().__init__(message, context=merged)
        self.parameter = parameter


class MissingRequiredInputError(InputValidationError):
    """Raised when a parameter that the chosen mode requires was not supplied.

    Examples:
        - Neither TargetFqdn nor FqdnTag given for an application rule
    """

    pass


class ConflictingInputError(InputValidationError):
    """Raised when two mutually exclusive parameters are both supplied.

    Examples:
        - TargetFqdn and FqdnTag in the same application rule
    """

    pass


class UnsupportedCombinationError(InputValidationError):
    """Raised when a parameter is not allowed together with another one.

    Examples:
        - Protocol given while FqdnTag fixes the protocol set
    """

    pass


class MalformedProtocolError(InputValidationError):
    """Raised when a protocol string does not look like ``protocol[:port]``."""

    pass


class UnsupportedProtocolError(InputValidationError):
    """Raised when a protocol name is not one of the supported protocols."""

    pass


class InvalidPortError(InputValidationError):
    """Raised when a protocol port suffix is not a non-negative integer."""

    pass


class UnknownFqdnTagError(InputValidationError):
    """Raised when an FQDN tag cannot be mapped to an allowed tag."""

    pass


class DocumentLoadError(ArmForgeError):
    """Raised when a YAML/JSON parameter document cannot be loaded.

    Examples:
        - File does not exist
        - Invalid YAML syntax
    """

    pass


class ConfigurationError(ArmForgeError):
    """Raised when provider configuration loading fails."""

    pass


class ArmRequestError(ArmForgeError):
    """Raised when a request to Azure Resource Manager fails.

    Examples:
        - Non-2xx response (context carries status_code and ARM error code)
        - Connection errors and timeouts
    """

    pass
