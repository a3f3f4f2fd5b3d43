"""
actionctl faults - typed fault signals.

Faults are exceptions carrying a stable code, a domain and a severity.
``Application.handle`` maps them to responses and logs them with
``to_dict()`` attached.

Defines:
- Fault base class, FaultDomain and Severity
- Controller resolution faults (misconfigured routes)
- Registry faults (service container misuse)
- HTTPException (raised by ``AbstractController.abort``)
- ConfigError
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class Severity(str, Enum):
    """Selects the logging level a fault is reported with."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain(str, Enum):
    """Area of the application a fault comes from."""
    CONFIG = "config"
    REGISTRY = "registry"
    ROUTING = "routing"
    FLOW = "flow"
    SECURITY = "security"


# Configuration problems stop the application; everything else is an error
_DEFAULT_SEVERITY = {FaultDomain.CONFIG: Severity.FATAL}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base class of every actionctl error.

    ``code``, ``message`` and ``domain`` may be passed or declared as class
    attributes; all three must end up set. ``metadata`` holds the values
    the message was built from.
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.code = code or getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain or getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{type(self).__name__} needs a code, a message and a domain")

        super().__init__(self.message)
        self.severity = severity or _DEFAULT_SEVERITY.get(self.domain, Severity.ERROR)
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.code} ({self.domain.value})>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "metadata": self.metadata,
        }


# ============================================================================
# Controller resolution faults
# ============================================================================

class ControllerResolutionFault(Fault, ValueError):
    """
    A route points at a controller that cannot be resolved.

    These are configuration errors of the route table, not client errors.
    They are also ``ValueError`` so callers can treat them as invalid
    arguments.
    """
    domain = FaultDomain.ROUTING


class MissingActionParameter(ControllerResolutionFault):
    code = "MISSING_ACTION_PARAMETER"

    def __init__(self, attribute: str = "action"):
        super().__init__(
            message=(
                f'To route an action controller, make sure the route contains '
                f'an "{attribute}" parameter.'
            ),
            metadata={"attribute": attribute},
        )


class UnknownService(ControllerResolutionFault):
    code = "UNKNOWN_SERVICE"

    def __init__(self, service: str):
        self.service = service
        super().__init__(
            message=f'Service "{service}" does not exist.',
            metadata={"service": service},
        )


class UnknownClass(ControllerResolutionFault):
    code = "UNKNOWN_CLASS"

    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(
            message=f'Class "{class_name}" does not exist.',
            metadata={"class_name": class_name},
        )


class InvalidServiceValue(ControllerResolutionFault):
    """Registry value is neither a class name nor a usable object."""
    code = "INVALID_SERVICE_VALUE"

    def __init__(self, service: str, value: Any):
        self.service = service
        self.value = value
        super().__init__(
            message=(
                f'Service "{service}" must be a class name or an object, '
                f'got {type(value).__name__}.'
            ),
            metadata={"service": service, "type": type(value).__name__},
        )


class ControllerNotCallable(ControllerResolutionFault):
    code = "CONTROLLER_NOT_CALLABLE"

    def __init__(self, controller: str, reason: str = ""):
        self.controller = controller
        message = f'Controller "{controller}" is not callable.'
        if reason:
            message += f" {reason}"
        super().__init__(message=message, metadata={"controller": controller})


class MissingControllerArgument(ControllerResolutionFault):
    """The route supplies no value for a controller parameter without a default."""
    code = "MISSING_CONTROLLER_ARGUMENT"

    def __init__(self, controller: str, argument: str):
        self.controller = controller
        self.argument = argument
        super().__init__(
            message=(
                f'Controller "{controller}" requires that you provide a value '
                f'for the "{argument}" argument (because there is no default value or '
                f"because there is a non optional argument after this one)."
            ),
            metadata={"controller": controller, "argument": argument},
        )


# ============================================================================
# Registry faults
# ============================================================================

class RegistryFault(Fault):
    domain = FaultDomain.REGISTRY


class ServiceNotFound(RegistryFault, KeyError):
    code = "SERVICE_NOT_FOUND"

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            message=f'Identifier "{key}" is not defined.',
            metadata={"key": key},
        )


class FrozenService(RegistryFault):
    code = "FROZEN_SERVICE"

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            message=f'Cannot override frozen service "{key}".',
            metadata={"key": key},
        )


# ============================================================================
# HTTP / config
# ============================================================================

class HTTPException(Fault):
    """
    Abort the current request with an HTTP status.

    Raised by ``AbstractController.abort``; ``Application.handle`` turns it
    into a response with ``status`` and ``headers``.
    """
    code = "HTTP_EXCEPTION"
    domain = FaultDomain.FLOW

    def __init__(
        self,
        status: int,
        message: str = "",
        headers: Optional[Dict[str, str]] = None,
    ):
        self.status = status
        self.headers = dict(headers or {})
        super().__init__(
            message=message,
            severity=Severity.INFO if status < 500 else Severity.ERROR,
            metadata={"status": status},
        )


class ConfigError(Fault):
    """Raised when configuration validation fails."""
    code = "CONFIG_INVALID"
    domain = FaultDomain.CONFIG

    def __init__(self, message: str, **metadata: Any):
        super().__init__(message=message, metadata=metadata)
