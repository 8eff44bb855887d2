"""
Code generation exceptions.
"""

from typing import Any, Dict, Optional


class CodegenError(Exception):
    """Base exception for all code generation errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(CodegenError):
    """Raised when generator configuration is malformed."""
    pass


class GraphValidationError(CodegenError):
    """Raised when a node graph cannot be loaded."""

    def __init__(self, message: str, path: str = '', details: Optional[Dict[str, Any]] = None):
        super().__init__(f"{path}: {message}" if path else message, details)
        self.path = path


class SynthesisError(CodegenError):
    """Raised when a compilation pass cannot complete. Output is discarded."""

    def __init__(self, message: str, kind: Optional[str] = None, node_id: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.kind = kind
        self.node_id = node_id


class UnhandledNodeKindError(SynthesisError):
    """Raised for a node kind with no emitter, or an unknown field option."""

    def __init__(self, kind: str, node_id: Optional[str] = None, value: Any = None,
                 message: Optional[str] = None):
        if message is None:
            if value is None:
                message = f'No emitter registered for node kind "{kind}"'
            else:
                message = f'Unhandled option {value!r} ({kind})'
        super().__init__(message, kind=kind, node_id=node_id,
                         details={'value': value} if value is not None else None)
        self.value = value
