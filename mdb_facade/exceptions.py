"""
Custom exceptions for MDB_FACADE.

Every error raised by the facade itself derives from MongoFacadeError, which
is a RuntimeError. Errors raised by PyMongo (transport failures, server
errors on acknowledged writes) are not wrapped and reach the caller as-is.
"""

from typing import Any, Dict, List, Optional


class MongoFacadeError(RuntimeError):
    """
    Base exception for MongoDB facade errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection_name,
                 option, command, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InvalidNamespaceError(MongoFacadeError):
    """
    Raised when a collection name breaks the namespace rules.

    Attributes:
        message: Error message
        namespace: The rejected name
    """

    def __init__(
        self,
        message: str,
        namespace: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if namespace is not None:
            context["namespace"] = namespace
        super().__init__(message, context=context)
        self.namespace = namespace


class InvalidArgumentError(MongoFacadeError, TypeError):
    """Raised when an argument has the wrong type (names, keys, selectors)."""


class DocumentEncodingError(InvalidArgumentError):
    """
    Raised when a value has no native document representation.

    Attributes:
        message: Error message
        value_type: Name of the offending type
        path: Dotted path of the value inside the document
    """

    def __init__(
        self,
        message: str,
        value_type: Optional[str] = None,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if value_type:
            context["value_type"] = value_type
        if path:
            context["path"] = path
        super().__init__(message, context=context)
        self.value_type = value_type
        self.path = path


class QueryOptionsError(MongoFacadeError):
    """
    Raised when find options are unknown, ill-typed or inconsistent.

    Attributes:
        message: Error message
        options: Names of the offending options
    """

    def __init__(
        self,
        message: str,
        options: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if options:
            context["options"] = options
        super().__init__(message, context=context)
        self.options = options or []


class OperationFailureError(MongoFacadeError):
    """
    Raised when a database command reports a not-ok status.

    Attributes:
        message: Error message
        command: Name of the command that failed
        errmsg: Error message reported by the server
        response: Decoded server response
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        errmsg: Optional[str] = None,
        response: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if command:
            context["command"] = command
        if errmsg:
            context["errmsg"] = errmsg
        super().__init__(message, context=context)
        self.command = command
        self.errmsg = errmsg
        self.response = response or {}


class NotImplementedCapabilityError(MongoFacadeError, NotImplementedError):
    """
    Raised by administrative operations the facade does not model.

    This is a permanent capability gap, never a transient failure.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"{operation} is not implemented by this facade",
            context={"operation": operation},
        )
        self.operation = operation


class ConfigurationError(MongoFacadeError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value
