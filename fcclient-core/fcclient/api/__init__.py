from .core import (
    AccessDeniedError,
    FcError,
    FunctionExecutionError,
    LogDecodeError,
    PreconditionFailedError,
    RequestInput,
    ResourceConflictError,
    ResourceNotFoundError,
    ResponseOutput,
    ServerError,
    Shape,
    TriggerTypeMismatchError,
    ValidationError,
    get_fc_error,
)

__all__ = [
    "AccessDeniedError",
    "FcError",
    "FunctionExecutionError",
    "LogDecodeError",
    "PreconditionFailedError",
    "RequestInput",
    "ResourceConflictError",
    "ResourceNotFoundError",
    "ResponseOutput",
    "ServerError",
    "Shape",
    "TriggerTypeMismatchError",
    "ValidationError",
    "get_fc_error",
]
