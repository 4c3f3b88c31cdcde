"""Core module - 공통 모델, 설정, 예외"""

from .models import (
    # OpenAPI Models
    OpenAPISpec,
    PathItem,
    Operation,
    OperationDescriptor,
    Parameter,
    RequestBody,
    Response,
    Schema,
    # Request / Response Models
    ClassifiedParams,
    RequestConfig,
    HttpClientResponse,
    HttpClientConfig,
)
from .config import settings, Settings
from .exceptions import (
    OpenAPIClientError,
    SpecParsingError,
    ConfigurationError,
    MissingOperationIdError,
    OperationNotFoundError,
    FileUploadError,
    MissingPathParameterError,
    HttpClientError,
)

__all__ = [
    # Models
    "OpenAPISpec",
    "PathItem",
    "Operation",
    "OperationDescriptor",
    "Parameter",
    "RequestBody",
    "Response",
    "Schema",
    "ClassifiedParams",
    "RequestConfig",
    "HttpClientResponse",
    "HttpClientConfig",
    # Config
    "settings",
    "Settings",
    # Exceptions
    "OpenAPIClientError",
    "SpecParsingError",
    "ConfigurationError",
    "MissingOperationIdError",
    "OperationNotFoundError",
    "FileUploadError",
    "MissingPathParameterError",
    "HttpClientError",
]
