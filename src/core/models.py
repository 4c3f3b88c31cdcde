"""Pydantic 모델 정의"""

from typing import Any, Dict, List, Optional, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# OpenAPI Specification Models
# ============================================================================

class Schema(BaseModel):
    """OpenAPI Schema 객체"""
    type: Optional[str] = None
    format: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None
    items: Optional[Dict[str, Any]] = None
    required: Optional[List[str]] = None
    enum: Optional[List[Any]] = None
    example: Optional[Any] = None
    ref: Optional[str] = Field(None, alias="$ref")


class Parameter(BaseModel):
    """OpenAPI Parameter 객체"""
    name: str
    in_: Literal["query", "header", "path", "cookie"] = Field(..., alias="in")
    description: Optional[str] = None
    required: Optional[bool] = False
    schema_: Optional[Schema] = Field(None, alias="schema")
    example: Optional[Any] = None


class RequestBody(BaseModel):
    """OpenAPI RequestBody 객체"""
    description: Optional[str] = None
    content: Dict[str, Any] = Field(default_factory=dict)  # media type -> media type object
    required: Optional[bool] = False


class Response(BaseModel):
    """OpenAPI Response 객체"""
    description: Optional[str] = None
    content: Optional[Dict[str, Any]] = None


class Operation(BaseModel):
    """OpenAPI Operation 객체 (GET, POST 등)"""
    summary: Optional[str] = None
    description: Optional[str] = None
    operationId: Optional[str] = None
    tags: Optional[List[str]] = None
    parameters: Optional[List[Parameter]] = None
    requestBody: Optional[RequestBody] = None
    responses: Dict[str, Response] = Field(default_factory=dict)
    security: Optional[List[Dict[str, List[str]]]] = None


class PathItem(BaseModel):
    """OpenAPI Path Item (경로별 엔드포인트)"""
    parameters: Optional[List[Parameter]] = None
    get: Optional[Operation] = None
    post: Optional[Operation] = None
    put: Optional[Operation] = None
    delete: Optional[Operation] = None
    patch: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None


class OpenAPISpec(BaseModel):
    """OpenAPI Specification (전체 구조)"""
    openapi: str  # "3.0.0", "3.1.0"
    info: Dict[str, Any]
    servers: Optional[List[Dict[str, Any]]] = None
    paths: Dict[str, PathItem]
    components: Optional[Dict[str, Any]] = None


class OperationDescriptor(Operation):
    """호출 가능한 단일 엔드포인트 (Operation + HTTP 메서드 + 경로)

    requestBody 가 None 이면 "바디 없음"을 의미한다.
    """
    method: str  # "get", "post", ...
    path: str  # "/pages/{page_id}"


# ============================================================================
# Request / Response Models
# ============================================================================

class ClassifiedParams(BaseModel):
    """파라미터 분류 결과

    body_params 는 일반 dict 이거나 multipart 폼(MultipartForm)이다.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    url_params: Dict[str, Any] = Field(default_factory=dict)
    body_params: Any = Field(default_factory=dict)


class RequestConfig(BaseModel):
    """operation 호출 시 전달되는 요청 설정"""
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: Optional[float] = None


class HttpClientResponse(BaseModel):
    """정규화된 응답 (성공 시에만 생성)"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any = None
    status: int
    headers: httpx.Headers = Field(default_factory=httpx.Headers)


class HttpClientConfig(BaseModel):
    """HttpClient 설정"""
    base_url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: float = 30.0
    user_agent: str = "openapi-http-client"
