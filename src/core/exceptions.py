"""커스텀 예외 정의"""

from typing import Any, Optional

import httpx


class OpenAPIClientError(Exception):
    """Base exception for the OpenAPI HTTP client"""
    pass


class SpecParsingError(OpenAPIClientError):
    """OpenAPI 명세서 파싱 오류"""
    pass


class ConfigurationError(OpenAPIClientError):
    """네트워크 호출 전에 발견되는 설정 오류 (재시도 대상 아님)"""
    pass


class MissingOperationIdError(ConfigurationError):
    """operationId 가 없는 operation"""
    def __init__(self):
        super().__init__("Operation ID is required")


class OperationNotFoundError(ConfigurationError):
    """operationId 에 대응하는 callable 이 없음"""
    def __init__(self, operation_id: str):
        self.operation_id = operation_id
        super().__init__(f"Operation {operation_id} not found")


class FileUploadError(ConfigurationError):
    """파일 업로드 파라미터 오류 (누락, 지원하지 않는 타입, 읽기 실패)"""
    pass


class MissingPathParameterError(ConfigurationError):
    """경로 템플릿을 채울 값이 없음"""
    def __init__(self, name: str, operation_id: Optional[str] = None):
        self.name = name
        self.operation_id = operation_id
        super().__init__(
            f"Missing path parameter '{name}' for operation {operation_id}"
        )


class HttpClientError(OpenAPIClientError):
    """원격 엔드포인트가 오류 응답을 반환한 경우"""
    def __init__(
        self,
        message: str,
        status: int,
        data: Any = None,
        headers: Optional[httpx.Headers] = None,
    ):
        self.message = message
        self.status = status
        self.data = data
        self.headers = headers
        super().__init__(f"{status} {message}")
