"""요청 디스패처 - operation 호출 및 응답/오류 정규화"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

import httpx

from src.core.models import HttpClientResponse, Operation, RequestConfig
from src.core.exceptions import (
    HttpClientError,
    MissingOperationIdError,
    OperationNotFoundError,
)
from src.client.file_upload import MultipartForm
from src.client.operations import OperationCallable


logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def to_headers(raw: Any) -> httpx.Headers:
    """응답 헤더를 순서 있는 멀티맵으로 변환

    값이 비어 있으면 버리고, 나머지는 문자열로 변환한다.
    리스트 값은 항목마다 하나씩 추가한다.
    """
    if raw is None:
        return httpx.Headers()

    if isinstance(raw, httpx.Headers):
        items: Iterable[Tuple[Any, Any]] = raw.multi_items()
    elif isinstance(raw, Mapping):
        items = raw.items()
    else:
        items = raw

    pairs = []
    for key, value in items:
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item:
                pairs.append((str(key), str(item)))
    return httpx.Headers(pairs)


def merge_headers(*sources: Optional[Mapping]) -> Dict[str, str]:
    """대소문자 무시 헤더 병합 (뒤쪽이 우선)"""
    merged: Dict[str, str] = {}
    for source in sources:
        for key, value in (source or {}).items():
            for existing in [k for k in merged if k.lower() == key.lower()]:
                del merged[existing]
            merged[key] = value
    return merged


def read_data(response: httpx.Response) -> Any:
    """응답 바디 추출 (JSON 이면 파싱, 아니면 텍스트, 비어 있으면 None)"""
    if not response.content:
        return None

    content_type = response.headers.get("content-type", "")
    mime = content_type.split(";", 1)[0].strip().lower()
    if mime == JSON_CONTENT_TYPE or mime.endswith("+json"):
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


class RequestDispatcher:
    """operationId 로 callable 을 찾아 한 번 호출하고 결과를 정규화

    호출자 헤더는 생성 시점에 고정된 맵(headers) 또는 매 호출마다 평가되는
    header_provider 로 전달한다. 계산된 헤더보다 우선한다.
    """

    def __init__(
        self,
        operations: Mapping,
        headers: Optional[Mapping] = None,
        header_provider: Optional[Callable[[], Mapping]] = None,
        timeout: Optional[float] = None,
    ):
        self.operations: Dict[str, OperationCallable] = dict(operations)
        self.headers = dict(headers or {})
        self.header_provider = header_provider
        self.timeout = timeout

    def resolve(self, operation: Operation) -> OperationCallable:
        """operationId 에 대응하는 callable 조회

        Raises:
            MissingOperationIdError: operationId 가 없을 때
            OperationNotFoundError: 매핑에 없을 때
        """
        operation_id = operation.operationId
        if not operation_id:
            raise MissingOperationIdError()

        operation_fn = self.operations.get(operation_id)
        if operation_fn is None:
            raise OperationNotFoundError(operation_id)
        return operation_fn

    def build_headers(self, body_params: Any) -> Dict[str, str]:
        if isinstance(body_params, MultipartForm):
            computed = body_params.get_headers()
        elif body_params:
            computed = {"Content-Type": JSON_CONTENT_TYPE}
        else:
            computed = {}

        provided = self.header_provider() if self.header_provider else None
        return merge_headers(computed, self.headers, provided)

    async def dispatch(
        self,
        operation: Operation,
        url_params: Dict[str, Any],
        body_params: Any = None,
    ) -> HttpClientResponse:
        """operation 을 호출하고 정규화된 응답 반환

        Args:
            operation: 호출할 operation
            url_params: path/query 파라미터
            body_params: JSON 바디 dict, MultipartForm, 또는 None

        Returns:
            HttpClientResponse: 성공 응답

        Raises:
            ConfigurationError: callable 을 찾을 수 없거나 업로드 파일을 열 수 없을 때
            HttpClientError: 원격 엔드포인트가 오류 상태로 응답했을 때
            httpx.RequestError: 응답이 없는 전송 실패 (그대로 전달)
        """
        operation_fn = self.resolve(operation)
        config = RequestConfig(headers=self.build_headers(body_params), timeout=self.timeout)

        logger.debug("Dispatching %s with url params %s", operation.operationId, sorted(url_params))

        try:
            if isinstance(body_params, MultipartForm):
                with body_params.open() as payload:
                    response = await operation_fn(url_params, payload, config)
            else:
                response = await operation_fn(url_params, body_params or None, config)
        except httpx.HTTPStatusError as e:
            error_response = e.response
            logger.debug(
                "Operation %s failed with status %s", operation.operationId, error_response.status_code
            )
            raise HttpClientError(
                error_response.reason_phrase or "Request failed",
                error_response.status_code,
                read_data(error_response),
                to_headers(error_response.headers),
            ) from e

        return HttpClientResponse(
            data=read_data(response),
            status=response.status_code,
            headers=to_headers(response.headers),
        )
