"""OpenAPI 명세서 기반 HTTP 클라이언트"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from src.core.models import HttpClientConfig, HttpClientResponse, OpenAPISpec, OperationDescriptor
from src.core.exceptions import OperationNotFoundError
from src.ingestion.operations import OperationCollector
from src.client.classifier import ParameterClassifier
from src.client.dispatcher import RequestDispatcher
from src.client.operations import build_operation_map


logger = logging.getLogger(__name__)


class HttpClient:
    """명세서의 operation 을 평면 인자로 호출하는 클라이언트

    Examples:
        async with HttpClient(HttpClientConfig(base_url=url), spec) as client:
            op = client.get_operation("listPages")
            result = await client.execute_operation(op, {"cursor": "abc"})
    """

    def __init__(
        self,
        config: HttpClientConfig,
        spec: OpenAPISpec,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: 기본 URL, 호출자 헤더, 타임아웃
            spec: 파싱된 OpenAPI 명세서
            transport: httpx 전송 계층 (테스트용 MockTransport 등)
        """
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={"User-Agent": config.user_agent},
            timeout=config.timeout,
            transport=transport,
        )
        self.operations: List[OperationDescriptor] = OperationCollector().collect(spec)
        self._by_id: Dict[str, OperationDescriptor] = {
            op.operationId: op for op in self.operations if op.operationId
        }
        self.classifier = ParameterClassifier()
        self.dispatcher = RequestDispatcher(
            build_operation_map(self._client, self.operations),
            headers=config.headers,
            timeout=config.timeout,
        )
        logger.debug("HttpClient ready: %s (%d operations)", config.base_url, len(self._by_id))

    def get_operation(self, operation_id: str) -> OperationDescriptor:
        """operationId 로 operation 조회

        Raises:
            OperationNotFoundError: 명세서에 없을 때
        """
        operation = self._by_id.get(operation_id)
        if operation is None:
            raise OperationNotFoundError(operation_id)
        return operation

    async def execute_operation(
        self,
        operation: OperationDescriptor,
        params: Optional[Dict[str, Any]] = None,
    ) -> HttpClientResponse:
        """인자를 분류해 operation 실행

        Args:
            operation: 실행할 operation
            params: 평면 인자 (파라미터 이름 → 값)

        Returns:
            HttpClientResponse: 정규화된 응답

        Raises:
            ConfigurationError: 네트워크 호출 전에 발견된 설정 오류
            HttpClientError: 오류 상태 응답
            httpx.RequestError: 응답이 없는 전송 실패
        """
        self.dispatcher.resolve(operation)
        classified = self.classifier.classify(operation, params or {})
        return await self.dispatcher.dispatch(
            operation, classified.url_params, classified.body_params
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
