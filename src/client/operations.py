"""operationId → 호출 가능한 operation 매핑"""

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple
from urllib.parse import quote

import httpx

from src.core.models import OperationDescriptor, RequestConfig
from src.core.exceptions import MissingPathParameterError, SpecParsingError
from src.client.file_upload import FormPayload


logger = logging.getLogger(__name__)

PATH_TEMPLATE = re.compile(r"\{([^}]+)\}")


class OperationCallable(Protocol):
    """(url_params, body, request_config) 를 받아 응답을 돌려주는 비동기 callable

    오류 상태 응답은 httpx.HTTPStatusError 로, 연결 실패 등은
    httpx.RequestError 로 알린다.
    """

    async def __call__(
        self,
        url_params: Dict[str, Any],
        body: Any,
        request_config: RequestConfig,
    ) -> httpx.Response:
        ...


def _query_value(value: Any) -> Any:
    if isinstance(value, dict):
        return json.dumps(value)
    if isinstance(value, (list, tuple)):
        return [json.dumps(item) if isinstance(item, dict) else item for item in value]
    return value


class HttpOperation:
    """공유 httpx.AsyncClient 위에서 단일 operation 을 실행"""

    def __init__(self, client: httpx.AsyncClient, operation: OperationDescriptor):
        self.client = client
        self.operation = operation
        self.method = operation.method.upper()
        self.path_params = PATH_TEMPLATE.findall(operation.path)

    def render_path(self, url_params: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        """경로 템플릿을 채우고 나머지 쿼리 파라미터를 반환

        Raises:
            MissingPathParameterError: 템플릿 변수 값이 없을 때
        """
        query = dict(url_params)
        path = self.operation.path
        for name in self.path_params:
            value = query.pop(name, None)
            if value is None:
                raise MissingPathParameterError(name, self.operation.operationId)
            path = path.replace("{" + name + "}", quote(str(value), safe=""))
        return path, {key: _query_value(value) for key, value in query.items()}

    async def __call__(
        self,
        url_params: Dict[str, Any],
        body: Any,
        request_config: RequestConfig,
    ) -> httpx.Response:
        path, query = self.render_path(url_params)

        kwargs: Dict[str, Any] = {"headers": request_config.headers}
        if query:
            kwargs["params"] = query
        if request_config.timeout is not None:
            kwargs["timeout"] = request_config.timeout
        if isinstance(body, FormPayload):
            kwargs["data"] = body.data
            kwargs["files"] = body.files
        elif body is not None:
            kwargs["json"] = body

        response = await self.client.request(self.method, path, **kwargs)
        response.raise_for_status()
        return response


def build_operation_map(
    client: httpx.AsyncClient,
    operations: Iterable[OperationDescriptor],
) -> Dict[str, OperationCallable]:
    """operationId 별 HttpOperation 매핑 생성

    operationId 가 없는 operation 은 건너뛴다.

    Raises:
        SpecParsingError: operationId 가 중복될 때
    """
    mapping: Dict[str, OperationCallable] = {}
    skipped: List[str] = []

    for operation in operations:
        operation_id: Optional[str] = operation.operationId
        if not operation_id:
            skipped.append(f"{operation.method.upper()} {operation.path}")
            continue
        if operation_id in mapping:
            raise SpecParsingError(f"Duplicate operationId: {operation_id}")
        mapping[operation_id] = HttpOperation(client, operation)

    if skipped:
        logger.debug("Operations without operationId skipped: %s", ", ".join(skipped))

    return mapping
