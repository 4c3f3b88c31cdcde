"""파라미터 분류기 - 평면 인자를 URL 파라미터와 바디로 분리"""

import logging
from pathlib import Path
from typing import Any, Dict, List

from src.core.models import ClassifiedParams, Operation
from src.core.exceptions import FileUploadError
from src.client.file_upload import MultipartForm, get_file_upload_params


logger = logging.getLogger(__name__)

URL_LOCATIONS = ("path", "query")


class ParameterClassifier:
    """operation 정의에 따라 인자를 분류"""

    def classify(self, operation: Operation, args: Dict[str, Any]) -> ClassifiedParams:
        """인자를 url_params 와 body_params 로 분류

        1. 파일 파라미터가 있으면 multipart 폼을 만든다.
        2. 없으면 args 의 사본을 JSON 바디로 시작한다.
        3. path/query 로 선언된 파라미터는 url_params 로 옮긴다.
           (폼인 경우 폼에서 제거하지 않는다)
        4. requestBody 가 없고 폼도 아니면 남은 바디 필드 전부를
           url_params 로 옮긴다.

        Args:
            operation: Operation 객체
            args: 파라미터 이름 → 값

        Returns:
            ClassifiedParams: 분류 결과

        Raises:
            FileUploadError: 파일 파라미터 값이 없거나 타입이 잘못된 경우
        """
        form = self.prepare_file_upload(operation, args)
        url_params: Dict[str, Any] = {}
        body_params: Any = form if form is not None else dict(args)

        for param in operation.parameters or []:
            if param.in_ not in URL_LOCATIONS:
                continue
            if args.get(param.name) is None:
                continue
            url_params[param.name] = args[param.name]
            if form is None:
                body_params.pop(param.name, None)

        if operation.requestBody is None and form is None:
            # 바디 스키마가 없으면 남은 필드는 모두 URL 에 속한다
            for key, value in body_params.items():
                if value is not None:
                    url_params[key] = value
            body_params = {}

        return ClassifiedParams(url_params=url_params, body_params=body_params)

    def prepare_file_upload(self, operation: Operation, args: Dict[str, Any]):
        """파일 파라미터가 선언된 경우 MultipartForm 생성, 아니면 None

        Raises:
            FileUploadError: 파일 경로 누락 또는 지원하지 않는 값 타입
        """
        file_params = get_file_upload_params(operation)
        if not file_params:
            return None

        form = MultipartForm()
        for name in file_params:
            value = args.get(name)
            if value is None or (isinstance(value, (str, list, tuple)) and not value):
                raise FileUploadError(f"File path must be provided for parameter: {name}")

            for path in self._file_paths(value):
                form.append_file(name, path)

        for key, value in args.items():
            if key in file_params or value is None:
                continue
            form.append_field(key, value)

        logger.debug(
            "Built multipart form for %s: %d file(s), %d field(s)",
            operation.operationId, len(form.files), len(form.fields),
        )
        return form

    def _file_paths(self, value: Any) -> List[Any]:
        if isinstance(value, (str, Path)):
            return [value]
        if isinstance(value, (list, tuple)):
            for item in value:
                if not isinstance(item, (str, Path)):
                    raise FileUploadError(f"Unsupported file type: {type(item).__name__}")
            return list(value)
        raise FileUploadError(f"Unsupported file type: {type(value).__name__}")
