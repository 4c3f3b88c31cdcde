"""파일 업로드 파라미터 탐지 및 multipart 폼 구성"""

import json
import os
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import IO, Any, Dict, Iterator, List, NamedTuple, Optional, Tuple, Union

from pydantic import BaseModel

from src.core.models import Operation
from src.core.exceptions import FileUploadError


MULTIPART_MEDIA_TYPE = "multipart/form-data"


def _is_binary_schema(schema: Any) -> bool:
    if not isinstance(schema, dict):
        return False
    if schema.get("format") == "binary":
        return True
    if schema.get("type") == "array":
        return _is_binary_schema(schema.get("items"))
    return False


def get_file_upload_params(operation: Operation) -> List[str]:
    """파일 내용을 받는 파라미터 이름 목록

    multipart/form-data 요청 바디 스키마에서 format: binary 인 속성
    (또는 그 배열)을 찾는다.

    Args:
        operation: Operation 객체

    Returns:
        List[str]: 파일 파라미터 이름 (스키마 선언 순서)
    """
    if operation.requestBody is None:
        return []

    names: List[str] = []
    for media_type, media in operation.requestBody.content.items():
        if not media_type.lower().startswith(MULTIPART_MEDIA_TYPE):
            continue
        schema = (media or {}).get("schema") or {}
        for name, prop in (schema.get("properties") or {}).items():
            if _is_binary_schema(prop) and name not in names:
                names.append(name)

    return names


class FormPart(BaseModel):
    """multipart 폼의 단일 항목 (파일 또는 일반 필드)"""
    name: str
    value: Optional[str] = None
    path: Optional[Path] = None

    @property
    def is_file(self) -> bool:
        return self.path is not None


class FormPayload(NamedTuple):
    """열린 multipart 폼 (httpx 의 data=, files= 인자 형식)"""
    data: Dict[str, Union[str, List[str]]]
    files: List[Tuple[str, Tuple[str, IO[bytes]]]]


def to_form_value(value: Any) -> str:
    """일반 폼 필드 값을 문자열로 변환"""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    return str(value)


class MultipartForm:
    """파일 경로와 일반 필드를 순서대로 담는 multipart 폼

    파일은 open() 컨텍스트 안에서만 열린다.
    """

    def __init__(self, boundary: Optional[str] = None):
        self.boundary = boundary or os.urandom(16).hex()
        self.parts: List[FormPart] = []

    def append_file(self, name: str, path: Union[str, Path]) -> None:
        self.parts.append(FormPart(name=name, path=Path(path)))

    def append_field(self, name: str, value: Any) -> None:
        self.parts.append(FormPart(name=name, value=to_form_value(value)))

    @property
    def files(self) -> List[FormPart]:
        return [part for part in self.parts if part.is_file]

    @property
    def fields(self) -> List[FormPart]:
        return [part for part in self.parts if not part.is_file]

    def get_headers(self) -> Dict[str, str]:
        """boundary 를 포함한 Content-Type 헤더"""
        return {"Content-Type": f"{MULTIPART_MEDIA_TYPE}; boundary={self.boundary}"}

    @contextmanager
    def open(self) -> Iterator[FormPayload]:
        """파일 스트림을 열고 FormPayload 를 반환

        컨텍스트를 벗어나면 (예외, 취소 포함) 모든 파일이 닫힌다.

        Raises:
            FileUploadError: 파일을 열 수 없을 때
        """
        with ExitStack() as stack:
            data: Dict[str, Union[str, List[str]]] = {}
            files: List[Tuple[str, Tuple[str, IO[bytes]]]] = []

            for part in self.parts:
                if part.is_file:
                    try:
                        stream = stack.enter_context(open(part.path, "rb"))
                    except OSError as e:
                        raise FileUploadError(
                            f"Failed to read file at {part.path}: {e}"
                        ) from e
                    files.append((part.name, (part.path.name, stream)))
                elif part.name in data:
                    existing = data[part.name]
                    if isinstance(existing, list):
                        existing.append(part.value)
                    else:
                        data[part.name] = [existing, part.value]
                else:
                    data[part.name] = part.value

            yield FormPayload(data=data, files=files)

    def __repr__(self) -> str:
        return f"MultipartForm(parts={self.parts!r})"
