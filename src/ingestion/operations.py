"""OpenAPI 명세서 → OperationDescriptor 목록"""

from typing import Dict, List, Optional, Tuple

from src.core.models import OpenAPISpec, Operation, OperationDescriptor, Parameter


HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head")


class OperationCollector:
    """경로 × HTTP 메서드 단위로 호출 가능한 operation 수집"""

    def collect(self, spec: OpenAPISpec) -> List[OperationDescriptor]:
        """OpenAPI 명세서에서 operation 목록 생성

        Args:
            spec: OpenAPI 명세서

        Returns:
            List[OperationDescriptor]: 명세서 순서대로 정렬된 operation 목록
        """
        descriptors = []

        for path, path_item in spec.paths.items():
            for method in HTTP_METHODS:
                operation = getattr(path_item, method)
                if operation is None:
                    continue

                descriptors.append(
                    self._create_descriptor(
                        path=path,
                        method=method,
                        operation=operation,
                        shared_parameters=path_item.parameters,
                    )
                )

        return descriptors

    def _create_descriptor(
        self,
        path: str,
        method: str,
        operation: Operation,
        shared_parameters: Optional[List[Parameter]] = None,
    ) -> OperationDescriptor:
        """단일 operation 디스크립터 생성

        Args:
            path: API 경로
            method: HTTP 메서드 (소문자)
            operation: Operation 객체
            shared_parameters: Path Item 수준 파라미터

        Returns:
            OperationDescriptor: 생성된 디스크립터
        """
        fields = operation.model_dump(by_alias=True, exclude_none=True)
        fields["parameters"] = [
            param.model_dump(by_alias=True, exclude_none=True)
            for param in self._merge_parameters(shared_parameters, operation.parameters)
        ]
        return OperationDescriptor.model_validate(
            {**fields, "method": method, "path": path}
        )

    def _merge_parameters(
        self,
        shared: Optional[List[Parameter]],
        own: Optional[List[Parameter]],
    ) -> List[Parameter]:
        """Path Item 파라미터와 operation 파라미터 병합

        같은 (name, in) 이면 operation 쪽이 우선한다.
        """
        merged: Dict[Tuple[str, str], Parameter] = {}
        for param in (shared or []) + (own or []):
            merged[(param.name, param.in_)] = param
        return list(merged.values())
