"""Ingestion 모듈 - OpenAPI 명세서 파싱 및 operation 수집"""

from .parser import OpenAPIParser
from .operations import OperationCollector

__all__ = [
    "OpenAPIParser",
    "OperationCollector",
]
