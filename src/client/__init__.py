"""Client 모듈 - 파라미터 분류, 요청 디스패치"""

from .file_upload import MultipartForm, FormPayload, get_file_upload_params
from .classifier import ParameterClassifier
from .operations import HttpOperation, OperationCallable, build_operation_map
from .dispatcher import RequestDispatcher
from .http_client import HttpClient

__all__ = [
    "MultipartForm",
    "FormPayload",
    "get_file_upload_params",
    "ParameterClassifier",
    "HttpOperation",
    "OperationCallable",
    "build_operation_map",
    "RequestDispatcher",
    "HttpClient",
]
