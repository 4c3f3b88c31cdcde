"""Pytest fixtures."""

from typing import Any, Dict

import pytest

from src.core.models import OperationDescriptor


def make_operation(**fields: Any) -> OperationDescriptor:
    fields.setdefault("method", "get")
    fields.setdefault("path", "/")
    return OperationDescriptor.model_validate(fields)


UPLOAD_BODY: Dict[str, Any] = {
    "content": {
        "multipart/form-data": {
            "schema": {
                "type": "object",
                "properties": {
                    "file": {"type": "string", "format": "binary"},
                    "caption": {"type": "string"},
                },
            }
        }
    }
}


@pytest.fixture
def operation_factory():
    return make_operation


@pytest.fixture
def list_pages():
    return make_operation(
        operationId="listPages",
        path="/pages",
        parameters=[{"name": "cursor", "in": "query"}],
    )


@pytest.fixture
def create_page():
    return make_operation(
        operationId="createPage",
        method="post",
        path="/pages",
        requestBody={"content": {"application/json": {"schema": {"type": "object"}}}},
    )


@pytest.fixture
def upload_attachment():
    return make_operation(
        operationId="uploadAttachment",
        method="post",
        path="/attachments",
        requestBody=UPLOAD_BODY,
    )


@pytest.fixture
def spec_dict() -> Dict[str, Any]:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Pages API", "version": "1.0"},
        "servers": [{"url": "https://api.example.com/v1"}],
        "paths": {
            "/pages": {
                "get": {
                    "operationId": "listPages",
                    "parameters": [{"$ref": "#/components/parameters/Cursor"}],
                    "responses": {"200": {"description": "ok"}},
                },
                "post": {
                    "operationId": "createPage",
                    "requestBody": {"$ref": "#/components/requestBodies/Page"},
                    "responses": {"200": {"description": "ok"}},
                },
            },
            "/pages/{page_id}": {
                "parameters": [{"name": "page_id", "in": "path", "required": True}],
                "get": {
                    "operationId": "getPage",
                    "responses": {"200": {"description": "ok"}},
                },
                "patch": {
                    "operationId": "updatePage",
                    "requestBody": {"$ref": "#/components/requestBodies/Page"},
                    "responses": {"200": {"description": "ok"}},
                },
            },
            "/attachments": {
                "post": {
                    "operationId": "uploadAttachment",
                    "requestBody": UPLOAD_BODY,
                    "responses": {"201": {"description": "created"}},
                },
            },
        },
        "components": {
            "parameters": {
                "Cursor": {"name": "cursor", "in": "query", "schema": {"type": "string"}},
            },
            "requestBodies": {
                "Page": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Page"},
                        }
                    }
                },
            },
            "schemas": {
                "Page": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "parent": {"type": "string"},
                        "children": {
                            "type": "array",
                            "items": {"$ref": "#/components/schemas/Page"},
                        },
                    },
                },
            },
        },
    }
