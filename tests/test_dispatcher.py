"""Tests for RequestDispatcher."""

import asyncio

import httpx
import pytest

from src.client.dispatcher import RequestDispatcher, merge_headers, read_data, to_headers
from src.client.file_upload import FormPayload, MultipartForm
from src.core.exceptions import (
    FileUploadError,
    HttpClientError,
    MissingOperationIdError,
    OperationNotFoundError,
)

REQUEST = httpx.Request("GET", "https://api.example.com/pages")


class RecordingOperation:
    """Fake operation callable that records its arguments."""

    def __init__(self, response=None, error=None):
        self.response = response or httpx.Response(200, json={"ok": True}, request=REQUEST)
        self.error = error
        self.calls = []

    async def __call__(self, url_params, body, request_config):
        self.calls.append((url_params, body, request_config))
        if self.error is not None:
            raise self.error
        return self.response


def status_error(response):
    return httpx.HTTPStatusError("boom", request=REQUEST, response=response)


@pytest.mark.asyncio
async def test_dispatch_returns_normalized_response(list_pages):
    response = httpx.Response(
        200,
        json={"results": []},
        headers=[("X-Request-Id", "r1"), ("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
        request=REQUEST,
    )
    fn = RecordingOperation(response=response)
    dispatcher = RequestDispatcher({"listPages": fn})

    result = await dispatcher.dispatch(list_pages, {"cursor": "abc"}, {})

    assert result.status == 200
    assert result.data == {"results": []}
    assert result.headers["x-request-id"] == "r1"
    assert result.headers.get_list("set-cookie") == ["a=1", "b=2"]
    url_params, body, config = fn.calls[0]
    assert url_params == {"cursor": "abc"}
    assert body is None
    assert "Content-Type" not in config.headers


@pytest.mark.asyncio
async def test_dispatch_sets_json_content_type_for_body(create_page):
    fn = RecordingOperation()
    dispatcher = RequestDispatcher({"createPage": fn})

    await dispatcher.dispatch(create_page, {}, {"title": "Hi"})

    _, body, config = fn.calls[0]
    assert body == {"title": "Hi"}
    assert config.headers == {"Content-Type": "application/json"}


@pytest.mark.asyncio
async def test_caller_headers_override_computed_headers_on_every_call(create_page):
    fn = RecordingOperation()
    dispatcher = RequestDispatcher(
        {"createPage": fn},
        headers={"Authorization": "Bearer secret", "content-type": "application/vnd.api+json"},
    )

    await dispatcher.dispatch(create_page, {}, {"title": "Hi"})
    await dispatcher.dispatch(create_page, {}, {"title": "Again"})

    for _, _, config in fn.calls:
        assert config.headers == {
            "Authorization": "Bearer secret",
            "content-type": "application/vnd.api+json",
        }


@pytest.mark.asyncio
async def test_header_provider_is_evaluated_per_call(list_pages):
    tokens = iter(["t1", "t2"])
    fn = RecordingOperation()
    dispatcher = RequestDispatcher(
        {"listPages": fn},
        headers={"Notion-Version": "2022-06-28"},
        header_provider=lambda: {"Authorization": f"Bearer {next(tokens)}"},
    )

    await dispatcher.dispatch(list_pages, {}, {})
    await dispatcher.dispatch(list_pages, {}, {})

    assert [c.headers["Authorization"] for _, _, c in fn.calls] == ["Bearer t1", "Bearer t2"]
    assert all(c.headers["Notion-Version"] == "2022-06-28" for _, _, c in fn.calls)


@pytest.mark.asyncio
async def test_multipart_form_is_opened_for_the_call(tmp_path, upload_attachment):
    path = tmp_path / "a.png"
    path.write_bytes(b"PNGDATA")
    form = MultipartForm(boundary="b0undary")
    form.append_file("file", path)
    form.append_field("caption", "x")
    seen = {}

    async def upload(url_params, body, request_config):
        assert isinstance(body, FormPayload)
        stream = body.files[0][1][1]
        seen["content"] = stream.read()
        seen["stream"] = stream
        seen["data"] = body.data
        seen["headers"] = request_config.headers
        return httpx.Response(201, json={"id": "f1"}, request=REQUEST)

    dispatcher = RequestDispatcher({"uploadAttachment": upload})
    result = await dispatcher.dispatch(upload_attachment, {}, form)

    assert result.status == 201
    assert seen["content"] == b"PNGDATA"
    assert seen["data"] == {"caption": "x"}
    assert seen["headers"] == {"Content-Type": "multipart/form-data; boundary=b0undary"}
    assert seen["stream"].closed


@pytest.mark.asyncio
async def test_upload_streams_are_closed_when_call_is_cancelled(tmp_path, upload_attachment):
    path = tmp_path / "a.png"
    path.write_bytes(b"x")
    form = MultipartForm()
    form.append_file("file", path)
    streams = []

    async def slow_upload(url_params, body, request_config):
        streams.append(body.files[0][1][1])
        await asyncio.sleep(10)

    dispatcher = RequestDispatcher({"uploadAttachment": slow_upload})

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(dispatcher.dispatch(upload_attachment, {}, form), timeout=0.05)

    assert streams and streams[0].closed


@pytest.mark.asyncio
async def test_unreadable_upload_fails_before_call(tmp_path, upload_attachment):
    form = MultipartForm()
    form.append_file("file", tmp_path / "missing.png")
    fn = RecordingOperation()
    dispatcher = RequestDispatcher({"uploadAttachment": fn})

    with pytest.raises(FileUploadError):
        await dispatcher.dispatch(upload_attachment, {}, form)

    assert fn.calls == []


@pytest.mark.asyncio
async def test_missing_operation_id_is_configuration_error(operation_factory):
    dispatcher = RequestDispatcher({})

    with pytest.raises(MissingOperationIdError, match="Operation ID is required"):
        await dispatcher.dispatch(operation_factory(), {}, {})


@pytest.mark.asyncio
async def test_unknown_operation_is_configuration_error(list_pages):
    dispatcher = RequestDispatcher({"createPage": RecordingOperation()})

    with pytest.raises(OperationNotFoundError, match="Operation listPages not found"):
        await dispatcher.dispatch(list_pages, {}, {})


@pytest.mark.asyncio
async def test_status_error_becomes_http_client_error(list_pages):
    response = httpx.Response(
        404, json={"error": "missing"}, headers={"X-Request-Id": "r2"}, request=REQUEST
    )
    dispatcher = RequestDispatcher({"listPages": RecordingOperation(error=status_error(response))})

    with pytest.raises(HttpClientError) as excinfo:
        await dispatcher.dispatch(list_pages, {}, {})

    error = excinfo.value
    assert error.status == 404
    assert error.message == "Not Found"
    assert error.data == {"error": "missing"}
    assert error.headers["x-request-id"] == "r2"
    assert str(error) == "404 Not Found"
    assert isinstance(error.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_status_error_without_reason_uses_fallback_message(list_pages):
    response = httpx.Response(599, text="upstream exploded", request=REQUEST)
    dispatcher = RequestDispatcher({"listPages": RecordingOperation(error=status_error(response))})

    with pytest.raises(HttpClientError) as excinfo:
        await dispatcher.dispatch(list_pages, {}, {})

    assert excinfo.value.message == "Request failed"
    assert excinfo.value.status == 599
    assert excinfo.value.data == "upstream exploded"


@pytest.mark.asyncio
async def test_failure_without_response_is_reraised_unchanged(list_pages):
    failure = httpx.ConnectError("connection refused", request=REQUEST)
    dispatcher = RequestDispatcher({"listPages": RecordingOperation(error=failure)})

    with pytest.raises(httpx.ConnectError) as excinfo:
        await dispatcher.dispatch(list_pages, {}, {})

    assert excinfo.value is failure


@pytest.mark.asyncio
async def test_concurrent_dispatches_do_not_share_state(list_pages, create_page):
    fn = RecordingOperation()
    dispatcher = RequestDispatcher({"listPages": fn, "createPage": fn}, headers={"X-Api": "1"})

    await asyncio.gather(
        dispatcher.dispatch(list_pages, {"cursor": "a"}, {}),
        dispatcher.dispatch(create_page, {}, {"title": "b"}),
    )

    by_body = {repr(body): config.headers for _, body, config in fn.calls}
    assert by_body["None"] == {"X-Api": "1"}
    assert by_body[repr({"title": "b"})] == {"Content-Type": "application/json", "X-Api": "1"}


def test_to_headers_drops_falsy_values_and_stringifies():
    headers = to_headers({"content-length": 12, "x-empty": "", "x-none": None, "x-list": ["a", "b"]})

    assert headers.multi_items() == [("content-length", "12"), ("x-list", "a"), ("x-list", "b")]


def test_merge_headers_is_case_insensitive():
    merged = merge_headers({"Content-Type": "a"}, None, {"content-type": "b", "X-One": "1"})

    assert merged == {"content-type": "b", "X-One": "1"}


def test_read_data_handles_json_text_and_empty():
    assert read_data(httpx.Response(200, json={"a": 1})) == {"a": 1}
    assert read_data(httpx.Response(200, text="plain")) == "plain"
    assert read_data(httpx.Response(204)) is None
    assert read_data(
        httpx.Response(200, content=b"{bad", headers={"Content-Type": "application/json"})
    ) == "{bad"


@pytest.mark.asyncio
async def test_timeout_is_passed_in_request_config(list_pages):
    fn = RecordingOperation()
    dispatcher = RequestDispatcher({"listPages": fn}, timeout=5.0)

    await dispatcher.dispatch(list_pages, {}, {})

    assert fn.calls[0][2].timeout == 5.0
