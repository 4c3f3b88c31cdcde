"""Main CLI for openapi-http-client."""

import asyncio
import json
import logging
from typing import Any, Dict, Tuple

import click
from src.core import settings


def _parse_value(raw: str) -> Any:
    """JSON 으로 해석되면 그 값을, 아니면 문자열 그대로"""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _parse_params(pairs: Tuple[str, ...], args_json: str) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    if args_json:
        try:
            loaded = json.loads(args_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"--args is not valid JSON: {e}")
        if not isinstance(loaded, dict):
            raise click.BadParameter("--args must be a JSON object")
        params.update(loaded)
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected key=value, got: {pair}")
        key, raw = pair.split("=", 1)
        params[key] = _parse_value(raw)
    return params


def _parse_headers(pairs: Tuple[str, ...]) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for pair in pairs:
        if ":" not in pair:
            raise click.BadParameter(f"Expected 'Name: value', got: {pair}")
        name, value = pair.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """OpenAPI HTTP Client

    OpenAPI 명세서의 operation 을 평면 인자로 호출합니다.
    """
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)


@cli.command()
@click.argument("spec_file", type=click.Path(exists=True))
def operations(spec_file: str):
    """명세서의 operation 목록을 출력합니다.

    Examples:
        $ python -m src.main operations ./specs/notion.yaml
    """
    from src.ingestion import OpenAPIParser, OperationCollector
    from src.client import get_file_upload_params

    try:
        parser = OpenAPIParser()
        spec = parser.parse_file(spec_file)
        parser.validate_spec(spec)
    except Exception as e:
        click.echo(f"❌ Failed to load spec: {e}", err=True)
        raise click.Abort()

    for op in OperationCollector().collect(spec):
        line = f"{op.operationId or '-':<30} {op.method.upper():<7} {op.path}"
        uploads = get_file_upload_params(op)
        if uploads:
            line += f"  [files: {', '.join(uploads)}]"
        click.echo(line)


@cli.command()
@click.argument("spec_file", type=click.Path(exists=True))
@click.argument("operation_id")
@click.option("--param", "-p", "params", multiple=True, help="key=value (값은 JSON 으로 해석 시도)")
@click.option("--args", "args_json", default="", help="JSON 객체로 전달하는 인자")
@click.option("--header", "-H", "headers", multiple=True, help="'Name: value' 추가 헤더")
@click.option("--base-url", default=None, help="API 기본 URL")
def call(spec_file: str, operation_id: str, params, args_json: str, headers, base_url: str):
    """operation 을 실행하고 응답을 JSON 으로 출력합니다.

    Examples:
        $ python -m src.main call ./specs/notion.yaml listPages -p cursor=abc
        $ python -m src.main call ./specs/api.yaml uploadAttachment -p file=/tmp/a.png -p caption=x
    """
    from src.core import HttpClientConfig, HttpClientError
    from src.ingestion import OpenAPIParser
    from src.client import HttpClient

    arguments = _parse_params(params, args_json)
    extra_headers = _parse_headers(headers)

    try:
        parser = OpenAPIParser()
        spec = parser.parse_file(spec_file)
        parser.validate_spec(spec)
    except Exception as e:
        click.echo(f"❌ Failed to load spec: {e}", err=True)
        raise click.Abort()

    url = base_url or settings.API_BASE_URL
    if not url and spec.servers:
        url = spec.servers[0].get("url")
    if not url:
        raise click.UsageError("Base URL is required (--base-url, API_BASE_URL or spec servers)")

    config = HttpClientConfig(
        base_url=url,
        headers={**settings.default_headers(), **extra_headers},
        timeout=settings.REQUEST_TIMEOUT,
        user_agent=settings.USER_AGENT,
    )

    async def run():
        async with HttpClient(config, spec) as client:
            operation = client.get_operation(operation_id)
            return await client.execute_operation(operation, arguments)

    try:
        result = asyncio.run(run())
    except HttpClientError as e:
        click.echo(f"❌ {e}", err=True)
        click.echo(json.dumps(e.data, indent=2, ensure_ascii=False, default=str), err=True)
        raise click.Abort()
    except Exception as e:
        click.echo(f"❌ Request failed: {e}", err=True)
        raise click.Abort()

    click.echo(json.dumps(
        {
            "status": result.status,
            "headers": dict(result.headers.items()),
            "data": result.data,
        },
        indent=2,
        ensure_ascii=False,
        default=str,
    ))


@cli.command()
def info():
    """설정 정보를 출력합니다."""
    click.echo("=" * 60)
    click.echo("OpenAPI HTTP Client - Configuration")
    click.echo("=" * 60)

    token = settings.API_TOKEN
    masked = f"{token[:4]}…" if token else "(not set)"

    click.echo(f"\n🌐 API:")
    click.echo(f"  Base URL: {settings.API_BASE_URL or '(from spec servers)'}")
    click.echo(f"  Token: {masked}")
    click.echo(f"  Extra headers: {', '.join(settings.API_HEADERS) or '(none)'}")

    click.echo(f"\n⚙️  HTTP:")
    click.echo(f"  User-Agent: {settings.USER_AGENT}")
    click.echo(f"  Timeout: {settings.REQUEST_TIMEOUT}s")
    click.echo(f"  Log level: {settings.LOG_LEVEL}")

    click.echo("\n" + "=" * 60)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
