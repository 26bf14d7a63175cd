"""Normalise the Lambda events that can reach the function into one request shape."""

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlencode


@dataclass(frozen=True)
class HttpRequest:
    method: str
    uri: str
    query_parameters: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    def header(self, name: str) -> Optional[str]:
        return find_header(self.headers, name)


def find_header(headers: Dict[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup; API Gateway keeps client casing, HTTP APIs lowercase."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def _decode_body(event: Dict[str, Any]) -> Optional[str]:
    body = event.get("body")
    if body is None:
        return None
    if event.get("isBase64Encoded"):
        return base64.b64decode(body).decode("utf-8", errors="replace")
    return body


def _build_uri(scheme: str, host: Optional[str], path: str, query: str) -> str:
    uri = f"{scheme}://{host}{path}" if host else path
    return f"{uri}?{query}" if query else uri


def _from_rest_event(event: Dict[str, Any]) -> HttpRequest:
    # API Gateway REST proxy integration (payload format 1.0)
    headers = dict(event.get("headers") or {})
    query = dict(event.get("queryStringParameters") or {})
    request_context = event.get("requestContext") or {}
    multi_query = event.get("multiValueQueryStringParameters")
    query_string = urlencode(multi_query, doseq=True) if multi_query else urlencode(query)
    uri = _build_uri(
        find_header(headers, "X-Forwarded-Proto") or "https",
        find_header(headers, "Host") or request_context.get("domainName"),
        event.get("path") or "/",
        query_string,
    )
    return HttpRequest(
        method=event["httpMethod"].upper(),
        uri=uri,
        query_parameters=query,
        headers=headers,
        body=_decode_body(event),
    )


def _from_http_api_event(event: Dict[str, Any]) -> HttpRequest:
    # HTTP API and function URLs (payload format 2.0)
    request_context = event["requestContext"]
    headers = dict(event.get("headers") or {})
    uri = _build_uri(
        find_header(headers, "X-Forwarded-Proto") or "https",
        request_context.get("domainName"),
        event.get("rawPath") or "/",
        event.get("rawQueryString", ""),
    )
    return HttpRequest(
        method=request_context["http"]["method"].upper(),
        uri=uri,
        query_parameters=dict(event.get("queryStringParameters") or {}),
        headers=headers,
        body=_decode_body(event),
    )


def _from_direct_invoke(event: Dict[str, Any]) -> HttpRequest:
    query = {"name": str(event["name"])} if event.get("name") is not None else {}
    body = _decode_body(event)
    return HttpRequest(
        method="GET" if body is None else "POST",
        uri=_build_uri("https", None, "/", urlencode(query)),
        query_parameters=query,
        headers=dict(event.get("headers") or {}),
        body=body,
    )


def parse_event(event: Dict[str, Any]) -> HttpRequest:
    """Build an :class:`HttpRequest` from an API Gateway, function URL or direct payload."""
    if not isinstance(event, dict):
        raise TypeError(f"Unsupported event type: {type(event).__name__}")
    if "httpMethod" in event:
        return _from_rest_event(event)
    if "http" in (event.get("requestContext") or {}):
        return _from_http_api_event(event)
    return _from_direct_invoke(event)
