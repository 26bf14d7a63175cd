import logging
from datetime import datetime
from http import HTTPStatus
from typing import Any, Dict, Optional

from .client_info import get_client_info, get_client_ip
from .request import HttpRequest, parse_event
from .response import json_response, text_response
from .settings import load_settings

settings = load_settings()

# Set up logging
logger = logging.getLogger()
logger.setLevel(settings.log_level)

MISSING_NAME_ERROR = "Please pass a name on the query string or in the request body"


def _now() -> datetime:
    if settings.timezone is None:
        return datetime.now()
    return datetime.now(settings.timezone).replace(tzinfo=None)


def resolve_name(request: HttpRequest) -> Optional[str]:
    """Body wins over the ``name`` query parameter; an empty body still counts."""
    if request.body is not None:
        return request.body
    return request.query_parameters.get("name")


def build_greeting(request: HttpRequest, name: str, now: datetime) -> Dict[str, Any]:
    return {
        "message": f"Hello, {name}",
        "name": name,
        "timestamp": now.isoformat(),
        "date": now.date().isoformat(),
        "time": now.time().isoformat(),
        "clientIp": get_client_ip(request),
        "clientInfo": get_client_info(request),
        "headers": dict(request.headers),
        "method": request.method,
        "uri": request.uri,
    }


def handler(event, context):
    """
    Greets the caller and reports what the request says about them.

    Accepts ``?name=`` or a raw request body (body first) through API Gateway,
    a function URL, or a direct ``{"name": ...}`` invocation.
    """
    request = parse_event(event)
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        f"HTTP trigger processed a request: {request.method} {request.uri} (request_id={request_id})"
    )

    now = _now()
    name = resolve_name(request)
    if name is None:
        logger.warning("Request rejected: no name in query string or body")
        status = HTTPStatus.BAD_REQUEST
        payload = {"error": MISSING_NAME_ERROR, "timestamp": now.isoformat()}
    else:
        status = HTTPStatus.OK
        payload = build_greeting(request, name, now)

    try:
        return json_response(status, payload)
    except (TypeError, ValueError) as e:
        logger.error(f"Error serializing response to JSON: {e}")
        return text_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")
