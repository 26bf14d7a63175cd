import json
from http import HTTPStatus
from typing import Any, Dict

# Stateless, shared by every invocation in the execution environment.
ENCODER = json.JSONEncoder(ensure_ascii=False)


def json_response(status: HTTPStatus, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Build a proxy integration response with a JSON body.

    Raises TypeError or ValueError when the payload cannot be encoded.
    """
    return {
        "statusCode": int(status),
        "headers": {"Content-Type": "application/json"},
        "body": ENCODER.encode(payload),
        "isBase64Encoded": False,
    }


def text_response(status: HTTPStatus, text: str) -> Dict[str, Any]:
    return {
        "statusCode": int(status),
        "headers": {"Content-Type": "text/plain"},
        "body": text,
        "isBase64Encoded": False,
    }
