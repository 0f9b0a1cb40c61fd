"""
Serverless function adapter for the chat relay.

Accepts API-Gateway-shaped events (``httpMethod``/``body``, or the HTTP API
v2 ``requestContext.http.method``) and answers with ``statusCode``,
``headers`` and a JSON ``body`` string. Behavior matches ``POST /api/chat``
in main.py because both delegate to ``ChatRelay.handle``.
"""

import base64
import json
import logging
from typing import Any, Dict, Optional

from config import CORS_HEADERS
from services.relay import ChatRelay

logger = logging.getLogger(__name__)

relay = ChatRelay()


def _response(status_code: int, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    headers = dict(CORS_HEADERS)
    headers["Access-Control-Allow-Credentials"] = "true"
    if body is None:
        return {"statusCode": status_code, "headers": headers, "body": ""}
    headers["Content-Type"] = "application/json"
    return {"statusCode": status_code, "headers": headers, "body": json.dumps(body)}


def _method(event: Dict[str, Any]) -> str:
    method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    return method.upper()


def _decode_body(event: Dict[str, Any]) -> Any:
    raw = event.get("body")
    if raw is None:
        return None
    if isinstance(raw, (dict, list)):
        return raw
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        return json.loads(raw)
    except ValueError:
        # binascii.Error and UnicodeDecodeError are ValueErrors too
        logger.warning("Serverless chat request body is not valid JSON")
        return None


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    method = _method(event)

    if method == "OPTIONS":
        return _response(200)

    if method != "POST":
        return _response(405, {"error": "Method not allowed"})

    result = relay.handle(_decode_body(event))
    return _response(result.status_code, result.body)
