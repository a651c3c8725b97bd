"""Classification of incoming JSON-RPC messages."""

from __future__ import annotations

import json

from .notification import Notification, parse_notification
from .request import Request, parse_request
from .response import RawResponse, parse_raw_response


def parse_message(data: str | bytes) -> Request | Notification | RawResponse:
    """Decode a message as a request, a notification or a raw response.

    A message with a method is a request when it carries an ID and a
    notification otherwise; anything without a method is a response.
    """
    obj = json.loads(data)
    if not isinstance(obj, dict):
        raise ValueError(f"cannot decode a JSON {type(obj).__name__} as a message")
    method = obj.get("method")
    if method is not None and not isinstance(method, str):
        raise ValueError('field "method" must be a string')

    if method is not None:
        if obj.get("id") is not None:
            return parse_request(data)
        return parse_notification(data)
    return parse_raw_response(data)