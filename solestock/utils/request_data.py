"""Request body helpers for the JSON blueprints."""
from flask import request


def json_payload() -> dict:
    """
    The request's JSON body as a dict; a missing or unparseable body is an
    empty payload.

    Raises:
        ValueError: if the body is JSON but not an object (e.g. a list).
    """
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError('Request body must be a JSON object')
    return payload
