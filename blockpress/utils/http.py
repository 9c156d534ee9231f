from typing import Any, Dict, Optional
from flask import request, jsonify, current_app


def ok(payload: Dict[str, Any], status: int = 200):
    return jsonify(payload), status


def error(code: str, message: str, status: int = 400, **extra):
    body: Dict[str, Any] = {
        "success": False,
        "message": message,
        "error": {"code": code, "message": message},
    }
    if extra:
        body["error"].update(extra)
    return jsonify(body), status


def server_error(message: str, exc: Exception):
    """Generic 500; the exception text is only echoed in development."""
    current_app.logger.exception(message)
    if current_app.config.get("EXPOSE_ERROR_DETAILS"):
        return error("UNKNOWN_ERROR", message, 500, detail=str(exc))
    return error("UNKNOWN_ERROR", message, 500)


def json_body() -> Dict[str, Any]:
    # force=True allows a missing Content-Type header
    data = request.get_json(force=True, silent=True)
    if isinstance(data, dict):
        return data
    return {}


def arg_str(name: str, default: Optional[str] = None) -> Optional[str]:
    val = request.args.get(name)
    if val is None or not val.strip():
        return default
    return val.strip()


def arg_int(name: str, default: int, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
    try:
        v = int(request.args.get(name, default))
    except (TypeError, ValueError):
        v = default
    if min_value is not None:
        v = max(min_value, v)
    if max_value is not None:
        v = min(max_value, v)
    return v


def if_match_version() -> Optional[int]:
    """Parse an If-Match header carrying an article version ("3" or W/"3")."""
    raw = request.headers.get("If-Match")
    if not raw:
        return None
    raw = raw.strip()
    if raw.startswith("W/"):
        raw = raw[2:]
    try:
        return int(raw.strip('"'))
    except ValueError:
        return None
