# profesiones/core/responses.py
from typing import Any, Optional


def success(data: Any = None, message: Optional[str] = None) -> dict:
    """Wrap a payload in the {success, data, message} envelope the mobile client expects."""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body
