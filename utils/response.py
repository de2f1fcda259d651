"""Единый формат ответов API: успех или ошибка с машиночитаемым кодом."""

from typing import Any

AUTH_KEY_MISSING = "error.api.auth.key.missing"
GENERIC_ERROR = "error.api.generic"

ERROR_STATUS = {
    AUTH_KEY_MISSING: 401,
    GENERIC_ERROR: 500,
}


def create_response(response_type: str, response_data: dict[str, Any] | None = None) -> tuple[int, dict]:
    """
    Возвращает (status, body).
    success: {"status": "success", **data}
    error:   {"status": "error", "error": {"code": ..., "context": ...}}
    """
    response_data = dict(response_data or {})

    if response_type == "success":
        return 200, {"status": "success", **response_data}

    if response_type == "error":
        code = response_data.pop("code", GENERIC_ERROR)
        error: dict[str, Any] = {"code": code}
        if response_data:
            error["context"] = response_data
        return ERROR_STATUS.get(code, 400), {"status": "error", "error": error}

    raise ValueError(f"Неизвестный тип ответа: {response_type}")
