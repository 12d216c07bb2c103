"""Errors raised by the API layer."""

from __future__ import annotations

import enum

API_VERSION = "v2.0.0"


class ApiErrorCode(str, enum.Enum):
    """Category of an API error."""

    INVALID_STATE = "INVALID_STATE"
    INVALID_CONFIG = "INVALID_CONFIG"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    INVALID_DISTRIBUTION = "INVALID_DISTRIBUTION"
    SUBSCRIPTION_NOT_FOUND = "SUBSCRIPTION_NOT_FOUND"
    INVALID_CHECK = "INVALID_CHECK"
    CHECK_NOT_FOUND = "CHECK_NOT_FOUND"
    COMPONENT_NOT_FOUND = "COMPONENT_NOT_FOUND"
    METRIC_EXISTS = "METRIC_EXISTS"
    METRIC_NOT_FOUND = "METRIC_NOT_FOUND"
    METRIC_NO_VALUE = "METRIC_NO_VALUE"
    INVALID_PATTERN = "INVALID_PATTERN"
    PATTERN_NOT_FOUND = "PATTERN_NOT_FOUND"


class ApiError(Exception):
    """An error reported by one of the API components."""

    def __init__(self, code: ApiErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = ApiErrorCode(code)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"