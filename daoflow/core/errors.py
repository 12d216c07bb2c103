"""Error type shared by the core components."""

from __future__ import annotations

import enum
import traceback

_MAX_STACK_DEPTH = 32


class ErrorCode(str, enum.Enum):
    """Category of a core error."""

    INVALID = "INVALID"
    RANGE = "RANGE"
    STATE = "STATE"
    INITIALIZE = "INITIALIZE"

    QUANTUM = "QUANTUM"
    SUPERPOSE = "SUPERPOSE"
    ENTANGLE = "ENTANGLE"

    FIELD = "FIELD"
    POTENTIAL = "POTENTIAL"
    INTERACTION = "INTERACTION"

    ENERGY = "ENERGY"
    TRANSFORM = "TRANSFORM"
    CONSERVATION = "CONSERVATION"


def _capture_stack() -> list[str]:
    """Return the caller's stack, innermost frame first."""
    frames = traceback.extract_stack()[:-2]
    frames.reverse()
    return [
        f"{frame.filename}:{frame.lineno} {frame.name}"
        for frame in frames[:_MAX_STACK_DEPTH]
    ]


class CoreError(Exception):
    """An error raised by a core component, carrying a code and the stack."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code)
        self.cause = cause
        self.stack = _capture_stack()
        self.__cause__ = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.value}] {self.message}"]
        if self.cause is not None:
            parts.append(f"\nCaused by: {self.cause}")
        if self.stack:
            parts.append("\nStack trace:")
            parts.extend(
                f"\n  {number}: {frame}"
                for number, frame in enumerate(self.stack, start=1)
            )
        return "".join(parts)


def wrap_core_error(
    err: BaseException | None, code: ErrorCode, message: str
) -> CoreError | None:
    """Wrap ``err`` in a :class:`CoreError`; ``None`` stays ``None``."""
    if err is None:
        return None
    return CoreError(message, code, cause=err)