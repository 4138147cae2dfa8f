"""Error types: unwrap contract violations and the FlowError extension point."""

from __future__ import annotations

from typing import Any

import msgspec

__all__ = [
    'AbsenceError',
    'FlowError',
    'Origin',
    'UnwrapError',
    'UnwrappedErrWithOk',
    'UnwrappedNone',
    'UnwrappedOkWithErr',
]


class Origin(msgspec.Struct, frozen=True, gc=False):
    """Source location of the yield that short-circuited a sequence."""

    filename: str
    lineno: int
    function: str

    def __str__(self) -> str:
        return f'{self.filename}:{self.lineno} in {self.function}'


# --- Custom abort errors ---


class FlowError(Exception):
    """Base class for errors that abort a Flow sequence directly.

    Subclass it for business-rule failures discovered by ordinary control
    flow. Yielding or raising an instance inside a Flow sequence ends the
    sequence with ``Err(instance)``.

    Example:
        ```python
        class ValidationError(FlowError):
            pass

        @do
        def check():
            value = yield Some(-5)
            if value < 0:
                yield ValidationError('Value must be positive')
            return value * 2

        check()  # Err(ValidationError('Value must be positive'))
        ```

    Attributes:
        origin: Where the sequence was aborted (the yield or raise), filled
            in by the engine when origin capture is on. None otherwise.
    """

    origin: Origin | None = None


# --- Unwrap contract violations ---


class UnwrapError(Exception):
    """Base class for unwrap-family contract violations."""


class UnwrappedNone(UnwrapError):
    """Raised by ``unwrap()`` on Nothing; also the Flow error for absence.

    Attributes:
        origin: Where the absence was observed inside a sequence, if captured.
    """

    def __init__(self, message: str | None = None, *, origin: Origin | None = None) -> None:
        self.origin = origin
        msg = message or 'Called unwrap on Nothing'
        if origin is not None:
            msg = f'{msg} (at {origin})'
        super().__init__(msg)

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))


AbsenceError = UnwrappedNone
"""Error substituted for Nothing when an absence becomes a Result failure."""


class UnwrappedOkWithErr(UnwrapError):
    """Raised by ``unwrap()`` on an Err whose payload is not an exception.

    Attributes:
        error: The Err payload.
    """

    def __init__(self, error: Any, message: str | None = None) -> None:
        self.error = error
        msg = message or 'Called unwrap on Err'
        super().__init__(f'{msg}: {error!r}')


class UnwrappedErrWithOk(UnwrapError):
    """Raised by ``unwrap_err()`` on an Ok.

    Attributes:
        value: The Ok payload.
    """

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f'Called unwrap_err on Ok: {value!r}')
