"""The control-flow signal behind ``bail()`` and sequence short-circuiting."""

from typing import Any


class Propagate(Exception):  # noqa: N818
    """Carries a failed container (Nothing or an Err) out of a sequence body.

    Raised by ``bail()`` and by the engine when a yielded step fails. Only the
    sequence engine and ``@result`` catch it; ``Result.try_catch`` and
    ``@safe`` let it through. If it escapes anyway, its message says how to
    contain it.
    """

    __slots__ = ('value',)

    def __init__(self, value: Any) -> None:
        super().__init__(value)
        self.value = value

    def __repr__(self) -> str:
        return f'Propagate({self.value!r})'

    def __str__(self) -> str:
        return (
            f'bail() on {self.value!r} escaped its sequence; '
            'call it inside a gen body, @do or @result-decorated function'
        )
