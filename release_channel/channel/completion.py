"""Completion handles for channel hooks.

`_set_version` and `_conflict_check` hooks may finish synchronously or later
(for example after a publish step running elsewhere). The hook says which by
what it returns:

- `Immediate(value)`: done now, `value` is the result.
- `PENDING`: the hook keeps the `Completion` it was given and calls it later.

For convenience a bare non-None return value is read as `Immediate(value)` and
a bare `None` as `PENDING`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

__all__ = [
    "PENDING",
    "Callback",
    "Completion",
    "HookResult",
    "Immediate",
    "coerce_result",
]


Callback = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class Immediate:
    """A hook result that is available right away."""

    value: Any = None


class _Pending:
    __slots__ = ()

    def __repr__(self) -> str:
        return "PENDING"


PENDING = _Pending()

HookResult = Immediate | _Pending


def coerce_result(result: Any) -> Immediate | _Pending:
    if isinstance(result, (Immediate, _Pending)):
        return result
    if result is None:
        return PENDING
    return Immediate(result)


class Completion:
    """Single-shot completion handle.

    The first call fulfils it and forwards the value to `callback`. Later calls
    are ignored (reported to `on_duplicate` when given) and return False.
    """

    __slots__ = ("_callback", "_on_duplicate", "_done", "_value")

    def __init__(
        self,
        callback: Callback | None = None,
        *,
        on_duplicate: Callback | None = None,
    ) -> None:
        self._callback = callback
        self._on_duplicate = on_duplicate
        self._done = False
        self._value: Any = None

    @property
    def done(self) -> bool:
        return self._done

    @property
    def value(self) -> Any:
        return self._value

    def __call__(self, value: Any = None) -> bool:
        if self._done:
            if self._on_duplicate is not None:
                self._on_duplicate(value)
            return False

        self._done = True
        self._value = value
        if self._callback is not None:
            self._callback(value)
        return True

    def settle(self, result: Any) -> bool:
        """Fulfil from a hook's return value unless the hook reported `PENDING`."""

        coerced = coerce_result(result)
        if isinstance(coerced, Immediate):
            return self(coerced.value)
        return False
