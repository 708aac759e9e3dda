"""Entity and callback type definitions.

An entity is a plain mapping of field names to values, exactly as the
remote service returns it. Remote handlers report back through the
callbacks carried by CallOptions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

Entity = Dict[str, Any]

SuccessCallback = Callable[[Any], None]
# (transport_handle, status, message)
ErrorCallback = Callable[[Any, Optional[int], Optional[str]], None]

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")


@dataclass
class CallOptions:
    """Options handed to a remote handler or supplied by a caller.

    Attributes:
        success: Invoked once with the resulting payload
        error: Invoked once with (transport_handle, status, message)
        reset: Drop any cached copy before reading
        params: Extra request parameters (e.g. the primary-key value)
    """

    success: SuccessCallback | None = None
    error: ErrorCallback | None = None
    reset: bool = False
    params: dict[str, Any] = field(default_factory=dict)

    def notify_success(self, payload: Any) -> None:
        """Invoke the success callback when one was supplied."""
        if self.success is not None:
            self.success(payload)

    def notify_error(
        self,
        transport_handle: Any,
        status: int | None,
        message: str | None,
    ) -> None:
        """Invoke the error callback when one was supplied."""
        if self.error is not None:
            self.error(transport_handle, status, message)


@dataclass(frozen=True)
class PageOptions:
    """Page-lifecycle hints supplied by the surrounding UI framework.

    Attributes:
        reloading_page: The current operation is part of a page reload
        reset: Explicit reset request; only ``False`` keeps a cached copy
            during a reload, ``None`` means the caller did not say
    """

    reloading_page: bool = False
    reset: bool | None = None


def is_entity_id(value: Any) -> bool:
    """Return True for a single integer-like value.

    Integers, integral floats such as ``5.0`` and strings holding an
    integer qualify; booleans, fractional floats, sequences and None do not.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, str):
        return bool(_INTEGER_PATTERN.match(value))
    return False


def parse_entity_id(value: int | float | str) -> int:
    """Coerce an integer-like entity id to int.

    Raises:
        ValueError: If value is not integer-like
    """
    if not is_entity_id(value):
        msg = f"Entity id must be a single integer, got: {value!r}"
        raise ValueError(msg)
    return int(value)
