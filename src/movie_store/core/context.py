import time
from dataclasses import dataclass, field
from typing import Annotated, Callable, Optional

from fastapi import Header

from .config import settings


@dataclass(frozen=True)
class CallContext:
    """Who is calling and what time it is, as seen by a single operation."""

    caller: str
    now: Callable[[], int] = field(default=time.time_ns)


def get_call_context(
    x_caller_id: Annotated[Optional[str], Header()] = None,
) -> CallContext:
    caller = (x_caller_id or "").strip() or settings.anonymous_caller
    return CallContext(caller=caller)
