"""Values the serializer threads through lifecycle hooks.

Hooks take a SerializationContext. Error hooks also take an ErrorContext and
may set ``handled`` to stop the error propagating.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jsoncontract.contracts.enums import ContextStates


@dataclass(frozen=True, slots=True)
class SerializationContext:
    """Source/destination of the current serialization pass.

    Attributes:
        states: Where the data is going or coming from
        context: Arbitrary caller-supplied state
    """

    states: ContextStates = ContextStates.ALL
    context: Any = None


@dataclass(slots=True)
class ErrorContext:
    """An in-flight serialization error offered to on_error hooks.

    Mutable: a hook sets ``handled = True`` to suppress the error.

    Attributes:
        error: The exception being raised
        original_object: Object whose hook is being invoked
        member: Member or key being processed when the error occurred
        path: Location within the document, if known
        handled: Set by a hook to stop propagation
    """

    error: BaseException
    original_object: Any = None
    member: Any = None
    path: str | None = None
    handled: bool = field(default=False)
