from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence


@dataclass(frozen=True, eq=False)
class Listener:
    """A callback registered against one event name.

    ``context`` is fixed at registration. When ``bound`` is set the context was
    given explicitly and acts as the callback's receiver: it is passed as the
    first positional argument, the way an instance is passed to a method.
    Otherwise ``context`` is the owning dispatcher and the callback only sees
    the emitted arguments.

    Bindings compare by identity, so registering the same callback twice
    yields two independent bindings.
    """

    callback: Callable[..., Any]
    context: Any
    once: bool = False
    bound: bool = False

    def matches(self, callback: Callable[..., Any], context: Optional[Any] = None, once: bool = False) -> bool:
        if self.callback != callback:
            return False
        if once and not self.once:
            return False
        if context is not None and self.context is not context:
            return False
        return True

    def invoke(self, args: Sequence[Any]) -> Any:
        if self.bound:
            return self.callback(self.context, *args)
        return self.callback(*args)
