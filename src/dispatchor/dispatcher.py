from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Set

from .config import DispatcherConfig
from .errors import InvalidArgument
from .listener import Listener

logger = logging.getLogger(__name__)


class Dispatcher:
    """Synchronous in-process event dispatcher.

    Maps event names to ordered lists of :class:`Listener` bindings. Listeners
    run in registration order, on the caller's stack, before :meth:`emit`
    returns. Listeners registered under the wildcard name (``"*"`` unless
    configured otherwise) see every emission, event name included.

    Event names must be hashable. Registering under an unhashable name raises
    :class:`InvalidArgument`; lookups and removals treat it as absent.

    The registry is not locked. Callers sharing one dispatcher across threads
    must serialize access themselves.
    """

    def __init__(self, config: Optional[DispatcherConfig] = None) -> None:
        self.config = config or DispatcherConfig()
        self._events: Dict[Hashable, List[Listener]] = {}
        self._leak_warned: Set[Hashable] = set()
        # One-shot bindings already delivered; a nested emit may consume a
        # binding that an outer round still holds in its snapshot.
        self._consumed: "weakref.WeakSet[Listener]" = weakref.WeakSet()

    # ------------------------ Introspection ------------------------
    def event_names(self) -> List[Hashable]:
        """Event names with at least one listener, in first-registration order."""
        return list(self._events)

    def listeners(self, event: Hashable) -> List[Callable[..., Any]]:
        return [listener.callback for listener in self._entry(event) or ()]

    def listener_count(self, event: Hashable) -> int:
        return len(self._entry(event) or ())

    # ------------------------ Registration ------------------------
    def on(self, event: Hashable, callback: Callable[..., Any], context: Any = None) -> "Dispatcher":
        """Register ``callback`` for every emission of ``event``.

        Args:
            event: Event name; the wildcard name subscribes to all events.
            callback: Callable invoked with the emitted arguments.
            context: Optional receiver passed to ``callback`` as its first
                argument on each call.

        Raises:
            InvalidArgument: ``callback`` is not callable.
        """
        return self._add_listener(event, callback, context, once=False)

    def once(self, event: Hashable, callback: Callable[..., Any], context: Any = None) -> "Dispatcher":
        """Like :meth:`on`, but the binding is dropped right before its first call."""
        return self._add_listener(event, callback, context, once=True)

    def add_listener(self, event: Hashable, callback: Callable[..., Any]) -> "Dispatcher":
        return self.on(event, callback)

    # ------------------------ Removal ------------------------
    def remove_listener(
        self,
        event: Hashable,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
        once: bool = False,
    ) -> "Dispatcher":
        """Remove bindings for ``event``.

        Without ``callback`` every binding for the event goes. Otherwise only
        bindings with an equal callback are removed, further narrowed to
        one-shot bindings when ``once`` is set and to bindings with this exact
        ``context`` when one is given. Absent names or callbacks are a no-op.
        """
        listeners = self._entry(event)
        if listeners is None:
            return self
        if callback is None:
            self._clear_event(event)
            return self

        remaining = [listener for listener in listeners if not listener.matches(callback, context, once)]
        if len(remaining) != len(listeners):
            logger.debug("Removed %d listener(s) %s from event %r", len(listeners) - len(remaining), callback, event)
            self._replace(event, remaining)
        return self

    def off(self, event: Hashable, callback: Optional[Callable[..., Any]] = None) -> "Dispatcher":
        """Shorthand for :meth:`remove_listener` without context or once filters."""
        return self.remove_listener(event, callback)

    def remove_all_listeners(self, event: Optional[Hashable] = None) -> "Dispatcher":
        """Drop every binding for ``event``, or the whole registry when omitted.

        ``None`` means "omitted", so an event literally named ``None`` can only
        be cleared with :meth:`remove_listener`.
        """
        if event is None:
            logger.debug("Clearing all listeners (%d events)", len(self._events))
            self._events.clear()
            self._leak_warned.clear()
        elif self._entry(event) is not None:
            self._clear_event(event)
        return self

    # ------------------------ Emission ------------------------
    def emit(self, event: Hashable, *args: Any) -> bool:
        """Deliver ``args`` to the listeners of ``event``.

        Wildcard listeners run first and receive ``(event, *args)``. Listeners
        of ``event`` itself then receive ``args``. Exceptions raised by a
        listener propagate and stop delivery to the remaining listeners.

        Returns:
            True if ``event`` had listeners of its own, False otherwise.
        """
        wildcard = self.config.wildcard
        if wildcard in self._events:
            self._run_listeners(wildcard, (event,) + args)

        if self._entry(event) is None:
            logger.debug("Emitting %r with no listeners", event)
            return False
        self._run_listeners(event, args)
        return True

    # ------------------------ Internals ------------------------
    def _add_listener(self, event: Hashable, callback: Callable[..., Any], context: Any, once: bool) -> "Dispatcher":
        if not callable(callback):
            raise InvalidArgument(f"The listener must be callable, got {type(callback).__name__}")
        try:
            hash(event)
        except TypeError:
            raise InvalidArgument(f"Event names must be hashable, got {type(event).__name__}") from None

        listener = Listener(
            callback=callback,
            context=self if context is None else context,
            once=once,
            bound=context is not None,
        )
        listeners = self._events.setdefault(event, [])
        listeners.append(listener)
        logger.debug("Added %s listener %s to event %r", "once" if once else "on", callback, event)

        limit = self.config.max_listeners
        if limit and len(listeners) > limit and event not in self._leak_warned:
            self._leak_warned.add(event)
            logger.warning(
                "Possible listener leak: %d listeners on event %r (max_listeners=%d)",
                len(listeners),
                event,
                limit,
            )
        return self

    def _run_listeners(self, event: Hashable, args: Sequence[Any]) -> None:
        # Iterate a snapshot; listeners may mutate the registry while we run.
        listeners = list(self._events.get(event, ()))
        logger.debug("Emitting %r to %d listener(s)", event, len(listeners))
        for listener in listeners:
            if listener.once:
                if listener in self._consumed:
                    continue
                self._consumed.add(listener)
                self._detach(event, listener)
            listener.invoke(args)

    def _entry(self, event: Hashable) -> Optional[List[Listener]]:
        try:
            return self._events.get(event)
        except TypeError:
            # Unhashable names can never be registered.
            return None

    def _detach(self, event: Hashable, listener: Listener) -> None:
        listeners = self._events.get(event, [])
        # The live list is never the one being iterated, so edit it in place.
        try:
            listeners.remove(listener)
        except ValueError:
            return
        if not listeners:
            self._clear_event(event)

    def _replace(self, event: Hashable, listeners: List[Listener]) -> None:
        if listeners:
            self._events[event] = listeners
        else:
            self._clear_event(event)

    def _clear_event(self, event: Hashable) -> None:
        del self._events[event]
        self._leak_warned.discard(event)
        logger.debug("Cleared event %r", event)
