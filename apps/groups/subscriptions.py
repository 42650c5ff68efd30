"""
Push-based change notifications for groups and their expense logs.

Callers register a callback for a group and get back a Subscription
handle. Model signals (see apps.groups.signals and apps.expenses.signals)
publish after the surrounding transaction commits, so callbacks only
ever see committed state.

Example::

    from apps.groups.subscriptions import subscribe_to_group

    subscription = subscribe_to_group(group.id, lambda g: print(g.member_ids))
    ...
    subscription.cancel()
"""

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

GROUP_TOPIC = 'group'
EXPENSES_TOPIC = 'expenses'


# Per-thread count of callbacks currently running on that thread.
_delivery = threading.local()


class Subscription:
    """
    Handle for one registered callback.

    cancel() is idempotent. Once it returns the callback will not be
    started again, and any run already in progress on another thread has
    finished. The one exception is cancel() called from inside a callback
    (its own or another subscription's): it only stops future runs and
    does not wait, so callbacks cancelling each other cannot deadlock.
    """

    def __init__(self, registry: 'SubscriptionRegistry', topic: str, group_id, callback: Callable[[Any], None]):
        self.topic = topic
        self.group_id = str(group_id)
        self.callback = callback
        self._registry = registry
        self._condition = threading.Condition()
        self._active = True
        self._in_flight = 0

    def __repr__(self):
        state = 'active' if self._active else 'cancelled'
        return f"Subscription(topic={self.topic}, group={self.group_id}, {state})"

    @property
    def active(self) -> bool:
        return self._active

    def deliver(self, payload) -> bool:
        """Invoke the callback unless cancelled. Returns whether it ran."""
        with self._condition:
            if not self._active:
                return False
            self._in_flight += 1

        _delivery.depth = getattr(_delivery, 'depth', 0) + 1
        try:
            self.callback(payload)
        finally:
            _delivery.depth -= 1
            with self._condition:
                self._in_flight -= 1
                if not self._in_flight:
                    self._condition.notify_all()
        return True

    def cancel(self) -> None:
        with self._condition:
            was_active = self._active
            self._active = False
            if not getattr(_delivery, 'depth', 0):
                self._condition.wait_for(lambda: not self._in_flight)
        if was_active:
            self._registry.remove(self)


class SubscriptionRegistry:
    """Thread-safe map of (topic, group id) to live subscriptions."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: Dict[Tuple[str, str], List[Subscription]] = defaultdict(list)

    def subscribe(self, topic: str, group_id, callback: Callable[[Any], None]) -> Subscription:
        if not callable(callback):
            raise TypeError("callback must be callable")
        subscription = Subscription(self, topic, group_id, callback)
        with self._lock:
            self._subscriptions[(topic, subscription.group_id)].append(subscription)
        return subscription

    def remove(self, subscription: Subscription) -> None:
        key = (subscription.topic, subscription.group_id)
        with self._lock:
            subscribers = self._subscriptions.get(key)
            if not subscribers:
                return
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                del self._subscriptions[key]

    def subscribers(self, topic: str, group_id) -> List[Subscription]:
        with self._lock:
            return list(self._subscriptions.get((topic, str(group_id)), ()))

    def has_subscribers(self, topic: str, group_id) -> bool:
        with self._lock:
            return bool(self._subscriptions.get((topic, str(group_id))))

    def publish(self, topic: str, group_id, load_payload: Callable[[], Any]) -> int:
        """
        Load the current state once and hand it to every live subscriber.

        A callback that raises is logged and does not stop delivery to
        the remaining subscribers. Returns the number of callbacks run.
        """
        subscribers = self.subscribers(topic, group_id)
        if not subscribers:
            return 0

        payload = load_payload()
        delivered = 0
        for subscription in subscribers:
            try:
                if subscription.deliver(payload):
                    delivered += 1
            except Exception:
                logger.exception(
                    "Subscriber callback failed for %s on group %s", topic, group_id
                )
        return delivered

    def clear(self) -> None:
        """Cancel every subscription."""
        with self._lock:
            subscriptions = [s for subs in self._subscriptions.values() for s in subs]
        for subscription in subscriptions:
            subscription.cancel()


registry = SubscriptionRegistry()


def subscribe_to_group(group_id, callback: Callable[[Any], None]) -> Subscription:
    """
    Call `callback(group)` after every committed change to the group
    document or its roster. `group` is None once the group is gone.
    """
    return registry.subscribe(GROUP_TOPIC, group_id, callback)


def subscribe_to_group_expenses(group_id, callback: Callable[[Any], None]) -> Subscription:
    """Call `callback(expenses)` with the group's full expense list (newest first) after every committed insert."""
    return registry.subscribe(EXPENSES_TOPIC, group_id, callback)
