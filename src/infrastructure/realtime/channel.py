"""In-process live-update channel for collection snapshots."""

from collections import defaultdict
from typing import Any

import structlog

from domain.repositories.activity_repository import SnapshotCallback

logger = structlog.get_logger()


class Subscription:
    """Handle returned by ``SnapshotChannel.subscribe``."""

    def __init__(self, channel: "SnapshotChannel", path: str, callback: SnapshotCallback) -> None:
        self._channel = channel
        self.path = path
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        """Stop deliveries. Safe to call more than once."""
        if self.active:
            self.active = False
            self._channel._remove(self)


class SnapshotChannel:
    """Delivers full collection snapshots to every subscriber of a path.

    Each delivery replaces whatever the subscriber held before, so a
    subscriber only ever needs the latest one.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(self, path: str, callback: SnapshotCallback) -> Subscription:
        subscription = Subscription(self, path, callback)
        self._subscriptions[path].append(subscription)
        logger.debug("snapshot_subscribed", path=path)
        return subscription

    async def publish(self, path: str, snapshot: dict[str, Any] | None) -> None:
        """Deliver a snapshot to the path's subscribers, in subscription order."""
        for subscription in list(self._subscriptions.get(path, ())):
            if not subscription.active:
                continue
            try:
                await subscription.callback(snapshot)
            except Exception:
                # One broken subscriber must not block delivery to the rest
                logger.exception("snapshot_delivery_failed", path=path)

    def subscriber_count(self, path: str) -> int:
        return len(self._subscriptions.get(path, ()))

    def close(self) -> None:
        """Cancel every subscription."""
        for subscriptions in list(self._subscriptions.values()):
            for subscription in list(subscriptions):
                subscription.cancel()

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.path)
        if subscriptions and subscription in subscriptions:
            subscriptions.remove(subscription)
            if not subscriptions:
                del self._subscriptions[subscription.path]
