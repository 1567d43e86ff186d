from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from .models import Notification, NotificationType, utcnow
from .results import Ok, Result, not_found
from .store import IdentityStore

logger = logging.getLogger(__name__)


class NotificationCenter:
    """Pull-only inbox per user; nothing is pushed to clients."""

    def __init__(self, identity: IdentityStore, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.identity = identity
        self._clock = clock or utcnow

    def notify(
        self,
        recipient_id: int,
        kind: NotificationType,
        from_user_id: int,
        entity_id: Optional[int] = None,
    ) -> Optional[Notification]:
        if recipient_id == from_user_id:
            return None
        recipient = self.identity.get(recipient_id)
        if recipient is None:
            return None
        notification = self.identity.add_notification(recipient, kind, from_user_id, entity_id, self._clock())
        logger.debug("Notified user %s of %s from %s", recipient_id, kind.value, from_user_id)
        return notification

    def list_for(self, user_id: int, unread_only: bool = False) -> Result[List[Notification]]:
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        with self.identity.lock:
            items = [n for n in user.notifications if not (unread_only and n.read)]
        items.sort(key=lambda n: (n.created_at, n.id), reverse=True)
        return Ok(items)

    def mark_read(self, user_id: int, notification_id: int) -> Result[Notification]:
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        with self.identity.lock:
            for notification in user.notifications:
                if notification.id == notification_id:
                    notification.read = True
                    return Ok(notification)
        return not_found(f"notification {notification_id} not found")

    def mark_all_read(self, user_id: int) -> Result[int]:
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        changed = 0
        with self.identity.lock:
            for notification in user.notifications:
                if not notification.read:
                    notification.read = True
                    changed += 1
        return Ok(changed)
