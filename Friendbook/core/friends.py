"""
Friend-request lifecycle over the identity store.

For an ordered pair (A, B) the relationship moves None -> pending -> friends,
or pending -> None on rejection, and friends -> None on removal. A pair is
never friends and pending at the same time.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Set, Tuple

from .models import NotificationType, User
from .notifications import NotificationCenter
from .results import Ok, Result, invalid_argument, invalid_state, not_found
from .store import IdentityStore

logger = logging.getLogger(__name__)


def second_degree_connections(identity: IdentityStore, user: User) -> Set[int]:
    """Friends-of-friends, excluding the user and their direct friends."""
    connections: Set[int] = set()
    with identity.lock:
        direct = set(user.friends)
        for friend_id in direct:
            friend = identity.get(friend_id)
            if friend is None:
                continue
            connections.update(friend.friends)
    connections.discard(user.id)
    return connections - direct


class FriendGraph:
    def __init__(self, identity: IdentityStore, notifications: Optional[NotificationCenter] = None) -> None:
        self.identity = identity
        self.notifications = notifications

    def _pair(self, user_id: int, other_id: int) -> Result[Tuple[User, User]]:
        if user_id == other_id:
            return invalid_argument("cannot target yourself")
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        other = self.identity.get(other_id)
        if other is None:
            return not_found(f"user {other_id} not found")
        return Ok((user, other))

    def send_request(self, from_id: int, to_id: int) -> Result[None]:
        pair = self._pair(from_id, to_id)
        if not pair.ok:
            return pair
        sender, recipient = pair.value
        with self.identity.lock:
            if to_id in sender.friends:
                return invalid_state("users are already friends")
            if from_id in recipient.friend_requests or to_id in sender.friend_requests:
                return invalid_state("a friend request is already pending")
            recipient.friend_requests.add(from_id)
        logger.info("Friend request %s -> %s", from_id, to_id)
        if self.notifications:
            self.notifications.notify(to_id, NotificationType.FRIEND_REQUEST, from_id)
        return Ok(None)

    def accept_request(self, user_id: int, requester_id: int) -> Result[None]:
        pair = self._pair(user_id, requester_id)
        if not pair.ok:
            return pair
        user, requester = pair.value
        with self.identity.lock:
            if requester_id not in user.friend_requests:
                return invalid_state(f"no pending request from user {requester_id}")
            user.friend_requests.discard(requester_id)
            user.friends.add(requester_id)
            requester.friends.add(user_id)
        logger.info("Users %s and %s are now friends", user_id, requester_id)
        if self.notifications:
            self.notifications.notify(requester_id, NotificationType.FRIEND_ACCEPTED, user_id)
        return Ok(None)

    def reject_request(self, user_id: int, requester_id: int) -> Result[None]:
        pair = self._pair(user_id, requester_id)
        if not pair.ok:
            return pair
        user, _ = pair.value
        with self.identity.lock:
            if requester_id not in user.friend_requests:
                return invalid_state(f"no pending request from user {requester_id}")
            user.friend_requests.discard(requester_id)
        logger.info("User %s rejected request from %s", user_id, requester_id)
        return Ok(None)

    def remove_friend(self, user_id: int, friend_id: int) -> Result[None]:
        pair = self._pair(user_id, friend_id)
        if not pair.ok:
            return pair
        user, friend = pair.value
        with self.identity.lock:
            if friend_id not in user.friends:
                return invalid_state("users are not friends")
            user.friends.discard(friend_id)
            friend.friends.discard(user_id)
        logger.info("Users %s and %s are no longer friends", user_id, friend_id)
        return Ok(None)

    def friends_of(self, user_id: int) -> Result[List[User]]:
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        return Ok(self.identity.get_many(user.friends))

    def pending_requests(self, user_id: int) -> Result[List[User]]:
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        return Ok(self.identity.get_many(user.friend_requests))

    def suggested_friends(self, user_id: int, limit: int = 10) -> Result[List[Tuple[User, int]]]:
        """Second-degree connections ranked by mutual friend count."""
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        candidates = second_degree_connections(self.identity, user)
        mutuals: Counter = Counter()
        with self.identity.lock:
            for friend_id in user.friends:
                friend = self.identity.get(friend_id)
                if friend is None:
                    continue
                for candidate in friend.friends & candidates:
                    mutuals[candidate] += 1
        ranked = sorted(mutuals.items(), key=lambda item: (-item[1], item[0]))[:limit]
        return Ok([(self.identity.get(uid), count) for uid, count in ranked])
