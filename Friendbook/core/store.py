"""
In-memory repositories for users and content.

Each store owns an ``RLock``; callers that perform a read-modify-write across
several accessors (reactions, friend requests) hold ``store.lock`` for the
whole step so that concurrent requests on a threaded host are serialized.
"""

from __future__ import annotations

import threading
from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from .models import Comment, Notification, NotificationType, Post, User, utcnow


class IdentityStore:
    """User records, the friend graph and each user's notification inbox."""

    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._by_username: Dict[str, int] = {}
        self._user_seq = 0
        self._notification_seq = 0
        self.lock = threading.RLock()

    def create_user(
        self,
        username: str,
        password_hash: str,
        full_name: Optional[str] = None,
        created_at: Optional[datetime] = None,
        **profile,
    ) -> User:
        with self.lock:
            self._user_seq += 1
            user = User(
                id=self._user_seq,
                username=username,
                password_hash=password_hash,
                full_name=full_name or username,
                created_at=created_at or utcnow(),
                **profile,
            )
            self._users[user.id] = user
            self._by_username[username.lower()] = user.id
            return user

    def get(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        user_id = self._by_username.get(username.lower())
        return self._users.get(user_id) if user_id is not None else None

    def list_users(self) -> List[User]:
        with self.lock:
            return list(self._users.values())

    def friend_ids(self, user: User) -> Set[int]:
        with self.lock:
            return set(user.friends)

    def get_many(self, user_ids: Iterable[int]) -> List[User]:
        with self.lock:
            return [self._users[uid] for uid in sorted(user_ids) if uid in self._users]

    def add_notification(
        self,
        user: User,
        kind: NotificationType,
        from_user_id: int,
        entity_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> Notification:
        with self.lock:
            self._notification_seq += 1
            notification = Notification(
                id=self._notification_seq,
                type=kind,
                from_user_id=from_user_id,
                entity_id=entity_id,
                created_at=created_at or utcnow(),
            )
            user.notifications.append(notification)
            return notification

    def __len__(self) -> int:
        return len(self._users)


class ContentStore:
    """Posts and comments kept as flat, insertion-ordered collections."""

    def __init__(self) -> None:
        self._posts: Dict[int, Post] = {}
        self._comments: Dict[int, Comment] = {}
        self._comment_counts: Counter = Counter()
        self._post_seq = 0
        self._comment_seq = 0
        self.lock = threading.RLock()

    # Post helpers
    def add_post(self, **fields) -> Post:
        with self.lock:
            self._post_seq += 1
            created_at = fields.pop("created_at", None) or utcnow()
            post = Post(id=self._post_seq, created_at=created_at, updated_at=created_at, **fields)
            self._posts[post.id] = post
            return post

    def get_post(self, post_id: int) -> Optional[Post]:
        return self._posts.get(post_id)

    def posts(self) -> List[Post]:
        with self.lock:
            return list(self._posts.values())

    def posts_by_user(self, user_id: int) -> List[Post]:
        with self.lock:
            return [post for post in self._posts.values() if post.user_id == user_id]

    # Comment helpers
    def add_comment(self, **fields) -> Comment:
        with self.lock:
            self._comment_seq += 1
            created_at = fields.pop("created_at", None) or utcnow()
            comment = Comment(id=self._comment_seq, created_at=created_at, updated_at=created_at, **fields)
            self._comments[comment.id] = comment
            self._comment_counts[comment.post_id] += 1
            return comment

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self._comments.get(comment_id)

    def comments_for_post(self, post_id: int) -> List[Comment]:
        with self.lock:
            return [comment for comment in self._comments.values() if comment.post_id == post_id]

    def comment_count(self, post_id: int) -> int:
        return self._comment_counts[post_id]
