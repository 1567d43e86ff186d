from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List, Optional, Set, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PostType(str, enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    LINK = "link"


class Privacy(str, enum.Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class ReactionKind(str, enum.Enum):
    LIKE = "like"
    LOVE = "love"
    HAHA = "haha"
    WOW = "wow"
    SAD = "sad"
    ANGRY = "angry"


POST_REACTION_KINDS: FrozenSet[ReactionKind] = frozenset(ReactionKind)
COMMENT_REACTION_KINDS: FrozenSet[ReactionKind] = frozenset({ReactionKind.LIKE, ReactionKind.LOVE})


class NotificationType(str, enum.Enum):
    FRIEND_REQUEST = "FRIEND_REQUEST"
    FRIEND_ACCEPTED = "FRIEND_ACCEPTED"
    POST_REACTION = "POST_REACTION"
    COMMENT = "COMMENT"
    COMMENT_REPLY = "COMMENT_REPLY"
    POST_SHARE = "POST_SHARE"


class ReactionMap:
    """
    Reactions on a single post or comment.

    Stores the one active kind per user, so a user can never appear under two
    kinds at once. The per-kind sets are derived on read.
    """

    def __init__(self, allowed: FrozenSet[ReactionKind]) -> None:
        self.allowed = allowed
        self._by_user: Dict[int, ReactionKind] = {}
        self._lock = threading.Lock()

    def accepts(self, kind: ReactionKind) -> bool:
        return kind in self.allowed

    def set(self, user_id: int, kind: ReactionKind) -> None:
        if kind not in self.allowed:
            raise ValueError(f"reaction {kind.value} not allowed here")
        # Re-inserting moves the user to the end of the kind's ordering.
        with self._lock:
            self._by_user.pop(user_id, None)
            self._by_user[user_id] = kind

    def clear(self, user_id: int, kind: ReactionKind) -> bool:
        with self._lock:
            if self._by_user.get(user_id) != kind:
                return False
            del self._by_user[user_id]
            return True

    def kind_of(self, user_id: int) -> Optional[ReactionKind]:
        return self._by_user.get(user_id)

    def _snapshot(self) -> List[Tuple[int, ReactionKind]]:
        with self._lock:
            return list(self._by_user.items())

    def users_for(self, kind: ReactionKind) -> List[int]:
        return [user_id for user_id, active in self._snapshot() if active == kind]

    def total(self) -> int:
        return len(self._by_user)

    def as_dict(self) -> Dict[str, List[int]]:
        entries = self._snapshot()
        ordered = [kind for kind in ReactionKind if kind in self.allowed]
        return {kind.value: [user_id for user_id, active in entries if active == kind] for kind in ordered}


@dataclass(frozen=True)
class Education:
    school: str
    degree: str
    year: str


@dataclass(frozen=True)
class WorkEntry:
    company: str
    position: str
    year: str


@dataclass(frozen=True)
class LinkPreview:
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


@dataclass
class Notification:
    id: int
    type: NotificationType
    from_user_id: int
    entity_id: Optional[int] = None
    read: bool = False
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class User:
    id: int
    username: str
    password_hash: str
    full_name: str
    profile_picture: Optional[str] = None
    cover_photo: Optional[str] = None
    bio: str = ""
    location: Optional[str] = None
    education: List[Education] = field(default_factory=list)
    work: List[WorkEntry] = field(default_factory=list)
    friends: Set[int] = field(default_factory=set)
    friend_requests: Set[int] = field(default_factory=set)
    notifications: List[Notification] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Post:
    id: int
    user_id: int
    content: str
    post_type: PostType = PostType.TEXT
    privacy: Privacy = Privacy.PUBLIC
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    link: Optional[LinkPreview] = None
    location: Optional[str] = None
    tagged_users: List[int] = field(default_factory=list)
    reactions: ReactionMap = field(default_factory=lambda: ReactionMap(POST_REACTION_KINDS))
    share_count: int = 0
    original_post_id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_share(self) -> bool:
        return self.original_post_id is not None


def is_visible_to(post: Post, viewer_id: int, friend_ids: Set[int]) -> bool:
    """Privacy rule: public to all, friends-only to author and friends, private to author."""
    if post.privacy == Privacy.PUBLIC:
        return True
    if post.privacy == Privacy.FRIENDS:
        return post.user_id == viewer_id or post.user_id in friend_ids
    return post.user_id == viewer_id


@dataclass
class Comment:
    id: int
    post_id: int
    user_id: int
    content: str
    parent_id: Optional[int] = None
    tagged_users: List[int] = field(default_factory=list)
    reactions: ReactionMap = field(default_factory=lambda: ReactionMap(COMMENT_REACTION_KINDS))
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
