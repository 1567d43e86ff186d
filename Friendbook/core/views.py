"""
Read-time denormalisation of store records.

Views attach author and tagged-user summaries plus derived counters to posts
and comments. They are built fresh on every read and never written back.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Optional

from .models import Comment, Post, User, is_visible_to
from .store import ContentStore, IdentityStore

PRIVATE_USER_FIELDS = ("password_hash", "friend_requests", "notifications")


def public_user_data(user: User) -> Dict[str, Any]:
    """Profile fields safe to show to any authenticated user."""
    snapshot = replace(user, friends=user.friends.copy(), friend_requests=set(), notifications=[])
    data = asdict(snapshot)
    for name in PRIVATE_USER_FIELDS:
        data.pop(name, None)
    data["friends"] = sorted(snapshot.friends)
    return data


@dataclass(frozen=True)
class UserSummary:
    id: int
    username: str
    full_name: str
    profile_picture: Optional[str]
    location: Optional[str] = None

    @classmethod
    def from_user(cls, user: User, with_location: bool = True) -> "UserSummary":
        return cls(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            profile_picture=user.profile_picture,
            location=user.location if with_location else None,
        )


@dataclass
class PostView:
    post: Post
    author: Optional[UserSummary]
    tagged: List[UserSummary] = field(default_factory=list)
    original: Optional["PostView"] = None
    comment_count: int = 0
    reaction_count: int = 0


@dataclass
class CommentView:
    comment: Comment
    author: Optional[UserSummary]


class ViewBuilder:
    def __init__(self, identity: IdentityStore, content: ContentStore) -> None:
        self.identity = identity
        self.content = content

    def summary(self, user_id: int, with_location: bool = True) -> Optional[UserSummary]:
        user = self.identity.get(user_id)
        return UserSummary.from_user(user, with_location) if user else None

    def can_see(self, post: Post, viewer_id: Optional[int]) -> bool:
        if viewer_id is None:
            return True
        viewer = self.identity.get(viewer_id)
        friend_ids = self.identity.friend_ids(viewer) if viewer else set()
        return is_visible_to(post, viewer_id, friend_ids)

    def post_view(self, post: Post, viewer_id: Optional[int] = None, _seen: Optional[set] = None) -> PostView:
        """
        Denormalise ``post`` for ``viewer_id``.

        A shared original the viewer may not see is left out of the view.
        ``viewer_id=None`` skips the check for internal callers.
        """
        seen = _seen or set()
        seen.add(post.id)
        original = None
        if post.original_post_id is not None and post.original_post_id not in seen:
            source = self.content.get_post(post.original_post_id)
            if source is not None and self.can_see(source, viewer_id):
                original = self.post_view(source, viewer_id, seen)
        tagged = [
            summary
            for summary in (self.summary(uid, with_location=False) for uid in post.tagged_users)
            if summary is not None
        ]
        return PostView(
            post=post,
            author=self.summary(post.user_id),
            tagged=tagged,
            original=original,
            comment_count=self.content.comment_count(post.id),
            reaction_count=post.reactions.total(),
        )

    def comment_view(self, comment: Comment) -> CommentView:
        return CommentView(comment=comment, author=self.summary(comment.user_id, with_location=False))
