"""
Coordinates identity, content, reactions, friends and ranking.

``SocialService`` is the single entry point the HTTP layer talks to. It is a
constructed object with its own stores; nothing here is module-global, so
tests and the app each build their own instance.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .config import Settings, get_settings
from .credentials import CredentialService
from .friends import FriendGraph
from .models import (
    Comment,
    Education,
    LinkPreview,
    Notification,
    NotificationType,
    Post,
    PostType,
    Privacy,
    ReactionKind,
    User,
    WorkEntry,
    utcnow,
)
from .notifications import NotificationCenter
from .ranking import FeedRanker
from .reactions import ReactionEngine
from .results import Ok, Result, invalid_argument, invalid_state, not_found, unauthenticated
from .store import ContentStore, IdentityStore
from .threads import CommentNode, build_comment_tree
from .views import CommentView, PostView, ViewBuilder

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]{3,32}$")
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthSession:
    token: str
    user: User


@dataclass(frozen=True)
class ProfileUpdate:
    full_name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    profile_picture: Optional[str] = None
    cover_photo: Optional[str] = None
    education: Optional[Sequence[Education]] = None
    work: Optional[Sequence[WorkEntry]] = None


class SocialService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._clock = clock or utcnow
        self.identity = IdentityStore()
        self.content = ContentStore()
        self.credentials = CredentialService(
            secret=self.settings.JWT_SECRET,
            expires_seconds=self.settings.JWT_EXPIRES_SECONDS,
            iterations=self.settings.PASSWORD_HASH_ITERATIONS,
            clock=lambda: self._clock().timestamp(),
        )
        self.views = ViewBuilder(self.identity, self.content)
        self.notifications = NotificationCenter(self.identity, clock=self._clock)
        self.friends = FriendGraph(self.identity, self.notifications)
        self.reactions = ReactionEngine(self.content, clock=self._clock)
        self.ranker = FeedRanker(self.identity, self.content, self.views, clock=self._clock)

    def now(self) -> datetime:
        return self._clock()

    def _cap(self, limit: Optional[int], default: int) -> int:
        return min(limit or default, self.settings.MAX_LIST_LIMIT)

    # ------------------------------------------------------------------
    # Authentication

    def register(self, username: str, password: str, full_name: Optional[str] = None) -> Result[AuthSession]:
        username = (username or "").strip()
        if not USERNAME_PATTERN.match(username):
            return invalid_argument("username must be 3-32 letters, digits, '_' or '.'")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            return invalid_argument(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        with self.identity.lock:
            if self.identity.find_by_username(username) is not None:
                return invalid_state("username already exists")
            user = self.identity.create_user(
                username,
                self.credentials.hash_password(password),
                full_name=(full_name or "").strip() or None,
                created_at=self._clock(),
            )
        logger.info("Registered user %s (%s)", user.id, user.username)
        return Ok(AuthSession(token=self.credentials.issue_token(user.id, user.username), user=user))

    def authenticate(self, username: str, password: str) -> Result[AuthSession]:
        user = self.identity.find_by_username((username or "").strip())
        if user is None or not self.credentials.verify_password(password or "", user.password_hash):
            logger.warning("Failed login for username %r", username)
            return unauthenticated("Invalid credentials")
        return Ok(AuthSession(token=self.credentials.issue_token(user.id, user.username), user=user))

    def resolve_token(self, token: str) -> Result[User]:
        claims = self.credentials.validate_token(token)
        if not claims.ok:
            return claims
        user = self.identity.get(claims.value.user_id)
        if user is None:
            return unauthenticated("token subject no longer exists")
        return Ok(user)

    # ------------------------------------------------------------------
    # Users and profiles

    def get_user(self, user_id: int) -> Result[User]:
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        return Ok(user)

    def get_profile(self, user_id: int) -> Result[Tuple[User, List[User]]]:
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        return Ok((user, self.identity.get_many(user.friends)))

    def update_profile(self, user_id: int, changes: ProfileUpdate) -> Result[User]:
        user = self.identity.get(user_id)
        if user is None:
            return not_found(f"user {user_id} not found")
        if changes.full_name is not None and not changes.full_name.strip():
            return invalid_argument("full name cannot be blank")
        with self.identity.lock:
            for name in ("full_name", "bio", "location", "profile_picture", "cover_photo"):
                value = getattr(changes, name)
                if value is not None:
                    setattr(user, name, value.strip() if name == "full_name" else value)
            if changes.education is not None:
                user.education = list(changes.education)
            if changes.work is not None:
                user.work = list(changes.work)
        logger.info("Updated profile for user %s", user_id)
        return Ok(user)

    def search_users(self, query: str, limit: int = 20) -> Result[List[User]]:
        needle = (query or "").strip().lower()
        if not needle:
            return invalid_argument("search query is required")
        matches = [
            user
            for user in self.identity.list_users()
            if needle in user.username.lower() or needle in user.full_name.lower()
        ]
        return Ok(matches[: self._cap(limit, 20)])

    # ------------------------------------------------------------------
    # Friends

    def send_friend_request(self, from_id: int, to_id: int) -> Result[None]:
        return self.friends.send_request(from_id, to_id)

    def accept_friend_request(self, user_id: int, requester_id: int) -> Result[None]:
        return self.friends.accept_request(user_id, requester_id)

    def reject_friend_request(self, user_id: int, requester_id: int) -> Result[None]:
        return self.friends.reject_request(user_id, requester_id)

    def remove_friend(self, user_id: int, friend_id: int) -> Result[None]:
        return self.friends.remove_friend(user_id, friend_id)

    # ------------------------------------------------------------------
    # Posts

    def create_post(
        self,
        author_id: int,
        content: str,
        post_type: Union[str, PostType] = PostType.TEXT,
        *,
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
        link: Optional[LinkPreview] = None,
        privacy: Union[str, Privacy] = Privacy.PUBLIC,
        location: Optional[str] = None,
        tagged_users: Optional[Iterable[int]] = None,
        original_post_id: Optional[int] = None,
    ) -> Result[Post]:
        if self.identity.get(author_id) is None:
            return not_found(f"user {author_id} not found")
        # Shares may carry no commentary of their own.
        if original_post_id is None and not (content or "").strip():
            return invalid_argument("post content is required")
        try:
            kind = PostType(post_type)
            visibility = Privacy(privacy)
        except ValueError as exc:
            return invalid_argument(str(exc))

        fields = {"image_url": None, "video_url": None, "link": None}
        if kind == PostType.IMAGE:
            if not image_url:
                return invalid_argument("image posts require an image URL")
            fields["image_url"] = image_url
        elif kind == PostType.VIDEO:
            if not video_url:
                return invalid_argument("video posts require a video URL")
            fields["video_url"] = video_url
        elif kind == PostType.LINK:
            if link is None or not link.url:
                return invalid_argument("link posts require a link URL")
            fields["link"] = link

        tagged: List[int] = []
        for user_id in tagged_users or ():
            if self.identity.get(user_id) is None:
                return not_found(f"tagged user {user_id} not found")
            if user_id not in tagged:
                tagged.append(user_id)

        post = self.content.add_post(
            user_id=author_id,
            content=(content or "").strip(),
            post_type=kind,
            privacy=visibility,
            location=location,
            tagged_users=tagged,
            original_post_id=original_post_id,
            created_at=self._clock(),
            **fields,
        )
        logger.info("User %s created %s post %s", author_id, kind.value, post.id)
        return Ok(post)

    def share_post(self, original_post_id: int, author_id: int, content: str) -> Result[Post]:
        original = self.content.get_post(original_post_id)
        if original is None:
            return not_found(f"post {original_post_id} not found")
        sharer = self.identity.get(author_id)
        if sharer is None:
            return not_found(f"user {author_id} not found")
        if not self.views.can_see(original, author_id):
            return not_found(f"post {original_post_id} not found")
        shared = self.create_post(
            author_id,
            content,
            original.post_type,
            image_url=original.image_url,
            video_url=original.video_url,
            link=original.link,
            privacy=Privacy.PUBLIC,
            location=original.location,
            tagged_users=[original.user_id],
            original_post_id=original.id,
        )
        if not shared.ok:
            return shared
        with self.content.lock:
            original.share_count += 1
            original.updated_at = self._clock()
        self.notifications.notify(original.user_id, NotificationType.POST_SHARE, author_id, original.id)
        logger.info("User %s shared post %s as %s", author_id, original.id, shared.value.id)
        return shared

    def get_post(self, post_id: int, viewer_id: Optional[int] = None) -> Result[PostView]:
        post = self.content.get_post(post_id)
        if post is None:
            return not_found(f"post {post_id} not found")
        if not self.views.can_see(post, viewer_id):
            return not_found(f"post {post_id} not found")
        return Ok(self.views.post_view(post, viewer_id))

    def user_posts(self, author_id: int, viewer_id: int) -> Result[List[PostView]]:
        return self.ranker.timeline(author_id, viewer_id)

    # ------------------------------------------------------------------
    # Ranking

    def get_feed(self, viewer_id: int) -> Result[List[PostView]]:
        return self.ranker.feed(viewer_id)

    def get_trending(self, limit: Optional[int] = None, viewer_id: Optional[int] = None) -> Result[List[PostView]]:
        return self.ranker.trending(self._cap(limit, self.settings.TRENDING_DEFAULT_LIMIT), viewer_id)

    def get_suggested(self, viewer_id: int, limit: Optional[int] = None) -> Result[List[PostView]]:
        return self.ranker.suggested(viewer_id, self._cap(limit, self.settings.SUGGESTED_DEFAULT_LIMIT))

    def suggested_friends(self, user_id: int, limit: int = 10) -> Result[List[Tuple[User, int]]]:
        return self.friends.suggested_friends(user_id, self._cap(limit, 10))

    # ------------------------------------------------------------------
    # Reactions

    def set_post_reaction(self, post_id: int, user_id: int, kind: Union[str, ReactionKind]) -> Result[Post]:
        result = self.reactions.set_post_reaction(post_id, user_id, kind)
        if result.ok:
            self.notifications.notify(result.value.user_id, NotificationType.POST_REACTION, user_id, post_id)
        return result

    def clear_post_reaction(self, post_id: int, user_id: int, kind: Union[str, ReactionKind]) -> Result[Post]:
        return self.reactions.clear_post_reaction(post_id, user_id, kind)

    def like_post(self, post_id: int, user_id: int) -> Result[Post]:
        return self.set_post_reaction(post_id, user_id, ReactionKind.LIKE)

    def unlike_post(self, post_id: int, user_id: int) -> Result[Post]:
        return self.clear_post_reaction(post_id, user_id, ReactionKind.LIKE)

    def set_comment_reaction(
        self, comment_id: int, user_id: int, kind: Union[str, ReactionKind]
    ) -> Result[Comment]:
        return self.reactions.set_comment_reaction(comment_id, user_id, kind)

    def clear_comment_reaction(
        self, comment_id: int, user_id: int, kind: Union[str, ReactionKind]
    ) -> Result[Comment]:
        return self.reactions.clear_comment_reaction(comment_id, user_id, kind)

    # ------------------------------------------------------------------
    # Comments

    def add_comment(
        self,
        post_id: int,
        author_id: int,
        content: str,
        parent_id: Optional[int] = None,
        tagged_users: Optional[Iterable[int]] = None,
    ) -> Result[Comment]:
        post = self.content.get_post(post_id)
        if post is None:
            return not_found(f"post {post_id} not found")
        if self.identity.get(author_id) is None:
            return not_found(f"user {author_id} not found")
        if not content or not content.strip():
            return invalid_argument("comment content is required")
        parent = None
        if parent_id is not None:
            parent = self.content.get_comment(parent_id)
            if parent is None:
                return not_found(f"comment {parent_id} not found")
            if parent.post_id != post_id:
                return invalid_argument(f"comment {parent_id} belongs to another post")
        tagged: List[int] = []
        for user_id in tagged_users or ():
            if self.identity.get(user_id) is None:
                return not_found(f"tagged user {user_id} not found")
            if user_id not in tagged:
                tagged.append(user_id)

        comment = self.content.add_comment(
            post_id=post_id,
            user_id=author_id,
            content=content.strip(),
            parent_id=parent_id,
            tagged_users=tagged,
            created_at=self._clock(),
        )
        self.notifications.notify(post.user_id, NotificationType.COMMENT, author_id, post_id)
        if parent is not None and parent.user_id != post.user_id:
            self.notifications.notify(parent.user_id, NotificationType.COMMENT_REPLY, author_id, parent.id)
        logger.info("User %s commented on post %s", author_id, post_id)
        return Ok(comment)

    def get_comments(self, post_id: int) -> Result[List[CommentView]]:
        if self.content.get_post(post_id) is None:
            return not_found(f"post {post_id} not found")
        comments = sorted(self.content.comments_for_post(post_id), key=lambda c: c.created_at)
        return Ok([self.views.comment_view(comment) for comment in comments])

    def comment_tree(self, post_id: int) -> Result[List[CommentNode]]:
        if self.content.get_post(post_id) is None:
            return not_found(f"post {post_id} not found")
        comments = sorted(self.content.comments_for_post(post_id), key=lambda c: c.created_at)
        return Ok(build_comment_tree(comments))

    # ------------------------------------------------------------------
    # Notifications

    def list_notifications(self, user_id: int, unread_only: bool = False) -> Result[List[Notification]]:
        return self.notifications.list_for(user_id, unread_only)

    def mark_notification_read(self, user_id: int, notification_id: int) -> Result[Notification]:
        return self.notifications.mark_read(user_id, notification_id)

    def mark_all_notifications_read(self, user_id: int) -> Result[int]:
        return self.notifications.mark_all_read(user_id)
