"""
Feed assembly and ranking.

Three retrieval modes run over the whole content store on every call; there
is no persisted index:

- feed: posts by the viewer and their friends that the viewer may see,
  newest first.
- trending: all posts scored by engagement with a 72-hour recency boost.
- suggested: public, non-shared posts by second-degree connections, scored by
  engagement with a one-week recency boost.

Recency boosts decay linearly from 1 to 0 across their window, and are
computed from the clock at query time, so trending order drifts over time.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Set, Tuple

from .friends import second_degree_connections
from .models import Post, Privacy, is_visible_to, utcnow
from .results import Ok, Result, invalid_argument, not_found
from .store import ContentStore, IdentityStore
from .views import PostView, ViewBuilder

logger = logging.getLogger(__name__)

TRENDING_WINDOW_HOURS = 72.0
SUGGESTED_WINDOW_HOURS = 168.0

TRENDING_COMMENT_WEIGHT = 2
TRENDING_SHARE_WEIGHT = 3


def age_in_hours(created_at: datetime, now: datetime) -> float:
    return (now - created_at).total_seconds() / 3600.0


def recency_boost(created_at: datetime, now: datetime, window_hours: float) -> float:
    return max(0.0, 1.0 - age_in_hours(created_at, now) / window_hours)


def trending_score(post: Post, comment_count: int, now: datetime) -> float:
    engagement = (
        post.reactions.total()
        + comment_count * TRENDING_COMMENT_WEIGHT
        + post.share_count * TRENDING_SHARE_WEIGHT
    )
    return engagement * (1 + recency_boost(post.created_at, now, TRENDING_WINDOW_HOURS))


def suggestion_score(post: Post, comment_count: int, now: datetime) -> float:
    engagement = post.reactions.total() + comment_count + post.share_count
    return engagement * (1 + recency_boost(post.created_at, now, SUGGESTED_WINDOW_HOURS))


def belongs_in_feed(post: Post, viewer_id: int, friend_ids: Set[int]) -> bool:
    # Public posts from outside the viewer's network are left to trending/suggested.
    in_network = post.user_id == viewer_id or post.user_id in friend_ids
    return in_network and is_visible_to(post, viewer_id, friend_ids)


def rank_by_score(scored: Iterable[Tuple[Post, float]], limit: int) -> List[Post]:
    # sorted() is stable, so equal scores keep insertion order.
    ordered = sorted(scored, key=lambda item: item[1], reverse=True)
    return [post for post, _ in ordered[:limit]]


class FeedRanker:
    def __init__(
        self,
        identity: IdentityStore,
        content: ContentStore,
        views: Optional[ViewBuilder] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.identity = identity
        self.content = content
        self.views = views or ViewBuilder(identity, content)
        self._clock = clock or utcnow

    def feed(self, viewer_id: int) -> Result[List[PostView]]:
        viewer = self.identity.get(viewer_id)
        if viewer is None:
            return not_found(f"user {viewer_id} not found")
        friend_ids = self.identity.friend_ids(viewer)
        posts = [post for post in self.content.posts() if belongs_in_feed(post, viewer_id, friend_ids)]
        posts.sort(key=lambda post: post.created_at, reverse=True)
        logger.debug("Feed for user %s: %s posts", viewer_id, len(posts))
        return Ok([self.views.post_view(post, viewer_id) for post in posts])

    def trending(self, limit: int = 10, viewer_id: Optional[int] = None) -> Result[List[PostView]]:
        if limit < 1:
            return invalid_argument("limit must be positive")
        now = self._clock()
        scored = [
            (post, trending_score(post, self.content.comment_count(post.id), now))
            for post in self.content.posts()
        ]
        ranked = rank_by_score(scored, limit)
        return Ok([self.views.post_view(post, viewer_id) for post in ranked])

    def suggested(self, viewer_id: int, limit: int = 10) -> Result[List[PostView]]:
        if limit < 1:
            return invalid_argument("limit must be positive")
        viewer = self.identity.get(viewer_id)
        if viewer is None:
            return not_found(f"user {viewer_id} not found")
        connections = second_degree_connections(self.identity, viewer)
        if not connections:
            return Ok([])
        now = self._clock()
        scored = [
            (post, suggestion_score(post, self.content.comment_count(post.id), now))
            for post in self.content.posts()
            if post.privacy == Privacy.PUBLIC and not post.is_share and post.user_id in connections
        ]
        ranked = rank_by_score(scored, limit)
        logger.debug("Suggested %s posts for user %s from %s connections", len(ranked), viewer_id, len(connections))
        return Ok([self.views.post_view(post, viewer_id) for post in ranked])

    def timeline(self, author_id: int, viewer_id: int) -> Result[List[PostView]]:
        author = self.identity.get(author_id)
        if author is None:
            return not_found(f"user {author_id} not found")
        viewer = self.identity.get(viewer_id)
        friend_ids = self.identity.friend_ids(viewer) if viewer else set()
        posts = [
            post for post in self.content.posts_by_user(author_id) if is_visible_to(post, viewer_id, friend_ids)
        ]
        posts.sort(key=lambda post: post.created_at, reverse=True)
        return Ok([self.views.post_view(post, viewer_id) for post in posts])
