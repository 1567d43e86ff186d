"""
Reaction engine for posts and comments.

A user holds at most one reaction per target. Setting a reaction replaces any
previous one; clearing only succeeds for the kind the user currently holds.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from .models import Comment, Post, ReactionKind, utcnow
from .results import Ok, Result, invalid_argument, not_found
from .store import ContentStore

logger = logging.getLogger(__name__)

Target = Union[Post, Comment]


def total_reactions(target: Target) -> int:
    return target.reactions.total()


def _coerce_kind(kind: Union[str, ReactionKind]) -> Optional[ReactionKind]:
    try:
        return ReactionKind(kind)
    except ValueError:
        return None


class ReactionEngine:
    def __init__(self, content: ContentStore, clock: Optional[Callable] = None) -> None:
        self.content = content
        self._clock = clock or utcnow

    def set_post_reaction(self, post_id: int, user_id: int, kind: Union[str, ReactionKind]) -> Result[Post]:
        post = self.content.get_post(post_id)
        if post is None:
            return not_found(f"post {post_id} not found")
        return self._set(post, user_id, kind)

    def clear_post_reaction(self, post_id: int, user_id: int, kind: Union[str, ReactionKind]) -> Result[Post]:
        post = self.content.get_post(post_id)
        if post is None:
            return not_found(f"post {post_id} not found")
        return self._clear(post, user_id, kind)

    def set_comment_reaction(
        self, comment_id: int, user_id: int, kind: Union[str, ReactionKind]
    ) -> Result[Comment]:
        comment = self.content.get_comment(comment_id)
        if comment is None:
            return not_found(f"comment {comment_id} not found")
        return self._set(comment, user_id, kind)

    def clear_comment_reaction(
        self, comment_id: int, user_id: int, kind: Union[str, ReactionKind]
    ) -> Result[Comment]:
        comment = self.content.get_comment(comment_id)
        if comment is None:
            return not_found(f"comment {comment_id} not found")
        return self._clear(comment, user_id, kind)

    def _set(self, target: Target, user_id: int, kind: Union[str, ReactionKind]) -> Result:
        reaction = _coerce_kind(kind)
        if reaction is None or not target.reactions.accepts(reaction):
            return invalid_argument(f"unsupported reaction {kind!r}")
        with self.content.lock:
            target.reactions.set(user_id, reaction)
            target.updated_at = self._clock()
        logger.debug("User %s reacted %s on %s %s", user_id, reaction.value, type(target).__name__, target.id)
        return Ok(target)

    def _clear(self, target: Target, user_id: int, kind: Union[str, ReactionKind]) -> Result:
        reaction = _coerce_kind(kind)
        if reaction is None or not target.reactions.accepts(reaction):
            return invalid_argument(f"unsupported reaction {kind!r}")
        with self.content.lock:
            if not target.reactions.clear(user_id, reaction):
                return not_found(f"user {user_id} has no {reaction.value} reaction on {target.id}")
            target.updated_at = self._clock()
        return Ok(target)
