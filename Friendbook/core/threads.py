from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .models import Comment


@dataclass
class CommentNode:
    comment: Comment
    replies: List["CommentNode"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.comment.id


def build_comment_tree(comments: Iterable[Comment]) -> List[CommentNode]:
    """
    Rebuild the reply forest from a flat comment list.

    Replies keep their input order under each parent. A comment whose parent
    is missing from the input, or sits on a different post, becomes a root.
    """
    ordered = list(comments)
    nodes: Dict[int, CommentNode] = {comment.id: CommentNode(comment) for comment in ordered}
    roots: List[CommentNode] = []
    for comment in ordered:
        node = nodes[comment.id]
        parent = nodes.get(comment.parent_id) if comment.parent_id is not None else None
        if parent is not None and parent is not node and parent.comment.post_id == comment.post_id:
            parent.replies.append(node)
        else:
            roots.append(node)
    return roots

