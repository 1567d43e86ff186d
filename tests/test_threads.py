from __future__ import annotations

from Friendbook.core.models import Comment
from Friendbook.core.threads import build_comment_tree


def _comment(comment_id, parent_id=None, post_id=1):
    return Comment(id=comment_id, post_id=post_id, user_id=1, content=f"c{comment_id}", parent_id=parent_id)


def test_builds_nested_forest_in_input_order():
    comments = [_comment(1), _comment(2, parent_id=1), _comment(3), _comment(4, parent_id=2)]

    roots = build_comment_tree(comments)

    assert [node.id for node in roots] == [1, 3]
    assert [reply.id for reply in roots[0].replies] == [2]
    assert [reply.id for reply in roots[0].replies[0].replies] == [4]
    assert roots[1].replies == []


def test_two_replies_under_one_root_with_grandchild():
    comments = [_comment(1), _comment(2, parent_id=1), _comment(3, parent_id=1), _comment(4, parent_id=2)]

    roots = build_comment_tree(comments)

    assert [node.id for node in roots] == [1]
    assert [reply.id for reply in roots[0].replies] == [2, 3]
    assert [reply.id for reply in roots[0].replies[0].replies] == [4]
    assert roots[0].replies[1].replies == []


def test_replies_keep_input_order():
    comments = [_comment(10), _comment(12, parent_id=10), _comment(11, parent_id=10)]

    roots = build_comment_tree(comments)

    assert [reply.id for reply in roots[0].replies] == [12, 11]


def test_reply_listed_before_parent_still_attaches():
    comments = [_comment(2, parent_id=1), _comment(1)]

    roots = build_comment_tree(comments)

    assert [node.id for node in roots] == [1]
    assert [reply.id for reply in roots[0].replies] == [2]


def test_orphan_becomes_root():
    roots = build_comment_tree([_comment(1), _comment(2, parent_id=99)])

    assert [node.id for node in roots] == [1, 2]


def test_parent_on_another_post_is_ignored():
    comments = [_comment(1, post_id=1), _comment(2, parent_id=1, post_id=2)]

    roots = build_comment_tree(comments)

    assert [node.id for node in roots] == [1, 2]
    assert roots[0].replies == []


def test_empty_input():
    assert build_comment_tree([]) == []


def test_service_tree_uses_stored_comments(service, people):
    post = service.create_post(people["alice"], "thread me").unwrap()
    first = service.add_comment(post.id, people["bob"], "first").unwrap()
    reply = service.add_comment(post.id, people["alice"], "reply", parent_id=first.id).unwrap()
    service.add_comment(post.id, people["carol"], "second").unwrap()

    roots = service.comment_tree(post.id).unwrap()

    assert [node.comment.content for node in roots] == ["first", "second"]
    assert roots[0].replies[0].id == reply.id
