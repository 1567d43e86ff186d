from __future__ import annotations

from Friendbook.core.models import NotificationType, ReactionKind
from Friendbook.core.results import ErrorKind


def _types(service, user_id, **kwargs):
    return [n.type for n in service.list_notifications(user_id, **kwargs).unwrap()]


def test_activity_on_a_post_notifies_its_author(service, people):
    alice, bob = people["alice"], people["bob"]
    post = service.create_post(alice, "hello").unwrap()

    service.set_post_reaction(post.id, bob, ReactionKind.LIKE).unwrap()
    service.add_comment(post.id, bob, "hi").unwrap()
    service.share_post(post.id, bob, "").unwrap()

    assert sorted(_types(service, alice)) == sorted(
        [NotificationType.POST_REACTION, NotificationType.COMMENT, NotificationType.POST_SHARE]
    )
    assert all(n.entity_id == post.id for n in service.list_notifications(alice).unwrap())


def test_own_activity_is_silent(service, people):
    alice = people["alice"]
    post = service.create_post(alice, "talking to myself").unwrap()

    service.set_post_reaction(post.id, alice, ReactionKind.LOVE).unwrap()
    service.add_comment(post.id, alice, "me again").unwrap()

    assert _types(service, alice) == []


def test_reply_notifies_parent_author(service, people):
    alice, bob, carol = people["alice"], people["bob"], people["carol"]
    post = service.create_post(alice, "question").unwrap()
    parent = service.add_comment(post.id, bob, "answer").unwrap()

    service.add_comment(post.id, carol, "follow-up", parent_id=parent.id).unwrap()

    assert _types(service, bob) == [NotificationType.COMMENT_REPLY]
    assert _types(service, alice).count(NotificationType.COMMENT) == 2


def test_mark_read(service, people):
    alice, bob = people["alice"], people["bob"]
    service.send_friend_request(bob, alice).unwrap()
    post = service.create_post(alice, "x").unwrap()
    service.like_post(post.id, bob).unwrap()
    first = service.list_notifications(alice).unwrap()[0]

    service.mark_notification_read(alice, first.id).unwrap()

    assert len(_types(service, alice, unread_only=True)) == 1
    assert service.mark_all_notifications_read(alice).unwrap() == 1
    assert service.mark_all_notifications_read(alice).unwrap() == 0
    assert _types(service, alice, unread_only=True) == []


def test_cannot_mark_someone_elses_notification(service, people):
    service.send_friend_request(people["bob"], people["alice"]).unwrap()
    notification = service.list_notifications(people["alice"]).unwrap()[0]

    result = service.mark_notification_read(people["carol"], notification.id)

    assert result.kind == ErrorKind.NOT_FOUND
    assert notification.read is False


def test_inbox_is_newest_first(service, people):
    alice = people["alice"]
    service.send_friend_request(people["bob"], alice).unwrap()
    service.send_friend_request(people["carol"], alice).unwrap()

    senders = [n.from_user_id for n in service.list_notifications(alice).unwrap()]

    assert senders == [people["carol"], people["bob"]]
