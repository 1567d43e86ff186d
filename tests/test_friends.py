from __future__ import annotations

from Friendbook.core.friends import second_degree_connections
from Friendbook.core.results import ErrorKind


def test_accepting_request_makes_friendship_symmetric(service, people):
    alice, bob = people["alice"], people["bob"]
    service.send_friend_request(alice, bob).unwrap()
    assert alice in service.identity.get(bob).friend_requests

    service.accept_friend_request(bob, alice).unwrap()

    assert bob in service.identity.get(alice).friends
    assert alice in service.identity.get(bob).friends
    assert not service.identity.get(bob).friend_requests
    assert not service.identity.get(alice).friend_requests


def test_duplicate_and_reverse_requests_are_rejected(service, people):
    alice, bob = people["alice"], people["bob"]
    service.send_friend_request(alice, bob).unwrap()

    assert service.send_friend_request(alice, bob).kind == ErrorKind.INVALID_STATE
    assert service.send_friend_request(bob, alice).kind == ErrorKind.INVALID_STATE
    assert service.identity.get(bob).friend_requests == {alice}


def test_request_between_friends_is_rejected(service, people, befriend):
    befriend(people["alice"], people["bob"])

    result = service.send_friend_request(people["bob"], people["alice"])

    assert result.kind == ErrorKind.INVALID_STATE


def test_self_and_unknown_targets(service, people):
    assert service.send_friend_request(people["alice"], people["alice"]).kind == ErrorKind.INVALID_ARGUMENT
    assert service.send_friend_request(people["alice"], 404).kind == ErrorKind.NOT_FOUND


def test_accept_without_pending_request(service, people):
    result = service.accept_friend_request(people["bob"], people["alice"])

    assert result.kind == ErrorKind.INVALID_STATE
    assert not service.identity.get(people["bob"]).friends


def test_reject_clears_request_without_friendship(service, people):
    alice, bob = people["alice"], people["bob"]
    service.send_friend_request(alice, bob).unwrap()

    service.reject_friend_request(bob, alice).unwrap()

    assert not service.identity.get(bob).friend_requests
    assert alice not in service.identity.get(bob).friends
    assert service.reject_friend_request(bob, alice).kind == ErrorKind.INVALID_STATE
    # Once rejected, a fresh request may be sent.
    assert service.send_friend_request(alice, bob).ok


def test_remove_friend_is_symmetric(service, people, befriend):
    alice, bob = people["alice"], people["bob"]
    befriend(alice, bob)

    service.remove_friend(bob, alice).unwrap()

    assert alice not in service.identity.get(bob).friends
    assert bob not in service.identity.get(alice).friends
    assert service.remove_friend(alice, bob).kind == ErrorKind.INVALID_STATE


def test_second_degree_excludes_self_and_direct_friends(service, people, befriend):
    alice, bob, carol, dave = people["alice"], people["bob"], people["carol"], people["dave"]
    befriend(alice, bob)
    befriend(bob, carol)
    befriend(alice, dave)
    befriend(dave, bob)

    connections = second_degree_connections(service.identity, service.identity.get(alice))

    assert connections == {carol}


def test_suggested_friends_ranked_by_mutual_count(service, people, befriend):
    alice, bob, carol, dave, erin = (people[name] for name in ("alice", "bob", "carol", "dave", "erin"))
    befriend(alice, bob)
    befriend(alice, carol)
    befriend(bob, dave)
    befriend(carol, dave)
    befriend(bob, erin)

    ranked = service.suggested_friends(alice).unwrap()

    assert [(user.id, mutuals) for user, mutuals in ranked] == [(dave, 2), (erin, 1)]


def test_friend_request_notifies_recipient(service, people):
    service.send_friend_request(people["alice"], people["bob"]).unwrap()
    service.accept_friend_request(people["bob"], people["alice"]).unwrap()

    bob_inbox = service.list_notifications(people["bob"]).unwrap()
    alice_inbox = service.list_notifications(people["alice"]).unwrap()

    assert [n.type.value for n in bob_inbox] == ["FRIEND_REQUEST"]
    assert [n.type.value for n in alice_inbox] == ["FRIEND_ACCEPTED"]
    assert alice_inbox[0].from_user_id == people["bob"]
