from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from Friendbook.core.models import Post, Privacy, ReactionKind
from Friendbook.core.ranking import (
    TRENDING_WINDOW_HOURS,
    belongs_in_feed,
    is_visible_to,
    rank_by_score,
    recency_boost,
    trending_score,
)
from Friendbook.core.results import ErrorKind

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def network(service, people, befriend):
    befriend(people["alice"], people["bob"])
    befriend(people["alice"], people["carol"])
    return people


def _ids(views):
    return [view.post.id for view in views]


def test_feed_is_viewer_and_friends_newest_first(service, clock, network):
    posts = []
    for name in ("alice", "bob", "carol", "dave"):
        posts.append(service.create_post(network[name], f"hello from {name}").unwrap())
        clock.advance(minutes=10)

    feed = service.get_feed(network["alice"]).unwrap()

    own, bob, carol, stranger = posts
    assert _ids(feed) == [carol.id, bob.id, own.id]
    assert stranger.id not in _ids(feed)


def test_feed_respects_privacy(service, clock, network):
    alice, bob, dave = network["alice"], network["bob"], network["dave"]
    mine_private = service.create_post(alice, "diary", privacy=Privacy.PRIVATE).unwrap()
    friend_only = service.create_post(bob, "close friends", privacy=Privacy.FRIENDS).unwrap()
    friend_private = service.create_post(bob, "bob diary", privacy=Privacy.PRIVATE).unwrap()
    service.create_post(dave, "friends of dave", privacy=Privacy.FRIENDS).unwrap()

    alice_feed = _ids(service.get_feed(alice).unwrap())
    carol_feed = _ids(service.get_feed(network["carol"]).unwrap())

    assert set(alice_feed) == {mine_private.id, friend_only.id}
    assert friend_private.id not in alice_feed
    # carol and bob are not friends
    assert carol_feed == []


def test_feed_ties_keep_insertion_order(service, network):
    first = service.create_post(network["alice"], "one").unwrap()
    second = service.create_post(network["bob"], "two").unwrap()

    assert _ids(service.get_feed(network["alice"]).unwrap()) == [first.id, second.id]


def test_feed_for_unknown_viewer(service):
    assert service.get_feed(42).kind == ErrorKind.NOT_FOUND


def test_feed_without_friends_or_posts_is_empty(service, people):
    assert service.get_feed(people["erin"]).unwrap() == []


def test_feed_views_carry_author_and_counts(service, network):
    post = service.create_post(network["bob"], "counted").unwrap()
    service.set_post_reaction(post.id, network["alice"], ReactionKind.LIKE).unwrap()
    service.add_comment(post.id, network["carol"], "nice").unwrap()

    view = service.get_feed(network["alice"]).unwrap()[0]

    assert view.author.username == "bob"
    assert view.reaction_count == 1
    assert view.comment_count == 1


def test_recency_boost_decays_linearly_to_zero():
    assert recency_boost(NOW, NOW, TRENDING_WINDOW_HOURS) == 1.0
    assert recency_boost(NOW - timedelta(hours=36), NOW, TRENDING_WINDOW_HOURS) == pytest.approx(0.5)
    assert recency_boost(NOW - timedelta(hours=72), NOW, TRENDING_WINDOW_HOURS) == 0.0
    assert recency_boost(NOW - timedelta(hours=500), NOW, TRENDING_WINDOW_HOURS) == 0.0


def test_trending_score_weights():
    post = Post(id=1, user_id=1, content="x", share_count=1, created_at=NOW - timedelta(hours=100))
    post.reactions.set(2, ReactionKind.LIKE)

    # (1 reaction + 2 comments * 2 + 1 share * 3) with no boost
    assert trending_score(post, comment_count=2, now=NOW) == pytest.approx(8.0)

    post.created_at = NOW
    assert trending_score(post, comment_count=2, now=NOW) == pytest.approx(16.0)


def test_newer_post_trends_higher_with_equal_engagement(service, clock, people):
    old = service.create_post(people["alice"], "old news").unwrap()
    clock.advance(hours=99)
    new = service.create_post(people["bob"], "fresh news").unwrap()
    clock.advance(hours=1)
    for post in (old, new):
        service.set_post_reaction(post.id, people["carol"], ReactionKind.LIKE).unwrap()

    trending = service.get_trending().unwrap()

    assert _ids(trending) == [new.id, old.id]


def test_trending_beyond_window_keeps_insertion_order(service, clock, people):
    first = service.create_post(people["alice"], "first").unwrap()
    second = service.create_post(people["bob"], "second").unwrap()
    for post in (first, second):
        service.set_post_reaction(post.id, people["carol"], ReactionKind.LIKE).unwrap()
    clock.advance(hours=200)

    assert _ids(service.get_trending().unwrap()) == [first.id, second.id]


def test_trending_order_drifts_with_time(service, clock, people):
    busy = service.create_post(people["alice"], "busy").unwrap()
    for name in ("bob", "carol"):
        service.set_post_reaction(busy.id, people[name], ReactionKind.LOVE).unwrap()
    clock.advance(hours=71)
    quiet = service.create_post(people["bob"], "quiet").unwrap()
    service.add_comment(quiet.id, people["dave"], "first!").unwrap()

    # busy: 2 * (1 + 1/72); quiet: 2 * 2
    assert _ids(service.get_trending().unwrap()) == [quiet.id, busy.id]


def test_trending_limit(service, people, settings):
    for index in range(12):
        service.create_post(people["alice"], f"post {index}").unwrap()

    assert len(service.get_trending().unwrap()) == settings.TRENDING_DEFAULT_LIMIT
    assert len(service.get_trending(3).unwrap()) == 3
    assert service.ranker.trending(0).kind == ErrorKind.INVALID_ARGUMENT


def test_suggested_posts_come_from_second_degree_public_originals(service, people, befriend):
    alice, bob, carol, dave = people["alice"], people["bob"], people["carol"], people["dave"]
    befriend(alice, bob)
    befriend(bob, carol)
    befriend(bob, dave)
    public = service.create_post(carol, "public from carol").unwrap()
    service.create_post(carol, "carol friends", privacy=Privacy.FRIENDS).unwrap()
    service.create_post(bob, "direct friend").unwrap()
    shared = service.share_post(public.id, dave, "look").unwrap()
    popular = service.create_post(dave, "popular from dave").unwrap()
    service.set_post_reaction(popular.id, bob, ReactionKind.LIKE).unwrap()
    service.set_post_reaction(popular.id, alice, ReactionKind.WOW).unwrap()

    suggested = _ids(service.get_suggested(alice).unwrap())

    assert suggested == [popular.id, public.id]
    assert shared.id not in suggested


def test_suggested_without_connections_is_empty(service, people):
    service.create_post(people["bob"], "nobody sees this as a suggestion").unwrap()

    assert service.get_suggested(people["alice"]).unwrap() == []


def test_suggested_for_unknown_viewer(service):
    assert service.get_suggested(404).kind == ErrorKind.NOT_FOUND


def test_visibility_rules():
    public = Post(id=1, user_id=10, content="a")
    friends = Post(id=2, user_id=10, content="b", privacy=Privacy.FRIENDS)
    private = Post(id=3, user_id=10, content="c", privacy=Privacy.PRIVATE)

    assert is_visible_to(public, 99, set())
    assert is_visible_to(friends, 99, {10}) and not is_visible_to(friends, 99, set())
    assert is_visible_to(private, 10, set()) and not is_visible_to(private, 99, {10})
    assert not belongs_in_feed(public, 99, set())
    assert belongs_in_feed(public, 99, {10})


def test_rank_by_score_is_stable():
    posts = [Post(id=i, user_id=1, content=str(i)) for i in range(4)]
    scored = [(posts[0], 1.0), (posts[1], 3.0), (posts[2], 1.0), (posts[3], 3.0)]

    assert [post.id for post in rank_by_score(scored, 10)] == [1, 3, 0, 2]
    assert [post.id for post in rank_by_score(scored, 1)] == [1]


def test_timeline_filters_by_viewer(service, network):
    bob = network["bob"]
    public = service.create_post(bob, "hi all").unwrap()
    friends = service.create_post(bob, "hi friends", privacy=Privacy.FRIENDS).unwrap()
    service.create_post(bob, "hi me", privacy=Privacy.PRIVATE).unwrap()

    as_friend = set(_ids(service.user_posts(bob, network["alice"]).unwrap()))
    as_stranger = set(_ids(service.user_posts(bob, network["dave"]).unwrap()))

    assert as_friend == {public.id, friends.id}
    assert as_stranger == {public.id}
    assert len(service.user_posts(bob, bob).unwrap()) == 3
