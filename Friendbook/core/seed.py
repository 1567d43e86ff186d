"""Demo community loaded at startup so the API is usable straight away."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Dict

from .models import Education, LinkPreview, PostType, Privacy, ReactionKind, WorkEntry
from .service import ProfileUpdate, SocialService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {
        "username": "johndoe",
        "full_name": "John Doe",
        "bio": "Software developer and hiking enthusiast",
        "location": "Seattle, WA",
        "profile_picture": "https://randomuser.me/api/portraits/men/1.jpg",
        "education": [Education("University of Washington", "Computer Science", "2015-2019")],
        "work": [WorkEntry("Tech Innovations", "Senior Developer", "2019-Present")],
    },
    {
        "username": "janedoe",
        "full_name": "Jane Doe",
        "bio": "Graphic designer and coffee lover",
        "location": "Portland, OR",
        "profile_picture": "https://randomuser.me/api/portraits/women/1.jpg",
    },
    {
        "username": "mikesmith",
        "full_name": "Mike Smith",
        "bio": "Photographer chasing sunsets",
        "location": "San Francisco, CA",
        "profile_picture": "https://randomuser.me/api/portraits/men/2.jpg",
    },
    {
        "username": "sarahj",
        "full_name": "Sarah Johnson",
        "bio": "Yoga teacher",
        "location": "Los Angeles, CA",
        "profile_picture": "https://randomuser.me/api/portraits/women/2.jpg",
    },
    {
        "username": "davidw",
        "full_name": "David Wilson",
        "bio": "Music producer",
        "location": "Nashville, TN",
        "profile_picture": "https://randomuser.me/api/portraits/men/3.jpg",
    },
    {
        "username": "emilyc",
        "full_name": "Emily Chen",
        "bio": "Home cook and food blogger",
        "location": "Boston, MA",
        "profile_picture": "https://randomuser.me/api/portraits/women/3.jpg",
    },
]

FRIENDSHIPS = [
    ("johndoe", "janedoe"),
    ("johndoe", "mikesmith"),
    ("janedoe", "sarahj"),
    ("mikesmith", "davidw"),
    ("sarahj", "emilyc"),
]

PENDING_REQUESTS = [("davidw", "johndoe")]


def seed_demo_data(service: SocialService) -> Dict[str, int]:
    """Populate an empty service and return username -> user id."""
    if len(service.identity):
        logger.debug("Skipping demo seed; store already has users")
        return {user.username: user.id for user in service.identity.list_users()}

    ids: Dict[str, int] = {}
    for entry in DEMO_USERS:
        profile = dict(entry)
        username = profile.pop("username")
        session = service.register(username, DEMO_PASSWORD, profile.pop("full_name")).unwrap()
        service.update_profile(session.user.id, ProfileUpdate(**profile)).unwrap()
        ids[username] = session.user.id

    for left, right in FRIENDSHIPS:
        service.send_friend_request(ids[left], ids[right]).unwrap()
        service.accept_friend_request(ids[right], ids[left]).unwrap()
    for sender, recipient in PENDING_REQUESTS:
        service.send_friend_request(ids[sender], ids[recipient]).unwrap()

    now = service.now()
    hike = service.create_post(
        ids["johndoe"],
        "Just finished hiking Mount Rainier! The views were amazing. #hiking #nature",
        PostType.IMAGE,
        image_url="https://picsum.photos/id/10/800/600",
        location="Mount Rainier, WA",
        tagged_users=[ids["mikesmith"]],
    ).unwrap()
    logo = service.create_post(
        ids["janedoe"],
        "Finished a new logo design for a client today. What do you think? #design",
        PostType.IMAGE,
        image_url="https://picsum.photos/id/20/800/600",
    ).unwrap()
    track = service.create_post(
        ids["davidw"],
        "Just released a new track! #music #producer",
        PostType.LINK,
        link=LinkPreview(
            url="https://soundcloud.com/example/track",
            title="New Summer Beats - David Wilson",
            description="The latest electronic track from a Nashville-based producer",
            image="https://picsum.photos/id/50/800/600",
        ),
    ).unwrap()
    ramen = service.create_post(
        ids["emilyc"],
        "Made ramen from scratch today! Recipe in comments. #cooking",
        PostType.IMAGE,
        image_url="https://picsum.photos/id/60/800/600",
        location="Boston, MA",
    ).unwrap()
    plans = service.create_post(
        ids["janedoe"],
        "Weekend plans with close friends only.",
        privacy=Privacy.FRIENDS,
    ).unwrap()
    diary = service.create_post(ids["johndoe"], "Note to self: stretch more.", privacy=Privacy.PRIVATE).unwrap()

    for post, hours_old in ((hike, 30), (logo, 20), (track, 90), (ramen, 5), (plans, 2), (diary, 1)):
        post.created_at = post.updated_at = now - timedelta(hours=hours_old)

    for username, kind in (("janedoe", ReactionKind.LIKE), ("mikesmith", ReactionKind.WOW)):
        service.set_post_reaction(hike.id, ids[username], kind).unwrap()
    for username in ("johndoe", "sarahj", "mikesmith"):
        service.set_post_reaction(logo.id, ids[username], ReactionKind.LOVE).unwrap()
    service.set_post_reaction(track.id, ids["mikesmith"], ReactionKind.LIKE).unwrap()
    service.set_post_reaction(ramen.id, ids["sarahj"], ReactionKind.HAHA).unwrap()

    question = service.add_comment(hike.id, ids["janedoe"], "Looks amazing! Which trail?").unwrap()
    answer = service.add_comment(hike.id, ids["johndoe"], "Skyline Trail, start early!", parent_id=question.id).unwrap()
    service.add_comment(hike.id, ids["mikesmith"], "Great shot of the summit.").unwrap()
    service.add_comment(hike.id, ids["janedoe"], "Adding it to my list.", parent_id=answer.id).unwrap()
    service.add_comment(ramen.id, ids["sarahj"], "Recipe please!").unwrap()
    service.set_comment_reaction(question.id, ids["johndoe"], ReactionKind.LIKE).unwrap()

    service.share_post(track.id, ids["mikesmith"], "My friend David made this, check it out").unwrap()

    logger.info("Seeded %s demo users and %s posts", len(ids), len(service.content.posts()))
    return ids
