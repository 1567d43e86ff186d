"""Friendbook: an in-memory social network service (feed, friends, reactions, comments)."""
