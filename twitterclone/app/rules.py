"""Per-operation authorization rules.

Each rule runs after the auth gate has resolved the caller. It takes the
caller's `Identity` and request parameters (never the raw token), checks its
precondition against the store, applies the effect and appends a notification
where one is due, then commits once. A violated rule raises before anything
is written.

Concurrent like toggles from the same account on the same tweet are not
serialised: the check and the write are separate statements, so the last
writer wins and a racing duplicate insert surfaces as a storage error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from twitterclone.app.common.auth import Identity
from twitterclone.app.common.errors import Forbidden, NotFound, ValidationFailed
from twitterclone.app.common.validation import require_text
from twitterclone.app.models import Account, Notification, Reply, Tweet
from twitterclone.app.store.base import FeedItem, PostSummary, Store

logger = logging.getLogger(__name__)


@dataclass
class LikeResult:
    liked: bool
    likers: List[Account]


def _is_visible(store: Store, identity: Identity, post_id: int) -> bool:
    """A post is visible to the caller iff the caller follows its author."""
    author_id = store.post_author(post_id)
    if author_id is None:
        return False
    return store.follow_exists(identity.account_id, author_id)


def _require_visible(store: Store, identity: Identity, post_id: int) -> None:
    if not _is_visible(store, identity, post_id):
        raise NotFound("Tweet not found")


# --- reads ---

def feed(store: Store, identity: Identity) -> List[FeedItem]:
    return store.feed(identity.account_id)


def view_post(store: Store, identity: Identity, post_id: int) -> PostSummary:
    _require_visible(store, identity, post_id)
    summary = store.post_summary(post_id)
    if summary is None:
        raise NotFound("Tweet not found")
    return summary


def post_likes(store: Store, identity: Identity, post_id: int) -> List[Account]:
    _require_visible(store, identity, post_id)
    return store.likers_of(post_id)


def post_replies(store: Store, identity: Identity, post_id: int) -> List[Reply]:
    _require_visible(store, identity, post_id)
    return store.replies_of(post_id)


def suggestions(store: Store, identity: Identity, limit: int) -> List[Account]:
    return store.suggestions(identity.account_id, limit)


# --- writes ---

def create_post(store: Store, identity: Identity, text) -> Tweet:
    text = require_text(text, "Tweet cannot be empty.")
    tweet = store.create_post(identity.account_id, text)
    store.commit()
    return tweet


def delete_post(store: Store, identity: Identity, post_id: int) -> None:
    # Someone else's tweet looks exactly like a missing one.
    if store.post_author(post_id) != identity.account_id:
        raise NotFound("Tweet not found")
    store.delete_post(post_id)
    store.commit()


def follow(store: Store, identity: Identity, target_id: int) -> None:
    if target_id == identity.account_id:
        raise ValidationFailed("You cannot follow yourself", code="self_follow")
    if store.find_account_by_id(target_id) is None:
        raise NotFound("User not found")
    if store.follow_exists(identity.account_id, target_id):
        raise ValidationFailed("Already following this user", code="already_following")

    store.add_follow(identity.account_id, target_id)
    store.add_notification(
        recipient_id=target_id,
        actor_id=identity.account_id,
        kind="follow",
        message=f"@{identity.handle} started following you",
    )
    store.commit()


def unfollow(store: Store, identity: Identity, target_id: int) -> None:
    removed = store.remove_follow(identity.account_id, target_id)
    store.commit()
    if not removed:
        logger.debug("Unfollow of %s by %s was a no-op", target_id, identity.account_id)


def toggle_like(store: Store, identity: Identity, post_id: int) -> LikeResult:
    author_id = store.post_author(post_id)
    if author_id is None:
        raise NotFound("Tweet not found")

    if store.like_exists(post_id, identity.account_id):
        store.remove_like(post_id, identity.account_id)
        liked = False
    else:
        store.add_like(post_id, identity.account_id)
        if author_id != identity.account_id:
            store.add_notification(
                recipient_id=author_id,
                actor_id=identity.account_id,
                kind="like",
                message=f"{identity.handle} liked your tweet.",
                post_id=post_id,
            )
        liked = True

    store.commit()
    return LikeResult(liked=liked, likers=store.likers_of(post_id))


def create_reply(store: Store, identity: Identity, post_id: int, text) -> List[Reply]:
    author_id = store.post_author(post_id)
    if author_id is None:
        raise NotFound("Tweet not found")
    if not store.follow_exists(identity.account_id, author_id):
        raise Forbidden("You can only reply to tweets from users you follow")
    text = require_text(text, "Reply cannot be empty.")

    store.add_reply(post_id, identity.account_id, text)
    store.add_notification(
        recipient_id=author_id,
        actor_id=identity.account_id,
        kind="reply",
        message=f'{identity.handle} replied: "{text}"',
        post_id=post_id,
    )
    store.commit()
    return store.replies_of(post_id)


def mark_notification_read(store: Store, identity: Identity, notification_id: int) -> Notification:
    notification = store.find_notification(notification_id)
    if notification is None or notification.user_id != identity.account_id:
        raise NotFound("Notification not found")
    store.mark_notification_read(notification)
    store.commit()
    return notification
