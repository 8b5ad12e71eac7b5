from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol, Tuple

from twitterclone.app.models import Account, Notification, Reply, Tweet


@dataclass
class PostSummary:
    """A tweet with its like/reply counts."""

    tweet_id: int
    tweet: str
    likes: int
    replies: int
    date_time: datetime


@dataclass
class FeedItem:
    username: str
    tweet_id: int
    tweet: str
    date_time: datetime


class Store(Protocol):
    """
    Abstraction over persistence used by the auth gate and the rules.

    Implementations must give read-after-write consistency inside a request.
    Writes are staged until `commit()` so a rule can check, apply its effect
    and append a notification as one unit.
    """

    # Reads the auth gate and the rules depend on.

    def find_account_by_handle(self, handle: str) -> Optional[Account]:
        ...

    def find_account_by_id(self, account_id: int) -> Optional[Account]:
        ...

    def follow_exists(self, follower_id: int, following_id: int) -> bool:
        ...

    def like_exists(self, post_id: int, account_id: int) -> bool:
        ...

    def post_author(self, post_id: int) -> Optional[int]:
        """Return the author id of a post, or None if it does not exist."""

        ...

    # Accounts

    def create_account(self, name: str, username: str, password_hash: str, gender: str) -> Account:
        ...

    def follow_counts(self, account_id: int) -> Tuple[int, int]:
        """Return `(followers, following)` for an account."""

        ...

    def suggestions(self, account_id: int, limit: int) -> List[Account]:
        ...

    # Posts

    def create_post(self, author_id: int, text: str) -> Tweet:
        ...

    def delete_post(self, post_id: int) -> None:
        ...

    def post_summary(self, post_id: int) -> Optional[PostSummary]:
        ...

    def posts_by(self, author_id: int) -> List[PostSummary]:
        ...

    def feed(self, account_id: int) -> List[FeedItem]:
        """Posts by accounts `account_id` follows, newest first."""

        ...

    # Follow graph

    def add_follow(self, follower_id: int, following_id: int) -> None:
        ...

    def remove_follow(self, follower_id: int, following_id: int) -> bool:
        ...

    def followers_of(self, account_id: int) -> List[Account]:
        ...

    def following_of(self, account_id: int) -> List[Account]:
        ...

    # Likes and replies

    def add_like(self, post_id: int, account_id: int) -> None:
        ...

    def remove_like(self, post_id: int, account_id: int) -> None:
        ...

    def likers_of(self, post_id: int) -> List[Account]:
        ...

    def add_reply(self, post_id: int, account_id: int, text: str) -> Reply:
        ...

    def replies_of(self, post_id: int) -> List[Reply]:
        ...

    def likes_on_posts_by(self, author_id: int) -> List[Tuple[int, str]]:
        """`(tweet_id, liker name)` for every like on the author's posts."""

        ...

    def replies_on_posts_by(self, author_id: int) -> List[Tuple[int, str, str]]:
        """`(tweet_id, replier name, reply)` for every reply on the author's posts."""

        ...

    # Notifications

    def add_notification(
        self,
        recipient_id: int,
        actor_id: int,
        kind: str,
        message: str,
        post_id: Optional[int] = None,
    ) -> Notification:
        ...

    def notifications_for(self, account_id: int) -> List[Notification]:
        ...

    def find_notification(self, notification_id: int) -> Optional[Notification]:
        ...

    def mark_notification_read(self, notification: Notification) -> None:
        ...

    def commit(self) -> None:
        ...
