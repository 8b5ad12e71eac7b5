from __future__ import annotations

import functools
import logging
from typing import Callable, List, Optional, Tuple, TypeVar, Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from twitterclone.app.extensions import db
from twitterclone.app.models import Account, Follower, Like, Notification, Reply, Tweet
from twitterclone.app.common.errors import StorageError
from twitterclone.app.store.base import FeedItem, PostSummary, Store

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _guarded(fn: F) -> F:
    """Roll back and surface driver failures as `StorageError`."""

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except SQLAlchemyError:
            logger.exception("Storage operation %s failed", fn.__name__)
            db.session.rollback()
            raise StorageError(fn.__name__)

    return wrapper  # type: ignore


class SqlStore(Store):
    """
    Flask-SQLAlchemy implementation of `Store`.

    The same adapter serves SQLite (development, tests) and PostgreSQL
    (production); the dialect comes from `SQLALCHEMY_DATABASE_URI`. All
    queries are ORM expressions, so values are always bound parameters.
    """

    def __init__(self, database=db) -> None:
        self._db = database

    @property
    def _session(self):
        return self._db.session

    # --- core reads ---

    @_guarded
    def find_account_by_handle(self, handle: str) -> Optional[Account]:
        return Account.query.filter_by(username=handle).first()

    @_guarded
    def find_account_by_id(self, account_id: int) -> Optional[Account]:
        return self._session.get(Account, account_id)

    @_guarded
    def follow_exists(self, follower_id: int, following_id: int) -> bool:
        return (
            Follower.query.filter_by(follower_user_id=follower_id, following_user_id=following_id).first()
            is not None
        )

    @_guarded
    def like_exists(self, post_id: int, account_id: int) -> bool:
        return Like.query.filter_by(tweet_id=post_id, user_id=account_id).first() is not None

    @_guarded
    def post_author(self, post_id: int) -> Optional[int]:
        return self._session.query(Tweet.user_id).filter(Tweet.id == post_id).scalar()

    # --- accounts ---

    @_guarded
    def create_account(self, name: str, username: str, password_hash: str, gender: str) -> Account:
        account = Account(name=name, username=username, password_hash=password_hash, gender=gender)
        self._session.add(account)
        self._session.flush()
        return account

    @_guarded
    def follow_counts(self, account_id: int) -> Tuple[int, int]:
        followers = Follower.query.filter_by(following_user_id=account_id).count()
        following = Follower.query.filter_by(follower_user_id=account_id).count()
        return followers, following

    @_guarded
    def suggestions(self, account_id: int, limit: int) -> List[Account]:
        followed = select(Follower.following_user_id).where(Follower.follower_user_id == account_id)
        return (
            Account.query.filter(Account.id != account_id, Account.id.not_in(followed))
            .order_by(func.random())
            .limit(limit)
            .all()
        )

    # --- posts ---

    @_guarded
    def create_post(self, author_id: int, text: str) -> Tweet:
        tweet = Tweet(user_id=author_id, tweet=text)
        self._session.add(tweet)
        self._session.flush()
        return tweet

    @_guarded
    def delete_post(self, post_id: int) -> None:
        tweet = self._session.get(Tweet, post_id)
        if tweet is None:
            return
        # SQLite does not enforce ON DELETE SET NULL unless foreign keys are switched on.
        Notification.query.filter_by(tweet_id=post_id).update({"tweet_id": None})
        self._session.delete(tweet)
        self._session.flush()

    def _summary_query(self):
        like_count = (
            select(func.count(Like.id)).where(Like.tweet_id == Tweet.id).correlate(Tweet).scalar_subquery()
        )
        reply_count = (
            select(func.count(Reply.id)).where(Reply.tweet_id == Tweet.id).correlate(Tweet).scalar_subquery()
        )
        return self._session.query(
            Tweet.id,
            Tweet.tweet,
            like_count.label("likes"),
            reply_count.label("replies"),
            Tweet.date_time,
        )

    @staticmethod
    def _to_summary(row) -> PostSummary:
        return PostSummary(
            tweet_id=row[0],
            tweet=row[1],
            likes=int(row[2] or 0),
            replies=int(row[3] or 0),
            date_time=row[4],
        )

    @_guarded
    def post_summary(self, post_id: int) -> Optional[PostSummary]:
        row = self._summary_query().filter(Tweet.id == post_id).first()
        return self._to_summary(row) if row else None

    @_guarded
    def posts_by(self, author_id: int) -> List[PostSummary]:
        rows = (
            self._summary_query()
            .filter(Tweet.user_id == author_id)
            .order_by(Tweet.date_time.desc(), Tweet.id.desc())
            .all()
        )
        return [self._to_summary(r) for r in rows]

    @_guarded
    def feed(self, account_id: int) -> List[FeedItem]:
        rows = (
            self._session.query(Account.username, Tweet.id, Tweet.tweet, Tweet.date_time)
            .select_from(Tweet)
            .join(Follower, Follower.following_user_id == Tweet.user_id)
            .join(Account, Account.id == Tweet.user_id)
            .filter(Follower.follower_user_id == account_id)
            .order_by(Tweet.date_time.desc(), Tweet.id.desc())
            .all()
        )
        return [FeedItem(username=r[0], tweet_id=r[1], tweet=r[2], date_time=r[3]) for r in rows]

    # --- follow graph ---

    @_guarded
    def add_follow(self, follower_id: int, following_id: int) -> None:
        self._session.add(Follower(follower_user_id=follower_id, following_user_id=following_id))
        self._session.flush()

    @_guarded
    def remove_follow(self, follower_id: int, following_id: int) -> bool:
        deleted = Follower.query.filter_by(
            follower_user_id=follower_id, following_user_id=following_id
        ).delete()
        return bool(deleted)

    @_guarded
    def followers_of(self, account_id: int) -> List[Account]:
        return (
            Account.query.join(Follower, Follower.follower_user_id == Account.id)
            .filter(Follower.following_user_id == account_id)
            .order_by(Account.id.asc())
            .all()
        )

    @_guarded
    def following_of(self, account_id: int) -> List[Account]:
        return (
            Account.query.join(Follower, Follower.following_user_id == Account.id)
            .filter(Follower.follower_user_id == account_id)
            .order_by(Account.id.asc())
            .all()
        )

    # --- likes / replies ---

    @_guarded
    def add_like(self, post_id: int, account_id: int) -> None:
        self._session.add(Like(tweet_id=post_id, user_id=account_id))
        self._session.flush()

    @_guarded
    def remove_like(self, post_id: int, account_id: int) -> None:
        Like.query.filter_by(tweet_id=post_id, user_id=account_id).delete()

    @_guarded
    def likers_of(self, post_id: int) -> List[Account]:
        return (
            Account.query.join(Like, Like.user_id == Account.id)
            .filter(Like.tweet_id == post_id)
            .order_by(Like.id.asc())
            .all()
        )

    @_guarded
    def add_reply(self, post_id: int, account_id: int, text: str) -> Reply:
        reply = Reply(tweet_id=post_id, user_id=account_id, reply=text)
        self._session.add(reply)
        self._session.flush()
        return reply

    @_guarded
    def replies_of(self, post_id: int) -> List[Reply]:
        return Reply.query.filter_by(tweet_id=post_id).order_by(Reply.id.asc()).all()

    @_guarded
    def likes_on_posts_by(self, author_id: int) -> List[Tuple[int, str]]:
        rows = (
            self._session.query(Tweet.id, Account.name)
            .select_from(Tweet)
            .join(Like, Like.tweet_id == Tweet.id)
            .join(Account, Account.id == Like.user_id)
            .filter(Tweet.user_id == author_id)
            .order_by(Like.id.asc())
            .all()
        )
        return [(r[0], r[1]) for r in rows]

    @_guarded
    def replies_on_posts_by(self, author_id: int) -> List[Tuple[int, str, str]]:
        rows = (
            self._session.query(Tweet.id, Account.name, Reply.reply)
            .select_from(Tweet)
            .join(Reply, Reply.tweet_id == Tweet.id)
            .join(Account, Account.id == Reply.user_id)
            .filter(Tweet.user_id == author_id)
            .order_by(Reply.id.asc())
            .all()
        )
        return [(r[0], r[1], r[2]) for r in rows]

    # --- notifications ---

    @_guarded
    def add_notification(
        self,
        recipient_id: int,
        actor_id: int,
        kind: str,
        message: str,
        post_id: Optional[int] = None,
    ) -> Notification:
        n = Notification(
            user_id=recipient_id,
            from_user_id=actor_id,
            tweet_id=post_id,
            type=kind,
            message=message,
        )
        self._session.add(n)
        self._session.flush()
        return n

    @_guarded
    def notifications_for(self, account_id: int) -> List[Notification]:
        return (
            Notification.query.filter_by(user_id=account_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    @_guarded
    def find_notification(self, notification_id: int) -> Optional[Notification]:
        return self._session.get(Notification, notification_id)

    @_guarded
    def mark_notification_read(self, notification: Notification) -> None:
        notification.is_read = True
        self._session.flush()

    @_guarded
    def commit(self) -> None:
        self._session.commit()
