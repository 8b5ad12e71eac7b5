from __future__ import annotations

from datetime import datetime
from sqlalchemy import CheckConstraint, UniqueConstraint, Index

from twitterclone.app.extensions import db

GENDERS = ("Male", "Female", "Other")
NOTIFICATION_TYPES = ("like", "reply", "follow")


class Account(db.Model):
    __tablename__ = "accounts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    username = db.Column(db.String(64), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    gender = db.Column(db.String(10), nullable=False)  # Male | Female | Other
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    tweets = db.relationship("Tweet", backref="author", lazy=True, cascade="all, delete-orphan")


class Follower(db.Model):
    __tablename__ = "followers"

    id = db.Column(db.Integer, primary_key=True)
    follower_user_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False, index=True)
    following_user_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("follower_user_id", "following_user_id", name="uq_followers_pair"),
        CheckConstraint("follower_user_id <> following_user_id", name="ck_followers_no_self"),
    )


class Tweet(db.Model):
    __tablename__ = "tweets"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False, index=True)
    tweet = db.Column(db.Text, nullable=False)
    date_time = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    likes = db.relationship("Like", backref="tweet", lazy=True, cascade="all, delete-orphan")
    replies = db.relationship("Reply", backref="tweet", lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_tweets_user_date", "user_id", "date_time"),
    )


class Like(db.Model):
    __tablename__ = "likes"

    id = db.Column(db.Integer, primary_key=True)
    tweet_id = db.Column(db.Integer, db.ForeignKey("tweets.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False, index=True)
    date_time = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("tweet_id", "user_id", name="uq_likes_tweet_user"),
    )


class Reply(db.Model):
    __tablename__ = "replies"

    id = db.Column(db.Integer, primary_key=True)
    tweet_id = db.Column(db.Integer, db.ForeignKey("tweets.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False, index=True)
    reply = db.Column(db.Text, nullable=False)
    date_time = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False, index=True)  # recipient
    from_user_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False)  # actor
    # Kept after the tweet is deleted
    tweet_id = db.Column(db.Integer, db.ForeignKey("tweets.id", ondelete="SET NULL"), nullable=True)
    type = db.Column(db.String(10), nullable=False)  # like | reply | follow
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
    )
