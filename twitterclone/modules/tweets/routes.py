from __future__ import annotations

from flask import Blueprint, jsonify

from twitterclone.app import rules
from twitterclone.app.common.validation import get_json
from twitterclone.app.common.auth import current_identity, get_store, login_required
from twitterclone.app.store.base import PostSummary

bp = Blueprint("tweets", __name__)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _summary(s: PostSummary) -> dict:
    return {
        "tweetId": s.tweet_id,
        "tweet": s.tweet,
        "likes": s.likes,
        "replies": s.replies,
        "dateTime": _iso(s.date_time),
    }


def _replies(replies) -> list[dict]:
    return [{"name": r.user.name, "reply": r.reply} for r in replies]


@bp.get("/user/tweets/feed/")
@login_required
def get_feed():
    """GET /user/tweets/feed/ - Tweets by accounts the caller follows, newest first."""
    items = rules.feed(get_store(), current_identity())
    return jsonify(
        [
            {
                "username": i.username,
                "tweetId": i.tweet_id,
                "tweet": i.tweet,
                "dateTime": _iso(i.date_time),
            }
            for i in items
        ]
    ), 200


@bp.get("/user/tweets/")
@login_required
def list_own_tweets():
    """GET /user/tweets/ - Caller's tweets with like/reply counts."""
    posts = get_store().posts_by(current_identity().account_id)
    return jsonify([_summary(p) for p in posts]), 200


@bp.post("/user/tweets")
@login_required
def create_tweet():
    """POST /user/tweets - Post a tweet."""
    data = get_json()
    tweet = rules.create_post(get_store(), current_identity(), data.get("tweet"))
    return {
        "message": "Created a Tweet",
        "tweet": {
            "tweetId": tweet.id,
            "tweet": tweet.tweet,
            "likes": 0,
            "replies": 0,
            "dateTime": _iso(tweet.date_time),
        },
    }, 201


@bp.get("/tweets/<int:tweet_id>/")
@login_required
def get_tweet(tweet_id: int):
    """GET /tweets/<id>/ - A single tweet, if its author is followed."""
    return _summary(rules.view_post(get_store(), current_identity(), tweet_id)), 200


@bp.delete("/tweets/<int:tweet_id>/")
@login_required
def delete_tweet(tweet_id: int):
    """DELETE /tweets/<id>/ - Author only."""
    rules.delete_post(get_store(), current_identity(), tweet_id)
    return {"message": "Tweet Removed"}, 200


@bp.get("/tweets/<int:tweet_id>/likes/")
@login_required
def get_tweet_likes(tweet_id: int):
    store, identity = get_store(), current_identity()
    likers = rules.post_likes(store, identity, tweet_id)
    return {
        "likes": [a.name for a in likers],
        "hasLiked": store.like_exists(tweet_id, identity.account_id),
    }, 200


@bp.get("/tweets/<int:tweet_id>/replies/")
@login_required
def get_tweet_replies(tweet_id: int):
    replies = rules.post_replies(get_store(), current_identity(), tweet_id)
    return {"replies": _replies(replies)}, 200


@bp.post("/tweets/<int:tweet_id>/like")
@login_required
def like_tweet(tweet_id: int):
    """POST /tweets/<id>/like - Toggle the caller's like."""
    identity = current_identity()
    result = rules.toggle_like(get_store(), identity, tweet_id)
    return {
        "message": "Tweet liked successfully" if result.liked else "Tweet unliked successfully",
        "liked": result.liked,
        "likes": [a.username for a in result.likers],
        "currentUser": identity.handle,
    }, 200


@bp.post("/tweets/<int:tweet_id>/reply")
@login_required
def reply_to_tweet(tweet_id: int):
    """POST /tweets/<id>/reply - Reply to a tweet whose author the caller follows."""
    data = get_json()
    replies = rules.create_reply(get_store(), current_identity(), tweet_id, data.get("replyText"))
    return {"message": "Reply added successfully", "replies": _replies(replies)}, 200


@bp.get("/user/tweets/replies/")
@login_required
def replies_on_own_tweets():
    rows = get_store().replies_on_posts_by(current_identity().account_id)
    return jsonify([{"tweetId": t, "name": n, "reply": r} for t, n, r in rows]), 200


@bp.get("/user/tweets/likes/")
@login_required
def likes_on_own_tweets():
    rows = get_store().likes_on_posts_by(current_identity().account_id)
    return jsonify([{"tweetId": t, "name": n} for t, n in rows]), 200
