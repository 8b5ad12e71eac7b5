from __future__ import annotations

from flask import Blueprint, jsonify

from twitterclone.app import rules
from twitterclone.app.common.auth import current_identity, get_store, login_required

bp = Blueprint("notifications", __name__)


def _notification(n) -> dict:
    return {
        "id": n.id,
        "user_id": n.user_id,
        "from_user_id": n.from_user_id,
        "tweet_id": n.tweet_id,
        "type": n.type,
        "message": n.message,
        "is_read": n.is_read,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }


@bp.get("/notifications/")
@login_required
def list_notifications():
    """GET /notifications/ - Caller's notifications, newest first."""
    items = get_store().notifications_for(current_identity().account_id)
    return jsonify([_notification(n) for n in items]), 200


@bp.post("/notifications/<int:notification_id>/read")
@login_required
def mark_read(notification_id: int):
    rules.mark_notification_read(get_store(), current_identity(), notification_id)
    return {"message": "Notification marked as read"}, 200
