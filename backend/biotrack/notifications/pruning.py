from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Sequence

from flask import current_app

from biotrack.extensions import db
from biotrack.models.update import Update


def _now():
    return datetime.utcnow()


def user_viewed_updates(updates: Sequence[Update], now: Optional[datetime] = None) -> dict:
    """Record that a subscriber has seen `updates` and drop what they supersede.

    - every update in the batch gets viewed_at = now
    - older activity updates on the same resource that were not shown are deleted
    - all of the subscriber's updates past the retention age are deleted

    Deletes are hard deletes. Unsaved (synthesized) updates are ignored.
    """
    persisted = [u for u in updates if u.id is not None]
    if not persisted:
        return {"viewed": 0, "activity_deleted": 0, "expired_deleted": 0}

    now = now or _now()
    retention_days = int(current_app.config.get("UPDATE_RETENTION_DAYS", 365))
    update_ids = sorted({int(u.id) for u in persisted})
    min_id = update_ids[0]
    subscriber_id = persisted[0].subscriber_id

    # Capture before the bulk statements; they leave these instances stale
    activity_scopes = []
    for u in persisted:
        if u.notification != "activity":
            continue
        scope = (u.subscriber_id, u.resource_type, u.resource_id)
        if scope not in activity_scopes:
            activity_scopes.append(scope)

    try:
        viewed = (
            Update.query
            .filter(Update.id.in_(update_ids))
            .update({Update.viewed_at: now}, synchronize_session=False)
        )

        activity_deleted = 0
        for scope_subscriber_id, resource_type, resource_id in activity_scopes:
            activity_deleted += (
                Update.query
                .filter(
                    Update.id < min_id,
                    Update.id.notin_(update_ids),
                    Update.subscriber_id == scope_subscriber_id,
                    Update.notification == "activity",
                    Update.resource_type == resource_type,
                    Update.resource_id == resource_id,
                )
                .delete(synchronize_session=False)
            )

        expired_deleted = (
            Update.query
            .filter(
                Update.subscriber_id == subscriber_id,
                Update.created_at < now - timedelta(days=retention_days),
            )
            .delete(synchronize_session=False)
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return {
        "viewed": int(viewed),
        "activity_deleted": int(activity_deleted),
        "expired_deleted": int(expired_deleted),
    }
