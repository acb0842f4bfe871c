from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from flask import current_app

from biotrack.extensions import db
from biotrack.models import Update, User
from biotrack.notifications.emailer import deliver_updates_notification


def _now():
    return datetime.utcnow()


@dataclass
class DigestResult:
    checked: int = 0
    sent: int = 0
    elapsed: float = 0.0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "checked": self.checked,
            "sent": self.sent,
            "elapsed": round(self.elapsed, 3),
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }


def _find_subscriber(subscriber) -> Optional[User]:
    if isinstance(subscriber, User):
        return subscriber
    try:
        user = db.session.get(User, int(subscriber))
    except (TypeError, ValueError):
        user = None
    if user is None:
        user = User.query.filter_by(login=str(subscriber)).first()
    return user


def email_updates_to_user(subscriber, start_time: datetime, end_time: datetime) -> bool:
    """Email one subscriber their updates from the window. True if a message went out.

    Missing users, blank emails, unverified accounts and users with nothing
    left after their email preferences are skipped quietly.
    """
    user = _find_subscriber(subscriber)
    if user is None:
        current_app.logger.debug("update digest: subscriber %r not found", subscriber)
        return False
    if not (user.email or "").strip():
        current_app.logger.debug("update digest: %s has no email address", user.login)
        return False
    if not user.active:
        current_app.logger.debug("update digest: %s is not active", user.login)
        return False
    if current_app.config.get("DIGEST_ADMIN_ONLY") and not user.is_admin():
        return False

    updates = (
        Update.query
        .filter(Update.subscriber_id == user.id)
        .filter(Update.created_at.between(start_time, end_time))
        .order_by(Update.id.asc())
        .all()
    )
    updates = [u for u in updates if user.prefers_email_notification(u.notifier_type)]
    if not updates:
        return False

    deliver_updates_notification(user, updates)
    return True


def email_updates(now: Optional[datetime] = None) -> DigestResult:
    """Send the daily update digest to everyone who got updates in the last window."""
    started = time.monotonic()
    end_time = now or _now()
    start_time = end_time - timedelta(hours=int(current_app.config.get("DIGEST_WINDOW_HOURS", 24)))
    current_app.logger.info("start daily updates emailer (%s .. %s)", start_time.isoformat(), end_time.isoformat())

    rows = (
        db.session.query(Update.subscriber_id)
        .filter(Update.created_at.between(start_time, end_time))
        .filter(Update.subscriber_id.isnot(None))
        .distinct()
        .order_by(Update.subscriber_id.asc())
        .all()
    )

    result = DigestResult(start_time=start_time, end_time=end_time)
    for (subscriber_id,) in rows:
        result.checked += 1
        if email_updates_to_user(subscriber_id, start_time, end_time):
            result.sent += 1

    result.elapsed = time.monotonic() - started
    current_app.logger.info(
        "end daily updates emailer, checked %s, sent %s in %.2f s",
        result.checked, result.sent, result.elapsed,
    )
    return result
