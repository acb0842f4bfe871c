from __future__ import annotations

from typing import Iterable, List, Optional

from biotrack.extensions import db
from biotrack.models.update import Update
from biotrack.notifications import registry


def _user_id(subscriber) -> int:
    return int(getattr(subscriber, "id", subscriber))


def _ensure_persisted(*objs) -> None:
    # pending records have no id until flushed, and no lazy-loaded relations either
    if any(obj is not None and obj.id is None for obj in objs):
        db.session.flush()


def queue_update(subscriber, resource, notifier, notification: str) -> Update:
    """Add an update unless this subscriber already has one for the notifier and kind."""
    _ensure_persisted(resource, notifier)
    subscriber_id = _user_id(subscriber)
    existing = Update.query.filter_by(
        notifier_type=registry.tag_for(notifier),
        notifier_id=int(notifier.id),
        subscriber_id=subscriber_id,
        notification=notification,
    ).first()
    if existing:
        return existing

    u = Update(
        subscriber_id=subscriber_id,
        resource=resource,
        notifier=notifier,
        notification=notification,
    )
    db.session.add(u)
    return u


def notify_activity(notifier) -> Optional[Update]:
    """Tell the owner of whatever `notifier` is about that something happened on it.

    Nothing is queued when the owner is the one acting.
    """
    _ensure_persisted(notifier)
    resource = registry.resource_of(notifier)
    if resource is None:
        return None
    owner = registry.owner_of(resource)
    if owner is None:
        return None
    actor = registry.owner_of(notifier)
    if actor is not None and int(actor.id) == int(owner.id):
        return None
    return queue_update(owner, resource, notifier, "activity")


def notify_created_observations(observation, subscribers: Iterable) -> List[Update]:
    """Queue a created_observations update per follower of the observer."""
    _ensure_persisted(observation)
    observer = observation.user
    out = []
    for subscriber in subscribers:
        if _user_id(subscriber) == int(observer.id):
            continue
        out.append(queue_update(subscriber, observer, observation, "created_observations"))
    return out
