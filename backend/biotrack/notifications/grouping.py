from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from flask import current_app

from biotrack.models.update import Update
from biotrack.notifications import registry

GroupKey = Tuple[str, int, str]


def _key(update: Update) -> GroupKey:
    return (update.resource_type, update.resource_id, update.notification)


def _by_date(updates):
    return sorted(updates, key=lambda u: u.sort_by_date())


def load_additional_activity_updates(updates: Sequence[Update]) -> List[Update]:
    """Pull in the subscriber's other stored activity updates on the same resources."""
    updates = list(updates)
    activity_updates = [u for u in updates if u.notification == "activity"]
    activity_update_ids = {u.id for u in activity_updates if u.id is not None}
    for update in activity_updates:
        q = Update.query.filter(
            Update.subscriber_id == update.subscriber_id,
            Update.notification == "activity",
            Update.resource_type == update.resource_type,
            Update.resource_id == update.resource_id,
        )
        if activity_update_ids:
            q = q.filter(Update.id.notin_(activity_update_ids))
        new_updates = q.order_by(Update.id.asc()).all()
        updates.extend(new_updates)
        activity_update_ids.update(u.id for u in new_updates)
    return updates


def expand_activity(key: GroupKey, batch: List[Update]) -> List[Update]:
    """Add unsaved updates for live activity on the resource that has no update row yet.

    Appends to `batch` and returns it sorted by date. Running it again on its
    own output adds nothing.
    """
    resource_type, resource_id, _ = key
    resource = registry.resolve(resource_type, resource_id)
    if resource is None:
        current_app.logger.debug("activity expansion: %s %s no longer exists", resource_type, resource_id)
        return _by_date(batch)

    present = {(u.notifier_type, u.notifier_id) for u in batch}
    subscriber_id = batch[0].subscriber_id if batch else None

    for assoc in registry.activity_associations(resource):
        # lazy-loads each associate's own relations (e.g. a comment's user) on first touch
        for associate in getattr(resource, assoc) or []:
            ident = (registry.tag_for(associate), associate.id)
            if ident in present:
                continue
            batch.append(Update(
                subscriber_id=subscriber_id,
                resource=resource,
                notifier=associate,
                notification="activity",
            ))
            present.add(ident)

    return _by_date(batch)


def group_and_sort(updates: Sequence[Update], skip_past_activity: bool = False) -> List[Tuple[GroupKey, List[Update]]]:
    """Bucket updates into feed entries, newest entry first.

    Buckets are keyed by (resource_type, resource_id, notification) and sorted
    by date inside. created_observations buckets split per hour; activity
    buckets gain the resource's live activity unless `skip_past_activity`.
    """
    batches: Dict[GroupKey, List[Update]] = {}
    for u in updates:
        batches.setdefault(_key(u), []).append(u)

    grouped_updates = []
    for key, batch in batches.items():
        notification = key[2]
        batch = _by_date(batch)
        if notification == "created_observations" and len(batch) > 1:
            hours: Dict[str, List[Update]] = {}
            for u in batch:
                created_at = u.created_at or u.sort_by_date()
                hours.setdefault(created_at.strftime("%Y-%m-%d %H"), []).append(u)
            for hour_updates in hours.values():
                grouped_updates.append((key, hour_updates))
        elif notification == "activity" and not skip_past_activity:
            grouped_updates.append((key, expand_activity(key, batch)))
        else:
            grouped_updates.append((key, batch))

    return sorted(grouped_updates, key=lambda group: group[1][-1].sort_by_date(), reverse=True)
