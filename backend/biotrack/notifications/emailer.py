"""
Email delivery for update digests.

Renders the subscriber's updates the same way the feed groups them and sends
one message through Flask-Mail. Delivery errors are left to the caller.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from flask import current_app, render_template
from flask_mail import Message

from biotrack.extensions import mail
from biotrack.models.update import Update
from biotrack.notifications import registry
from biotrack.notifications.cache import eager_load_associates
from biotrack.notifications.grouping import group_and_sort


def _cached(update_cache: Dict[str, Dict[int, Any]], tag: str, obj_id):
    if not tag or obj_id is None:
        return None
    bucket = update_cache.get(registry.lookup(tag).cache_key, {})
    return bucket.get(int(obj_id))


def _resource_label(tag: str, resource) -> str:
    if resource is None:
        return f"a {tag.lower()} that is no longer available"
    if tag == "Observation":
        taxon = resource.taxon
        return f"observation #{resource.id} ({taxon.name if taxon else 'unknown taxon'})"
    if tag == "Post":
        return f'post "{resource.title}"'
    if tag == "ListedTaxon":
        return f"{resource.taxon.name} on {resource.list.title}"
    if tag == "User":
        return resource.login
    return f"{tag.lower()} #{resource.id}"


def build_digest_groups(updates: Sequence[Update]) -> List[dict]:
    update_cache = eager_load_associates(updates)
    groups = []
    for (resource_type, resource_id, notification), members in group_and_sort(updates, skip_past_activity=True):
        resource = _cached(update_cache, resource_type, resource_id)
        lines = []
        for u in members:
            notifier = _cached(update_cache, u.notifier_type, u.notifier_id)
            actor = registry.owner_of(notifier) if notifier is not None else None
            lines.append({
                "kind": (u.notifier_type or "update").lower(),
                "actor": actor.login if actor is not None else None,
                "body": getattr(notifier, "body", None) or "",
                "created_at": u.sort_by_date(),
            })
        groups.append({
            "notification": notification,
            "resource_label": _resource_label(resource_type, resource),
            "lines": lines,
        })
    return groups


def deliver_updates_notification(user, updates: Sequence[Update]) -> Message:
    groups = build_digest_groups(updates)
    subject = f"{len(updates)} new update{'s' if len(updates) != 1 else ''} on biotrack"
    msg = Message(
        subject,
        recipients=[user.email],
        sender=current_app.config.get("MAIL_DEFAULT_SENDER"),
    )
    msg.body = render_template("emails/updates_notification.txt", user=user, groups=groups)
    msg.html = render_template("emails/updates_notification.html", user=user, groups=groups)
    mail.send(msg)
    return msg
