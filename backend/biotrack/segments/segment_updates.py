from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from biotrack.models import Update
from biotrack.notifications import registry
from biotrack.notifications.cache import eager_load_associates
from biotrack.notifications.grouping import group_and_sort, load_additional_activity_updates
from biotrack.notifications.pruning import user_viewed_updates

updates_bp = Blueprint("updates_bp", __name__, url_prefix="/api")


def _page_limit() -> int:
    default = int(current_app.config.get("UPDATES_PAGE_SIZE", 50))
    raw_limit = (request.args.get("limit") or "").strip()
    try:
        limit = int(raw_limit) if raw_limit else default
    except ValueError:
        limit = default
    if limit < 1:
        limit = default
    if limit > 200:
        limit = 200
    return limit


def _record_dict(update_cache, tag, obj_id, fallback=None):
    obj = None
    if tag and obj_id is not None:
        obj = update_cache.get(registry.lookup(tag).cache_key, {}).get(int(obj_id))
    obj = obj or fallback
    return obj.to_dict() if obj is not None else None


def _group_dict(key, members, update_cache) -> dict:
    resource_type, resource_id, notification = key
    items = []
    for u in members:
        row = u.to_dict()
        # synthesized activity carries its notifier on the instance, not in the cache
        fallback = u.notifier if u.id is None else None
        row["notifier"] = _record_dict(update_cache, u.notifier_type, u.notifier_id, fallback)
        items.append(row)
    return {
        "resource_type": resource_type,
        "resource_id": resource_id,
        "notification": notification,
        "resource": _record_dict(update_cache, resource_type, resource_id),
        "updates": items,
    }


@updates_bp.get("/updates")
@login_required
def list_updates():
    """The signed-in user's update feed, grouped, newest first.

    ?filter=you limits the feed to activity on the user's own records.
    Showing the feed marks it viewed.
    """
    only_mine = (request.args.get("filter") or "").strip().lower() == "you"
    q = Update.activity_on_my_stuff() if only_mine else Update.query
    updates = (
        q.filter(Update.subscriber_id == current_user.id)
        .order_by(Update.id.desc())
        .limit(_page_limit())
        .all()
    )
    if only_mine:
        updates = load_additional_activity_updates(updates)

    update_cache = eager_load_associates(updates)
    grouped_updates = group_and_sort(updates)
    groups = [_group_dict(key, members, update_cache) for key, members in grouped_updates]

    pruned = user_viewed_updates(updates)
    return jsonify({"ok": True, "groups": groups, "viewed": pruned["viewed"]}), 200


@updates_bp.get("/updates/count")
@login_required
def unviewed_count():
    count = Update.unviewed().filter(Update.subscriber_id == current_user.id).count()
    return jsonify({"ok": True, "unviewed": int(count)}), 200
