from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from flask import current_app
from sqlalchemy.orm import selectinload

from biotrack.models.update import Update
from biotrack.models.user import User
from biotrack.notifications import registry


def _loader_options(model, paths: Iterable[str]) -> list:
    """Turn dotted relationship paths ("taxon.taxon_names") into selectinload chains."""
    options = []
    for path in paths:
        cls = model
        option = None
        for name in path.split("."):
            attr = getattr(cls, name)
            option = selectinload(attr) if option is None else option.selectinload(attr)
            cls = attr.property.mapper.class_
        if option is not None:
            options.append(option)
    return options


def eager_load_associates(
    updates: Sequence[Update], includes: Optional[Dict[str, Iterable[str]]] = None
) -> Dict[str, Dict[int, Any]]:
    """Fetch everything a batch of updates points at, one query per type.

    Returns ``{cache_key: {id: record}}``, e.g. ``cache["observations"][12]``.
    ``includes`` overrides the registry's default eager-load paths per tag.
    ``users`` also holds every subscriber and resource owner. Ids that no
    longer resolve are simply absent.
    """
    includes = includes or {}
    for u in updates:
        for tag in (u.resource_type, u.notifier_type):
            if tag:
                registry.lookup(tag)

    user_ids = set()
    for u in updates:
        if u.subscriber_id is not None:
            user_ids.add(int(u.subscriber_id))
        if u.resource_owner_id is not None:
            user_ids.add(int(u.resource_owner_id))

    update_cache: Dict[str, Dict[int, Any]] = {}
    for entry in registry.types():
        ids = set()
        for u in updates:
            if u.notifier_type == entry.tag and u.notifier_id is not None:
                ids.add(int(u.notifier_id))
            if u.resource_type == entry.tag and u.resource_id is not None:
                ids.add(int(u.resource_id))
        if entry.model is User:
            ids |= user_ids
        if not ids:
            continue

        paths = includes.get(entry.tag, entry.includes)
        rows = (
            entry.model.query
            .options(*_loader_options(entry.model, paths))
            .filter(entry.model.id.in_(sorted(ids)))
            .all()
        )
        update_cache[entry.cache_key] = {int(o.id): o for o in rows}

        missing = ids - set(update_cache[entry.cache_key])
        if missing:
            current_app.logger.debug("updates cache: %s %s no longer exist", entry.tag, sorted(missing))

    update_cache.setdefault("users", {})
    return update_cache
