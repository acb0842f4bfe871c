"""Closed registry of the record types an Update may point at.

Updates store polymorphic references as a ``(type tag, id)`` pair. Every tag
that may appear in ``resource_type`` / ``notifier_type`` is registered here
together with what the updates engine needs to know about it: the model, the
key it is cached under, default eager-load paths, how to find the owning user
and how to find the resource a notifier is about.

Tags that are not registered are a data-integrity problem and raise
``UnknownResourceType`` instead of being looked up dynamically.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from biotrack.extensions import db
from biotrack.models.comment import Comment
from biotrack.models.identification import Identification
from biotrack.models.listed_taxon import ListedTaxon
from biotrack.models.observation import Observation
from biotrack.models.post import Post
from biotrack.models.user import User


class UnknownResourceType(ValueError):
    """Raised for a type tag that is not in the registry."""

    def __init__(self, tag):
        super().__init__(f"Unknown resource type: {tag!r}")
        self.tag = tag


def _user_of(obj):
    return getattr(obj, "user", None)


def _itself(obj):
    return obj


@dataclass(frozen=True)
class ResourceType:
    tag: str
    model: type
    cache_key: str
    includes: Tuple[str, ...] = ()
    owner: Optional[Callable[[Any], Any]] = _user_of
    resource: Callable[[Any], Any] = _itself

    def notifying_associations(self, notification: Optional[str] = None) -> Dict[str, dict]:
        assocs = getattr(self.model, "notifying_associations", None) or {}
        if notification is None:
            return dict(assocs)
        return {name: opts for name, opts in assocs.items() if opts.get("notification") == notification}


_REGISTRY: Dict[str, ResourceType] = {}


def register(model, *, cache_key: str, includes=(), owner=_user_of, resource=_itself) -> ResourceType:
    tag = model.__name__
    entry = ResourceType(
        tag=tag,
        model=model,
        cache_key=cache_key,
        includes=tuple(includes),
        owner=owner,
        resource=resource,
    )
    _REGISTRY[tag] = entry
    return entry


def types() -> List[ResourceType]:
    return list(_REGISTRY.values())


def lookup(tag: str) -> ResourceType:
    try:
        return _REGISTRY[tag]
    except KeyError:
        raise UnknownResourceType(tag) from None


def tag_for(obj) -> str:
    for entry in _REGISTRY.values():
        if type(obj) is entry.model:
            return entry.tag
    raise UnknownResourceType(type(obj).__name__)


def resolve(tag: str | None, obj_id):
    """Load the record behind a tagged reference; None if it no longer exists."""
    if not tag or obj_id is None:
        return None
    entry = lookup(tag)
    return db.session.get(entry.model, int(obj_id))


def owner_of(obj):
    if obj is None:
        return None
    entry = lookup(tag_for(obj))
    if entry.owner is None:
        return None
    return entry.owner(obj)


def resource_of(obj):
    """The record a notifier is about (a comment's parent, an identification's observation)."""
    return lookup(tag_for(obj)).resource(obj)


def activity_associations(obj) -> List[str]:
    return list(lookup(tag_for(obj)).notifying_associations("activity"))


register(
    Comment,
    cache_key="comments",
    includes=("user",),
    resource=lambda c: c.parent,
)
register(
    Identification,
    cache_key="identifications",
    includes=("user", "taxon.taxon_names", "observation.user"),
    resource=lambda i: i.observation,
)
register(
    Observation,
    cache_key="observations",
    includes=("user", "taxon.taxon_names"),
)
register(
    ListedTaxon,
    cache_key="listed_taxa",
    includes=("list.user", "taxon.taxon_names"),
)
register(
    Post,
    cache_key="posts",
    includes=("user",),
)
# Users own nothing through an update; the cache fills this bucket with subscribers too.
register(
    User,
    cache_key="users",
    owner=None,
)
