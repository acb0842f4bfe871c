"""Small builders for test records. Each one adds to the session and flushes."""

from datetime import datetime
from itertools import count

from biotrack.extensions import db
from biotrack.models import (
    Comment,
    Identification,
    List,
    ListedTaxon,
    Observation,
    Post,
    Taxon,
    TaxonName,
    Update,
    User,
    UserSettings,
)

_seq = count(1)


def _add(obj):
    db.session.add(obj)
    db.session.flush()
    return obj


def make_user(login=None, *, email=None, active=True, role="user", password=None, **prefs):
    n = next(_seq)
    login = login or f"user{n}"
    user = User(
        login=login,
        name=login.title(),
        email=email if email is not None else f"{login}@example.com",
        active=active,
        role=role,
    )
    if password:
        user.set_password(password)
    _add(user)
    if prefs:
        _add(UserSettings(user_id=user.id, **prefs))
    return user


def make_taxon(name="Quercus agrifolia", common_name="Coast Live Oak"):
    taxon = _add(Taxon(name=name, rank="species"))
    _add(TaxonName(taxon_id=taxon.id, name=name, lexicon="Scientific Names", is_scientific=True))
    if common_name:
        _add(TaxonName(taxon_id=taxon.id, name=common_name, lexicon="English"))
    return taxon


def make_observation(user, taxon=None, created_at=None, **kwargs):
    return _add(Observation(
        user_id=user.id,
        taxon_id=taxon.id if taxon else None,
        created_at=created_at or datetime.utcnow(),
        **kwargs,
    ))


def make_comment(user, parent, body="Nice find!", created_at=None):
    return _add(Comment(user_id=user.id, parent=parent, body=body, created_at=created_at or datetime.utcnow()))


def make_identification(user, observation, taxon, created_at=None):
    return _add(Identification(
        user_id=user.id,
        observation_id=observation.id,
        taxon_id=taxon.id,
        created_at=created_at or datetime.utcnow(),
    ))


def make_post(user, title="Bioblitz recap"):
    return _add(Post(user_id=user.id, title=title, body="What a weekend."))


def make_listed_taxon(user, taxon, title="Life list"):
    lst = _add(List(user_id=user.id, title=title))
    return _add(ListedTaxon(list_id=lst.id, taxon_id=taxon.id))


def make_update(subscriber, resource, notifier, notification="activity", created_at=None, id=None):
    update = Update(
        subscriber_id=subscriber.id,
        resource=resource,
        notifier=notifier,
        notification=notification,
    )
    if id is not None:
        update.id = id
    if created_at is not None:
        update.created_at = created_at
    return _add(update)
