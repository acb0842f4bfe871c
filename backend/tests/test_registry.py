import pytest

from biotrack.models import Comment, Observation, User
from biotrack.notifications import registry
from biotrack.notifications.registry import UnknownResourceType
from tests.factories import (
    make_comment,
    make_identification,
    make_listed_taxon,
    make_observation,
    make_taxon,
    make_user,
)


def test_lookup_known_tags(app):
    assert registry.lookup("Observation").model is Observation
    assert registry.lookup("Comment").cache_key == "comments"
    assert registry.lookup("User").owner is None


def test_lookup_unknown_tag_raises(app):
    with pytest.raises(UnknownResourceType) as exc:
        registry.lookup("Spaceship")
    assert exc.value.tag == "Spaceship"
    assert isinstance(exc.value, ValueError)


def test_resolve_returns_none_for_missing_record(app):
    assert registry.resolve("Observation", 4242) is None
    assert registry.resolve(None, 1) is None
    assert registry.resolve("Observation", None) is None


def test_resolve_unknown_tag_raises(app):
    with pytest.raises(UnknownResourceType):
        registry.resolve("Spaceship", 1)


def test_owner_and_resource_of_notifiers(app):
    alice = make_user("alice")
    bob = make_user("bob")
    oak = make_taxon()
    obs = make_observation(alice, oak)
    comment = make_comment(bob, obs)
    ident = make_identification(bob, obs, oak)

    assert registry.resource_of(comment).id == obs.id
    assert registry.resource_of(ident).id == obs.id
    assert registry.owner_of(obs).id == alice.id
    assert registry.owner_of(comment).id == bob.id
    assert registry.owner_of(alice) is None


def test_listed_taxon_is_owned_through_its_list(app):
    carol = make_user("carol")
    lt = make_listed_taxon(carol, make_taxon())
    assert registry.owner_of(lt).id == carol.id


def test_activity_associations(app):
    alice = make_user("alice")
    obs = make_observation(alice)
    assert sorted(registry.activity_associations(obs)) == ["comments", "identifications"]
    assert registry.activity_associations(alice) == []


def test_tag_for(app):
    alice = make_user("alice")
    obs = make_observation(alice)
    assert registry.tag_for(obs) == "Observation"
    assert registry.tag_for(alice) == "User"
    assert registry.tag_for(make_comment(alice, obs)) == Comment.__name__
    with pytest.raises(UnknownResourceType):
        registry.tag_for(object())


def test_every_type_has_a_distinct_cache_key(app):
    keys = [t.cache_key for t in registry.types()]
    assert len(keys) == len(set(keys))
    assert registry.lookup("User").model is User
