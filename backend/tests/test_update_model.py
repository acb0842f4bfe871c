from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from biotrack.models import Update
from tests.factories import make_comment, make_observation, make_post, make_update, make_user


def test_resource_owner_set_on_insert(app, db):
    alice = make_user("alice")
    bob = make_user("bob")
    obs = make_observation(alice)
    comment = make_comment(bob, obs)

    u = make_update(bob, obs, comment)
    db.session.commit()

    assert db.session.get(Update, u.id).resource_owner_id == alice.id


def test_explicit_resource_owner_is_kept(app, db):
    alice = make_user("alice")
    bob = make_user("bob")
    obs = make_observation(alice)
    u = Update(subscriber_id=bob.id, resource=obs, notifier=make_comment(bob, obs), notification="activity")
    u.resource_owner_id = bob.id
    db.session.add(u)
    db.session.commit()
    assert u.resource_owner_id == bob.id


def test_duplicate_notifier_subscriber_notification_rejected(app, db):
    alice = make_user("alice")
    bob = make_user("bob")
    obs = make_observation(alice)
    comment = make_comment(bob, obs)
    make_update(alice, obs, comment)
    db.session.commit()

    with pytest.raises(IntegrityError):
        make_update(alice, obs, comment)
    db.session.rollback()

    # same notifier, different kind is fine
    make_update(alice, obs, comment, notification="change")
    db.session.commit()
    assert Update.query.count() == 2


def test_resource_and_notifier_resolve(app, db):
    alice = make_user("alice")
    obs = make_observation(alice)
    comment = make_comment(alice, obs)
    u = make_update(alice, obs, comment)
    db.session.commit()

    fresh = db.session.get(Update, u.id)
    assert fresh.resource_type == "Observation"
    assert fresh.resource.id == obs.id
    assert fresh.notifier.id == comment.id


def test_dangling_notifier_resolves_to_none(app, db):
    alice = make_user("alice")
    obs = make_observation(alice)
    u = Update(subscriber_id=alice.id, resource=obs, notification="activity")
    u.notifier_type = "Comment"
    u.notifier_id = 999
    db.session.add(u)
    db.session.commit()
    assert u.notifier is None


def test_sort_by_date_prefers_created_at(app):
    alice = make_user("alice")
    obs = make_observation(alice)
    when = datetime(2024, 5, 1, 12, 0)
    comment = make_comment(alice, obs, created_at=when - timedelta(days=3))
    u = make_update(alice, obs, comment, created_at=when)
    assert u.sort_by_date() == when


def test_sort_by_date_falls_back_to_notifier(app):
    alice = make_user("alice")
    obs = make_observation(alice)
    when = datetime(2024, 5, 1, 12, 0)
    comment = make_comment(alice, obs, created_at=when)
    u = Update(subscriber_id=alice.id, resource=obs, notifier=comment, notification="activity")
    assert u.created_at is None
    assert u.sort_by_date() == when


def test_sort_by_date_falls_back_to_now(app):
    u = Update(notification="activity")
    before = datetime.utcnow()
    assert u.sort_by_date() >= before


def test_query_helpers(app, db):
    alice = make_user("alice")
    bob = make_user("bob")
    obs = make_observation(alice)
    post = make_post(bob)

    mine = make_update(alice, obs, make_comment(bob, obs))
    followed = make_update(alice, post, make_comment(bob, post))
    change = make_update(alice, obs, obs, notification="change")
    change.viewed_at = datetime.utcnow()
    db.session.commit()

    assert {u.id for u in Update.activity_on_my_stuff()} == {mine.id}
    assert {u.id for u in Update.activity()} == {mine.id, followed.id}
    assert {u.id for u in Update.unviewed()} == {mine.id, followed.id}
