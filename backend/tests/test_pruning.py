from datetime import datetime, timedelta

import pytest

from biotrack.models import Update
from biotrack.notifications.pruning import user_viewed_updates
from tests.factories import make_comment, make_observation, make_post, make_update, make_user

NOW = datetime(2024, 6, 1, 12, 0)


@pytest.fixture
def feed(app, db):
    alice = make_user("alice")
    bob = make_user("bob")
    obs = make_observation(alice)
    post = make_post(alice)

    def activity(update_id, subscriber=alice, resource=obs, created_at=NOW - timedelta(hours=1)):
        return make_update(subscriber, resource, make_comment(bob, resource), created_at=created_at, id=update_id)

    rows = {
        "ancient": make_update(alice, post, post, notification="change", created_at=NOW - timedelta(days=400), id=1),
        "someone_elses": activity(2, subscriber=bob),
        "stale": activity(3),
        "other_resource": activity(4, resource=post),
        "shown": [activity(5), activity(6), activity(7)],
        "newer": activity(10),
    }
    db.session.commit()
    return rows


def _ids():
    return {u.id for u in Update.query.all()}


def test_viewing_prunes_superseded_and_expired(feed, db):
    counts = user_viewed_updates(feed["shown"], now=NOW)

    assert counts == {"viewed": 3, "activity_deleted": 1, "expired_deleted": 1}
    assert _ids() == {2, 4, 5, 6, 7, 10}
    for update_id in (5, 6, 7):
        assert db.session.get(Update, update_id).viewed_at == NOW
    assert db.session.get(Update, 10).viewed_at is None


def test_unsaved_updates_are_ignored(feed):
    alice_id = feed["newer"].subscriber_id
    unsaved = Update(subscriber_id=alice_id, notification="activity")

    counts = user_viewed_updates([unsaved], now=NOW)

    assert counts == {"viewed": 0, "activity_deleted": 0, "expired_deleted": 0}
    assert len(_ids()) == 8


def test_batch_without_older_activity_only_expires(feed):
    counts = user_viewed_updates([feed["other_resource"]], now=NOW)
    # other_resource is activity on the post, and nothing older shares its scope
    assert counts["activity_deleted"] == 0
    assert counts["expired_deleted"] == 1
    assert 3 in _ids()


def test_retention_is_configurable(app, feed):
    app.config["UPDATE_RETENTION_DAYS"] = 1000
    counts = user_viewed_updates(feed["shown"], now=NOW)
    assert counts["expired_deleted"] == 0
    assert 1 in _ids()


def test_errors_roll_back(feed, db, monkeypatch):
    def boom():
        raise RuntimeError("disk full")

    monkeypatch.setattr(db.session(), "commit", boom)
    with pytest.raises(RuntimeError):
        user_viewed_updates(feed["shown"], now=NOW)
    monkeypatch.undo()

    assert len(_ids()) == 8
    assert all(db.session.get(Update, i).viewed_at is None for i in (5, 6, 7))
