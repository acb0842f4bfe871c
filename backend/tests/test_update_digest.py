from datetime import datetime, timedelta

import pytest

from biotrack.extensions import mail
from biotrack.jobs import update_digest
from biotrack.jobs.update_digest import DigestResult, email_updates, email_updates_to_user
from tests.factories import (
    make_comment,
    make_identification,
    make_observation,
    make_taxon,
    make_update,
    make_user,
)

NOW = datetime(2024, 6, 2, 6, 0)
IN_WINDOW = NOW - timedelta(hours=3)


@pytest.fixture
def deliveries(monkeypatch):
    sent = []

    def fake_deliver(user, updates):
        sent.append((user.login, [(u.notifier_type, u.notifier_id) for u in updates]))

    monkeypatch.setattr(update_digest, "deliver_updates_notification", fake_deliver)
    return sent


def _activity(owner, actor, when=IN_WINDOW):
    oak = make_taxon(name=f"Quercus {actor.login}", common_name=None)
    obs = make_observation(owner, oak)
    comment = make_comment(actor, obs, body="Looks like an oak to me")
    ident = make_identification(actor, obs, oak)
    return (
        make_update(owner, obs, comment, created_at=when),
        make_update(owner, obs, ident, created_at=when),
    )


def test_only_subscribers_with_updates_in_window_are_emailed(app, db, deliveries):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    _activity(alice, bob)
    _activity(carol, bob, when=NOW - timedelta(days=3))
    db.session.commit()

    result = email_updates(now=NOW)

    assert isinstance(result, DigestResult)
    assert result.checked == 1
    assert result.sent == 1
    assert [login for login, _ in deliveries] == ["alice"]
    assert result.end_time == NOW
    assert result.start_time == NOW - timedelta(hours=24)


def test_comment_opt_out_filters_comment_updates(app, db, deliveries):
    alice = make_user("alice", email_comment_notifications=False)
    bob = make_user("bob")
    comment_update, ident_update = _activity(alice, bob)
    db.session.commit()

    assert email_updates_to_user(alice, NOW - timedelta(days=1), NOW) is True
    assert deliveries == [("alice", [("Identification", ident_update.notifier_id)])]


def test_nothing_left_after_preferences_sends_nothing(app, db, deliveries):
    alice = make_user(
        "alice",
        email_comment_notifications=False,
        email_identification_notifications=False,
    )
    _activity(alice, make_user("bob"))
    db.session.commit()

    assert email_updates_to_user(alice, NOW - timedelta(days=1), NOW) is False
    assert deliveries == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"email": "  "},
        {"active": False},
    ],
)
def test_unreachable_subscribers_are_skipped(app, db, deliveries, kwargs):
    alice = make_user("alice", **kwargs)
    _activity(alice, make_user("bob"))
    db.session.commit()

    result = email_updates(now=NOW)
    assert result.checked == 1
    assert result.sent == 0
    assert deliveries == []


def test_admin_gate(app, db, deliveries):
    app.config["DIGEST_ADMIN_ONLY"] = True
    alice = make_user("alice")
    root = make_user("root", role="admin")
    bob = make_user("bob")
    _activity(alice, bob)
    _activity(root, bob)
    db.session.commit()

    result = email_updates(now=NOW)

    assert result.checked == 2
    assert [login for login, _ in deliveries] == ["root"]


def test_subscriber_lookup_by_id_and_login(app, db, deliveries):
    alice = make_user("alice")
    _activity(alice, make_user("bob"))
    db.session.commit()
    start = NOW - timedelta(days=1)

    assert email_updates_to_user(alice.id, start, NOW) is True
    assert email_updates_to_user("alice", start, NOW) is True
    assert email_updates_to_user("nobody", start, NOW) is False
    assert len(deliveries) == 2


def test_delivery_failure_propagates(app, db, monkeypatch):
    alice = make_user("alice")
    _activity(alice, make_user("bob"))
    db.session.commit()

    def broken(user, updates):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(update_digest, "deliver_updates_notification", broken)
    with pytest.raises(ConnectionRefusedError):
        email_updates(now=NOW)


def test_digest_email_contents(app, db):
    alice = make_user("alice")
    bob = make_user("bob")
    _activity(alice, bob)
    db.session.commit()

    with mail.record_messages() as outbox:
        result = email_updates(now=NOW)

    assert result.sent == 1
    assert len(outbox) == 1
    msg = outbox[0]
    assert msg.recipients == ["alice@example.com"]
    assert msg.subject == "2 new updates on biotrack"
    assert "New activity on observation #" in msg.body
    assert "comment by bob" in msg.body
    assert "Looks like an oak to me" in msg.body
    assert "identification by bob" in msg.body
    assert "Looks like an oak to me" in msg.html


def test_result_to_dict(app):
    result = DigestResult(checked=3, sent=1, elapsed=0.12345, start_time=NOW - timedelta(days=1), end_time=NOW)
    assert result.to_dict() == {
        "checked": 3,
        "sent": 1,
        "elapsed": 0.123,
        "start_time": "2024-06-01T06:00:00",
        "end_time": "2024-06-02T06:00:00",
    }
