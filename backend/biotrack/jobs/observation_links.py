from __future__ import annotations

import csv
import io
import re
import time
from datetime import datetime

import requests
from flask import current_app

from biotrack.extensions import db
from biotrack.models import Observation, ObservationLink

_OBSERVATION_ID = re.compile(r"/(\d+)$")


def _now():
    return datetime.utcnow()


def _fetch_rows(url: str):
    r = requests.get(url, timeout=30)
    r.raise_for_status()
    return csv.DictReader(io.StringIO(r.text))


def import_globi_links(url: str, *, debug: bool = False) -> dict:
    """Sync observation links from a GloBI provider/consumer CSV.

    Each row maps an observation URL (``provider``) to an external page
    (``consumer``). Links seen in this run are created or touched; GloBI links
    not seen are deleted. With ``debug`` nothing is written.
    """
    if not (url or "").strip():
        raise ValueError("You must specify URL where we can retrieve the mappings")

    started = time.monotonic()
    start_time = _now()
    href_name = current_app.config.get("GLOBI_HREF_NAME", "GloBI (EOL)")
    created = 0
    updated = 0
    skipped = 0
    seen = set()

    try:
        for row in _fetch_rows(url):
            match = _OBSERVATION_ID.search((row.get("provider") or "").strip())
            observation = db.session.get(Observation, int(match.group(1))) if match else None
            if observation is None:
                current_app.logger.warning("observation %s doesn't exist, skipping", match.group(1) if match else row.get("provider"))
                skipped += 1
                continue

            href = (row.get("consumer") or "").strip()
            if not href:
                current_app.logger.warning("GloBI / EOL URL missing for observation %s, skipping", observation.id)
                skipped += 1
                continue

            # debug runs add nothing to the session, so repeated rows are tracked here
            if (observation.id, href) in seen:
                updated += 1
                continue
            seen.add((observation.id, href))

            existing = ObservationLink.query.filter_by(observation_id=observation.id, href=href).first()
            if existing:
                if not debug:
                    existing.touch()
                updated += 1
                current_app.logger.debug("observation link already exists: %s", existing)
                continue

            link = ObservationLink(
                observation_id=observation.id,
                href=href,
                href_name=href_name,
                rel="alternate",
            )
            if not debug:
                db.session.add(link)
            created += 1
            current_app.logger.debug("created %s", link)

        if not debug:
            db.session.flush()

        stale = ObservationLink.query.filter(
            ObservationLink.href_name == href_name,
            ObservationLink.updated_at < start_time,
        )
        deleted = stale.count()
        if not debug:
            stale.delete(synchronize_session=False)
            db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    elapsed = time.monotonic() - started
    current_app.logger.info(
        "GloBI links: %s created, %s updated, %s deleted, %s skipped in %.2f s",
        created, updated, deleted, skipped, elapsed,
    )
    return {
        "ok": True,
        "created": created,
        "updated": updated,
        "deleted": deleted,
        "skipped": skipped,
        "elapsed": round(elapsed, 3),
    }
