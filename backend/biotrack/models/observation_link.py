from datetime import datetime

from biotrack.extensions import db


class ObservationLink(db.Model):
    __tablename__ = "observation_links"
    __table_args__ = (
        db.Index("ix_observation_links_observation_href", "observation_id", "href"),
    )

    id = db.Column(db.Integer, primary_key=True)
    observation_id = db.Column(db.Integer, db.ForeignKey("observations.id"), nullable=False, index=True)

    href = db.Column(db.String(512), nullable=False)
    href_name = db.Column(db.String(128), nullable=True, index=True)
    rel = db.Column(db.String(32), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    observation = db.relationship("Observation")

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    def __str__(self):
        return f"ObservationLink obs={self.observation_id} {self.href_name or ''} {self.href}"

    def to_dict(self):
        return {
            "id": int(self.id),
            "observation_id": int(self.observation_id),
            "href": self.href,
            "href_name": self.href_name or "",
            "rel": self.rel or "",
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
