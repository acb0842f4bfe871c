from datetime import datetime

from biotrack.extensions import db


class Identification(db.Model):
    __tablename__ = "identifications"

    id = db.Column(db.Integer, primary_key=True)
    observation_id = db.Column(db.Integer, db.ForeignKey("observations.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    taxon_id = db.Column(db.Integer, db.ForeignKey("taxa.id"), nullable=False, index=True)

    body = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    observation = db.relationship("Observation", back_populates="identifications")
    user = db.relationship("User")
    taxon = db.relationship("Taxon")

    def to_dict(self):
        return {
            "id": int(self.id),
            "observation_id": int(self.observation_id),
            "user_id": int(self.user_id),
            "taxon_id": int(self.taxon_id),
            "body": self.body or "",
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
