from datetime import datetime

from biotrack.extensions import db


class Observation(db.Model):
    __tablename__ = "observations"

    # association name -> options; "activity" associations feed the updates stream
    notifying_associations = {
        "comments": {"notification": "activity"},
        "identifications": {"notification": "activity"},
    }

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    taxon_id = db.Column(db.Integer, db.ForeignKey("taxa.id"), nullable=True, index=True)

    description = db.Column(db.Text, nullable=True)
    observed_on = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User")
    taxon = db.relationship("Taxon")
    identifications = db.relationship(
        "Identification",
        back_populates="observation",
        order_by="Identification.created_at",
    )
    comments = db.relationship(
        "Comment",
        primaryjoin="and_(Comment.parent_type == 'Observation', foreign(Comment.parent_id) == Observation.id)",
        order_by="Comment.created_at",
        viewonly=True,
    )

    def to_dict(self):
        return {
            "id": int(self.id),
            "user_id": int(self.user_id),
            "taxon_id": int(self.taxon_id) if self.taxon_id else None,
            "description": self.description or "",
            "observed_on": self.observed_on.isoformat() if self.observed_on else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
