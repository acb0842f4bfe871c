from datetime import datetime

from biotrack.extensions import db


class Taxon(db.Model):
    __tablename__ = "taxa"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    rank = db.Column(db.String(32), nullable=True)
    parent_id = db.Column(db.Integer, db.ForeignKey("taxa.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    taxon_names = db.relationship("TaxonName", back_populates="taxon", order_by="TaxonName.id")

    def common_name(self):
        for tn in self.taxon_names:
            if not tn.is_scientific:
                return tn.name
        return None

    def to_dict(self):
        return {
            "id": int(self.id),
            "name": self.name,
            "rank": self.rank or "",
            "common_name": self.common_name(),
        }


class TaxonName(db.Model):
    __tablename__ = "taxon_names"

    id = db.Column(db.Integer, primary_key=True)
    taxon_id = db.Column(db.Integer, db.ForeignKey("taxa.id"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    lexicon = db.Column(db.String(64), nullable=True)
    is_scientific = db.Column(db.Boolean, nullable=False, default=False)

    taxon = db.relationship("Taxon", back_populates="taxon_names")
