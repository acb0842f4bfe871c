from datetime import datetime

from biotrack.extensions import db


class List(db.Model):
    __tablename__ = "lists"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User")
    listed_taxa = db.relationship("ListedTaxon", back_populates="list")


class ListedTaxon(db.Model):
    __tablename__ = "listed_taxa"
    __table_args__ = (
        db.UniqueConstraint("list_id", "taxon_id", name="uq_listed_taxa_list_taxon"),
    )

    id = db.Column(db.Integer, primary_key=True)
    list_id = db.Column(db.Integer, db.ForeignKey("lists.id"), nullable=False, index=True)
    taxon_id = db.Column(db.Integer, db.ForeignKey("taxa.id"), nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    list = db.relationship("List", back_populates="listed_taxa")
    taxon = db.relationship("Taxon")

    @property
    def user(self):
        return self.list.user if self.list else None

    def to_dict(self):
        return {
            "id": int(self.id),
            "list_id": int(self.list_id),
            "taxon_id": int(self.taxon_id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
