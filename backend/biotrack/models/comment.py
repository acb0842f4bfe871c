from datetime import datetime

from biotrack.extensions import db


class Comment(db.Model):
    __tablename__ = "comments"
    __table_args__ = (
        db.Index("ix_comments_parent", "parent_type", "parent_id"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    # Polymorphic parent: registry tag + id (Observation, Post, ...)
    parent_type = db.Column(db.String(64), nullable=False)
    parent_id = db.Column(db.Integer, nullable=False)

    body = db.Column(db.Text, nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User")

    @property
    def parent(self):
        from biotrack.notifications import registry
        return registry.resolve(self.parent_type, self.parent_id)

    @parent.setter
    def parent(self, obj):
        from biotrack.notifications import registry
        self.parent_type = registry.tag_for(obj)
        self.parent_id = obj.id

    def to_dict(self):
        return {
            "id": int(self.id),
            "user_id": int(self.user_id),
            "parent_type": self.parent_type,
            "parent_id": int(self.parent_id),
            "body": self.body or "",
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
