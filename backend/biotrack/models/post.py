from datetime import datetime

from biotrack.extensions import db


class Post(db.Model):
    __tablename__ = "posts"

    notifying_associations = {
        "comments": {"notification": "activity"},
    }

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    title = db.Column(db.String(255), nullable=False)
    body = db.Column(db.Text, nullable=True)
    published_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User")
    comments = db.relationship(
        "Comment",
        primaryjoin="and_(Comment.parent_type == 'Post', foreign(Comment.parent_id) == Post.id)",
        order_by="Comment.created_at",
        viewonly=True,
    )

    def to_dict(self):
        return {
            "id": int(self.id),
            "user_id": int(self.user_id),
            "title": self.title,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
