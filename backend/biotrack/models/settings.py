from datetime import datetime

from biotrack.extensions import db


class UserSettings(db.Model):
    __tablename__ = "user_settings"

    # notifier type -> column holding the user's email preference for it
    EMAIL_PREFERENCES = {
        "Comment": "email_comment_notifications",
        "Identification": "email_identification_notifications",
    }

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True, index=True)

    email_comment_notifications = db.Column(db.Boolean, nullable=False, default=True)
    email_identification_notifications = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def wants_email_for(self, notifier_type: str) -> bool:
        column = self.EMAIL_PREFERENCES.get(notifier_type)
        if column is None:
            return True
        return bool(getattr(self, column))

    def to_dict(self):
        return {
            "email_comment_notifications": bool(self.email_comment_notifications),
            "email_identification_notifications": bool(self.email_identification_notifications),
        }
