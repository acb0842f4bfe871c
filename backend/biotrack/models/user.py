from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from biotrack.extensions import db


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    login = db.Column(db.String(40), unique=True, index=True, nullable=False)
    name = db.Column(db.String(120), nullable=False, default="")
    email = db.Column(db.String(255), unique=True, index=True, nullable=True)

    password_hash = db.Column(db.String(255), nullable=True)

    # False until the email address has been confirmed
    active = db.Column(db.Boolean, nullable=False, default=False)

    role = db.Column(db.String(32), nullable=False, default="user")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    settings = db.relationship("UserSettings", uselist=False, lazy="joined")

    @property
    def is_active(self) -> bool:
        return bool(self.active)

    def is_admin(self) -> bool:
        return (self.role or "").strip().lower() == "admin"

    def set_password(self, raw_password: str) -> None:
        self.password_hash = generate_password_hash(raw_password)

    def check_password(self, raw_password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, raw_password)

    def prefers_email_notification(self, notifier_type: str) -> bool:
        """Whether updates caused by `notifier_type` belong in this user's emails.

        Types without a dedicated preference are always wanted.
        """
        settings = self.settings
        if settings is None:
            return True
        return settings.wants_email_for(notifier_type)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "login": self.login,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "role": self.role or "user",
        }

    def __repr__(self):
        return f"<User {self.id} {self.login}>"
