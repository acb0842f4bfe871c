from datetime import datetime

from sqlalchemy import event
from sqlalchemy.orm import Session

from biotrack.extensions import db


def _now():
    return datetime.utcnow()


class Update(db.Model):
    """Who should hear about what, why, and when.

    ``resource`` is the thing the update is about (an observation), ``notifier``
    the record that caused it (a comment on that observation). Both are stored
    as registry tag + id.
    """

    __tablename__ = "updates"
    __table_args__ = (
        db.UniqueConstraint(
            "notifier_type", "notifier_id", "subscriber_id", "notification",
            name="uq_updates_notifier_subscriber_notification",
        ),
        db.Index("ix_updates_subscriber_created", "subscriber_id", "created_at"),
        db.Index("ix_updates_resource", "resource_type", "resource_id"),
    )

    NOTIFICATIONS = ("create", "change", "activity")

    id = db.Column(db.Integer, primary_key=True)

    subscriber_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    resource_type = db.Column(db.String(64), nullable=True)
    resource_id = db.Column(db.Integer, nullable=True)

    notifier_type = db.Column(db.String(64), nullable=True)
    notifier_id = db.Column(db.Integer, nullable=True)

    resource_owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    notification = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime, nullable=True, default=_now)
    viewed_at = db.Column(db.DateTime, nullable=True)

    subscriber = db.relationship("User", foreign_keys=[subscriber_id])
    resource_owner = db.relationship("User", foreign_keys=[resource_owner_id])

    # -------------------------
    # Polymorphic references
    # -------------------------
    def _reference(self, name: str):
        from biotrack.notifications import registry

        tag = getattr(self, f"{name}_type")
        obj_id = getattr(self, f"{name}_id")
        cached = self.__dict__.get(f"_{name}_obj")
        if cached is not None and registry.tag_for(cached) == tag and cached.id == obj_id:
            return cached
        obj = registry.resolve(tag, obj_id)
        self.__dict__[f"_{name}_obj"] = obj
        return obj

    def _assign(self, name: str, obj) -> None:
        from biotrack.notifications import registry

        if obj is None:
            setattr(self, f"{name}_type", None)
            setattr(self, f"{name}_id", None)
        else:
            setattr(self, f"{name}_type", registry.tag_for(obj))
            setattr(self, f"{name}_id", obj.id)
        self.__dict__[f"_{name}_obj"] = obj

    @property
    def resource(self):
        return self._reference("resource")

    @resource.setter
    def resource(self, obj):
        self._assign("resource", obj)

    @property
    def notifier(self):
        return self._reference("notifier")

    @notifier.setter
    def notifier(self, obj):
        self._assign("notifier", obj)

    def set_resource_owner(self) -> None:
        from biotrack.notifications import registry

        owner = registry.owner_of(self.resource)
        self.resource_owner_id = owner.id if owner is not None else None

    def sort_by_date(self) -> datetime:
        if self.created_at:
            return self.created_at
        notifier = self.notifier
        notifier_created_at = getattr(notifier, "created_at", None) if notifier is not None else None
        return notifier_created_at or _now()

    # -------------------------
    # Query helpers
    # -------------------------
    @classmethod
    def unviewed(cls):
        return cls.query.filter(cls.viewed_at.is_(None))

    @classmethod
    def activity(cls):
        return cls.query.filter(cls.notification == "activity")

    @classmethod
    def activity_on_my_stuff(cls):
        return cls.query.filter(cls.resource_owner_id == cls.subscriber_id, cls.notification == "activity")

    def to_dict(self):
        return {
            "id": int(self.id) if self.id is not None else None,
            "subscriber_id": int(self.subscriber_id) if self.subscriber_id is not None else None,
            "resource_type": self.resource_type,
            "resource_id": int(self.resource_id) if self.resource_id is not None else None,
            "notifier_type": self.notifier_type,
            "notifier_id": int(self.notifier_id) if self.notifier_id is not None else None,
            "resource_owner_id": int(self.resource_owner_id) if self.resource_owner_id is not None else None,
            "notification": self.notification,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "viewed_at": self.viewed_at.isoformat() if self.viewed_at else None,
        }

    def __repr__(self):
        return (
            f"<Update {self.id} {self.notification} "
            f"{self.resource_type}:{self.resource_id} <- {self.notifier_type}:{self.notifier_id}>"
        )


@event.listens_for(Session, "before_flush")
def _set_resource_owners(session, flush_context, instances):
    for obj in session.new:
        if isinstance(obj, Update) and obj.resource_owner_id is None:
            obj.set_resource_owner()
