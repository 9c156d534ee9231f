from blockpress.extensions import db
from blockpress.utils.ids import new_id, iso
from datetime import datetime


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), nullable=False, unique=True, index=True)
    role = db.Column(db.String(20), nullable=False, default="EDITOR")  # ADMINISTRATOR, EDITOR
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_summary(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }

    def to_dict(self):
        data = self.to_summary()
        data.update({
            "isActive": self.is_active,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        })
        return data

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"
