from blockpress.extensions import db
from blockpress.utils.ids import new_id
from datetime import datetime


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(150), nullable=False)
    slug = db.Column(db.String(200), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, nullable=True)
    parent_id = db.Column(db.String(36), db.ForeignKey("categories.id"), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    parent = db.relationship("Category", remote_side=[id], backref="children")

    def to_summary(self, include_parent=False):
        data = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
        }
        if include_parent:
            data["description"] = self.description
            data["parent"] = self.parent.to_summary() if self.parent else None
        return data

    def __repr__(self):
        return f"<Category {self.id}: {self.slug}>"
