from blockpress.extensions import db
from blockpress.utils.ids import new_id, iso
from datetime import datetime


class Section(db.Model):
    __tablename__ = "sections"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)  # zero-based, contiguous per article
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    article_id = db.Column(db.String(36), db.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True)

    article = db.relationship("Article", back_populates="sections")
    blocks = db.relationship(
        "Block",
        back_populates="section",
        order_by="Block.order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
            "articleId": self.article_id,
            "blocks": [b.to_dict() for b in self.blocks],
        }

    def __repr__(self):
        return f"<Section {self.id}: {self.title}>"
