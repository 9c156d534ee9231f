from blockpress.extensions import db
from blockpress.utils.ids import new_id


def _block_fk():
    return db.Column(db.String(36), db.ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False, index=True)


def _children(model):
    return db.relationship(
        model,
        order_by=f"{model}.order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class Block(db.Model):
    __tablename__ = "blocks"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    type = db.Column(db.String(30), nullable=False, default="paragraph")
    content = db.Column(db.Text, nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)  # zero-based within section
    section_id = db.Column(db.String(36), db.ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True)

    # heading
    level = db.Column(db.Integer, nullable=True)
    # list
    list_type = db.Column(db.String(20), nullable=True)
    # image
    image_url = db.Column(db.String(500), nullable=True)
    image_caption = db.Column(db.Text, nullable=True)
    image_alt = db.Column(db.String(500), nullable=True)
    # code / quote
    language = db.Column(db.String(50), nullable=True)
    author = db.Column(db.String(255), nullable=True)
    # rating / ingredients
    product_name = db.Column(db.String(255), nullable=True)
    overall_rating = db.Column(db.Float, nullable=True)
    ingredients_introduction = db.Column(db.Text, nullable=True)
    # cta
    cta_text = db.Column(db.Text, nullable=True)
    cta_button_text = db.Column(db.String(255), nullable=True)
    cta_button_link = db.Column(db.String(500), nullable=True)
    background_color = db.Column(db.String(50), nullable=True)

    section = db.relationship("Section", back_populates="blocks")

    pros = _children("Pros")
    cons = _children("Cons")
    ingredients = _children("Ingredient")
    highlights = _children("Highlight")
    bullet_points = _children("BulletPoint")
    faq_items = _children("FAQItem")
    specifications = _children("Specification")
    ingredients_list = _children("IngredientItem")
    custom_fields = db.relationship("CustomField", cascade="all, delete-orphan", lazy="selectin")
    rating = db.relationship("Rating", uselist=False, cascade="all, delete-orphan", lazy="selectin")

    def to_dict(self):
        """Raw record as stored; the normalizer decides what each type exposes."""
        return {
            "id": self.id,
            "type": self.type,
            "content": self.content,
            "order": self.order,
            "sectionId": self.section_id,
            "level": self.level,
            "listType": self.list_type,
            "imageUrl": self.image_url,
            "imageCaption": self.image_caption,
            "imageAlt": self.image_alt,
            "language": self.language,
            "author": self.author,
            "productName": self.product_name,
            "overallRating": self.overall_rating,
            "ingredientsIntroduction": self.ingredients_introduction,
            "ctaText": self.cta_text,
            "ctaButtonText": self.cta_button_text,
            "ctaButtonLink": self.cta_button_link,
            "backgroundColor": self.background_color,
            "pros": [p.to_dict() for p in self.pros],
            "cons": [c.to_dict() for c in self.cons],
            "ingredients": [i.to_dict() for i in self.ingredients],
            "highlights": [h.to_dict() for h in self.highlights],
            "bulletPoints": [b.to_dict() for b in self.bullet_points],
            "faqItems": [f.to_dict() for f in self.faq_items],
            "specifications": [s.to_dict() for s in self.specifications],
            "ingredientsList": [i.to_dict() for i in self.ingredients_list],
            "customFields": [f.to_dict() for f in self.custom_fields],
            "ratings": self.rating.to_dict() if self.rating else None,
        }

    def __repr__(self):
        return f"<Block {self.id}: {self.type}>"


class Pros(db.Model):
    __tablename__ = "pros"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    content = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)
    block_id = _block_fk()

    def to_dict(self):
        return {"id": self.id, "content": self.content, "order": self.order}


class Cons(db.Model):
    __tablename__ = "cons"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    content = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)
    block_id = _block_fk()

    def to_dict(self):
        return {"id": self.id, "content": self.content, "order": self.order}


class Ingredient(db.Model):
    __tablename__ = "ingredients"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    content = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)
    block_id = _block_fk()

    def to_dict(self):
        return {"id": self.id, "content": self.content, "order": self.order}


class Highlight(db.Model):
    __tablename__ = "highlights"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    content = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)
    block_id = _block_fk()

    def to_dict(self):
        return {"id": self.id, "content": self.content, "order": self.order}


class BulletPoint(db.Model):
    __tablename__ = "bullet_points"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    content = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)
    block_id = _block_fk()

    def to_dict(self):
        return {"id": self.id, "content": self.content, "order": self.order}


class FAQItem(db.Model):
    __tablename__ = "faq_items"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    question = db.Column(db.Text, nullable=False, default="")
    answer = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)
    block_id = _block_fk()

    def to_dict(self):
        return {"id": self.id, "question": self.question, "answer": self.answer, "order": self.order}


class Specification(db.Model):
    __tablename__ = "specifications"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False, default="")
    value = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)
    block_id = _block_fk()

    def to_dict(self):
        return {"id": self.id, "name": self.name, "value": self.value, "order": self.order}


class IngredientItem(db.Model):
    __tablename__ = "ingredient_items"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    image_url = db.Column(db.String(500), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")
    study_year = db.Column(db.String(10), nullable=True)
    study_source = db.Column(db.String(500), nullable=True)
    study_description = db.Column(db.Text, nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    block_id = _block_fk()

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "imageUrl": self.image_url,
            "description": self.description,
            "studyYear": self.study_year,
            "studySource": self.study_source,
            "studyDescription": self.study_description,
            "order": self.order,
        }


class CustomField(db.Model):
    __tablename__ = "custom_fields"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    value = db.Column(db.Text, nullable=False, default="")  # may hold a JSON document
    block_id = _block_fk()

    def to_dict(self):
        return {"id": self.id, "name": self.name, "value": self.value}


class Rating(db.Model):
    __tablename__ = "ratings"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    block_id = db.Column(db.String(36), db.ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False, unique=True)
    ingredients = db.Column(db.Float, nullable=True)
    value = db.Column(db.Float, nullable=True)
    manufacturer = db.Column(db.Float, nullable=True)
    safety = db.Column(db.Float, nullable=True)
    effectiveness = db.Column(db.Float, nullable=True)

    def to_dict(self):
        return {
            "ingredients": self.ingredients,
            "value": self.value,
            "manufacturer": self.manufacturer,
            "safety": self.safety,
            "effectiveness": self.effectiveness,
        }
