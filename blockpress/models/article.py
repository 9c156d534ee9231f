from blockpress.extensions import db
from blockpress.utils.ids import new_id, iso
from datetime import datetime


class Article(db.Model):
    __tablename__ = "articles"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(300), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(500), nullable=True)
    publish_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    category_id = db.Column(db.String(36), db.ForeignKey("categories.id"), nullable=True, index=True)

    # SEO metadata
    meta_description = db.Column(db.Text, nullable=True)
    focus_keyword = db.Column(db.String(255), nullable=True)
    seo_title = db.Column(db.String(255), nullable=True)
    seo_score = db.Column(db.Integer, nullable=False, default=0)

    # Derived statistics cached at write time
    word_count = db.Column(db.Integer, nullable=False, default=0)
    reading_time = db.Column(db.Integer, nullable=False, default=1)

    # Optimistic concurrency token, bumped by SQLAlchemy on every UPDATE
    version = db.Column(db.Integer, nullable=False)

    user = db.relationship("User", backref=db.backref("articles", lazy="dynamic"))
    category = db.relationship("Category", backref=db.backref("articles", lazy="dynamic"))
    sections = db.relationship(
        "Section",
        back_populates="article",
        order_by="Section.order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    keywords = db.relationship(
        "KeywordVariation",
        back_populates="article",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    seo_data = db.relationship(
        "SEOData",
        back_populates="article",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self, include_sections=True):
        """Raw record consumed by the read path (camelCase, nested children)."""
        data = {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "imageUrl": self.image_url,
            "publishDate": iso(self.publish_date),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
            "userId": self.user_id,
            "user": self.user.to_summary() if self.user else None,
            "categoryId": self.category_id,
            "category": self.category.to_summary(include_parent=True) if self.category else None,
            "metaDescription": self.meta_description,
            "focusKeyword": self.focus_keyword,
            "seoTitle": self.seo_title,
            "seoScore": self.seo_score,
            "wordCount": self.word_count,
            "readingTime": self.reading_time,
            "version": self.version,
            "keywords": [k.to_dict() for k in self.keywords],
            "seoData": self.seo_data.to_dict() if self.seo_data else None,
        }

        if include_sections:
            data["sections"] = [s.to_dict() for s in self.sections]

        return data

    def __repr__(self):
        return f"<Article {self.id}: {self.title}>"


class KeywordVariation(db.Model):
    __tablename__ = "keyword_variations"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    article_id = db.Column(db.String(36), db.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True)
    keyword = db.Column(db.String(255), nullable=False)
    search_volume = db.Column(db.Integer, nullable=True)
    difficulty = db.Column(db.String(20), nullable=True)  # Low, Medium, High, Unknown
    intent = db.Column(db.String(30), nullable=True)  # Commercial, Informational, Navigational, Custom
    is_primary = db.Column(db.Boolean, nullable=False, default=False)

    article = db.relationship("Article", back_populates="keywords")

    def to_dict(self):
        return {
            "id": self.id,
            "keyword": self.keyword,
            "searchVolume": self.search_volume,
            "difficulty": self.difficulty,
            "intent": self.intent,
            "isPrimary": self.is_primary,
        }


class SEOData(db.Model):
    __tablename__ = "seo_data"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    article_id = db.Column(db.String(36), db.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, unique=True)
    title_suggestions = db.Column(db.JSON, nullable=False, default=list)
    content_suggestions = db.Column(db.JSON, nullable=False, default=dict)
    readability_score = db.Column(db.Float, nullable=False, default=0)
    keyword_density = db.Column(db.Float, nullable=False, default=0.0)
    word_count = db.Column(db.Integer, nullable=False, default=0)
    reading_time = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    article = db.relationship("Article", back_populates="seo_data")

    def to_dict(self):
        return {
            "id": self.id,
            "articleId": self.article_id,
            "titleSuggestions": self.title_suggestions or [],
            "contentSuggestions": self.content_suggestions or {},
            "readabilityScore": self.readability_score,
            "keywordDensity": self.keyword_density,
            "wordCount": self.word_count,
            "readingTime": self.reading_time,
            "updatedAt": iso(self.updated_at),
        }
