"""
Article Service Module

Handles all article persistence:
- Create / full-replace update / delete in one transaction each
- Slug resolution and unique-constraint conflicts
- Optimistic concurrency on update
- Pagination and search
- SEO data
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from blockpress.errors import ConflictError, NotFoundError, ValidationError
from blockpress.extensions import db
from blockpress.models.article import Article, KeywordVariation, SEOData
from blockpress.models.block import (
    Block,
    BulletPoint,
    Cons,
    CustomField,
    FAQItem,
    Highlight,
    Ingredient,
    IngredientItem,
    Pros,
    Rating,
    Specification,
)
from blockpress.models.category import Category
from blockpress.models.section import Section
from blockpress.models.user import User
from blockpress.schemas.article_schema import SeoPayloadSchema, flatten_errors
from blockpress.services.article_aggregator import format_article, summarize_article
from blockpress.services.article_decomposer import ArticleWritePlan, generate_slug
from blockpress.services.legacy_view import build_legacy_fields

logger = logging.getLogger(__name__)

CHILD_MODELS = {
    "pros": Pros,
    "cons": Cons,
    "ingredients": Ingredient,
    "highlights": Highlight,
    "bullet_points": BulletPoint,
    "faq_items": FAQItem,
    "specifications": Specification,
    "ingredients_list": IngredientItem,
    "custom_fields": CustomField,
}


# ============================================================================
# Helpers
# ============================================================================

def _slug_exists(slug: str) -> bool:
    return db.session.query(Article.id).filter_by(slug=slug).first() is not None


def _get_by_slug(slug: str) -> Article:
    article = Article.query.filter_by(slug=slug).first()
    if not article:
        raise NotFoundError("Article not found")
    return article


def _is_slug_violation(exc: IntegrityError) -> bool:
    return "slug" in str(exc.orig).lower()


def _check_references(plan: ArticleWritePlan, payload: Dict[str, Any]):
    """Reject the plan when the owner or category does not exist."""
    errors = []
    user_id = payload.get("userId")
    if user_id and db.session.get(User, str(user_id)) is None:
        errors.append("userId: User not found")
    category_id = payload.get("categoryId")
    if category_id and db.session.get(Category, str(category_id)) is None:
        errors.append("categoryId: Category not found")
    if errors:
        plan.reject(errors)


def _build_block(data: Dict[str, Any]) -> Block:
    children = data["children"]
    block = Block(**{k: v for k, v in data.items() if k != "children"})
    for relation, model in CHILD_MODELS.items():
        setattr(block, relation, [model(**child) for child in children[relation]])
    if children["rating"]:
        block.rating = Rating(**children["rating"])
    return block


def _build_sections(decomposed: Dict[str, Any]):
    return [
        Section(
            id=section["id"],
            article_id=section["article_id"],
            title=section["title"],
            order=section["order"],
            blocks=[_build_block(block) for block in section["blocks"]],
        )
        for section in decomposed["sections"]
    ]


def _build_keywords(decomposed: Dict[str, Any]):
    return [KeywordVariation(**keyword) for keyword in decomposed["keywords"]]


def _commit(slug: str):
    """
    Commit the current unit of work, translating constraint failures.

    Raises:
        ConflictError: Slug taken concurrently or stale version
        ValidationError: Any other constraint (unknown user or category)
    """
    try:
        db.session.commit()
    except StaleDataError as e:
        db.session.rollback()
        logger.warning("Stale write rejected for article %s: %s", slug, e)
        raise ConflictError("Article was modified by another request; reload and retry") from e
    except IntegrityError as e:
        db.session.rollback()
        if _is_slug_violation(e):
            raise ConflictError(f"Slug '{slug}' is already in use") from e
        logger.warning("Integrity error while saving article %s: %s", slug, e.orig)
        raise ValidationError(["Invalid user ID or category ID provided"]) from e


def _formatted(article: Article, legacy: bool = False) -> Dict[str, Any]:
    formatted = format_article(article.to_dict())
    if legacy:
        formatted.update(build_legacy_fields(formatted))
    return formatted


# ============================================================================
# Write path
# ============================================================================

def create_article(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create an article with its sections, blocks and children.

    Args:
        payload: Editor payload (title, userId, sections[].blocks[], ...)

    Returns:
        Formatted article

    Raises:
        ValidationError: Payload invalid or owner/category missing
        ConflictError: No unique slug could be committed
    """
    max_attempts = current_app.config.get("SLUG_MAX_ATTEMPTS", 100)
    retries = current_app.config.get("SLUG_COMMIT_RETRIES", 3)

    attempt = 0
    while True:
        plan = ArticleWritePlan(payload)
        plan.validate()
        _check_references(plan, payload)
        slug = plan.resolve_slug(_slug_exists, max_attempts)
        decomposed = plan.decompose()

        article = Article(**decomposed["article"])
        article.sections = _build_sections(decomposed)
        article.keywords = _build_keywords(decomposed)
        article.seo_data = SEOData(**decomposed["seo_data"])
        db.session.add(article)

        try:
            _commit(slug)
        except ConflictError:
            # Another request took the slug between the check and the commit
            attempt += 1
            if attempt > retries:
                raise
            logger.warning("Slug %s taken concurrently, retrying (%d/%d)", slug, attempt, retries)
            continue

        plan.mark_persisted()
        logger.info("Article created: %s (%s)", article.id, slug)
        return _formatted(article)


def update_article(slug: str, payload: Dict[str, Any], expected_version: Optional[int] = None) -> Dict[str, Any]:
    """
    Full-replace update: every section is deleted and recreated from the payload.

    Args:
        slug: Current article slug
        payload: Editor payload; ``userId`` is optional here
        expected_version: Version the client edited (payload ``version`` wins)

    Raises:
        NotFoundError: Unknown slug
        ValidationError: Payload invalid
        ConflictError: Stale version or slug already taken
    """
    article = _get_by_slug(slug)

    plan = ArticleWritePlan(payload, require_user=False)
    plan.validate()
    _check_references(plan, payload)

    version = payload.get("version")
    if version is None:
        version = expected_version
    if version is not None and int(version) != article.version:
        raise ConflictError(
            f"Article has changed since version {version} (current version {article.version})"
        )

    new_slug = article.slug
    requested = payload.get("slug")
    if requested and generate_slug(requested) != article.slug:
        new_slug = generate_slug(requested)
        if _slug_exists(new_slug):
            raise ConflictError(f"Slug '{new_slug}' is already in use")
    plan.use_slug(new_slug)
    decomposed = plan.decompose(article.id)

    columns = dict(decomposed["article"])
    columns.pop("id")
    if not payload.get("userId"):
        columns.pop("user_id")
    for key, value in columns.items():
        setattr(article, key, value)
    article.updated_at = datetime.utcnow()

    article.sections = _build_sections(decomposed)
    if payload.get("keywords") is not None:
        article.keywords = _build_keywords(decomposed)

    stats = decomposed["stats"]
    if article.seo_data is None:
        article.seo_data = SEOData(**decomposed["seo_data"])
    else:
        article.seo_data.word_count = stats["wordCount"]
        article.seo_data.reading_time = stats["readingTime"]

    _commit(new_slug)
    plan.mark_persisted()
    logger.info("Article updated: %s (%s, version %s)", article.id, new_slug, article.version)
    return _formatted(article)


def delete_article(slug: str) -> None:
    article = _get_by_slug(slug)
    db.session.delete(article)
    db.session.commit()
    logger.info("Article deleted: %s (%s)", article.id, slug)


# ============================================================================
# Read path
# ============================================================================

def get_article(slug: str, legacy: bool = False) -> Dict[str, Any]:
    return _formatted(_get_by_slug(slug), legacy=legacy)


def list_articles(
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    search: Optional[str] = None,
    user_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    List article summaries, newest update first.

    Args:
        page: Page number (starting from 1)
        limit: Items per page
        category: Category slug or id
        search: Matches the title or any block content
        user_id: Owner filter

    Returns:
        Dictionary containing articles and pagination info
    """
    query = Article.query

    if category:
        query = query.join(Article.category).filter(
            db.or_(Category.slug == category, Category.id == category)
        )

    if user_id:
        query = query.filter(Article.user_id == user_id)

    if search:
        term = f"%{search.strip()}%"
        query = query.filter(
            db.or_(
                Article.title.ilike(term),
                Article.sections.any(Section.blocks.any(Block.content.ilike(term))),
            )
        )

    pagination = query.order_by(Article.updated_at.desc()).paginate(page=page, per_page=limit, error_out=False)

    return {
        "articles": [summarize_article(article.to_dict()) for article in pagination.items],
        "pagination": {
            "total": pagination.total,
            "page": page,
            "limit": limit,
            "totalPages": pagination.pages,
            "hasNext": pagination.has_next,
            "hasPrev": pagination.has_prev,
        },
    }


# ============================================================================
# SEO
# ============================================================================

def _seo_view(article: Article) -> Dict[str, Any]:
    seo = article.seo_data.to_dict() if article.seo_data else None
    return {
        "seoData": seo,
        "keywords": [k.to_dict() for k in article.keywords],
        "metaDescription": article.meta_description or "",
        "focusKeyword": article.focus_keyword or "",
        "seoTitle": article.seo_title or "",
        "seoScore": article.seo_score or 0,
    }


def get_seo_data(slug: str) -> Dict[str, Any]:
    article = _get_by_slug(slug)
    if article.seo_data is None:
        raise NotFoundError("SEO data not found")
    return _seo_view(article)


def save_seo_data(slug: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Upsert SEO data; keywords are fully replaced when given."""
    article = _get_by_slug(slug)

    errors = flatten_errors(SeoPayloadSchema().validate(payload))
    if errors:
        raise ValidationError(errors)

    seo = article.seo_data or SEOData(article_id=article.id)
    seo.title_suggestions = payload.get("titleSuggestions") or []
    seo.content_suggestions = payload.get("contentSuggestions") or {}
    seo.readability_score = payload.get("readabilityScore") or 0
    seo.keyword_density = payload.get("keywordDensity") or 0.0
    seo.word_count = payload.get("wordCount") or article.word_count
    seo.reading_time = payload.get("readingTime") or article.reading_time
    article.seo_data = seo

    if isinstance(payload.get("keywords"), list):
        article.keywords = [
            KeywordVariation(
                article_id=article.id,
                keyword=k["keyword"].strip(),
                search_volume=k.get("searchVolume"),
                difficulty=k.get("difficulty"),
                intent=k.get("intent"),
                is_primary=bool(k.get("isPrimary")),
            )
            for k in payload["keywords"]
        ]

    for key, column in (
        ("metaDescription", "meta_description"),
        ("focusKeyword", "focus_keyword"),
        ("seoTitle", "seo_title"),
        ("seoScore", "seo_score"),
    ):
        if payload.get(key) is not None:
            setattr(article, column, payload[key])

    _commit(article.slug)
    logger.info("SEO data saved for article %s", article.id)
    return _seo_view(article)
