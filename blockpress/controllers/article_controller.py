"""
Article Controller Module

Handles article-related HTTP requests including:
- Aggregated reads (by slug, legacy shape via ?slug=)
- Paginated listing
- Create / full-replace update / delete
- SEO data
"""

from flask import current_app
from blockpress.extensions import db
from blockpress.errors import ConflictError, NotFoundError, ValidationError
from blockpress.utils.http import ok, error, server_error, json_body, arg_int, arg_str, if_match_version
from blockpress.services.article_service import (
    create_article,
    update_article,
    delete_article,
    get_article,
    list_articles,
    get_seo_data,
    save_seo_data,
)


def _validation_error(e: ValidationError):
    return error("VALIDATION_ERROR", e.message, 400, errors=e.errors)


# ============================================================================
# Read Handlers
# ============================================================================

def list_articles_handler():
    """
    List articles, or return one article in the legacy shape when ?slug= is set.

    Query Parameters:
        - slug: Article slug (single-article legacy read)
        - page: Page number (default: 1)
        - limit: Items per page (default: 10, max: 100)
        - category: Category slug or id
        - search: Title or block content search term
        - userId: Owner filter
    """
    slug = arg_str("slug")
    if slug:
        try:
            return ok({"success": True, "article": get_article(slug, legacy=True)})
        except NotFoundError as e:
            return error("NOT_FOUND", e.message, 404)
        except Exception as e:
            return server_error("Failed to fetch article", e)

    page = arg_int("page", 1, min_value=1)
    limit = arg_int(
        "limit",
        current_app.config.get("ARTICLES_PER_PAGE", 10),
        min_value=1,
        max_value=current_app.config.get("MAX_ARTICLES_PER_PAGE", 100),
    )

    try:
        result = list_articles(
            page=page,
            limit=limit,
            category=arg_str("category"),
            search=arg_str("search"),
            user_id=arg_str("userId"),
        )
        return ok({"success": True, **result})
    except Exception as e:
        return server_error("Failed to fetch articles", e)


def get_article_handler(slug: str):
    try:
        return ok({"success": True, "article": get_article(slug)})
    except NotFoundError as e:
        return error("NOT_FOUND", e.message, 404)
    except Exception as e:
        return server_error("Failed to fetch article", e)


# ============================================================================
# Write Handlers
# ============================================================================

def create_article_handler():
    """
    Create a new article.

    Body Parameters:
        - title (required): Article title
        - userId (required): Owner id
        - sections (required): Non-empty list of sections with blocks
        - categoryId, imageUrl, excerpt, publishDate, SEO fields, keywords (optional)
    """
    data = json_body()

    try:
        article = create_article(data)
        return ok({"success": True, "article": article}, 201)
    except ValidationError as e:
        return _validation_error(e)
    except ConflictError as e:
        return error("CONFLICT", e.message, 409)
    except Exception as e:
        db.session.rollback()
        return server_error("Failed to create article", e)


def update_article_handler(slug: str):
    """
    Replace an article's content.

    The article version may be sent as ``version`` in the body or in an
    If-Match header; a stale version is rejected with 409.
    """
    data = json_body()

    try:
        article = update_article(slug, data, expected_version=if_match_version())
        return ok({"success": True, "article": article})
    except NotFoundError as e:
        return error("NOT_FOUND", e.message, 404)
    except ValidationError as e:
        return _validation_error(e)
    except ConflictError as e:
        return error("CONFLICT", e.message, 409)
    except Exception as e:
        db.session.rollback()
        return server_error("Failed to update article", e)


def delete_article_handler(slug: str):
    try:
        delete_article(slug)
        return ok({"success": True, "message": "Article deleted successfully"})
    except NotFoundError as e:
        return error("NOT_FOUND", e.message, 404)
    except Exception as e:
        db.session.rollback()
        return server_error("Failed to delete article", e)


# ============================================================================
# SEO Handlers
# ============================================================================

def get_seo_handler(slug: str):
    try:
        return ok({"success": True, **get_seo_data(slug)})
    except NotFoundError as e:
        return error("NOT_FOUND", e.message, 404)
    except Exception as e:
        return server_error("Failed to fetch SEO data", e)


def save_seo_handler(slug: str):
    data = json_body()

    try:
        return ok({"success": True, **save_seo_data(slug, data)})
    except NotFoundError as e:
        return error("NOT_FOUND", e.message, 404)
    except ValidationError as e:
        return _validation_error(e)
    except ConflictError as e:
        return error("CONFLICT", e.message, 409)
    except Exception as e:
        db.session.rollback()
        return server_error("Failed to save SEO data", e)
