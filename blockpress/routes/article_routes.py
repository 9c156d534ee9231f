"""
Article Routes Module

Defines URL mappings for article endpoints.
"""

from flask import Blueprint
from blockpress.controllers.article_controller import (
    create_article_handler,
    update_article_handler,
    delete_article_handler,
    get_article_handler,
    list_articles_handler,
    get_seo_handler,
    save_seo_handler,
)

article_bp = Blueprint("articles", __name__, url_prefix="/api")


@article_bp.get("/articles")
def list_articles():
    """List articles, or one article in the legacy shape with ?slug="""
    return list_articles_handler()


@article_bp.post("/articles")
def create_article():
    return create_article_handler()


@article_bp.get("/articles/<slug>")
def get_article(slug):
    return get_article_handler(slug)


@article_bp.put("/articles/<slug>")
def update_article(slug):
    """Full-replace update"""
    return update_article_handler(slug)


@article_bp.delete("/articles/<slug>")
def delete_article(slug):
    return delete_article_handler(slug)


@article_bp.get("/articles/<slug>/seo")
def get_seo(slug):
    return get_seo_handler(slug)


@article_bp.post("/articles/<slug>/seo")
def save_seo(slug):
    return save_seo_handler(slug)
