from blockpress.models.user import User
from blockpress.models.category import Category
from blockpress.models.article import Article, KeywordVariation, SEOData
from blockpress.models.section import Section
from blockpress.models.block import (
    Block,
    Pros,
    Cons,
    Ingredient,
    Highlight,
    BulletPoint,
    FAQItem,
    Specification,
    IngredientItem,
    CustomField,
    Rating,
)

__all__ = [
    "User",
    "Category",
    "Article",
    "KeywordVariation",
    "SEOData",
    "Section",
    "Block",
    "Pros",
    "Cons",
    "Ingredient",
    "Highlight",
    "BulletPoint",
    "FAQItem",
    "Specification",
    "IngredientItem",
    "CustomField",
    "Rating",
]
