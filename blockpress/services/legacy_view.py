"""
Legacy product-review fields derived from an aggregated article.

Older consumers read a flat product-review shape (overview, ratings, pros,
pricing, FAQs, ...) rather than sections. Everything here is computed from
the aggregated sections and flat blocks; parts with no first-class schema
are read from block custom fields.
"""

from typing import Any, Dict, List, Mapping

from blockpress.services.article_aggregator import (
    extract_by_type,
    first_of_type,
    get_custom_field_value,
    overall_rating,
)
from blockpress.utils.enums import BlockType

MAX_LEGACY_FAQS = 10
MAX_LEGACY_REVIEWS = 5

# legacy key -> (custom field "section" tag, section title pattern)
CONTENT_SECTIONS = {
    "overview": ("overview", "overview"),
    "description": ("description", "what is"),
    "howToTake": ("howToTake", "how to use"),
    "safety": ("safety", "safety"),
    "effectiveness": ("effectiveness", "effective"),
    "howItWorks": ("howItWorks", "how does it work"),
    "conclusion": ("conclusion", "conclusion"),
}


def extract_ratings(blocks: List[Mapping]) -> Dict[str, float]:
    block = first_of_type(blocks, BlockType.RATING) or {}
    ratings = block.get("ratings") or {}
    overall = block.get("overallRating") or overall_rating(ratings)
    return {
        "overall": overall,
        "ingredients": ratings.get("ingredients") or 0,
        "value": ratings.get("value") or 0,
        "manufacturer": ratings.get("manufacturer") or 0,
        "safety": ratings.get("safety") or 0,
        "effectiveness": ratings.get("effectiveness") or 0,
    }


def _contents(blocks: List[Mapping], key: str) -> List[str]:
    return [item.get("content", "") for block in blocks for item in (block.get(key) or [])]


def extract_list_data(blocks: List[Mapping]) -> Dict[str, List[str]]:
    pros_cons = extract_by_type(blocks, BlockType.PROS_CONS)
    ratings = extract_by_type(blocks, BlockType.RATING)
    return {
        "pros": _contents(pros_cons, "pros"),
        "cons": _contents(pros_cons, "cons"),
        "keyIngredients": _contents(pros_cons, "ingredients"),
        "brandHighlights": _contents(ratings, "highlights"),
    }


def extract_detailed_ingredients(blocks: List[Mapping]) -> List[Dict[str, Any]]:
    return [
        {
            "name": item.get("name", ""),
            "description": item.get("description", ""),
            "benefits": item.get("studyDescription", ""),
            "imageUrl": item.get("imageUrl", ""),
            "studyYear": item.get("studyYear", ""),
            "studySource": item.get("studySource", ""),
        }
        for block in extract_by_type(blocks, BlockType.INGREDIENTS)
        for item in (block.get("ingredientsList") or [])
    ]


def extract_faqs(blocks: List[Mapping]) -> List[Dict[str, str]]:
    faq_blocks = extract_by_type(blocks, BlockType.FAQ)
    if faq_blocks:
        return [
            {"question": item.get("question", ""), "answer": item.get("answer", "")}
            for block in faq_blocks
            for item in (block.get("faqItems") or [])
        ]

    # Articles written before FAQ blocks existed keep them in custom fields
    faqs = []
    for i in range(1, MAX_LEGACY_FAQS + 1):
        question = get_custom_field_value(blocks, f"faq_question_{i}")
        answer = get_custom_field_value(blocks, f"faq_answer_{i}")
        if question and answer:
            faqs.append({"question": question, "answer": answer})
    return faqs


def extract_customer_reviews(blocks: List[Mapping]) -> List[Dict[str, Any]]:
    reviews = []
    for i in range(1, MAX_LEGACY_REVIEWS + 1):
        name = get_custom_field_value(blocks, f"review_name_{i}")
        text = get_custom_field_value(blocks, f"review_text_{i}")
        if not (name and text):
            continue
        try:
            rating = float(get_custom_field_value(blocks, f"review_rating_{i}") or 0)
        except ValueError:
            rating = 0.0
        reviews.append({
            "name": name,
            "location": get_custom_field_value(blocks, f"review_location_{i}"),
            "rating": rating,
            "review": text,
        })
    return reviews


def extract_content_sections(sections: List[Mapping], blocks: List[Mapping]) -> Dict[str, str]:
    paragraphs = extract_by_type(blocks, BlockType.PARAGRAPH)

    def by_tag(tag):
        for block in paragraphs:
            for field in block.get("customFields") or []:
                if field.get("name") == "section" and field.get("value") == tag:
                    return block.get("content") or ""
        return ""

    def by_title(pattern):
        for section in sections:
            if pattern.lower() in (section.get("title") or "").lower():
                paragraph = first_of_type(section.get("blocks") or [], BlockType.PARAGRAPH)
                return (paragraph or {}).get("content") or ""
        return ""

    return {
        key: by_tag(tag) or by_title(pattern)
        for key, (tag, pattern) in CONTENT_SECTIONS.items()
    }


def build_legacy_fields(article: Mapping) -> Dict[str, Any]:
    """Legacy fields for a formatted article (``sections`` + flat ``blocks``)."""
    sections = article.get("sections") or []
    blocks = article.get("blocks") or []
    ratings = extract_ratings(blocks)
    user = article.get("user") or {}

    return {
        "author": user.get("name", ""),
        **extract_content_sections(sections, blocks),
        "overallRating": ratings["overall"],
        "ingredientsRating": ratings["ingredients"],
        "valueRating": ratings["value"],
        "manufacturerRating": ratings["manufacturer"],
        "safetyRating": ratings["safety"],
        "effectivenessRating": ratings["effectiveness"],
        **extract_list_data(blocks),
        "officialWebsite": get_custom_field_value(blocks, "officialWebsite"),
        "pricing": {
            "singleBottle": get_custom_field_value(blocks, "priceSingleBottle"),
            "threeBottles": get_custom_field_value(blocks, "priceThreeBottles"),
            "sixBottles": get_custom_field_value(blocks, "priceSixBottles"),
        },
        "manufacturerInfo": {
            "name": get_custom_field_value(blocks, "manufacturerName"),
            "location": get_custom_field_value(blocks, "manufacturerLocation"),
            "description": get_custom_field_value(blocks, "manufacturerDescription"),
        },
        "ingredients": extract_detailed_ingredients(blocks),
        "faqs": extract_faqs(blocks),
        "customerReviews": extract_customer_reviews(blocks),
    }
