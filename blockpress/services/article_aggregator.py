"""
Section/Article Aggregator

Composes normalized blocks into sections, computes derived statistics and
builds the flat block view kept for older consumers. The flat view is always
derived from sections here and never stored.

Nothing in this module raises on malformed input: missing lists are treated
as empty and missing numbers are left out of averages.
"""

import math
import re
from typing import Any, Dict, List, Mapping, Optional

from blockpress.services.block_normalizer import RATING_KEYS, normalize_blocks
from blockpress.services.ordering import sort_by_order
from blockpress.utils.enums import BlockType

WORDS_PER_MINUTE = 200

_TAG_RE = re.compile(r"<[^>]*>")

# Ordered sub-entity lists sorted at render time
_ORDERED_LISTS = (
    "pros",
    "cons",
    "ingredients",
    "highlights",
    "bulletPoints",
    "faqItems",
    "specifications",
    "ingredientsList",
)


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _sorted_block(block: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(block)
    for key in _ORDERED_LISTS:
        if isinstance(result.get(key), list):
            result[key] = sort_by_order(result[key])
    return result


def count_words(text: Any) -> int:
    if not isinstance(text, str) or not text:
        return 0
    return len(_TAG_RE.sub("", text).split())


def reading_time_for(word_count: int) -> int:
    return max(1, math.ceil(max(word_count, 0) / WORDS_PER_MINUTE))


def compute_reading_stats(blocks: Optional[List[Mapping]]) -> Dict[str, int]:
    """Word count over every block with string content; reading time floored at 1."""
    word_count = sum(
        count_words(block.get("content"))
        for block in _as_list(blocks) if isinstance(block, Mapping)
    )
    return {"wordCount": word_count, "readingTime": reading_time_for(word_count)}


def extract_by_type(blocks: Optional[List[Mapping]], block_type: str) -> List[Mapping]:
    block_type = getattr(block_type, "value", block_type)
    return [b for b in _as_list(blocks) if isinstance(b, Mapping) and b.get("type") == block_type]


def first_of_type(blocks: Optional[List[Mapping]], block_type: str) -> Optional[Mapping]:
    """Singleton lookup: the first block of the type in document order wins."""
    matches = extract_by_type(blocks, block_type)
    return matches[0] if matches else None


def get_custom_field_value(blocks: Optional[List[Mapping]], name: str) -> str:
    for block in _as_list(blocks):
        if not isinstance(block, Mapping):
            continue
        for field in _as_list(block.get("customFields")):
            if isinstance(field, Mapping) and field.get("name") == name:
                value = field.get("value")
                return value if isinstance(value, str) else ""
    return ""


def overall_rating(ratings: Optional[Mapping]) -> float:
    """Mean of the non-null sub-scores, one decimal; 0.0 without any score."""
    if not isinstance(ratings, Mapping):
        return 0.0
    scores = [
        ratings.get(key) for key in RATING_KEYS
        if isinstance(ratings.get(key), (int, float)) and not isinstance(ratings.get(key), bool)
    ]
    if not scores:
        return 0.0
    return round(sum(scores) / len(scores), 1)


def aggregate(sections: Optional[List[Mapping]]) -> Dict[str, Any]:
    """
    Compose sections of normalized blocks into the read-path structure.

    Returns:
        Dictionary with sorted ``sections``, the derived ``flatBlocks`` view,
        ``wordCount``, ``readingTime`` and ``sectionCount``
    """
    result_sections = []
    flat_blocks = []

    for section in sort_by_order(_as_list(sections)):
        blocks = [_sorted_block(b) for b in sort_by_order(_as_list(section.get("blocks")))]
        result_sections.append({**section, "blocks": blocks})

        for block in blocks:
            flat_blocks.append({
                **block,
                "sectionId": section.get("id") or block.get("sectionId") or "",
                "sectionTitle": section.get("title") or "",
            })

    stats = compute_reading_stats(flat_blocks)

    return {
        "sections": result_sections,
        "flatBlocks": flat_blocks,
        "wordCount": stats["wordCount"],
        "readingTime": stats["readingTime"],
        "sectionCount": len(result_sections),
    }


def normalize_sections(raw_sections: Optional[List[Mapping]]) -> List[Dict[str, Any]]:
    return [
        {
            "id": section.get("id") or "",
            "title": section.get("title") or "",
            "order": section.get("order"),
            "articleId": section.get("articleId"),
            "createdAt": section.get("createdAt"),
            "updatedAt": section.get("updatedAt"),
            "blocks": normalize_blocks(_as_list(section.get("blocks"))),
        }
        for section in _as_list(raw_sections) if isinstance(section, Mapping)
    ]


def _seo(raw: Mapping) -> Dict[str, Any]:
    seo_data = raw.get("seoData") if isinstance(raw.get("seoData"), Mapping) else {}
    return {
        "metaDescription": raw.get("metaDescription") or "",
        "focusKeyword": raw.get("focusKeyword") or "",
        "seoTitle": raw.get("seoTitle") or "",
        "seoScore": raw.get("seoScore") or 0,
        "keywords": _as_list(raw.get("keywords")),
        "readabilityScore": seo_data.get("readabilityScore") or 0,
        "keywordDensity": seo_data.get("keywordDensity") or 0,
        "titleSuggestions": seo_data.get("titleSuggestions") or [],
        "contentSuggestions": seo_data.get("contentSuggestions") or {},
    }


def format_article(raw: Mapping) -> Dict[str, Any]:
    """Build the read-path article from a raw article record."""
    aggregated = aggregate(normalize_sections(raw.get("sections")))
    keywords = _as_list(raw.get("keywords"))

    return {
        "id": raw.get("id"),
        "title": raw.get("title") or "",
        "slug": raw.get("slug") or "",
        "excerpt": raw.get("excerpt") or "",
        "publishDate": raw.get("publishDate"),
        "createdAt": raw.get("createdAt"),
        "updatedAt": raw.get("updatedAt"),
        "imageUrl": raw.get("imageUrl") or "",

        "userId": raw.get("userId"),
        "user": raw.get("user"),

        "categoryId": raw.get("categoryId") or None,
        "category": raw.get("category"),

        "seo": _seo(raw),
        "metaDescription": raw.get("metaDescription") or "",
        "focusKeyword": raw.get("focusKeyword") or "",
        "keywords": [k.get("keyword") if isinstance(k, Mapping) else k for k in keywords],

        "wordCount": aggregated["wordCount"],
        "readingTime": aggregated["readingTime"],
        "sectionCount": aggregated["sectionCount"],
        "version": raw.get("version"),

        "sections": aggregated["sections"],
        "blocks": aggregated["flatBlocks"],
    }


def summarize_article(raw: Mapping) -> Dict[str, Any]:
    """Lightweight list entry; description is the first paragraph of the first section."""
    sections = sort_by_order(_as_list(raw.get("sections")))
    description = ""
    if sections:
        first_paragraph = first_of_type(sort_by_order(_as_list(sections[0].get("blocks"))), BlockType.PARAGRAPH)
        if first_paragraph:
            description = first_paragraph.get("content") or ""

    return {
        "id": raw.get("id"),
        "title": raw.get("title") or "",
        "slug": raw.get("slug") or "",
        "user": raw.get("user"),
        "publishDate": raw.get("publishDate"),
        "imageUrl": raw.get("imageUrl") or "",
        "description": description,
        "category": raw.get("category"),
        "createdAt": raw.get("createdAt"),
        "updatedAt": raw.get("updatedAt"),
        "seoScore": raw.get("seoScore") or 0,
        "focusKeyword": raw.get("focusKeyword") or "",
        "keywords": _as_list(raw.get("keywords")),
        "wordCount": raw.get("wordCount") or 0,
        "readingTime": raw.get("readingTime") or 1,
        "sectionCount": len(sections),
    }
