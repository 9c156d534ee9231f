"""
Write-Path Decomposer

Turns an editor payload (``title``, ``userId``, ``sections[].blocks[]``) into
the nested create instructions the persistence layer executes: plain dicts
keyed by column name, with fresh ids generated up front so every child can be
stamped with its parent's id before anything is written.

Client-supplied ids are never reused. Sections, blocks and ordered
sub-entities are sorted by their requested ``order`` (positional index when
absent) and renumbered to the contiguous range [0, n-1].
"""

import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from blockpress.errors import ConflictError, ValidationError
from blockpress.schemas.article_schema import (
    ArticlePayloadSchema,
    ArticleUpdateSchema,
    flatten_errors,
)
from blockpress.services.article_aggregator import count_words, reading_time_for
from blockpress.services.custom_field_codec import (
    RESPONSIVE_SETTINGS_FIELD,
    serialize_settings,
    upsert_custom_field,
)
from blockpress.services.ordering import renumber, sort_by_order
from blockpress.utils.enums import ArticleWriteState, BlockType
from blockpress.utils.ids import new_id

SLUG_MAX_LENGTH = 50
SLUG_FALLBACK = "article"
DEFAULT_SLUG_ATTEMPTS = 100

RATING_KEYS = ("ingredients", "value", "manufacturer", "safety", "effectiveness")

# payload key -> column name for scalar block fields
BLOCK_COLUMNS = {
    "level": "level",
    "listType": "list_type",
    "imageUrl": "image_url",
    "imageCaption": "image_caption",
    "imageAlt": "image_alt",
    "language": "language",
    "author": "author",
    "productName": "product_name",
    "overallRating": "overall_rating",
    "ctaText": "cta_text",
    "ctaButtonText": "cta_button_text",
    "ctaButtonLink": "cta_button_link",
    "backgroundColor": "background_color",
}

# payload key -> relationship name for the simple {content, order} children
CONTENT_CHILDREN = {
    "pros": "pros",
    "cons": "cons",
    "ingredients": "ingredients",
    "highlights": "highlights",
    "bulletPoints": "bullet_points",
}


# ---------------------------------------------------------------------------
# Slugs
# ---------------------------------------------------------------------------

def generate_slug(title: str) -> str:
    """
    Generate a URL-friendly slug from a title.
    Lowercases, turns whitespace runs into hyphens and strips anything that is
    not a word character or hyphen, then truncates to 50 characters.
    """
    slug = (title or "").lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w-]", "", slug, flags=re.ASCII)
    slug = slug[:SLUG_MAX_LENGTH]
    return slug or SLUG_FALLBACK


def resolve_unique_slug(title: str, exists: Callable[[str], bool], max_attempts: int = DEFAULT_SLUG_ATTEMPTS) -> str:
    """
    Probe ``slug``, ``slug-1``, ``slug-2`` ... until ``exists`` says the
    candidate is free.

    Raises:
        ConflictError: If no free candidate is found within ``max_attempts``
    """
    base = generate_slug(title)
    candidate = base
    for attempt in range(1, max_attempts + 1):
        if not exists(candidate):
            return candidate
        candidate = f"{base}-{attempt}"
    raise ConflictError(f"Could not find a unique slug for '{base}' after {max_attempts} attempts")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_article_payload(payload: Any, require_user: bool = True) -> List[str]:
    """Return every violated rule as "field: message"; empty when valid."""
    if not isinstance(payload, Mapping):
        return ["Request body must be a JSON object"]
    schema = ArticlePayloadSchema() if require_user else ArticleUpdateSchema()
    return flatten_errors(schema.validate(payload))


# ---------------------------------------------------------------------------
# Decomposition
# ---------------------------------------------------------------------------

def _valid_order(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _ordered(items: Any) -> List[Dict[str, Any]]:
    """Fill missing orders with the position, sort stably, renumber."""
    filled = []
    for idx, item in enumerate(items if isinstance(items, (list, tuple)) else []):
        if isinstance(item, str):
            item = {"content": item}
        if not isinstance(item, Mapping):
            continue
        order = _valid_order(item.get("order"))
        filled.append({**item, "order": idx if order is None else order})
    return renumber(sort_by_order(filled))


def _text(value: Any, default: Optional[str] = None) -> Optional[str]:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _block_content(block: Mapping) -> Optional[str]:
    content = block.get("content")
    if isinstance(content, (list, tuple)):
        # list blocks may arrive as an array of items
        return "\n".join(_text(item, "") for item in content)
    return _text(content)


def _content_children(items: Any, block_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": new_id(),
            "block_id": block_id,
            "content": _text(item.get("content"), ""),
            "order": item["order"],
        }
        for item in _ordered(items)
    ]


def _faq_children(items: Any, block_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": new_id(),
            "block_id": block_id,
            "question": _text(item.get("question"), ""),
            "answer": _text(item.get("answer"), ""),
            "order": item["order"],
        }
        for item in _ordered(items)
    ]


def _specification_children(items: Any, block_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": new_id(),
            "block_id": block_id,
            "name": _text(item.get("name"), ""),
            "value": _text(item.get("value"), ""),
            "order": item["order"],
        }
        for item in _ordered(items)
    ]


def _ingredient_item_children(items: Any, block_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": new_id(),
            "block_id": block_id,
            "name": _text(item.get("name")) or "Unknown Ingredient",
            "image_url": _text(item.get("imageUrl"), ""),
            "description": _text(item.get("description"), ""),
            "study_year": _text(item.get("studyYear")),
            "study_source": _text(item.get("studySource")),
            "study_description": _text(item.get("studyDescription")),
            "order": item["order"],
        }
        for item in _ordered(items)
    ]


def _custom_field_children(block: Mapping, block_id: str) -> List[Dict[str, Any]]:
    fields = [
        {"name": _text(f.get("name")) or "custom", "value": _text(f.get("value"), "")}
        for f in (block.get("customFields") or []) if isinstance(f, Mapping)
    ]
    settings = block.get("responsiveSettings")
    if isinstance(settings, Mapping):
        fields = upsert_custom_field(fields, RESPONSIVE_SETTINGS_FIELD, serialize_settings(dict(settings)))
    return [{"id": new_id(), "block_id": block_id, **f} for f in fields]


def _score(value: Any) -> Optional[float]:
    # Form-posted scores arrive as numeric strings
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _rating_child(ratings: Any, block_id: str) -> Optional[Dict[str, Any]]:
    if not isinstance(ratings, Mapping) or not ratings:
        return None
    scores = {key: _score(ratings.get(key)) for key in RATING_KEYS}
    return {"id": new_id(), "block_id": block_id, **scores}


def decompose_block(block: Mapping, section_id: str, index: int) -> Dict[str, Any]:
    """
    Build the create instruction for one block and its children.

    Args:
        block: Block payload from the editor
        section_id: Id of the (not yet persisted) owning section
        index: Positional index used when the block has no explicit order

    Returns:
        Dict of block columns plus a ``children`` dict keyed by relationship
    """
    block_id = new_id()
    order = _valid_order(block.get("order"))

    columns = {
        "id": block_id,
        "section_id": section_id,
        "order": index if order is None else order,
        "content": _block_content(block),
    }
    for key, column in BLOCK_COLUMNS.items():
        if block.get(key) is not None:
            columns[column] = block[key]
    if "overall_rating" in columns:
        columns["overall_rating"] = _score(columns["overall_rating"])
    if "level" in columns:
        columns["level"] = _valid_order(columns["level"])
    columns["type"] = _text(block.get("type")) or BlockType.PARAGRAPH.value

    introduction = block.get("introduction", block.get("ingredientsIntroduction"))
    if introduction is not None:
        columns["ingredients_introduction"] = _text(introduction)

    children = {
        relation: _content_children(block.get(key), block_id)
        for key, relation in CONTENT_CHILDREN.items()
    }
    children["faq_items"] = _faq_children(block.get("faqItems"), block_id)
    children["specifications"] = _specification_children(block.get("specifications"), block_id)
    children["ingredients_list"] = _ingredient_item_children(block.get("ingredientsList"), block_id)
    children["custom_fields"] = _custom_field_children(block, block_id)
    children["rating"] = _rating_child(block.get("ratings"), block_id)

    return {**columns, "children": children}


def decompose_section(section: Mapping, article_id: str, index: int) -> Dict[str, Any]:
    section_id = new_id()
    order = _valid_order(section.get("order"))
    blocks = _ordered(section.get("blocks"))
    return {
        "id": section_id,
        "article_id": article_id,
        "title": _text(section.get("title"), ""),
        "order": index if order is None else order,
        "blocks": [decompose_block(block, section_id, block["order"]) for block in blocks],
    }


def _decompose_keywords(keywords: Any, article_id: str, focus_keyword: Optional[str]) -> List[Dict[str, Any]]:
    result = []
    seen = set()
    for keyword in keywords if isinstance(keywords, (list, tuple)) else []:
        if isinstance(keyword, str):
            keyword = {"keyword": keyword}
        if not isinstance(keyword, Mapping):
            continue
        text = (_text(keyword.get("keyword"), "") or "").strip()
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        is_primary = keyword.get("isPrimary")
        if is_primary is None:
            is_primary = bool(focus_keyword) and text.lower() == focus_keyword.strip().lower()
        result.append({
            "id": new_id(),
            "article_id": article_id,
            "keyword": text,
            "search_volume": keyword.get("searchVolume"),
            "difficulty": keyword.get("difficulty"),
            "intent": keyword.get("intent"),
            "is_primary": bool(is_primary),
        })
    return result


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).replace(tzinfo=None)
        except ValueError:
            return None
    return None


def decompose_article(payload: Mapping, article_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Decompose a validated article payload.

    Returns:
        Dict with ``article`` columns, ``sections`` (with nested blocks),
        ``keywords``, ``seo_data`` and the computed ``stats``
    """
    article_id = article_id or new_id()
    sections = [
        decompose_section(section, article_id, section["order"])
        for section in _ordered(payload.get("sections"))
    ]

    word_count = sum(
        count_words(block.get("content"))
        for section in sections for block in section["blocks"]
    )
    reading_time = reading_time_for(word_count)

    focus_keyword = _text(payload.get("focusKeyword"))
    category_id = payload.get("categoryId") or None

    article = {
        "id": article_id,
        "title": _text(payload.get("title"), "").strip(),
        "excerpt": _text(payload.get("excerpt")),
        "image_url": _text(payload.get("imageUrl")),
        "user_id": _text(payload.get("userId")),
        "category_id": _text(category_id) if category_id else None,
        "meta_description": _text(payload.get("metaDescription")),
        "focus_keyword": focus_keyword,
        "seo_title": _text(payload.get("seoTitle")),
        "seo_score": payload.get("seoScore") or 0,
        "word_count": word_count,
        "reading_time": reading_time,
    }
    publish_date = _parse_datetime(payload.get("publishDate"))
    if publish_date is not None:
        article["publish_date"] = publish_date

    return {
        "article": article,
        "sections": sections,
        "keywords": _decompose_keywords(payload.get("keywords"), article_id, focus_keyword),
        "seo_data": {
            "id": new_id(),
            "article_id": article_id,
            "title_suggestions": [],
            "content_suggestions": {},
            "readability_score": 0,
            "keyword_density": 0.0,
            "word_count": word_count,
            "reading_time": reading_time,
        },
        "stats": {"wordCount": word_count, "readingTime": reading_time},
    }


# ---------------------------------------------------------------------------
# Write lifecycle
# ---------------------------------------------------------------------------

class ArticleWritePlan:
    """
    Article write lifecycle:
    DRAFT_PAYLOAD -> VALIDATED -> SLUG_RESOLVED -> PERSISTED, or REJECTED
    with every validation error collected.
    """

    def __init__(self, payload: Any, require_user: bool = True):
        self.payload = payload
        self.require_user = require_user
        self.state = ArticleWriteState.DRAFT_PAYLOAD
        self.errors: List[str] = []
        self.slug: Optional[str] = None
        self.decomposed: Optional[Dict[str, Any]] = None

    def _expect(self, *states: ArticleWriteState):
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise RuntimeError(f"Illegal write transition from {self.state.value} (expected {allowed})")

    def validate(self) -> "ArticleWritePlan":
        """
        Raises:
            ValidationError: With the full error list; the plan becomes REJECTED
        """
        self._expect(ArticleWriteState.DRAFT_PAYLOAD)
        self.errors = validate_article_payload(self.payload, require_user=self.require_user)
        if self.errors:
            self.state = ArticleWriteState.REJECTED
            raise ValidationError(self.errors)
        self.state = ArticleWriteState.VALIDATED
        return self

    def reject(self, errors: List[str]) -> None:
        """Reject a validated plan for reasons found outside the payload."""
        self._expect(ArticleWriteState.VALIDATED, ArticleWriteState.SLUG_RESOLVED)
        self.errors = list(errors)
        self.state = ArticleWriteState.REJECTED
        raise ValidationError(self.errors)

    def resolve_slug(self, exists: Callable[[str], bool], max_attempts: int = DEFAULT_SLUG_ATTEMPTS) -> str:
        self._expect(ArticleWriteState.VALIDATED)
        self.slug = resolve_unique_slug(self.payload.get("title", ""), exists, max_attempts)
        self.state = ArticleWriteState.SLUG_RESOLVED
        return self.slug

    def use_slug(self, slug: str) -> str:
        """Keep an existing slug (update without a title-derived change)."""
        self._expect(ArticleWriteState.VALIDATED)
        self.slug = slug
        self.state = ArticleWriteState.SLUG_RESOLVED
        return slug

    def decompose(self, article_id: Optional[str] = None) -> Dict[str, Any]:
        self._expect(ArticleWriteState.SLUG_RESOLVED)
        self.decomposed = decompose_article(self.payload, article_id)
        self.decomposed["article"]["slug"] = self.slug
        return self.decomposed

    def mark_persisted(self) -> None:
        self._expect(ArticleWriteState.SLUG_RESOLVED)
        if self.decomposed is None:
            raise RuntimeError("Article must be decomposed before it is persisted")
        self.state = ArticleWriteState.PERSISTED


