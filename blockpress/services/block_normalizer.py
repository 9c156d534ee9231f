"""
Block Normalizer

Turns a raw block record (from the database, an older schema version or a
partial update) into a fully shaped block: the common fields every block
has plus only the fields of its own type. Arrays are never None, ``content``
defaults to "" and nothing is re-sorted here; sorting happens in the
aggregator. Normalizing an already normalized block returns it unchanged.
"""

import copy
from typing import Any, Callable, Dict, List, Mapping, Optional

from blockpress.services.custom_field_codec import (
    RESPONSIVE_SETTINGS_FIELD,
    default_responsive_settings,
    deserialize_settings,
    find_custom_field,
)
from blockpress.utils.enums import BlockType, ListType

RATING_KEYS = ("ingredients", "value", "manufacturer", "safety", "effectiveness")
HEADING_LEVELS = (1, 2, 3)
DEFAULT_HEADING_LEVEL = 2
DEFAULT_CODE_LANGUAGE = "javascript"


# ---------------------------------------------------------------------------
# Scalar coercion
# ---------------------------------------------------------------------------

def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _opt_int(value: Any) -> Optional[int]:
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


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


# ---------------------------------------------------------------------------
# Sub-entities
# ---------------------------------------------------------------------------

def _content_item(item: Any) -> Dict[str, Any]:
    if isinstance(item, str):
        return {"id": "", "content": item, "order": None}
    item = item if isinstance(item, Mapping) else {}
    return {
        "id": _text(item.get("id")),
        "content": _text(item.get("content")),
        "order": _opt_int(item.get("order")),
    }


def _content_items(value: Any) -> List[Dict[str, Any]]:
    return [_content_item(i) for i in _list(value) if isinstance(i, (str, Mapping))]


def _faq_items(value: Any) -> List[Dict[str, Any]]:
    return [
        {
            "id": _text(i.get("id")),
            "question": _text(i.get("question")),
            "answer": _text(i.get("answer")),
            "order": _opt_int(i.get("order")),
        }
        for i in _list(value) if isinstance(i, Mapping)
    ]


def _specifications(value: Any) -> List[Dict[str, Any]]:
    return [
        {
            "id": _text(i.get("id")),
            "name": _text(i.get("name")),
            "value": _text(i.get("value")),
            "order": _opt_int(i.get("order")),
        }
        for i in _list(value) if isinstance(i, Mapping)
    ]


def _ingredient_items(value: Any) -> List[Dict[str, Any]]:
    return [
        {
            "id": _text(i.get("id")),
            "name": _text(i.get("name")),
            "imageUrl": _text(i.get("imageUrl")),
            "description": _text(i.get("description")),
            "studyYear": _text(i.get("studyYear")),
            "studySource": _text(i.get("studySource")),
            "studyDescription": _text(i.get("studyDescription")),
            "order": _opt_int(i.get("order")),
        }
        for i in _list(value) if isinstance(i, Mapping)
    ]


def _custom_fields(value: Any) -> List[Dict[str, Any]]:
    return [
        {
            "id": _text(f.get("id")),
            "name": _text(f.get("name")),
            "value": _text(f.get("value")),
        }
        for f in _list(value) if isinstance(f, Mapping)
    ]


def _ratings(value: Any) -> Dict[str, Optional[float]]:
    # Absent rating sub-entity stays an empty object; missing scores stay None
    if not isinstance(value, Mapping) or not value:
        return {}
    return {key: _number(value.get(key)) for key in RATING_KEYS}


# ---------------------------------------------------------------------------
# Per-type fields
# ---------------------------------------------------------------------------

def _heading(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    level = _opt_int(raw.get("level"))
    return {"level": level if level in HEADING_LEVELS else DEFAULT_HEADING_LEVEL}


def _image(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    field = find_custom_field(base["customFields"], RESPONSIVE_SETTINGS_FIELD)
    if field is not None:
        settings = deserialize_settings(field["value"])
    elif isinstance(raw.get("responsiveSettings"), Mapping):
        settings = copy.deepcopy(dict(raw["responsiveSettings"]))
    else:
        settings = default_responsive_settings()
    return {
        "imageUrl": _text(raw.get("imageUrl")),
        "imageCaption": _text(raw.get("imageCaption")),
        "imageAlt": _text(raw.get("imageAlt")),
        "responsiveSettings": settings,
    }


def _list_block(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    list_type = _text(raw.get("listType"))
    if list_type not in (ListType.ORDERED.value, ListType.UNORDERED.value):
        list_type = ListType.UNORDERED.value
    return {"listType": list_type}


def _quote(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    return {"author": _text(raw.get("author"))}


def _code(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    return {"language": _text(raw.get("language")) or DEFAULT_CODE_LANGUAGE}


def _cta(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "ctaText": _text(raw.get("ctaText")),
        "ctaButtonText": _text(raw.get("ctaButtonText")),
        "ctaButtonLink": _text(raw.get("ctaButtonLink")),
        "backgroundColor": _text(raw.get("backgroundColor")),
    }


def _rating(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "productName": _text(raw.get("productName")),
        "overallRating": _number(raw.get("overallRating")) or 0,
        "ratings": _ratings(raw.get("ratings")),
        "highlights": _content_items(raw.get("highlights")),
    }


def _pros_cons(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "pros": _content_items(raw.get("pros")),
        "cons": _content_items(raw.get("cons")),
        "ingredients": _content_items(raw.get("ingredients")),
    }


def _ingredients(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    # Stored as ingredientsIntroduction, exposed as introduction
    if "introduction" in raw:
        introduction = raw.get("introduction")
    else:
        introduction = raw.get("ingredientsIntroduction")
    return {
        "productName": _text(raw.get("productName")),
        "introduction": _text(introduction),
        "ingredientsList": _ingredient_items(raw.get("ingredientsList")),
    }


def _faq(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    return {"faqItems": _faq_items(raw.get("faqItems"))}


def _specifications_block(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    return {"specifications": _specifications(raw.get("specifications"))}


def _bullet_list(raw: Mapping, base: Dict[str, Any]) -> Dict[str, Any]:
    return {"bulletPoints": _content_items(raw.get("bulletPoints"))}


TYPE_FIELDS: Dict[str, Callable[[Mapping, Dict[str, Any]], Dict[str, Any]]] = {
    BlockType.HEADING.value: _heading,
    BlockType.IMAGE.value: _image,
    BlockType.LIST.value: _list_block,
    BlockType.QUOTE.value: _quote,
    BlockType.CODE.value: _code,
    BlockType.CTA.value: _cta,
    BlockType.RATING.value: _rating,
    BlockType.PROS_CONS.value: _pros_cons,
    BlockType.INGREDIENTS.value: _ingredients,
    BlockType.FAQ.value: _faq,
    BlockType.SPECIFICATIONS.value: _specifications_block,
    BlockType.BULLET_LIST.value: _bullet_list,
}


def normalize_block(raw: Optional[Mapping]) -> Dict[str, Any]:
    """
    Normalize one raw block record.

    Args:
        raw: Loosely typed mapping with at least ``id`` and ``type``

    Returns:
        New dict with the common block fields and the fields of its type
    """
    raw = raw if isinstance(raw, Mapping) else {}

    base = {
        "id": _text(raw.get("id")),
        "type": _text(raw.get("type")) or BlockType.PARAGRAPH.value,
        "order": _opt_int(raw.get("order")) or 0,
        "content": _text(raw.get("content")),
        "sectionId": _text(raw.get("sectionId")),
        "customFields": _custom_fields(raw.get("customFields")),
    }

    extra = TYPE_FIELDS.get(base["type"])
    if extra is None:
        return base
    return {**base, **extra(raw, base)}


def normalize_blocks(raws: Optional[List[Mapping]]) -> List[Dict[str, Any]]:
    return [normalize_block(raw) for raw in (raws or []) if isinstance(raw, Mapping)]
