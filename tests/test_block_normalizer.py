import json

import pytest

from blockpress.services.block_normalizer import normalize_block, normalize_blocks
from blockpress.services.custom_field_codec import default_responsive_settings


RAW_BLOCKS = [
    {"id": "b1", "type": "paragraph", "content": "Hello"},
    {"id": "b2", "type": "heading", "content": "Title", "level": 7},
    {"id": "b3", "type": "list", "content": "a\nb", "listType": "sideways"},
    {"id": "b4", "type": "code", "content": "print(1)"},
    {"id": "b5", "type": "rating", "ratings": {"ingredients": 4, "value": None}, "highlights": ["x", {"content": "y", "order": 1}]},
    {"id": "b6", "type": "pros-cons", "pros": None, "cons": ["bad"], "ingredients": [{"id": "i", "content": "zinc"}]},
    {"id": "b7", "type": "ingredients", "ingredientsIntroduction": "What is inside", "ingredientsList": [{"name": "Zinc", "order": "2"}]},
    {"id": "b8", "type": "faq"},
    {"id": "b9", "type": "specifications", "specifications": [{"name": "Size", "value": 30}]},
    {"id": "b10", "type": "bullet-list", "bulletPoints": ["one", "two"]},
    {"id": "b11", "type": "cta", "ctaText": "Buy", "order": "3"},
    {"id": "b12", "type": "image", "customFields": [{"name": "responsiveSettings", "value": "{broken"}]},
    {"id": "b13", "type": "image", "responsiveSettings": {"layout": "wide"}},
    {"id": "b14", "type": "quote", "content": None, "author": "Ada"},
    {"id": "b15", "type": "mystery", "content": "?"},
    {},
]


@pytest.mark.parametrize("raw", RAW_BLOCKS)
def test_normalize_is_idempotent(raw):
    once = normalize_block(raw)
    assert normalize_block(once) == once


def test_faq_without_items_gets_empty_list():
    block = normalize_block({"id": "f1", "type": "faq", "faqItems": None})
    assert block["faqItems"] == []
    assert block["content"] == ""
    assert block["customFields"] == []


def test_only_type_relevant_fields_are_exposed():
    block = normalize_block({"id": "p", "type": "paragraph", "content": "x", "level": 3, "pros": ["a"]})
    assert set(block) == {"id", "type", "order", "content", "sectionId", "customFields"}

    heading = normalize_block({"id": "h", "type": "heading", "faqItems": [{"question": "q"}]})
    assert "faqItems" not in heading
    assert heading["level"] == 2


def test_type_defaults():
    assert normalize_block({"type": "code"})["language"] == "javascript"
    assert normalize_block({"type": "list"})["listType"] == "unordered"
    assert normalize_block({"type": "list", "listType": "ordered"})["listType"] == "ordered"
    assert normalize_block({"type": "heading", "level": "3"})["level"] == 3
    assert normalize_block({})["type"] == "paragraph"


def test_content_lists_accept_plain_strings():
    block = normalize_block({"type": "bullet-list", "bulletPoints": ["one", {"content": "two", "order": 1}]})
    assert block["bulletPoints"] == [
        {"id": "", "content": "one", "order": None},
        {"id": "", "content": "two", "order": 1},
    ]


def test_rating_block_keeps_missing_scores_as_none():
    block = normalize_block({"type": "rating", "ratings": {"ingredients": 4}})
    assert block["ratings"]["ingredients"] == 4
    assert block["ratings"]["safety"] is None
    assert block["overallRating"] == 0

    assert normalize_block({"type": "rating"})["ratings"] == {}


def test_ingredients_block_exposes_introduction():
    block = normalize_block({"type": "ingredients", "ingredientsIntroduction": "Inside"})
    assert block["introduction"] == "Inside"
    assert block["ingredientsList"] == []


def test_image_settings_come_from_custom_field():
    settings = {"layout": "full-width", "lazy": False}
    block = normalize_block({
        "type": "image",
        "imageUrl": "https://img.example/a.jpg",
        "customFields": [{"id": "cf", "name": "responsiveSettings", "value": json.dumps(settings)}],
    })
    assert block["responsiveSettings"] == settings
    assert block["imageUrl"] == "https://img.example/a.jpg"
    assert block["imageAlt"] == ""


def test_image_with_corrupt_settings_falls_back_to_default():
    block = normalize_block({"type": "image", "customFields": [{"name": "responsiveSettings", "value": "{oops"}]})
    assert block["responsiveSettings"] == default_responsive_settings()


def test_normalize_blocks_skips_non_mappings():
    assert [b["id"] for b in normalize_blocks([{"id": "a"}, None, "x", {"id": "b"}])] == ["a", "b"]
    assert normalize_blocks(None) == []
