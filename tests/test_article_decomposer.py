import json

import pytest

from blockpress.errors import ConflictError, ValidationError
from blockpress.services.article_decomposer import (
    ArticleWritePlan,
    decompose_article,
    decompose_block,
    decompose_section,
    generate_slug,
    resolve_unique_slug,
    validate_article_payload,
)
from blockpress.utils.enums import ArticleWriteState


def _payload(**overrides):
    payload = {
        "title": "Best Vitamin C Serum!!",
        "userId": "u1",
        "sections": [
            {"title": "Intro", "blocks": [
                {"id": "client-1", "type": "heading", "content": "Intro", "level": 2},
                {"type": "paragraph", "content": "Hello world this is a test"},
            ]},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize("title, slug", [
    ("Best Vitamin C Serum!!", "best-vitamin-c-serum"),
    ("  Hello   World  ", "hello-world"),
    ("snake_case stays", "snake_case-stays"),
    ("Crème brûlée", "crme-brle"),
    ("!!!", "article"),
    ("", "article"),
])
def test_generate_slug(title, slug):
    assert generate_slug(title) == slug


def test_generate_slug_truncates_to_fifty():
    assert len(generate_slug("word " * 40)) == 50


def test_resolve_unique_slug_appends_suffix():
    taken = {"best-vitamin-c-serum", "best-vitamin-c-serum-1"}
    assert resolve_unique_slug("Best Vitamin C Serum!!", taken.__contains__) == "best-vitamin-c-serum-2"
    assert resolve_unique_slug("Fresh title", taken.__contains__) == "fresh-title"


def test_resolve_unique_slug_gives_up_after_max_attempts():
    calls = []

    def always_taken(slug):
        calls.append(slug)
        return True

    with pytest.raises(ConflictError):
        resolve_unique_slug("Busy", always_taken, max_attempts=3)
    assert calls == ["busy", "busy-1", "busy-2"]


def test_validation_collects_every_error():
    errors = validate_article_payload({"title": "", "sections": "nope"})
    fields = {e.split(":")[0] for e in errors}
    assert {"title", "userId", "sections"} <= fields

    assert validate_article_payload(_payload()) == []
    assert validate_article_payload(["not", "a", "dict"]) == ["Request body must be a JSON object"]


def test_validation_checks_block_rules():
    payload = _payload(sections=[{"blocks": [
        {"type": "list", "listType": "sideways"},
        {"type": "rating", "ratings": {"safety": 9}},
        {"content": "no type"},
    ]}])
    errors = validate_article_payload(payload)
    assert any(e.startswith("sections.0.blocks.0.listType:") for e in errors)
    assert any(e.startswith("sections.0.blocks.1.ratings.safety:") for e in errors)
    assert any(e.startswith("sections.0.blocks.2.type:") for e in errors)


def test_update_validation_does_not_require_user():
    payload = _payload()
    del payload["userId"]
    assert validate_article_payload(payload, require_user=False) == []
    assert validate_article_payload(payload)


def test_decompose_block_stamps_children_and_drops_client_ids():
    block = {
        "id": "client-block",
        "type": "pros-cons",
        "pros": [{"content": "Cheap", "order": 1}, {"id": "client-pro", "content": "Gentle", "order": 0}, "Sturdy"],
        "cons": [],
        "customFields": [{"id": "client-cf", "name": "section", "value": "overview"}],
    }
    result = decompose_block(block, "section-1", 4)

    assert result["id"] != "client-block"
    assert result["section_id"] == "section-1"
    assert result["order"] == 4
    assert result["type"] == "pros-cons"

    pros = result["children"]["pros"]
    assert [p["content"] for p in pros] == ["Gentle", "Cheap", "Sturdy"]
    assert [p["order"] for p in pros] == [0, 1, 2]
    assert all(p["block_id"] == result["id"] for p in pros)
    assert "client-pro" not in {p["id"] for p in pros}
    assert result["children"]["custom_fields"][0]["id"] != "client-cf"
    assert result["children"]["rating"] is None


def test_decompose_block_explicit_order_wins():
    assert decompose_block({"type": "paragraph", "order": 9}, "s", 0)["order"] == 9


def test_decompose_block_maps_type_fields():
    result = decompose_block({
        "type": "ingredients",
        "productName": "Glow",
        "introduction": "Inside the bottle",
        "ingredientsList": [{"name": "Zinc", "imageUrl": "z.png", "studyYear": 2020}],
    }, "s", 0)
    assert result["product_name"] == "Glow"
    assert result["ingredients_introduction"] == "Inside the bottle"
    item = result["children"]["ingredients_list"][0]
    assert item["name"] == "Zinc"
    assert item["image_url"] == "z.png"
    assert item["study_year"] == "2020"


def test_decompose_block_joins_list_content():
    result = decompose_block({"type": "list", "content": ["a", "b", "c"], "listType": "ordered"}, "s", 0)
    assert result["content"] == "a\nb\nc"
    assert result["list_type"] == "ordered"


def test_decompose_block_encodes_responsive_settings():
    settings = {"layout": "full-width"}
    result = decompose_block({
        "type": "image",
        "responsiveSettings": settings,
        "customFields": [{"name": "responsiveSettings", "value": "stale"}, {"name": "credit", "value": "me"}],
    }, "s", 0)
    fields = result["children"]["custom_fields"]
    assert [f["name"] for f in fields] == ["responsiveSettings", "credit"]
    assert json.loads(fields[0]["value"]) == settings


def test_decompose_block_rating_child():
    result = decompose_block({"type": "rating", "ratings": {"ingredients": 4, "value": 3.5}}, "s", 0)
    rating = result["children"]["rating"]
    assert rating["block_id"] == result["id"]
    assert rating["ingredients"] == 4.0
    assert rating["safety"] is None


def test_decompose_section_sorts_and_renumbers_blocks():
    section = {"title": "S", "order": 2, "blocks": [
        {"type": "paragraph", "content": "c", "order": 7},
        {"type": "paragraph", "content": "a", "order": 1},
        {"type": "paragraph", "content": "b", "order": 3},
    ]}
    result = decompose_section(section, "article-1", 0)
    assert result["order"] == 2
    assert result["article_id"] == "article-1"
    assert [b["content"] for b in result["blocks"]] == ["a", "b", "c"]
    assert [b["order"] for b in result["blocks"]] == [0, 1, 2]
    assert all(b["section_id"] == result["id"] for b in result["blocks"])


def test_decompose_article_links_and_counts():
    payload = _payload(
        keywords=["vitamin c", {"keyword": "Vitamin C"}, {"keyword": "serum", "isPrimary": True}],
        focusKeyword="vitamin c",
        sections=[
            {"title": "Second", "order": 5, "blocks": []},
            {"title": "First", "order": 1, "blocks": [{"type": "paragraph", "content": "one two"}]},
        ],
    )
    result = decompose_article(payload, "article-1")

    assert result["article"]["id"] == "article-1"
    assert result["article"]["user_id"] == "u1"
    assert result["article"]["category_id"] is None
    assert [s["title"] for s in result["sections"]] == ["First", "Second"]
    assert [s["order"] for s in result["sections"]] == [0, 1]
    assert result["stats"] == {"wordCount": 2, "readingTime": 1}
    assert result["seo_data"]["word_count"] == 2
    assert [(k["keyword"], k["is_primary"]) for k in result["keywords"]] == [("vitamin c", True), ("serum", True)]


def test_decomposition_differs_only_in_ids():
    first = decompose_article(_payload(), "a")
    second = decompose_article(_payload(), "a")
    assert first["sections"][0]["id"] != second["sections"][0]["id"]
    assert [b["content"] for b in first["sections"][0]["blocks"]] == [b["content"] for b in second["sections"][0]["blocks"]]


def test_write_plan_happy_path():
    plan = ArticleWritePlan(_payload())
    assert plan.state is ArticleWriteState.DRAFT_PAYLOAD

    plan.validate()
    assert plan.state is ArticleWriteState.VALIDATED

    assert plan.resolve_slug(lambda s: s == "best-vitamin-c-serum") == "best-vitamin-c-serum-1"
    assert plan.state is ArticleWriteState.SLUG_RESOLVED

    decomposed = plan.decompose("article-1")
    assert decomposed["article"]["slug"] == "best-vitamin-c-serum-1"

    plan.mark_persisted()
    assert plan.state is ArticleWriteState.PERSISTED


def test_write_plan_rejects_with_all_errors():
    plan = ArticleWritePlan({"sections": []})
    with pytest.raises(ValidationError) as exc:
        plan.validate()
    assert plan.state is ArticleWriteState.REJECTED
    assert len(exc.value.errors) >= 3
    assert plan.errors == exc.value.errors


def test_write_plan_illegal_transitions():
    plan = ArticleWritePlan(_payload())
    with pytest.raises(RuntimeError):
        plan.decompose()
    with pytest.raises(RuntimeError):
        plan.resolve_slug(lambda s: False)

    plan.validate()
    with pytest.raises(RuntimeError):
        plan.mark_persisted()
    with pytest.raises(RuntimeError):
        plan.validate()


def test_decompose_block_parses_numeric_strings():
    result = decompose_block({
        "type": "rating",
        "overallRating": "4.5",
        "ratings": {"ingredients": "4", "value": " 3.5 ", "safety": "n/a"},
    }, "s", 0)
    assert result["overall_rating"] == 4.5
    rating = result["children"]["rating"]
    assert rating["ingredients"] == 4.0
    assert rating["value"] == 3.5
    assert rating["safety"] is None

    assert decompose_block({"type": "heading", "level": "3"}, "s", 0)["level"] == 3
