import pytest

from blockpress import create_app
from blockpress.extensions import db
from blockpress.models.user import User
from blockpress.models.category import Category
from blockpress.models.section import Section
from blockpress.models.block import Block, CustomField
from blockpress.services import article_service

USER_ID = "user-editor"
CATEGORY_ID = "cat-skincare"

FOUR_STARS = {"ingredients": 4, "value": 4, "manufacturer": 4, "safety": 4, "effectiveness": 4}


@pytest.fixture(scope="module")
def app():
    app = create_app("config.TestConfig")
    with app.app_context():
        db.create_all()
        db.session.add(User(id=USER_ID, name="Jane Editor", email="jane@example.com"))
        db.session.add(Category(id=CATEGORY_ID, name="Skincare", slug="skincare"))
        db.session.commit()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def article_payload(title="Best Vitamin C Serum!!", **overrides):
    payload = {
        "title": title,
        "userId": USER_ID,
        "categoryId": CATEGORY_ID,
        "keywords": ["vitamin c serum", {"keyword": "brightening serum", "intent": "Commercial"}],
        "focusKeyword": "vitamin c serum",
        "sections": [
            {
                "title": "Overview",
                "blocks": [
                    {"type": "heading", "content": "Intro", "level": 2},
                    {"type": "paragraph", "content": "Hello world this is a test"},
                ],
            },
            {
                "title": "Verdict",
                "blocks": [
                    {
                        "type": "rating",
                        "productName": "Glow Serum",
                        "ratings": FOUR_STARS,
                        "highlights": ["Fast absorbing", "Vegan"],
                    },
                    {
                        "type": "pros-cons",
                        "pros": [{"content": "Cheap", "order": 1}, {"content": "Gentle", "order": 0}],
                        "cons": ["Sticky"],
                    },
                    {"type": "faq", "faqItems": [{"question": "Daily use?", "answer": "Yes."}]},
                ],
            },
        ],
    }
    payload.update(overrides)
    return payload


def create(client, **kwargs):
    r = client.post("/api/articles", json=article_payload(**kwargs))
    assert r.status_code == 201, r.data
    return r.get_json()["article"]


def test_create_article_generates_slug_and_aggregates(client):
    article = create(client)

    assert article["slug"] == "best-vitamin-c-serum"
    assert article["version"] == 1
    assert article["wordCount"] == 7
    assert article["readingTime"] == 1
    assert article["sectionCount"] == 2
    assert [s["order"] for s in article["sections"]] == [0, 1]

    blocks = article["blocks"]
    assert [b["type"] for b in blocks] == ["heading", "paragraph", "rating", "pros-cons", "faq"]
    assert blocks[0]["sectionTitle"] == "Overview"
    assert blocks[3]["sectionTitle"] == "Verdict"
    assert [p["content"] for p in blocks[3]["pros"]] == ["Gentle", "Cheap"]
    assert [c["content"] for c in blocks[3]["cons"]] == ["Sticky"]
    assert article["category"]["slug"] == "skincare"
    assert article["user"]["name"] == "Jane Editor"
    assert set(article["keywords"]) == {"vitamin c serum", "brightening serum"}


def test_same_title_gets_numeric_suffix(client):
    article = create(client)
    assert article["slug"] == "best-vitamin-c-serum-1"


def test_create_article_reports_all_validation_errors(client):
    r = client.post("/api/articles", json={"title": "   ", "sections": []})
    assert r.status_code == 400
    body = r.get_json()
    assert body["success"] is False
    errors = body["error"]["errors"]
    assert any(e.startswith("title:") for e in errors)
    assert any(e.startswith("userId:") for e in errors)
    assert any(e.startswith("sections:") for e in errors)


def test_create_article_rejects_unknown_block_type_and_heading_level(client):
    payload = article_payload(title="Broken blocks", sections=[{
        "title": "One",
        "blocks": [{"type": "video"}, {"type": "heading", "content": "x", "level": 7}],
    }])
    r = client.post("/api/articles", json=payload)
    assert r.status_code == 400
    errors = r.get_json()["error"]["errors"]
    assert any(e.startswith("sections.0.blocks.0.type:") for e in errors)
    assert any(e.startswith("sections.0.blocks.1.level:") for e in errors)


def test_create_article_allows_empty_section(client):
    article = create(client, title="Empty section ok", sections=[{"title": "Placeholder", "blocks": []}])
    assert article["sectionCount"] == 1
    assert article["wordCount"] == 0
    assert article["readingTime"] == 1


def test_create_article_unknown_user(client):
    r = client.post("/api/articles", json=article_payload(title="Orphan", userId="nobody"))
    assert r.status_code == 400
    assert "userId: User not found" in r.get_json()["error"]["errors"]


def test_get_article_by_slug_and_not_found(client):
    r = client.get("/api/articles/best-vitamin-c-serum")
    assert r.status_code == 200
    assert r.get_json()["article"]["title"] == "Best Vitamin C Serum!!"

    r2 = client.get("/api/articles/does-not-exist")
    assert r2.status_code == 404
    assert r2.get_json()["success"] is False


def test_legacy_shape_via_slug_query(client):
    r = client.get("/api/articles?slug=best-vitamin-c-serum")
    assert r.status_code == 200
    article = r.get_json()["article"]

    assert article["author"] == "Jane Editor"
    assert article["overview"] == "Hello world this is a test"
    assert article["overallRating"] == 4.0
    assert article["safetyRating"] == 4
    assert article["pros"] == ["Gentle", "Cheap"]
    assert article["cons"] == ["Sticky"]
    assert article["brandHighlights"] == ["Fast absorbing", "Vegan"]
    assert article["faqs"] == [{"question": "Daily use?", "answer": "Yes."}]
    # both shapes are present
    assert article["sections"] and article["blocks"]


def test_image_block_responsive_settings_stored_as_custom_field(client, app):
    settings = {"layout": "full-width", "quality": 90}
    article = create(client, title="Image settings", sections=[{
        "title": "Gallery",
        "blocks": [{"type": "image", "imageUrl": "https://img.example/a.jpg", "responsiveSettings": settings}],
    }])

    block = article["blocks"][0]
    assert block["responsiveSettings"] == settings
    assert [f["name"] for f in block["customFields"]] == ["responsiveSettings"]

    with app.app_context():
        stored = CustomField.query.filter_by(block_id=block["id"]).one()
        assert stored.value == '{"layout":"full-width","quality":90}'


def test_update_replaces_sections_and_bumps_version(client):
    created = create(client, title="Replace me")
    slug = created["slug"]

    payload = article_payload(
        title="Replace me",
        version=created["version"],
        sections=[{"title": "Only", "blocks": [{"type": "paragraph", "content": "one two three"}]}],
    )
    r = client.put(f"/api/articles/{slug}", json=payload)
    assert r.status_code == 200, r.data
    updated = r.get_json()["article"]

    assert updated["slug"] == slug
    assert updated["version"] == created["version"] + 1
    assert updated["sectionCount"] == 1
    assert updated["wordCount"] == 3
    assert updated["sections"][0]["id"] not in {s["id"] for s in created["sections"]}


def test_update_with_stale_version_is_rejected(client):
    created = create(client, title="Concurrent edit")
    slug = created["slug"]

    first = client.put(f"/api/articles/{slug}", json=article_payload(title="Concurrent edit", version=created["version"]))
    assert first.status_code == 200

    stale = client.put(f"/api/articles/{slug}", json=article_payload(title="Concurrent edit", version=created["version"]))
    assert stale.status_code == 409
    assert stale.get_json()["error"]["code"] == "CONFLICT"

    stale_header = client.put(
        f"/api/articles/{slug}",
        json=article_payload(title="Concurrent edit"),
        headers={"If-Match": f'W/"{created["version"]}"'},
    )
    assert stale_header.status_code == 409


def test_update_without_version_is_last_write_wins(client):
    created = create(client, title="No token")
    r = client.put(f"/api/articles/{created['slug']}", json=article_payload(title="No token"))
    assert r.status_code == 200


def test_update_unknown_article(client):
    r = client.put("/api/articles/missing-article", json=article_payload(title="Missing"))
    assert r.status_code == 404


def test_update_to_taken_slug_conflicts(client):
    created = create(client, title="Slug owner")
    r = client.put(
        f"/api/articles/{created['slug']}",
        json=article_payload(title="Slug owner", slug="best-vitamin-c-serum"),
    )
    assert r.status_code == 409


def test_delete_cascades_to_sections_and_blocks(client, app):
    created = create(client, title="Delete me")
    section_ids = [s["id"] for s in created["sections"]]
    block_ids = [b["id"] for b in created["blocks"]]

    r = client.delete(f"/api/articles/{created['slug']}")
    assert r.status_code == 200
    assert r.get_json()["success"] is True

    assert client.get(f"/api/articles/{created['slug']}").status_code == 404
    assert client.delete(f"/api/articles/{created['slug']}").status_code == 404

    with app.app_context():
        assert Section.query.filter(Section.id.in_(section_ids)).count() == 0
        assert Block.query.filter(Block.id.in_(block_ids)).count() == 0


def test_list_articles_search_and_pagination(client):
    create(client, title="Searchable one", sections=[{
        "title": "Body",
        "blocks": [{"type": "paragraph", "content": "Rare zanzibar clove extract"}],
    }])

    r = client.get("/api/articles?search=zanzibar")
    assert r.status_code == 200
    body = r.get_json()
    assert body["pagination"]["total"] == 1
    summary = body["articles"][0]
    assert summary["slug"] == "searchable-one"
    assert summary["description"] == "Rare zanzibar clove extract"
    assert summary["sectionCount"] == 1

    r2 = client.get("/api/articles?limit=1&page=1")
    page = r2.get_json()
    assert len(page["articles"]) == 1
    assert page["pagination"]["hasNext"] is True
    assert page["pagination"]["hasPrev"] is False

    r3 = client.get("/api/articles?category=skincare&userId=" + USER_ID)
    assert r3.get_json()["pagination"]["total"] >= 2


def test_seo_data_roundtrip(client):
    r = client.get("/api/articles/best-vitamin-c-serum/seo")
    assert r.status_code == 200
    body = r.get_json()
    assert body["seoData"]["wordCount"] == 7
    assert {k["keyword"] for k in body["keywords"]} == {"vitamin c serum", "brightening serum"}
    primary = [k for k in body["keywords"] if k["isPrimary"]]
    assert [k["keyword"] for k in primary] == ["vitamin c serum"]

    r2 = client.post("/api/articles/best-vitamin-c-serum/seo", json={
        "focusKeyword": "serum",
        "seoScore": 80,
        "readabilityScore": 65.5,
        "keywords": [{"keyword": "serum", "isPrimary": True}],
    })
    assert r2.status_code == 200, r2.data
    saved = r2.get_json()
    assert saved["focusKeyword"] == "serum"
    assert saved["seoScore"] == 80
    assert saved["seoData"]["readabilityScore"] == 65.5
    assert [k["keyword"] for k in saved["keywords"]] == ["serum"]

    r3 = client.post("/api/articles/best-vitamin-c-serum/seo", json={"seoScore": 500})
    assert r3.status_code == 400


def test_image_presets_and_variants(client):
    r = client.get("/api/images/presets")
    assert r.status_code == 200
    presets = r.get_json()["presets"]
    assert presets["hero"]["width"] == 1200
    assert presets["ingredient"]["folder"] == "health-articles/ingredients"

    r2 = client.get("/api/images/variants?publicId=health-articles/hero-images/abc&preset=hero")
    assert r2.status_code == 200
    body = r2.get_json()
    assert body["url"].startswith("https://res.cloudinary.com/demo/image/upload/w_1200,h_800")
    assert "placeholder" in body["variants"]

    assert client.get("/api/images/variants").status_code == 400


def test_health_reports_database(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.get_json()["database"] == "healthy"


def test_create_article_accepts_numeric_string_scores(client):
    payload = article_payload(title="String scores", sections=[{
        "title": "Verdict",
        "blocks": [{
            "type": "rating",
            "overallRating": "4.5",
            "ratings": {key: "4" for key in FOUR_STARS},
        }],
    }])
    r = client.post("/api/articles", json=payload)
    assert r.status_code == 201, r.data

    block = r.get_json()["article"]["blocks"][0]
    assert block["ratings"] == {key: 4.0 for key in FOUR_STARS}
    assert block["overallRating"] == 4.5


def test_slug_taken_between_check_and_commit_is_retried(client, monkeypatch):
    create(client, title="Race Title")

    real_exists = article_service._slug_exists
    calls = []

    def stale_first_check(slug):
        calls.append(slug)
        return False if len(calls) == 1 else real_exists(slug)

    monkeypatch.setattr(article_service, "_slug_exists", stale_first_check)

    article = create(client, title="Race Title")
    assert article["slug"] == "race-title-1"


def test_slug_conflict_after_commit_retries_is_409(client, monkeypatch):
    create(client, title="Always Racing")
    monkeypatch.setattr(article_service, "_slug_exists", lambda slug: False)

    r = client.post("/api/articles", json=article_payload(title="Always Racing"))
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "CONFLICT"
