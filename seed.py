from blockpress import create_app
from blockpress.extensions import db
from blockpress.models.article import Article
from blockpress.models.category import Category
from blockpress.models.user import User
from blockpress.services.article_service import create_article

app = create_app()

with app.app_context():
    # ensure tables exist (non-destructive: won't alter existing columns)
    db.create_all()

    user = User.query.filter_by(email="editor@example.com").first()
    if not user:
        user = User(name="Demo Editor", email="editor@example.com", role="ADMINISTRATOR")
        db.session.add(user)

    category = Category.query.filter_by(slug="supplements").first()
    if not category:
        category = Category(name="Supplements", slug="supplements", description="Supplement reviews")
        db.session.add(category)

    db.session.commit()

    if not Article.query.filter_by(slug="vitamin-c-serum-review").first():
        create_article({
            "title": "Vitamin C Serum Review",
            "excerpt": "Does this serum live up to the hype?",
            "userId": user.id,
            "categoryId": category.id,
            "focusKeyword": "vitamin c serum",
            "keywords": ["vitamin c serum", "brightening serum"],
            "sections": [
                {
                    "title": "Overview",
                    "blocks": [
                        {"type": "heading", "content": "What is it?", "level": 2},
                        {"type": "paragraph", "content": "A daily serum built around stabilized vitamin C."},
                    ],
                },
                {
                    "title": "Verdict",
                    "blocks": [
                        {
                            "type": "rating",
                            "productName": "Glow Serum",
                            "ratings": {"ingredients": 4.5, "value": 4, "manufacturer": 4, "safety": 5, "effectiveness": 4},
                            "highlights": ["Made in an FDA registered facility"],
                        },
                        {"type": "pros-cons", "pros": ["Lightweight", "Fragrance free"], "cons": ["Pricey"]},
                        {"type": "faq", "faqItems": [{"question": "Can I use it daily?", "answer": "Yes, mornings work best."}]},
                    ],
                },
            ],
        })

    print("✅ Seed completed.")
