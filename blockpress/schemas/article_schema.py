from marshmallow import INCLUDE, Schema, ValidationError, fields, validate

from blockpress.utils.enums import BlockType, ListType


def _not_blank(message):
    def check(value):
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(message)
    return check


class RatingsSchema(Schema):
    ingredients = fields.Float(allow_none=True, validate=validate.Range(min=0, max=5))
    value = fields.Float(allow_none=True, validate=validate.Range(min=0, max=5))
    manufacturer = fields.Float(allow_none=True, validate=validate.Range(min=0, max=5))
    safety = fields.Float(allow_none=True, validate=validate.Range(min=0, max=5))
    effectiveness = fields.Float(allow_none=True, validate=validate.Range(min=0, max=5))

    class Meta:
        unknown = INCLUDE


class FAQItemSchema(Schema):
    question = fields.Str(allow_none=True)
    answer = fields.Str(allow_none=True)
    order = fields.Int(allow_none=True)

    class Meta:
        unknown = INCLUDE


class CustomFieldSchema(Schema):
    name = fields.Str(required=True, validate=_not_blank("Custom field name is required"))
    value = fields.Str(allow_none=True)

    class Meta:
        unknown = INCLUDE


class BlockPayloadSchema(Schema):
    type = fields.Str(required=True, validate=validate.OneOf(BlockType.values()))
    # list blocks may send their items as an array
    content = fields.Raw(allow_none=True)
    order = fields.Int(allow_none=True)
    level = fields.Int(allow_none=True, validate=validate.Range(min=1, max=3))
    listType = fields.Str(allow_none=True, validate=validate.OneOf([e.value for e in ListType]))
    imageUrl = fields.Str(allow_none=True)
    imageCaption = fields.Str(allow_none=True)
    imageAlt = fields.Str(allow_none=True)
    responsiveSettings = fields.Dict(allow_none=True)
    language = fields.Str(allow_none=True)
    author = fields.Str(allow_none=True)
    productName = fields.Str(allow_none=True)
    overallRating = fields.Float(allow_none=True, validate=validate.Range(min=0, max=5))
    ratings = fields.Nested(RatingsSchema, allow_none=True)
    introduction = fields.Str(allow_none=True)
    ctaText = fields.Str(allow_none=True)
    ctaButtonText = fields.Str(allow_none=True)
    ctaButtonLink = fields.Str(allow_none=True)
    backgroundColor = fields.Str(allow_none=True)

    pros = fields.List(fields.Raw(), allow_none=True)
    cons = fields.List(fields.Raw(), allow_none=True)
    ingredients = fields.List(fields.Raw(), allow_none=True)
    highlights = fields.List(fields.Raw(), allow_none=True)
    bulletPoints = fields.List(fields.Raw(), allow_none=True)
    specifications = fields.List(fields.Dict(), allow_none=True)
    ingredientsList = fields.List(fields.Dict(), allow_none=True)
    faqItems = fields.List(fields.Nested(FAQItemSchema), allow_none=True)
    customFields = fields.List(fields.Nested(CustomFieldSchema), allow_none=True)

    class Meta:
        unknown = INCLUDE


class SectionPayloadSchema(Schema):
    title = fields.Str(allow_none=True)
    order = fields.Int(allow_none=True)
    # An empty section is allowed
    blocks = fields.List(fields.Nested(BlockPayloadSchema), load_default=[])

    class Meta:
        unknown = INCLUDE


class KeywordSchema(Schema):
    keyword = fields.Str(required=True, validate=_not_blank("Keyword is required"))
    searchVolume = fields.Int(allow_none=True)
    difficulty = fields.Str(allow_none=True)
    intent = fields.Str(allow_none=True)
    isPrimary = fields.Bool(allow_none=True)

    class Meta:
        unknown = INCLUDE


class ArticlePayloadSchema(Schema):
    title = fields.Str(
        required=True,
        validate=_not_blank("Title is required"),
        error_messages={"required": "Title is required"},
    )
    userId = fields.Str(
        required=True,
        validate=_not_blank("User ID is required"),
        error_messages={"required": "User ID is required"},
    )
    categoryId = fields.Str(allow_none=True)
    slug = fields.Str(allow_none=True)
    excerpt = fields.Str(allow_none=True)
    imageUrl = fields.Str(allow_none=True)
    publishDate = fields.DateTime(allow_none=True)
    metaDescription = fields.Str(allow_none=True)
    focusKeyword = fields.Str(allow_none=True)
    seoTitle = fields.Str(allow_none=True)
    seoScore = fields.Int(allow_none=True, validate=validate.Range(min=0, max=100))
    version = fields.Int(allow_none=True)
    keywords = fields.List(fields.Raw(), allow_none=True)
    sections = fields.List(
        fields.Nested(SectionPayloadSchema),
        required=True,
        validate=validate.Length(min=1, error="At least one section is required"),
        error_messages={"required": "At least one section is required"},
    )

    class Meta:
        unknown = INCLUDE


class ArticleUpdateSchema(ArticlePayloadSchema):
    # Ownership is kept on update
    userId = fields.Str(allow_none=True)


class SeoPayloadSchema(Schema):
    metaDescription = fields.Str(allow_none=True)
    focusKeyword = fields.Str(allow_none=True)
    seoTitle = fields.Str(allow_none=True)
    seoScore = fields.Int(allow_none=True, validate=validate.Range(min=0, max=100))
    keywords = fields.List(fields.Nested(KeywordSchema), allow_none=True)
    titleSuggestions = fields.List(fields.Str(), allow_none=True)
    contentSuggestions = fields.Dict(allow_none=True)
    readabilityScore = fields.Float(allow_none=True, validate=validate.Range(min=0, max=100))
    keywordDensity = fields.Float(allow_none=True, validate=validate.Range(min=0))

    class Meta:
        unknown = INCLUDE


def flatten_errors(messages, prefix=""):
    """Turn marshmallow's nested error dict into "path: message" strings."""
    result = []
    if isinstance(messages, dict):
        for key, value in messages.items():
            if key == "_schema":
                path = prefix
            else:
                path = f"{prefix}.{key}" if prefix else str(key)
            result.extend(flatten_errors(value, path))
    elif isinstance(messages, (list, tuple)):
        for message in messages:
            result.extend(flatten_errors(message, prefix))
    else:
        result.append(f"{prefix}: {messages}" if prefix else str(messages))
    return result
