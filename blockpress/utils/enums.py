from enum import Enum


class BlockType(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    IMAGE = "image"
    LIST = "list"
    QUOTE = "quote"
    CODE = "code"
    CTA = "cta"
    RATING = "rating"
    PROS_CONS = "pros-cons"
    INGREDIENTS = "ingredients"
    BULLET_LIST = "bullet-list"
    FAQ = "faq"
    SPECIFICATIONS = "specifications"

    @classmethod
    def values(cls):
        return [member.value for member in cls]


class ListType(str, Enum):
    ORDERED = "ordered"
    UNORDERED = "unordered"


class UserRole(str, Enum):
    ADMINISTRATOR = "ADMINISTRATOR"
    EDITOR = "EDITOR"


class ImagePreset(str, Enum):
    HERO = "hero"
    ARTICLE = "article"
    INGREDIENT = "ingredient"
    THUMBNAIL = "thumbnail"
    GENERAL = "general"


class ArticleWriteState(str, Enum):
    DRAFT_PAYLOAD = "DRAFT_PAYLOAD"
    VALIDATED = "VALIDATED"
    SLUG_RESOLVED = "SLUG_RESOLVED"
    PERSISTED = "PERSISTED"
    REJECTED = "REJECTED"
