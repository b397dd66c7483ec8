"""Pre-built structured output schemas.

Each template is a canonical JSON Schema describing a common extraction
target. ``get_schema_template`` hands out deep copies so callers can modify
the result freely.
"""

import copy
from enum import Enum
from typing import Any

from browser_tasks.logging import get_logger

logger = get_logger(__name__)


class SchemaTemplate(str, Enum):
    """Named structured output templates.

    ``CUSTOM`` means no template: the caller supplies a raw schema.
    """

    PRODUCT = "product"
    CONTACT = "contact"
    ARTICLE = "article"
    COMPANY = "company"
    CUSTOM = "custom"


DEFAULT_TEMPLATE = SchemaTemplate.PRODUCT

_STRING = {"type": "string"}

_TEMPLATES: dict[str, dict[str, Any]] = {
    SchemaTemplate.PRODUCT.value: {
        "type": "object",
        "properties": {
            "productName": _STRING,
            "price": _STRING,
            "description": _STRING,
            "inStock": {"type": "boolean"},
            "images": {"type": "array", "items": _STRING},
            "specifications": {"type": "object"},
            "rating": {"type": "number"},
            "reviews": {"type": "number"},
        },
        "required": ["productName", "price"],
    },
    SchemaTemplate.CONTACT.value: {
        "type": "object",
        "properties": {
            "companyName": _STRING,
            "email": _STRING,
            "phone": _STRING,
            "address": _STRING,
            "website": _STRING,
            "socialMedia": {
                "type": "object",
                "properties": {
                    "twitter": _STRING,
                    "linkedin": _STRING,
                    "facebook": _STRING,
                },
            },
        },
        "required": ["companyName"],
    },
    SchemaTemplate.ARTICLE.value: {
        "type": "object",
        "properties": {
            "title": _STRING,
            "author": _STRING,
            "publishDate": _STRING,
            "content": _STRING,
            "summary": _STRING,
            "tags": {"type": "array", "items": _STRING},
            "readTime": _STRING,
            "category": _STRING,
        },
        "required": ["title", "content"],
    },
    SchemaTemplate.COMPANY.value: {
        "type": "object",
        "properties": {
            "companyName": _STRING,
            "industry": _STRING,
            "description": _STRING,
            "foundedYear": _STRING,
            "headquarters": _STRING,
            "employees": _STRING,
            "revenue": _STRING,
            "website": _STRING,
            "contactInfo": {
                "type": "object",
                "properties": {
                    "email": _STRING,
                    "phone": _STRING,
                    "address": _STRING,
                },
            },
            "keyPeople": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": _STRING,
                        "position": _STRING,
                    },
                },
            },
        },
        "required": ["companyName", "description"],
    },
}

TEMPLATE_NAMES = tuple(_TEMPLATES)


def get_schema_template(name: str) -> dict[str, Any]:
    """Return a copy of the named template schema.

    Unknown names fall back to the product template. This permissive default
    is intentional; a warning is logged so the fallback is visible.

    Args:
        name: Template name, e.g. ``"article"``

    Returns:
        Deep copy of the template's JSON Schema
    """
    key = name.value if isinstance(name, SchemaTemplate) else str(name).strip().lower()
    template = _TEMPLATES.get(key)
    if template is None:
        logger.warning(
            f"Unknown schema template '{name}', falling back to "
            f"'{DEFAULT_TEMPLATE.value}'"
        )
        template = _TEMPLATES[DEFAULT_TEMPLATE.value]
    return copy.deepcopy(template)


def describe_template(name: str) -> str:
    """Comma-separated list of the top-level fields a template extracts."""
    return ", ".join(get_schema_template(name)["properties"])
