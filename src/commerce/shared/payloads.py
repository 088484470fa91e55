"""Helpers shared by handlers that translate external payloads.

External payloads use camelCase keys; aggregates use snake_case fields.
"""

import re
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payload models that accept camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def changes(self) -> dict:
        """Fields the caller actually supplied, keyed by snake_case name."""
        return self.model_dump(exclude_unset=True)


def slugify(text: str, suffix: bool = True) -> str:
    """Lowercase, hyphen-separated slug; a short random suffix keeps it unique."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "item"
    if suffix:
        slug = f"{slug}-{uuid4().hex[:6]}"
    return slug
