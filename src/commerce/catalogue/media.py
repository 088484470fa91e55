"""MediaAsset aggregate: an uploaded image and its rendered sizes.

Uploading and resizing happen elsewhere; the engine only reads the URLs of
the sizes when it attaches media to products, categories and collections.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from commerce.domain import commerce
from commerce.shared.tenancy import TenantScopedRepository


@commerce.aggregate
class MediaAsset:
    tenant_id = Identifier(required=True)
    original_url = String(required=True, max_length=1000)
    hero_url = String(max_length=1000)
    card_url = String(max_length=1000)
    thumbnail_url = String(max_length=1000)
    square_url = String(max_length=1000)
    og_url = String(max_length=1000)
    alt_text = String(max_length=255)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    def image_dict(self, position: int = 0) -> dict:
        return {
            "mediaAssetId": str(self.id),
            "originalUrl": self.original_url,
            "heroUrl": self.hero_url,
            "cardUrl": self.card_url,
            "thumbnailUrl": self.thumbnail_url,
            "squareUrl": self.square_url,
            "ogUrl": self.og_url,
            "alt": self.alt_text,
            "position": position,
        }


@commerce.repository(part_of=MediaAsset)
class MediaAssetRepository(TenantScopedRepository):
    entity_label = "Media asset"
