"""Domain events for the Store aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from commerce.domain import commerce


@commerce.event(part_of="Store")
class StoreDetailsUpdated:
    """Name, description, status or storefront copy changed."""

    __version__ = 1

    tenant_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: changed field -> new value
    updated_at = DateTime(required=True)


@commerce.event(part_of="Store")
class StoreDesignUpdated:
    """One or more design token groups changed."""

    __version__ = 1

    tenant_id = Identifier(required=True)
    groups = String(required=True, max_length=500)  # Comma-separated group names
    updated_at = DateTime(required=True)


@commerce.event(part_of="Store")
class StoreSectionsUpdated:
    """Homepage sections were toggled, reordered or reconfigured."""

    __version__ = 1

    tenant_id = Identifier(required=True)
    sections = Text(required=True)  # JSON: list of {type, visible, config}
    updated_at = DateTime(required=True)
