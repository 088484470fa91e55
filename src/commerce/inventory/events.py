"""Domain events for the Variant aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Variant")
class StockAdjusted:
    """On-hand stock was corrected or restored."""

    __version__ = 1

    variant_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    delta = Integer(required=True)
    new_stock = Integer(required=True)
    reason = String(max_length=255)
    adjusted_at = DateTime(required=True)


@commerce.event(part_of="Variant")
class StockReserved:
    """Units were held for a checkout."""

    __version__ = 1

    variant_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_reserved = Integer(required=True)
    reserved_at = DateTime(required=True)


@commerce.event(part_of="Variant")
class StockReleased:
    """A hold was given back without selling the units."""

    __version__ = 1

    variant_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_reserved = Integer(required=True)
    released_at = DateTime(required=True)


@commerce.event(part_of="Variant")
class ReservationCommitted:
    """Reserved units left the shelf with a placed order."""

    __version__ = 1

    variant_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    new_reserved = Integer(required=True)
    committed_at = DateTime(required=True)
