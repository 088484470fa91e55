"""Stock ledger — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String

from commerce.domain import commerce
from commerce.inventory.ledger import InventoryLedger
from commerce.inventory.variant import Variant


@commerce.command(part_of="Variant")
class AdjustStock:
    """Correct on-hand stock by a signed number of units."""

    tenant_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    adjustment = Integer(required=True)
    reason = String(max_length=255)


@commerce.command(part_of="Variant")
class ReserveStock:
    """Hold units of a variant for a checkout."""

    tenant_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="Variant")
class ReleaseStock:
    """Give back held units of a variant."""

    tenant_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="Variant")
class CommitReservation:
    """Take held units off the shelf for a placed order."""

    tenant_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command_handler(part_of=Variant)
class StockLedgerHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        variant = InventoryLedger().adjust_stock(
            command.tenant_id,
            command.variant_id,
            command.adjustment,
            reason=command.reason,
        )
        return variant.to_dict()

    @handle(ReserveStock)
    def reserve_stock(self, command):
        variant = InventoryLedger().reserve_stock(command.tenant_id, command.variant_id, command.quantity)
        return variant.to_dict()

    @handle(ReleaseStock)
    def release_stock(self, command):
        variant = InventoryLedger().release_stock(command.tenant_id, command.variant_id, command.quantity)
        return variant.to_dict()

    @handle(CommitReservation)
    def commit_reservation(self, command):
        variant = InventoryLedger().commit_reservation(command.tenant_id, command.variant_id, command.quantity)
        return variant.to_dict()
