"""Store opening — command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.exceptions import ValidationFailed
from commerce.store.store import Store


@commerce.command(part_of="Store")
class OpenStore:
    """Create the storefront of a new tenant."""

    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    slug = String(max_length=120)
    description = Text()
    whatsapp_number = String(max_length=20)
    gstin = String(max_length=15)
    business_state = String(max_length=100)


@commerce.command_handler(part_of=Store)
class StoreOpeningHandler:
    @handle(OpenStore)
    def open_store(self, command):
        repo = current_domain.repository_for(Store)
        try:
            repo.get(command.tenant_id)
        except ObjectNotFoundError:
            pass
        else:
            raise ValidationFailed(f"Tenant {command.tenant_id} already has a store", field="tenant_id")

        details = {
            key: value
            for key, value in command.to_dict().items()
            if key in ("description", "whatsapp_number", "gstin", "business_state") and value is not None
        }
        store = Store.open(command.tenant_id, command.name, slug=command.slug, **details)
        repo.add(store)
        return str(store.tenant_id)
