"""Commerce domain: tenant storefronts driven by conversational actions.

A single bounded context holding the store configuration, catalogue,
inventory ledger, discounts and orders of every tenant. Proposed actions
are validated against the business rules here before they are applied.
"""

from protean.domain import Domain

commerce = Domain(name="commerce")
