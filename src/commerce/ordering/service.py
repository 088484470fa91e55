"""Order lifecycle service.

Creating an order prices it once, numbers it, persists it, takes the sold
units off the inventory ledger and redeems the discount code. Status
updates go through the state machine; cancellation and RTO put the units
back on the shelf.
"""

from collections import OrderedDict
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from commerce.config import setting
from commerce.exceptions import InsufficientStock, NotFound, PersistenceError, ValidationFailed
from commerce.inventory.ledger import InventoryLedger
from commerce.ordering.order import Order
from commerce.ordering.transitions import REVENUE_STATUSES, STOCK_RESTORING_STATUSES, OrderStatus
from commerce.pricing.discount import Discount
from commerce.pricing.engine import calculate_discount
from commerce.pricing.tax import calculate_order_tax
from commerce.shared.money import round_currency
from commerce.shared.periods import as_aware, period_start
from commerce.shared.tenancy import store_errors
from commerce.sink.envelope import publish_event
from commerce.store.store import Store

logger = structlog.get_logger(__name__)


class OrderService:
    def __init__(self):
        self.orders = current_domain.repository_for(Order)
        self.discounts = current_domain.repository_for(Discount)
        self.ledger = InventoryLedger()

    # -------------------------------------------------------------------
    # Numbering
    # -------------------------------------------------------------------
    def generate_order_number(self, tenant_id, now: datetime | None = None) -> str:
        """``PREFIX-YYYYMM-#####``, sequential per tenant per calendar month."""
        now = now or datetime.now(UTC)
        month = now.strftime("%Y%m")
        sequence = self.orders.count_in_month(tenant_id, month) + 1
        return f"{setting('ORDER_NUMBER_PREFIX')}-{month}-{sequence:05d}"

    def _store_state(self, tenant_id) -> str | None:
        try:
            return current_domain.repository_for(Store).get_for_tenant(tenant_id).business_state
        except NotFound:
            return None

    # -------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------
    def create_order(
        self,
        tenant_id,
        buyer_phone: str,
        line_items: list[dict],
        buyer_name: str | None = None,
        buyer_email: str | None = None,
        shipping_address: dict | None = None,
        billing_address: dict | None = None,
        payment_method: str = "cod",
        discount_code: str | None = None,
        tax_amount: float = 0.0,
        shipping_cost: float = 0.0,
        apply_gst: bool = False,
        seller_state: str | None = None,
        notes: str | None = None,
    ) -> Order:
        """Place an order for ``line_items``.

        Each line item is a dict with product_id, name, quantity, unit_price
        and optionally variant_id, sku, hsn_code, gst_rate, attributes.
        With ``apply_gst`` the tax is computed from the line GST rates instead
        of taken from ``tax_amount``, the buyer's state coming from
        ``shipping_address``.
        """
        if not line_items:
            raise ValidationFailed("An order needs at least one line item", field="line_items")
        for item in line_items:
            if item.get("quantity", 0) <= 0:
                raise ValidationFailed("Quantity must be a positive whole number", field="quantity")
            if item.get("unit_price", -1) < 0:
                raise ValidationFailed("Unit price cannot be negative", field="unit_price")

        subtotal = round_currency(sum(item["unit_price"] * item["quantity"] for item in line_items))

        discount = None
        discount_amount = 0.0
        if discount_code:
            discount = self.discounts.find_by_code(tenant_id, discount_code)
            if discount is not None and discount.is_active:
                discount_amount = calculate_discount(discount, subtotal)

        if apply_gst:
            buyer_state = (shipping_address or {}).get("state")
            seller_state = seller_state or self._store_state(tenant_id)
            tax_amount = calculate_order_tax(line_items, seller_state, buyer_state, discount_amount).total_tax

        total = round_currency(max(subtotal - discount_amount + tax_amount + shipping_cost, 0.0))

        order = Order.place(
            tenant_id=tenant_id,
            order_number=self.generate_order_number(tenant_id),
            buyer_phone=buyer_phone,
            buyer_name=buyer_name,
            buyer_email=buyer_email,
            shipping_address=shipping_address,
            billing_address=billing_address,
            items=line_items,
            pricing={
                "subtotal": subtotal,
                "discount_amount": discount_amount,
                "tax_amount": round_currency(tax_amount),
                "shipping_cost": round_currency(shipping_cost),
                "total": total,
            },
            payment_method=payment_method,
            discount_code=discount.code if discount is not None and discount_amount > 0 else None,
            notes=notes,
        )
        with store_errors("save order", tenant_id=str(tenant_id)):
            self.orders.add(order)

        self._commit_stock(tenant_id, order)

        if discount is not None and discount_amount > 0:
            self._redeem(tenant_id, discount)

        logger.info(
            "order_created",
            tenant_id=str(tenant_id),
            order_id=str(order.id),
            order_number=order.order_number,
            total=order.total,
        )
        publish_event(
            "order.created",
            tenant_id,
            {
                "orderId": str(order.id),
                "orderNumber": order.order_number,
                "buyerPhone": order.buyer_phone,
                "buyerName": order.buyer_name,
                "total": order.total,
                "paymentMethod": order.payment_method,
                "status": order.status,
                "lineItems": order.line_item_dicts(),
            },
            source="ordering",
        )
        return order

    def _redeem(self, tenant_id, discount: Discount):
        discount.redeem()
        try:
            with store_errors("save discount", discount_id=str(discount.id)):
                self.discounts.add(discount)
        except PersistenceError as exc:
            logger.warning("discount_redeem_failed", tenant_id=str(tenant_id), code=discount.code, error=exc.message)

    def _variant_quantities(self, order: Order) -> "OrderedDict[str, int]":
        quantities = OrderedDict()
        for item in order.line_items:
            if item.variant_id:
                key = str(item.variant_id)
                quantities[key] = quantities.get(key, 0) + item.quantity
        return quantities

    def _commit_stock(self, tenant_id, order: Order):
        """Take sold units off the ledger. A failing line is logged and skipped."""
        for variant_id, quantity in self._variant_quantities(order).items():
            try:
                self.ledger.commit_reservation(tenant_id, variant_id, quantity)
            except (InsufficientStock, NotFound, PersistenceError) as exc:
                logger.warning(
                    "order_stock_commit_failed",
                    tenant_id=str(tenant_id),
                    order_id=str(order.id),
                    variant_id=variant_id,
                    quantity=quantity,
                    error=str(exc),
                )

    def _restore_stock(self, tenant_id, order: Order):
        """Put units back on the shelf. A failing line is logged and skipped."""
        for variant_id, quantity in self._variant_quantities(order).items():
            try:
                self.ledger.adjust_stock(tenant_id, variant_id, quantity, reason=f"order {order.order_number} {order.status}")
            except (InsufficientStock, NotFound, PersistenceError) as exc:
                logger.warning(
                    "order_stock_restore_failed",
                    tenant_id=str(tenant_id),
                    order_id=str(order.id),
                    variant_id=variant_id,
                    quantity=quantity,
                    error=str(exc),
                )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def update_status(self, tenant_id, order_id, status: str, notes: str | None = None, **details) -> Order:
        """Move an order to ``status``. Raises InvalidTransition when not allowed."""
        order = self.orders.get_for_tenant(tenant_id, order_id)
        previous = order.status

        order.transition_to(status, notes=notes, **details)
        with store_errors("save order", tenant_id=str(tenant_id)):
            self.orders.add(order)

        if status in STOCK_RESTORING_STATUSES:
            self._restore_stock(tenant_id, order)

        logger.info(
            "order_status_changed",
            tenant_id=str(tenant_id),
            order_id=str(order.id),
            previous_status=previous,
            new_status=status,
        )
        publish_event(
            f"order.{status}",
            tenant_id,
            {
                "orderId": str(order.id),
                "orderNumber": order.order_number,
                "previousStatus": previous,
                "status": order.status,
                "fulfillmentStatus": order.fulfillment_status,
                "buyerPhone": order.buyer_phone,
                "trackingNumber": order.tracking_number,
                "trackingUrl": order.tracking_url,
                "total": order.total,
            },
            source="ordering",
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def list_orders(self, tenant_id, status: str | None = None, period: str | None = None, limit: int | None = None) -> list[Order]:
        """Newest first, optionally narrowed by status and period."""
        filters = {"status": status} if status else {}
        orders = self.orders.list_for_tenant(tenant_id, **filters)

        start = period_start(period)
        if start is not None:
            orders = [order for order in orders if order.created_at and as_aware(order.created_at) >= start]

        orders.sort(key=lambda order: as_aware(order.created_at) or datetime.min.replace(tzinfo=UTC), reverse=True)
        return orders[:limit] if limit else orders

    def revenue_summary(self, tenant_id, period: str = "today") -> dict:
        orders = [order for order in self.list_orders(tenant_id, period=period) if order.status in REVENUE_STATUSES]

        total_revenue = round_currency(sum(order.total for order in orders))
        by_payment_method: dict[str, float] = {}
        for order in orders:
            method = order.payment_method or "unknown"
            by_payment_method[method] = round_currency(by_payment_method.get(method, 0.0) + order.total)

        return {
            "period": period,
            "totalRevenue": total_revenue,
            "orderCount": len(orders),
            "avgOrderValue": round_currency(total_revenue / len(orders)) if orders else 0.0,
            "byPaymentMethod": by_payment_method,
        }

    def pending_count(self, tenant_id) -> int:
        pending = {
            OrderStatus.CREATED.value,
            OrderStatus.PAYMENT_PENDING.value,
            OrderStatus.PAID.value,
            OrderStatus.COD_CONFIRMED.value,
            OrderStatus.COD_OTP_VERIFIED.value,
            OrderStatus.PROCESSING.value,
        }
        return sum(1 for order in self.orders.list_for_tenant(tenant_id) if order.status in pending)
