"""Application tests for running action batches against a tenant's store."""

import pytest
from protean import current_domain

from commerce.actions.executor import execute_action, execute_actions, run_actions
from commerce.actions.models import Action
from commerce.actions.registry import registered_types
from commerce.actions.snapshot import build_snapshot
from commerce.catalogue.category import Category
from commerce.catalogue.collection import Collection
from commerce.catalogue.media import MediaAsset
from commerce.catalogue.membership import ProductCategory
from commerce.catalogue.product import Product
from commerce.inventory.variant import Variant
from commerce.ordering.service import OrderService
from commerce.store.contrast import meets_contrast
from commerce.store.store import Store


def _create_product(name="Block Print Saree", price=2500, **extra):
    return Action(type="product.create", payload={"name": name, "price": price, **extra})


def _run(tenant_id, *actions, snapshot=None):
    return run_actions(tenant_id, list(actions), snapshot)


def _products(tenant_id):
    return current_domain.repository_for(Product).list_for_tenant(tenant_id)


def _line(product, variant, quantity=1):
    return {
        "product_id": str(product.id),
        "variant_id": str(variant.id),
        "name": product.name,
        "quantity": quantity,
        "unit_price": product.price,
    }


class TestBatchSemantics:
    def test_rejected_action_does_not_stop_the_batch(self, tenant_id):
        results = _run(
            tenant_id,
            _create_product("Saree"),
            _create_product("Broken", price=0),
            _create_product("Dupatta", price=800),
        )
        assert [r.success for r in results] == [True, False, True]
        assert results[1].error == "Price must be greater than ₹0."
        assert sorted(p.name for p in _products(tenant_id)) == ["Dupatta", "Saree"]

    def test_one_result_per_action_in_input_order(self, tenant_id):
        actions = [_create_product(f"Item {i}", price=100 + i) for i in range(4)]
        results = execute_actions(tenant_id, actions)
        assert len(results) == 4
        assert [r.action for r in results] == actions
        assert [r.data["name"] for r in results] == ["Item 0", "Item 1", "Item 2", "Item 3"]

    def test_unknown_action_type_fails_alone(self, tenant_id):
        results = execute_actions(tenant_id, [Action(type="product.teleport"), _create_product()])
        assert results[0].success is False
        assert results[0].error == "Unknown action type: product.teleport"
        assert results[1].success is True

    def test_malformed_payload_is_reported(self, tenant_id):
        result = execute_action(tenant_id, Action(type="product.create", payload={"price": 100}))
        assert result.success is False
        assert result.error.startswith("Invalid payload for product.create")

    def test_missing_record_is_reported(self, tenant_id):
        result = execute_action(tenant_id, Action(type="product.publish", payload={"productId": "missing"}))
        assert result.success is False
        assert result.error == "Product missing not found"

    def test_empty_batch_yields_no_results(self, tenant_id):
        assert run_actions(tenant_id, []) == []

    def test_malformed_fonts_fail_alone(self, tenant_id, store):
        results = _run(
            tenant_id,
            _create_product("Saree"),
            Action(type="store.update_fonts", payload={"fonts": "Inter"}),
            _create_product("Dupatta", price=800),
        )
        assert [r.success for r in results] == [True, False, True]
        assert results[1].error == "Fonts must name a display and a body font."

    def test_non_numeric_compare_at_price_fails_alone(self, tenant_id):
        results = _run(
            tenant_id,
            _create_product("Mug", price=100, compareAtPrice="150"),
            _create_product("Dupatta", price=800),
        )
        assert [r.success for r in results] == [False, True]
        assert results[0].error == "Compare-at price must be a number."

    def test_non_object_design_fails_alone(self, tenant_id, store):
        results = _run(
            tenant_id,
            Action(type="store.update_design_bulk", payload={"design": ["palette"]}),
            Action(type="store.update_name", payload={"name": "Priya Weaves"}),
        )
        assert [r.success for r in results] == [False, True]

    def test_crashing_check_is_reported_as_a_failure(self, tenant_id, monkeypatch):
        def explode(action, snapshot=None):
            raise RuntimeError("checker broke")

        monkeypatch.setattr("commerce.actions.validators.VALIDATORS", (explode,))
        results = _run(tenant_id, _create_product("Saree"), _create_product("Dupatta"))
        assert [r.success for r in results] == [False, False]
        assert results[0].error == "checker broke"
        assert _products(tenant_id) == []

    def test_store_failure_aborts_only_that_action(self, tenant_id, store, variant, monkeypatch):
        def unavailable(self, record):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(type(current_domain.repository_for(Variant)), "add", unavailable)
        results = _run(
            tenant_id,
            Action(type="stock.update", payload={"variantId": str(variant.id), "adjustment": 5}),
            Action(type="store.update_name", payload={"name": "Priya Weaves"}),
        )
        assert [r.success for r in results] == [False, True]
        assert results[0].error == "Could not save variant: connection reset"
        assert current_domain.repository_for(Variant).get(variant.id).stock == 10


class TestValidationThenExecution:
    def test_unreadable_palette_is_fixed_before_saving(self, tenant_id, store):
        results = _run(
            tenant_id,
            Action(type="store.update_palette", payload={"palette": {"background": "#FFFFFF", "text": "#FFFFFF"}}),
        )
        assert results[0].success
        saved_text = current_domain.repository_for(Store).get_for_tenant(tenant_id).palette.text
        assert saved_text != "#FFFFFF"
        assert meets_contrast(saved_text, "#FFFFFF")
        assert results[0].data["palette"]["text"] == saved_text

    def test_fixed_action_is_reported_in_result(self, tenant_id, store):
        results = _run(
            tenant_id,
            Action(type="store.update_palette", payload={"palette": {"background": "#FFFFFF", "text": "#FAFAFA"}}),
        )
        assert results[0].action.payload["palette"]["text"] != "#FAFAFA"

    def test_steep_percentage_cut_never_reaches_the_store(self, tenant_id, product):
        results = _run(
            tenant_id,
            Action(type="product.bulk_update_price", payload={"adjustmentType": "percentage", "adjustmentValue": -150}),
        )
        assert results[0].success is False
        assert results[0].error == "Can't reduce prices by 100% or more. Try a smaller percentage."
        assert current_domain.repository_for(Product).get(product.id).price == 1200.0

    def test_handler_also_guards_steep_percentage_cut(self, tenant_id, product):
        result = execute_action(
            tenant_id,
            Action(type="product.bulk_update_price", payload={"adjustmentType": "percentage", "adjustmentValue": -100}),
        )
        assert result.success is False

    def test_order_transition_checked_against_snapshot(self, tenant_id, product, variant):
        service = OrderService()
        order = service.create_order(tenant_id, "+919800000001", [_line(product, variant)])
        service.update_status(tenant_id, order.id, "cancelled")

        results = _run(
            tenant_id,
            Action(type="order.ship", payload={"orderId": str(order.id)}),
            snapshot=build_snapshot(tenant_id),
        )
        assert results[0].success is False
        assert "can't be changed" in results[0].error

    def test_stale_snapshot_is_caught_by_the_state_machine(self, tenant_id, product):
        service = OrderService()
        order = service.create_order(tenant_id, "+919800000001", [_line(product, _variant_for(tenant_id, product))])
        for status in ("payment_pending", "paid", "processing"):
            service.update_status(tenant_id, order.id, status)
        snapshot = build_snapshot(tenant_id)
        assert snapshot.find_order(str(order.id)).status == "processing"

        service.update_status(tenant_id, order.id, "cancelled")

        results = _run(tenant_id, Action(type="order.ship", payload={"orderId": str(order.id)}), snapshot=snapshot)
        assert results[0].success is False
        assert results[0].error.startswith("Invalid transition: cancelled → shipped")


def _variant_for(tenant_id, product):
    variant = Variant(tenant_id=tenant_id, product_id=str(product.id), stock=5)
    current_domain.repository_for(Variant).add(variant)
    return variant


class TestProductActions:
    def test_create_defaults_to_draft(self, tenant_id):
        result = execute_action(tenant_id, _create_product(tags=["cotton"]))
        assert result.data["status"] == "draft"
        assert result.data["tags"] == ["cotton"]

    def test_create_publishes_event(self, tenant_id, sink):
        execute_action(tenant_id, _create_product())
        assert len(sink.of_type("product.created")) == 1

    def test_create_with_category_links_it(self, tenant_id):
        category = Category(tenant_id=tenant_id, name="Sarees", slug="sarees")
        current_domain.repository_for(Category).add(category)

        result = execute_action(tenant_id, _create_product(categoryId=str(category.id)))
        links = current_domain.repository_for(ProductCategory).for_category(tenant_id, category.id)
        assert [str(link.product_id) for link in links] == [result.data["id"]]
        assert links[0].is_primary is True

    def test_update_rejects_compare_at_below_price(self, tenant_id, product):
        result = execute_action(
            tenant_id,
            Action(type="product.update", payload={"productId": str(product.id), "compareAtPrice": 1000}),
        )
        assert result.success is False

    def test_unvalidated_zero_price_is_refused_by_the_product(self, tenant_id):
        result = execute_action(tenant_id, _create_product("Free Diya", price=0))
        assert result.success is False
        assert "Price must be greater than ₹0." in result.error
        assert _products(tenant_id) == []

    def test_unvalidated_price_above_ceiling_is_refused(self, tenant_id):
        result = execute_action(tenant_id, _create_product("Gold Necklace", price=1_000_001))
        assert result.success is False
        assert _products(tenant_id) == []

    def test_unvalidated_compare_at_below_price_is_refused(self, tenant_id):
        result = execute_action(tenant_id, _create_product("Mug", price=500, compareAtPrice=400))
        assert result.success is False
        assert "Compare-at price must be higher than the selling price." in result.error

    def test_update_can_raise_price_past_the_old_compare_at(self, tenant_id):
        created = execute_action(tenant_id, _create_product("Mug", price=1200, compareAtPrice=1500)).data
        result = execute_action(
            tenant_id,
            Action(
                type="product.update",
                payload={"productId": created["id"], "price": 1800, "compareAtPrice": 2000},
            ),
        )
        assert result.success is True
        assert result.data["price"] == 1800
        assert result.data["compareAtPrice"] == 2000

    def test_bulk_increase_skips_products_it_would_push_over_the_ceiling(self, tenant_id, product):
        execute_action(tenant_id, _create_product("Silk Saree", price=950_000))
        result = execute_action(
            tenant_id,
            Action(type="product.bulk_update_price", payload={"adjustmentType": "percentage", "adjustmentValue": 10}),
        )
        assert result.data == {"updated": 1, "total": 2}
        assert current_domain.repository_for(Product).get(product.id).price == 1320.0

    def test_publish_and_archive(self, tenant_id):
        created = execute_action(tenant_id, _create_product()).data
        published = execute_action(tenant_id, Action(type="product.publish", payload={"productId": created["id"]}))
        assert published.data["status"] == "active"
        archived = execute_action(tenant_id, Action(type="product.archive", payload={"productId": created["id"]}))
        assert archived.data["status"] == "archived"

    def test_bulk_price_increase(self, tenant_id, product):
        result = execute_action(
            tenant_id,
            Action(type="product.bulk_update_price", payload={"adjustmentType": "percentage", "adjustmentValue": 10}),
        )
        assert result.data == {"updated": 1, "total": 1}
        assert current_domain.repository_for(Product).get(product.id).price == 1320.0

    def test_bulk_flat_cut_skips_products_it_would_zero(self, tenant_id, product):
        execute_action(tenant_id, _create_product("Bangle", price=150))
        result = execute_action(
            tenant_id,
            Action(type="product.bulk_update_price", payload={"adjustmentType": "flat", "adjustmentValue": -200}),
        )
        assert result.data == {"updated": 1, "total": 2}
        assert current_domain.repository_for(Product).get(product.id).price == 1000.0

    def test_bulk_publish_only_touches_listed_drafts(self, tenant_id):
        first = execute_action(tenant_id, _create_product("One")).data
        execute_action(tenant_id, _create_product("Two"))
        result = execute_action(tenant_id, Action(type="product.bulk_publish", payload={"productIds": [first["id"]]}))
        assert result.data == {"published": 1}

    def test_delete_removes_product(self, tenant_id, product):
        result = execute_action(tenant_id, Action(type="product.delete", payload={"productId": str(product.id)}))
        assert result.data["deleted"] is True
        assert _products(tenant_id) == []

    def test_other_tenant_cannot_touch_product(self, product):
        result = execute_action("tenant-other", Action(type="product.delete", payload={"productId": str(product.id)}))
        assert result.success is False
        assert current_domain.repository_for(Product).get(product.id) is not None


class TestVariantActions:
    def test_create_variant(self, tenant_id, product):
        result = execute_action(
            tenant_id,
            Action(
                type="variant.create",
                payload={"productId": str(product.id), "attributes": {"size": "L"}, "stock": 4, "sku": "KURTA-L"},
            ),
        )
        assert result.success
        assert result.data["stock"] == 4
        assert result.data["available"] == 4
        assert result.data["attributes"] == {"size": "L"}

    def test_create_variant_for_unknown_product_fails(self, tenant_id):
        result = execute_action(tenant_id, Action(type="variant.create", payload={"productId": "nope", "stock": 1}))
        assert result.success is False

    def test_delete_unreferenced_variant(self, tenant_id, variant):
        result = execute_action(tenant_id, Action(type="variant.delete", payload={"variantId": str(variant.id)}))
        assert result.success

    def test_delete_blocked_while_orders_reference_it(self, tenant_id, product, variant):
        OrderService().create_order(tenant_id, "+919800000001", [_line(product, variant)])
        result = execute_action(tenant_id, Action(type="variant.delete", payload={"variantId": str(variant.id)}))
        assert result.success is False
        assert "existing orders" in result.error

    def test_stock_update(self, tenant_id, variant):
        result = execute_action(
            tenant_id,
            Action(type="stock.update", payload={"variantId": str(variant.id), "adjustment": 5, "reason": "restock"}),
        )
        assert result.data["stock"] == 15

    def test_stock_update_cannot_go_negative(self, tenant_id, variant):
        result = execute_action(
            tenant_id, Action(type="stock.update", payload={"variantId": str(variant.id), "adjustment": -20})
        )
        assert result.success is False
        assert current_domain.repository_for(Variant).get(variant.id).stock == 10


class TestDiscountActions:
    def test_create_and_deactivate(self, tenant_id):
        created = execute_action(
            tenant_id, Action(type="discount.create", payload={"code": "diwali", "type": "percentage", "value": 15})
        )
        assert created.data["code"] == "DIWALI"
        assert created.data["isActive"] is True

        deactivated = execute_action(
            tenant_id, Action(type="discount.deactivate", payload={"discountId": created.data["id"]})
        )
        assert deactivated.data["isActive"] is False

    def test_duplicate_code_is_rejected(self, tenant_id):
        action = Action(type="discount.create", payload={"code": "DIWALI", "type": "flat", "value": 100})
        results = execute_actions(tenant_id, [action, action])
        assert [r.success for r in results] == [True, False]
        assert "already exists" in results[1].error

    def test_non_positive_value_is_rejected(self, tenant_id):
        result = execute_action(
            tenant_id, Action(type="discount.create", payload={"code": "ZERO", "type": "flat", "value": 0})
        )
        assert result.success is False


class TestCatalogueActions:
    def test_category_lifecycle(self, tenant_id, product):
        parent = execute_action(tenant_id, Action(type="category.create", payload={"name": "Clothing"})).data
        child = execute_action(
            tenant_id, Action(type="category.create", payload={"name": "Kurtas", "parentId": parent["id"]})
        ).data
        assert child["parentId"] == parent["id"]

        assigned = execute_action(
            tenant_id,
            Action(type="category.assign_product", payload={"productId": str(product.id), "categoryIds": [child["id"]]}),
        )
        assert assigned.data == {"assigned": 1}
        assert str(current_domain.repository_for(Product).get(product.id).category_id) == child["id"]

        execute_action(tenant_id, Action(type="category.delete", payload={"categoryId": child["id"]}))
        assert current_domain.repository_for(Product).get(product.id).category_id is None

    def test_category_cannot_parent_itself(self, tenant_id):
        category = execute_action(tenant_id, Action(type="category.create", payload={"name": "Loop"})).data
        result = execute_action(
            tenant_id,
            Action(type="category.update", payload={"categoryId": category["id"], "parentId": category["id"]}),
        )
        assert result.success is False

    def test_collection_membership_is_idempotent(self, tenant_id, product):
        collection = execute_action(
            tenant_id, Action(type="collection.create", payload={"name": "Festive Picks", "isFeatured": True})
        ).data
        add = Action(
            type="collection.add_products",
            payload={"collectionId": collection["id"], "productIds": [str(product.id)]},
        )
        first, second = execute_actions(tenant_id, [add, add])
        assert first.data == {"added": 1, "productCount": 1}
        assert second.data == {"added": 0, "productCount": 1}

        removed = execute_action(
            tenant_id,
            Action(
                type="collection.remove_products",
                payload={"collectionId": collection["id"], "productIds": [str(product.id)]},
            ),
        )
        assert removed.data == {"removed": 1, "productCount": 0}

    def test_set_product_images_keeps_order(self, tenant_id, product):
        repo = current_domain.repository_for(MediaAsset)
        first = MediaAsset(tenant_id=tenant_id, original_url="https://cdn.example/1.jpg")
        second = MediaAsset(tenant_id=tenant_id, original_url="https://cdn.example/2.jpg", alt_text="Back view")
        repo.add(first)
        repo.add(second)

        result = execute_action(
            tenant_id,
            Action(
                type="media.set_product_images",
                payload={"productId": str(product.id), "mediaAssetIds": [str(second.id), str(first.id)]},
            ),
        )
        images = result.data["images"]
        assert [image["position"] for image in images] == [0, 1]
        assert images[0]["alt"] == "Back view"
        assert images[1]["alt"] == "Indigo Kurta"

    def test_collection_banner_uses_hero_rendition(self, tenant_id):
        asset = MediaAsset(
            tenant_id=tenant_id,
            original_url="https://cdn.example/banner.jpg",
            hero_url="https://cdn.example/banner-hero.jpg",
        )
        current_domain.repository_for(MediaAsset).add(asset)
        collection = Collection(tenant_id=tenant_id, name="Monsoon", slug="monsoon")
        current_domain.repository_for(Collection).add(collection)

        result = execute_action(
            tenant_id,
            Action(
                type="media.set_collection_banner",
                payload={"collectionId": str(collection.id), "mediaAssetId": str(asset.id)},
            ),
        )
        assert result.data["bannerImageUrl"] == "https://cdn.example/banner-hero.jpg"


class TestStoreActions:
    def test_rename_store(self, tenant_id, store):
        result = execute_action(tenant_id, Action(type="store.update_name", payload={"name": "Priya Weaves"}))
        assert result.data["name"] == "Priya Weaves"

    def test_layout_token(self, tenant_id, store):
        result = execute_action(tenant_id, Action(type="store.update_layout", payload={"layout": "editorial"}))
        assert result.data["layout"] == "editorial"

    def test_bulk_design_update(self, tenant_id, store):
        result = execute_action(
            tenant_id,
            Action(
                type="store.update_design_bulk",
                payload={"design": {"radius": "large", "palette": {"primary": "#8B0000"}}},
            ),
        )
        assert result.data["radius"] == "large"
        assert result.data["palette"]["primary"] == "#8B0000"

    def test_invalid_token_value_fails(self, tenant_id, store):
        result = execute_action(tenant_id, Action(type="store.update_radius", payload={"radius": "huge"}))
        assert result.success is False

    def test_design_action_without_store_fails(self, tenant_id):
        result = execute_action(tenant_id, Action(type="store.update_layout", payload={"layout": "editorial"}))
        assert result.success is False

    def test_section_toggle(self, tenant_id, store):
        result = execute_action(
            tenant_id, Action(type="section.toggle", payload={"sectionType": "testimonials", "visible": False})
        )
        section = next(s for s in result.data if s["type"] == "testimonials")
        assert section["visible"] is False


class TestOrderActions:
    def test_ship_records_tracking(self, tenant_id, product, variant):
        service = OrderService()
        order = service.create_order(tenant_id, "+919800000001", [_line(product, variant)])
        for status in ("payment_pending", "paid", "processing"):
            service.update_status(tenant_id, order.id, status)

        result = execute_action(
            tenant_id,
            Action(type="order.ship", payload={"orderId": str(order.id), "trackingNumber": "AWB42"}),
        )
        assert result.data["status"] == "shipped"
        assert result.data["trackingNumber"] == "AWB42"
        assert result.data["fulfillmentStatus"] == "partially_fulfilled"

    def test_cancel_restores_stock(self, tenant_id, product, variant):
        order = OrderService().create_order(tenant_id, "+919800000001", [_line(product, variant, quantity=3)])
        result = execute_action(
            tenant_id, Action(type="order.cancel", payload={"orderId": str(order.id), "reason": "duplicate"})
        )
        assert result.data["status"] == "cancelled"
        assert current_domain.repository_for(Variant).get(variant.id).stock == 10

    def test_invalid_status_change_fails(self, tenant_id, product, variant):
        order = OrderService().create_order(tenant_id, "+919800000001", [_line(product, variant)])
        result = execute_action(
            tenant_id,
            Action(type="order.update_status", payload={"orderId": str(order.id), "status": "delivered"}),
        )
        assert result.success is False
        assert result.error.startswith("Invalid transition: created → delivered")


class TestQueryActions:
    def test_store_link(self, tenant_id, store):
        result = execute_action(tenant_id, Action(type="query.store_link"))
        assert result.data["url"] == f"http://localhost:3000/{store.slug}"

    def test_products_search(self, tenant_id, product):
        execute_action(tenant_id, _create_product("Silk Saree", price=5000))
        result = execute_action(tenant_id, Action(type="query.products", payload={"search": "kurta"}))
        assert [p["name"] for p in result.data] == ["Indigo Kurta"]

    def test_products_price_range(self, tenant_id, product):
        execute_action(tenant_id, _create_product("Silk Saree", price=5000))
        result = execute_action(tenant_id, Action(type="query.products", payload={"minPrice": 2000}))
        assert [p["name"] for p in result.data] == ["Silk Saree"]

    def test_revenue(self, tenant_id):
        result = execute_action(tenant_id, Action(type="query.revenue", payload={"period": "week"}))
        assert result.data["totalRevenue"] == 0

    def test_store_info_for_missing_store_fails(self, tenant_id):
        assert execute_action(tenant_id, Action(type="query.store_info")).success is False


class TestRegistry:
    def test_every_action_type_is_registered(self):
        types = registered_types()
        assert len(types) == 58
        assert len(set(types)) == len(types)

    @pytest.mark.parametrize(
        "action_type",
        ["store.update_palette", "store.update_animation", "media.set_hero_banner", "query.discounts", "stock.update"],
    )
    def test_known_types(self, action_type):
        assert action_type in registered_types()
