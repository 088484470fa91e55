"""Storefront load test scenarios.

A stateful SequentialTaskSet journey that opens a store, submits action
batches through the executor, places orders against real stock and moves
them through the lifecycle. A second user hammers the read-only snapshot
and discount validation endpoints.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    design_action,
    discount_action,
    order_data,
    product_action,
    store_data,
    variant_action,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import StoreState


def _first_result(resp):
    results = resp.json()["results"]
    return results[0] if results else None


class StorefrontJourney(SequentialTaskSet):
    """Open Store -> Design -> Product -> Variant -> Discount -> Order -> Ship -> Deliver.

    Models a seller setting up a shop over chat and a buyer checking out.
    """

    def on_start(self):
        self.state = StoreState()

    @task
    def open_store(self):
        with self.client.post("/stores", json=store_data(), catch_response=True, name="POST /stores") as resp:
            if resp.status_code == 201:
                self.state.tenant_id = resp.json()["tenant_id"]
            else:
                resp.failure(f"Open store failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def _actions(self, actions: list[dict], name: str):
        return self.client.post(
            f"/stores/{self.state.tenant_id}/actions",
            json={"actions": actions},
            catch_response=True,
            name=name,
        )

    @task
    def update_design(self):
        with self._actions([design_action()], "POST /stores/{id}/actions [design]") as resp:
            result = _first_result(resp) if resp.status_code == 200 else None
            if not result or not result["success"]:
                resp.failure(f"Design update failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def create_product(self):
        with self._actions([product_action()], "POST /stores/{id}/actions [product]") as resp:
            result = _first_result(resp) if resp.status_code == 200 else None
            if result and result["success"]:
                self.state.product_id = result["data"]["id"]
                self.state.unit_price = result["data"]["price"]
            else:
                resp.failure(f"Create product failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_variant(self):
        with self._actions([variant_action(self.state.product_id)], "POST /stores/{id}/actions [variant]") as resp:
            result = _first_result(resp) if resp.status_code == 200 else None
            if result and result["success"]:
                self.state.variant_id = result["data"]["id"]
            else:
                resp.failure(f"Create variant failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_discount(self):
        action = discount_action()
        with self._actions([action], "POST /stores/{id}/actions [discount]") as resp:
            result = _first_result(resp) if resp.status_code == 200 else None
            if result and result["success"]:
                self.state.discount_code = action["payload"]["code"]
            else:
                resp.failure(f"Create discount failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def place_order(self):
        payload = order_data(
            self.state.product_id,
            self.state.variant_id,
            self.state.unit_price,
            discount_code=self.state.discount_code if random.random() < 0.5 else None,
        )
        with self.client.post(
            f"/stores/{self.state.tenant_id}/orders",
            json=payload,
            catch_response=True,
            name="POST /stores/{id}/orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["order_id"])
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def _move(self, status: str, **details):
        order_id = self.state.order_ids[-1]
        with self.client.put(
            f"/stores/{self.state.tenant_id}/orders/{order_id}/status",
            json={"status": status, **details},
            catch_response=True,
            name=f"PUT /stores/{{id}}/orders/{{id}}/status [{status}]",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Transition to {status} failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def confirm_order(self):
        self._move("confirmed")

    @task
    def ship_order(self):
        self._move("processing")
        self._move("shipped", tracking_number=f"AWB{random.randint(10**9, 10**10 - 1)}")

    @task
    def deliver_or_cancel(self):
        if random.random() < 0.8:
            self._move("delivered")
        else:
            self._move("rto")

    @task
    def done(self):
        self.interrupt()


class StorefrontUser(HttpUser):
    """Seller and buyer journey through one storefront."""

    tasks = [StorefrontJourney]
    wait_time = between(0.5, 2)


class SnapshotReaderUser(HttpUser):
    """Reads snapshots and quotes discounts against a store it opens once."""

    wait_time = between(0.2, 1)

    def on_start(self):
        resp = self.client.post("/stores", json=store_data(), name="POST /stores")
        self.tenant_id = resp.json()["tenant_id"] if resp.status_code == 201 else None

    @task(3)
    def snapshot(self):
        if self.tenant_id:
            self.client.get(f"/stores/{self.tenant_id}/snapshot", name="GET /stores/{id}/snapshot")

    @task(1)
    def validate_discount(self):
        if self.tenant_id:
            self.client.post(
                f"/stores/{self.tenant_id}/discounts/validate",
                json={"code": "NOPE", "order_total": round(random.uniform(100, 5000), 2)},
                name="POST /stores/{id}/discounts/validate",
            )
