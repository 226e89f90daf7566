"""Buyer-side load test scenarios.

Each journey sets up its own vendor and menu first, so journeys never share
state across Locust users. Payments run against the fake gateway the API
falls back to when no Paystack key is configured, which confirms every
charge on the browser callback.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    auth_headers,
    cancellation_reason,
    cart_line_data,
    checkout_data,
    menu_item_data,
    principal_id,
    user_profile_data,
    vendor_profile_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import BuyerState


class _BuyerJourney(SequentialTaskSet):
    """Shared setup: one vendor with a small menu, one registered buyer."""

    def on_start(self):
        self.state = BuyerState(user_id=principal_id("user"), vendor_id=principal_id("vendor"))
        self.user_headers = auth_headers(self.state.user_id)
        self.vendor_headers = auth_headers(self.state.vendor_id)

        self.client.post(
            "/profiles", json=vendor_profile_data(), headers=self.vendor_headers, name="POST /profiles (vendor)"
        )
        for _ in range(2):
            resp = self.client.post(
                "/menu-items", json=menu_item_data(), headers=self.vendor_headers, name="POST /menu-items"
            )
            if resp.status_code == 201:
                self.state.menu_item_ids.append(resp.json()["menuItemId"])
        self.client.post(
            "/profiles", json=user_profile_data(), headers=self.user_headers, name="POST /profiles (user)"
        )

    def _fill_cart(self):
        for menu_item_id in self.state.menu_item_ids:
            with self.client.post(
                "/cart/lines",
                json=cart_line_data(self.state.vendor_id, menu_item_id),
                headers=self.user_headers,
                catch_response=True,
                name="POST /cart/lines",
            ) as resp:
                if resp.status_code == 201:
                    self.state.line_ids.append(resp.json()["lineId"])
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} {extract_error_detail(resp)}")

    def _checkout(self):
        with self.client.post(
            "/checkout",
            json=checkout_data(),
            headers=self.user_headers,
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.checkout_batch_id = body["checkoutBatchId"]
                self.state.order_ids = body["orderIds"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()


class CartBrowsingJourney(_BuyerJourney):
    """Browse Menu -> Add Dishes -> Change Quantity -> Remove Line -> Abandon."""

    @task
    def browse_menu(self):
        self.client.get(f"/vendors/{self.state.vendor_id}/menu", name="GET /vendors/{id}/menu")

    @task
    def add_dishes(self):
        self._fill_cart()

    @task
    def change_quantity(self):
        if not self.state.line_ids:
            return
        with self.client.put(
            f"/cart/lines/{self.state.line_ids[0]}",
            json={"quantity": random.randint(2, 5)},
            headers=self.user_headers,
            catch_response=True,
            name="PUT /cart/lines/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update cart line failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def remove_line(self):
        if not self.state.line_ids:
            return
        self.client.delete(
            f"/cart/lines/{self.state.line_ids.pop()}", headers=self.user_headers, name="DELETE /cart/lines/{id}"
        )

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.user_headers, name="GET /cart")

    @task
    def done(self):
        self.interrupt()


class CheckoutAndPayJourney(_BuyerJourney):
    """Fill Cart -> Quote Delivery -> Checkout -> Pay -> Vendor Accepts -> Dispatch.

    The happy path from an empty cart to a delivery task waiting for a rider.
    """

    @task
    def fill_cart(self):
        self._fill_cart()

    @task
    def quote_delivery(self):
        self.client.post(
            "/delivery/calculate",
            json={"deliveryLandmark": checkout_data()["deliveryLandmark"]},
            name="POST /delivery/calculate",
        )

    @task
    def checkout(self):
        self._checkout()

    @task
    def initialize_payment(self):
        with self.client.post(
            "/payments/initialize",
            json={"checkoutBatchId": self.state.checkout_batch_id},
            headers=self.user_headers,
            catch_response=True,
            name="POST /payments/initialize",
        ) as resp:
            if resp.status_code == 201:
                self.state.payment_reference = resp.json()["reference"]
            else:
                resp.failure(f"Initialize payment failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def payment_callback(self):
        with self.client.get(
            "/payments/callback",
            params={"reference": self.state.payment_reference},
            allow_redirects=False,
            catch_response=True,
            name="GET /payments/callback",
        ) as resp:
            if resp.status_code not in (200, 303):
                resp.failure(f"Payment callback failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def vendor_accepts(self):
        for order_id in self.state.order_ids:
            with self.client.post(
                "/orders/update-status",
                json={
                    "orderId": order_id,
                    "vendorId": self.state.vendor_id,
                    "newStatus": "Accepted",
                    "expectedStatus": "Paid",
                },
                headers=self.vendor_headers,
                catch_response=True,
                name="POST /orders/update-status",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Accept order failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def dispatch(self):
        for order_id in self.state.order_ids:
            with self.client.post(
                "/delivery-tasks",
                json={"orderId": order_id, "vendorId": self.state.vendor_id},
                headers=self.vendor_headers,
                catch_response=True,
                name="POST /delivery-tasks",
            ) as resp:
                if resp.status_code != 201:
                    resp.failure(f"Dispatch failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def read_batch(self):
        self.client.get(
            f"/orders/batches/{self.state.checkout_batch_id}",
            headers=self.user_headers,
            name="GET /orders/batches/{id}",
        )

    @task
    def vendor_inbox(self):
        self.client.get("/notifications", headers=self.vendor_headers, name="GET /notifications")

    @task
    def done(self):
        self.interrupt()


class CancellationJourney(_BuyerJourney):
    """Fill Cart -> Checkout -> Cancel Unpaid Order."""

    @task
    def fill_cart(self):
        self._fill_cart()

    @task
    def checkout(self):
        self._checkout()

    @task
    def cancel(self):
        for order_id in self.state.order_ids:
            with self.client.post(
                f"/orders/{order_id}/cancel",
                json={"expectedStatus": "Pending", "reason": cancellation_reason()},
                headers=self.user_headers,
                catch_response=True,
                name="POST /orders/{id}/cancel",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Cancel failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class BuyerUser(HttpUser):
    """Buyers only, weighted toward completed purchases."""

    wait_time = between(0.5, 2.0)
    tasks = {CheckoutAndPayJourney: 5, CartBrowsingJourney: 3, CancellationJourney: 1}
