"""Vendor-side load test scenarios.

A vendor registers, stocks a menu, reprices a dish and takes one off the
menu. Buyers browsing public menus are mixed in from the ordering scenarios.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    auth_headers,
    menu_item_data,
    price_update_data,
    principal_id,
    vendor_profile_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import VendorState


class VendorOnboardingJourney(SequentialTaskSet):
    """Register Vendor -> Add 3 Dishes -> Reprice -> Remove One -> Read Menu."""

    def on_start(self):
        self.state = VendorState(vendor_id=principal_id("vendor"))
        self.headers = auth_headers(self.state.vendor_id)

    @task
    def register_vendor(self):
        with self.client.post(
            "/profiles",
            json=vendor_profile_data(),
            headers=self.headers,
            catch_response=True,
            name="POST /profiles (vendor)",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Register vendor failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def stock_menu(self):
        for _ in range(3):
            with self.client.post(
                "/menu-items",
                json=menu_item_data(),
                headers=self.headers,
                catch_response=True,
                name="POST /menu-items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.menu_item_ids.append(resp.json()["menuItemId"])
                else:
                    resp.failure(f"Create menu item failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def reprice_dish(self):
        if not self.state.menu_item_ids:
            return
        menu_item_id = random.choice(self.state.menu_item_ids)
        with self.client.put(
            f"/menu-items/{menu_item_id}",
            json=price_update_data(),
            headers=self.headers,
            catch_response=True,
            name="PUT /menu-items/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Reprice failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def remove_dish(self):
        if len(self.state.menu_item_ids) < 2:
            return
        menu_item_id = self.state.menu_item_ids.pop()
        with self.client.delete(
            f"/menu-items/{menu_item_id}",
            headers=self.headers,
            catch_response=True,
            name="DELETE /menu-items/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Delete menu item failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def read_menu(self):
        self.client.get(f"/vendors/{self.state.vendor_id}/menu", name="GET /vendors/{id}/menu")

    @task
    def done(self):
        self.interrupt()


class VendorUser(HttpUser):
    """Vendors onboarding in isolation."""

    wait_time = between(1.0, 3.0)
    tasks = [VendorOnboardingJourney]
