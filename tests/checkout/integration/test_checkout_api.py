"""Integration tests for checkout and the delivery fee endpoints."""


class TestCheckout:
    def test_one_order_per_vendor(self, client, auth, make_profile, make_menu_item, add_to_cart):
        user_id = make_profile()
        v1 = make_profile(role="vendor")
        v2 = make_profile(role="vendor")
        add_to_cart(user_id, v1, make_menu_item(v1, price=1000.0))
        add_to_cart(user_id, v2, make_menu_item(v2, price=1000.0))

        response = client.post(
            "/checkout",
            headers=auth(user_id),
            json={"deliveryLandmark": "Ovom", "deliveryAddress": "4 Hospital Road"},
        )

        assert response.status_code == 201
        body = response.json()
        assert len(body["orderIds"]) == 2
        assert body["total"] == 4000.0

        batch = client.get(f"/orders/batches/{body['checkoutBatchId']}", headers=auth(user_id)).json()
        assert {order["status"] for order in batch["orders"]} == {"Pending"}
        assert batch["total"] == 4000.0
        assert client.get("/cart", headers=auth(user_id)).json()["cart"]["itemCount"] == 0

    def test_empty_cart(self, client, auth, make_profile):
        response = client.post("/checkout", headers=auth(make_profile()))
        assert response.status_code == 400
        assert response.json()["code"] == "empty_cart"

    def test_unknown_landmark_keeps_cart(self, client, auth, make_profile, make_menu_item, add_to_cart):
        user_id = make_profile()
        vendor_id = make_profile(role="vendor")
        add_to_cart(user_id, vendor_id, make_menu_item(vendor_id))

        response = client.post("/checkout", headers=auth(user_id), json={"deliveryLandmark": "Atlantis"})

        assert response.status_code == 400
        assert client.get("/cart", headers=auth(user_id)).json()["cart"]["itemCount"] == 1


class TestDeliveryFees:
    def test_calculate(self, client):
        response = client.post("/delivery/calculate", json={"deliveryLandmark": "  ovom "})
        assert response.status_code == 200
        assert response.json() == {"success": True, "landmark": "Ovom", "zone": 2, "fee": 1000.0}

    def test_unknown_landmark(self, client):
        response = client.post("/delivery/calculate", json={"deliveryLandmark": "Atlantis"})
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_landmarks_sorted_by_zone(self, client):
        landmarks = client.get("/delivery/landmarks").json()["landmarks"]
        zones = [landmark["zone"] for landmark in landmarks]
        assert zones == sorted(zones)
        assert {"name": "Igbogene", "zone": 4, "fee": 2000.0} in landmarks
