"""
API tests for /api/cart routes, run against in-memory repositories.
"""


def add(api, headers, dish_id, quantity=1, table_id="T1", client_id="client-1", **extra):
    return api.post(
        f"/api/cart/{client_id}/add",
        json={"dishId": dish_id, "quantity": quantity, "tableId": table_id, **extra},
        headers=headers,
    )


class TestCartRoutes:

    def test_requires_token(self, api):
        response = api.get("/api/cart/client-1")

        assert response.status_code == 401

    def test_get_missing_cart(self, api, client_headers):
        response = api.get("/api/cart/client-1", params={"tableId": "T1"}, headers=client_headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "Panier non trouvé"}

    def test_add_then_get(self, api, client_headers):
        add(api, client_headers, "dish-poulet", 2)
        response = add(api, client_headers, "dish-jus", 1, note="bien frais")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 5500
        assert body["currency"] == "FCFA"
        assert [i["dishId"] for i in body["items"]] == ["dish-poulet", "dish-jus"]
        assert body["items"][1]["note"] == "bien frais"

        fetched = api.get("/api/cart/client-1", params={"tableId": "T1"}, headers=client_headers)
        assert fetched.json()["id"] == body["id"]

    def test_add_rejects_bad_body(self, api, client_headers):
        response = add(api, client_headers, "dish-poulet", 0)

        assert response.status_code == 400
        assert response.json()["detail"] == "Données invalides"
        assert response.json()["errors"]

    def test_add_unavailable_dish(self, api, client_headers):
        response = add(api, client_headers, "dish-ndole")

        assert response.status_code == 400
        assert response.json() == {"detail": "Plat indisponible"}

    def test_add_unknown_dish(self, api, client_headers):
        response = add(api, client_headers, "dish-404")

        assert response.status_code == 404
        assert response.json() == {"detail": "Plat non trouvé"}

    def test_other_client_forbidden(self, api, other_client_headers):
        response = add(api, other_client_headers, "dish-poulet")

        assert response.status_code == 403

    def test_admin_may_act_for_client(self, api, admin_headers):
        response = add(api, admin_headers, "dish-poulet")

        assert response.status_code == 200
        assert response.json()["clientId"] == "client-1"

    def test_update_item(self, api, client_headers):
        add(api, client_headers, "dish-poulet")

        response = api.put(
            "/api/cart/client-1/update-item",
            json={"dishId": "dish-poulet", "quantity": 3, "tableId": "T1"},
            headers=client_headers,
        )

        assert response.status_code == 200
        assert response.json()["total"] == 7500

    def test_update_absent_item(self, api, client_headers):
        add(api, client_headers, "dish-poulet")

        response = api.put(
            "/api/cart/client-1/update-item",
            json={"dishId": "dish-jus", "quantity": 3, "tableId": "T1"},
            headers=client_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "Article non trouvé"}

    def test_update_zero_quantity(self, api, client_headers):
        add(api, client_headers, "dish-poulet")

        response = api.put(
            "/api/cart/client-1/update-item",
            json={"dishId": "dish-poulet", "quantity": 0, "tableId": "T1"},
            headers=client_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Quantité invalide"}

    def test_remove_is_idempotent(self, api, client_headers):
        add(api, client_headers, "dish-poulet", 2)
        add(api, client_headers, "dish-jus")

        first = api.delete("/api/cart/client-1/remove/dish-jus/T1", headers=client_headers)
        second = api.delete("/api/cart/client-1/remove/dish-jus/T1", headers=client_headers)

        assert first.status_code == second.status_code == 200
        assert first.json()["total"] == second.json()["total"] == 5000

    def test_clear(self, api, client_headers):
        add(api, client_headers, "dish-poulet", 2)

        response = api.delete("/api/cart/client-1/clear/T1", headers=client_headers)

        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["total"] == 0

    def test_summary(self, api, client_headers):
        empty = api.get("/api/cart/client-1/summary", headers=client_headers)
        assert empty.json() == {"itemsCount": 0, "total": 0, "currency": "FCFA", "table": None}

        add(api, client_headers, "dish-poulet", 2)
        summary = api.get("/api/cart/client-1/summary", headers=client_headers).json()

        assert summary["itemsCount"] == 2
        assert summary["table"] == {"id": "T1", "number": "5"}

    def test_reads_drop_dish_that_became_unavailable(self, api, client_headers, catalog_repo):
        add(api, client_headers, "dish-poulet", 2)
        add(api, client_headers, "dish-jus", 1)
        catalog_repo.dishes["dish-jus"].isAvailable = False

        cart = api.get("/api/cart/client-1", params={"tableId": "T1"}, headers=client_headers).json()
        summary = api.get("/api/cart/client-1/summary", headers=client_headers).json()

        assert cart["total"] == 5000
        assert len(cart["items"]) == 2
        assert summary["total"] == 5000


class TestConvertRoute:

    def test_convert_creates_pending_order(self, api, client_headers, users_repo):
        add(api, client_headers, "dish-poulet", 2)
        add(api, client_headers, "dish-jus", 1)

        response = api.post(
            "/api/cart/client-1/convert-to-order",
            json={"tableId": "T1", "mode": "dine_in", "comment": "Anniversaire"},
            headers=client_headers,
        )

        assert response.status_code == 201
        order = response.json()
        assert order["number"] == "CMD000001"
        assert (order["subtotal"], order["tax"], order["total"]) == (5500, 990, 6490)
        assert order["status"] == "pending"
        assert order["comment"] == "Anniversaire"
        assert users_repo.histories["client-1"] == [order["id"]]

        cart = api.get("/api/cart/client-1", params={"tableId": "T1"}, headers=client_headers)
        assert cart.status_code == 404

    def test_convert_without_cart(self, api, client_headers):
        response = api.post("/api/cart/client-1/convert-to-order", json={"tableId": "T1"}, headers=client_headers)

        assert response.status_code == 404

    def test_convert_empty_cart(self, api, client_headers):
        add(api, client_headers, "dish-poulet")
        api.delete("/api/cart/client-1/clear/T1", headers=client_headers)

        response = api.post("/api/cart/client-1/convert-to-order", json={"tableId": "T1"}, headers=client_headers)

        assert response.status_code == 400
        assert response.json() == {"detail": "Panier vide"}

    def test_convert_rejects_unknown_mode(self, api, client_headers):
        add(api, client_headers, "dish-poulet")

        response = api.post(
            "/api/cart/client-1/convert-to-order",
            json={"tableId": "T1", "mode": "delivery"},
            headers=client_headers,
        )

        assert response.status_code == 400
