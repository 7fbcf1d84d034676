"""
Unit Tests for the Cart aggregate (merge, update, removal, totals).
"""

import pytest

from app.exceptions import InvalidQuantity, ItemNotFound
from app.models.cart import Cart


@pytest.fixture
def cart():
    return Cart(id="cart-1", clientId="client-1", tableId="T1")


class TestAddItem:

    def test_same_dish_merges_into_one_line(self, cart):
        cart.add_item("dish-poulet", 2, 2500)
        cart.add_item("dish-poulet", 3, 2500)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5

    def test_note_overwritten_only_when_non_empty(self, cart):
        cart.add_item("dish-poulet", 1, 2500, note="sans piment")
        cart.add_item("dish-poulet", 1, 2500)
        assert cart.items[0].note == "sans piment"

        cart.add_item("dish-poulet", 1, 2500, note="bien cuit")
        assert cart.items[0].note == "bien cuit"

    def test_merge_keeps_first_unit_price(self, cart):
        cart.add_item("dish-poulet", 1, 2500)
        cart.add_item("dish-poulet", 1, 2700)

        assert cart.items[0].unitPrice == 2500

    def test_lines_keep_insertion_order(self, cart):
        cart.add_item("dish-poulet", 1, 2500)
        cart.add_item("dish-jus", 1, 500)

        assert cart.dish_ids == ["dish-poulet", "dish-jus"]
        assert cart.item_count == 2

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, cart, quantity):
        with pytest.raises(InvalidQuantity):
            cart.add_item("dish-poulet", quantity, 2500)
        assert cart.items == []


class TestUpdateItem:

    def test_sets_quantity_and_note(self, cart):
        cart.add_item("dish-poulet", 1, 2500, note="sans piment")

        cart.update_item("dish-poulet", 4, note="")

        assert cart.items[0].quantity == 4
        assert cart.items[0].note == ""

    def test_note_left_alone_when_not_given(self, cart):
        cart.add_item("dish-poulet", 1, 2500, note="sans piment")

        cart.update_item("dish-poulet", 2)

        assert cart.items[0].note == "sans piment"

    def test_absent_dish_is_not_found(self, cart):
        with pytest.raises(ItemNotFound):
            cart.update_item("dish-jus", 1)

    def test_zero_quantity_rejected_not_clamped(self, cart):
        cart.add_item("dish-poulet", 3, 2500)

        with pytest.raises(InvalidQuantity):
            cart.update_item("dish-poulet", 0)
        assert cart.items[0].quantity == 3


class TestRemoveAndClear:

    def test_remove_twice_is_harmless(self, cart):
        cart.add_item("dish-poulet", 2, 2500)
        cart.add_item("dish-jus", 1, 500)
        cart.compute_total({"dish-poulet", "dish-jus"})

        assert cart.remove_item("dish-jus") is True
        total_after_first = cart.compute_total({"dish-poulet", "dish-jus"})
        assert cart.remove_item("dish-jus") is False

        assert cart.dish_ids == ["dish-poulet"]
        assert cart.compute_total({"dish-poulet", "dish-jus"}) == total_after_first == 5000

    def test_clear_empties_and_zeroes(self, cart):
        cart.add_item("dish-poulet", 2, 2500)
        cart.compute_total({"dish-poulet"})

        cart.clear()

        assert cart.items == []
        assert cart.total == 0


class TestComputeTotal:

    def test_sums_available_lines(self, cart):
        cart.add_item("dish-poulet", 2, 2500)
        cart.add_item("dish-jus", 1, 500)

        assert cart.compute_total({"dish-poulet", "dish-jus"}) == 5500
        assert cart.total == 5500

    def test_unavailable_dishes_excluded_but_kept(self, cart):
        cart.add_item("dish-poulet", 2, 2500)
        cart.add_item("dish-ndole", 1, 3000)

        assert cart.compute_total({"dish-poulet"}) == 5000
        assert cart.dish_ids == ["dish-poulet", "dish-ndole"]

    def test_rounds_to_cents(self, cart):
        cart.add_item("dish-a", 3, 0.1)

        assert cart.compute_total({"dish-a"}) == 0.3
