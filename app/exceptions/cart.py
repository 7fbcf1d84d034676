"""
Cart-related exceptions.
"""

from .base import Conflict, NotFound, ValidationError


class CartNotFound(NotFound):

    def __init__(self, client_id: str, table_id: str | None = None):
        super().__init__("Panier non trouvé", details={'client_id': client_id, 'table_id': table_id})
        self.client_id = client_id
        self.table_id = table_id


class ItemNotFound(NotFound):
    """Raised when updating a dish that is not in the cart."""

    def __init__(self, dish_id: str):
        super().__init__("Article non trouvé", details={'dish_id': dish_id})
        self.dish_id = dish_id


class DishNotFound(NotFound):

    def __init__(self, dish_id: str):
        super().__init__("Plat non trouvé", details={'dish_id': dish_id})
        self.dish_id = dish_id


class DishUnavailable(ValidationError):

    def __init__(self, dish_id: str):
        super().__init__("Plat indisponible", details={'dish_id': dish_id})
        self.dish_id = dish_id


class InvalidQuantity(ValidationError):

    def __init__(self, quantity: int):
        super().__init__("Quantité invalide", details={'quantity': quantity})
        self.quantity = quantity


class EmptyCart(ValidationError):

    def __init__(self, cart_id: str):
        super().__init__("Panier vide", details={'cart_id': cart_id})
        self.cart_id = cart_id


class StaleWrite(Conflict):
    """Raised when a cart write keeps losing its optimistic version check."""

    def __init__(self, cart_id: str, attempts: int):
        super().__init__(
            "Le panier a été modifié simultanément, veuillez réessayer",
            details={'cart_id': cart_id, 'attempts': attempts}
        )
        self.cart_id = cart_id
        self.attempts = attempts
