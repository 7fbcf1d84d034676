"""
Order-related exceptions.
"""

from .base import Conflict, Forbidden, NotFound, ValidationError


class OrderNotFound(NotFound):

    def __init__(self, order_id: str):
        super().__init__("Commande non trouvée", details={'order_id': order_id})
        self.order_id = order_id


class MenuNotFound(NotFound):

    def __init__(self, menu_id: str):
        super().__init__("Menu du jour non trouvé", details={'menu_id': menu_id})
        self.menu_id = menu_id


class InvalidStatus(ValidationError):
    """Raised when the requested status is not a recognized target label."""

    def __init__(self, status: str):
        super().__init__("Statut invalide", details={'status': status})
        self.status = status


class TransitionForbidden(Forbidden):
    """Raised when the caller's role does not permit the requested transition."""

    def __init__(self, order_id: str, current_status: str, requested_status: str):
        super().__init__(
            "Impossible d'annuler cette commande" if requested_status == "cancelled" else "Accès refusé",
            details={'order_id': order_id, 'current_status': current_status, 'requested_status': requested_status}
        )
        self.order_id = order_id
        self.current_status = current_status
        self.requested_status = requested_status


class AlreadyTerminal(Conflict):
    """Raised when changing an order that is delivered or cancelled."""

    def __init__(self, order_id: str, current_status: str):
        super().__init__(
            "Commande ne peut plus être modifiée",
            details={'order_id': order_id, 'current_status': current_status}
        )
        self.order_id = order_id
        self.current_status = current_status


class InvalidTransition(Conflict):
    """Raised when the transition skips or reverses a step of the lifecycle."""

    def __init__(self, order_id: str, current_status: str, requested_status: str):
        super().__init__(
            f"Transition de statut impossible: {current_status} -> {requested_status}",
            details={'order_id': order_id, 'current_status': current_status, 'requested_status': requested_status}
        )
        self.order_id = order_id
        self.current_status = current_status
        self.requested_status = requested_status


class StaleTransition(Conflict):
    """Raised when the order status changed between read and write."""

    def __init__(self, order_id: str, expected_status: str):
        super().__init__(
            "Le statut de la commande a changé entre-temps",
            details={'order_id': order_id, 'expected_status': expected_status}
        )
        self.order_id = order_id
        self.expected_status = expected_status
