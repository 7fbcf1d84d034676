from .base import AppException, ValidationError, NotFound, Forbidden, Conflict, Internal
from .table import (
    TableNotFound, AlreadyOccupied, AlreadyFree, TableOccupied, DuplicateTable, MalformedToken
)
from .cart import (
    CartNotFound, ItemNotFound, DishNotFound, DishUnavailable, InvalidQuantity, EmptyCart, StaleWrite
)
from .order import (
    OrderNotFound, MenuNotFound, InvalidStatus, TransitionForbidden, AlreadyTerminal,
    InvalidTransition, StaleTransition
)

__all__ = [
    'AppException', 'ValidationError', 'NotFound', 'Forbidden', 'Conflict', 'Internal',
    'TableNotFound', 'AlreadyOccupied', 'AlreadyFree', 'TableOccupied', 'DuplicateTable', 'MalformedToken',
    'CartNotFound', 'ItemNotFound', 'DishNotFound', 'DishUnavailable', 'InvalidQuantity', 'EmptyCart',
    'StaleWrite',
    'OrderNotFound', 'MenuNotFound', 'InvalidStatus', 'TransitionForbidden', 'AlreadyTerminal',
    'InvalidTransition', 'StaleTransition',
]
