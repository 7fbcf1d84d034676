"""
Table and QR code exceptions.
"""

from .base import Conflict, NotFound, ValidationError


class TableNotFound(NotFound):

    def __init__(self, table_id: str):
        super().__init__("Table non trouvée", details={'table_id': table_id})
        self.table_id = table_id


class AlreadyOccupied(Conflict):
    """Raised when claiming a table that is already occupied."""

    def __init__(self, table_id: str):
        super().__init__("Table déjà occupée", details={'table_id': table_id})
        self.table_id = table_id


class AlreadyFree(Conflict):
    """Raised when freeing a table that is not occupied."""

    def __init__(self, table_id: str):
        super().__init__("Table déjà libre", details={'table_id': table_id})
        self.table_id = table_id


class TableOccupied(Conflict):
    """Raised when deleting a table that is still occupied."""

    def __init__(self, table_id: str):
        super().__init__("Table occupée, suppression impossible", details={'table_id': table_id})
        self.table_id = table_id


class DuplicateTable(Conflict):

    def __init__(self, number: str):
        super().__init__("Table déjà existante", details={'number': number})
        self.number = number


class MalformedToken(ValidationError):
    """Raised when a QR payload cannot be parsed into the table token shape."""

    def __init__(self, reason: str):
        super().__init__("Format de QR code invalide", details={'reason': reason})
        self.reason = reason
