from __future__ import annotations

from ..core.enums import IdentifierKind
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, store_errors
from .repository import EmployeeDirectory

_COLUMN_BY_KIND = {
    IdentifierKind.EMPLOYEE_NUMBER: "employee_number",
    IdentifierKind.PIN: "pin",
    IdentifierKind.RFID: "rfid_tag",
    IdentifierKind.QR: "qr_code",
}


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def resolve(self, identifier_kind: IdentifierKind, identifier_value: str) -> int:
        column = _COLUMN_BY_KIND[IdentifierKind(identifier_kind)]
        value = (identifier_value or "").strip()
        if not value:
            raise NotFoundError("Identifier is empty")

        with store_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT employee_id FROM employees WHERE {column}=%s AND is_active=1",
                (value,),
            )
            row = fetchone(cur)
        if not row:
            raise NotFoundError(f"No active employee for {IdentifierKind(identifier_kind).value}")
        return int(row["employee_id"])
