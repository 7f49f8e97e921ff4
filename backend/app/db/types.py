"""Column types shared by the models."""

from decimal import Decimal

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class ExactDecimal(TypeDecorator):
    """A ``Decimal`` stored as its plain-notation text.

    SQLite keeps ``Numeric`` as a float, so 33.33333 would come back as
    33.3333. Money and quantities go through this type instead; ordering by
    value needs ``cast(column, Numeric)``.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return format(Decimal(str(value)), "f")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)
