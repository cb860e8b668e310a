# vault_ledger/database/base.py

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.orm import declarative_base


LedgerBase = declarative_base()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def plain_value(value: Any) -> Any:
    """Column value as something msgspec/json can encode without hooks"""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


class DBEntity(LedgerBase):
    """Ledger entity keyed by a deterministic string identifier"""
    __abstract__ = True

    id = Column(String(160), primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False,
                        default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False,
                        default=utc_now, onupdate=utc_now, server_default=func.now())

    def to_dict(self) -> Dict[str, Any]:
        return {column.name: plain_value(getattr(self, column.name))
                for column in self.__table__.columns}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"
