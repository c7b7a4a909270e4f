from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import DeclarativeBase

# integer primary keys are signed 64-bit in SQLite and PostgreSQL
MIN_ROW_ID = -(2**63)
MAX_ROW_ID = 2**63 - 1


class Base(DeclarativeBase):
    pass


def is_row_id(value: Optional[int]) -> bool:
    return value is not None and MIN_ROW_ID <= value <= MAX_ROW_ID
