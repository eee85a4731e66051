"""SQLAlchemy table metadata owned by gridrows."""

from __future__ import annotations

from typing import Final

from sqlalchemy import Column, Integer, MetaData, String, Table

from gridrows.domain.selection import MAX_IDENTIFIER_COLUMNS, collection_column

SELECTION_TABLE_NAME: Final[str] = "gridrows_selection"
SELECTION_VALUE_LENGTH: Final[int] = 4000

metadata = MetaData()

# one row per selected record; c001..c050 hold the identifier values positionally
selection_table = Table(
    SELECTION_TABLE_NAME,
    metadata,
    Column("selection_id", String(32), primary_key=True),
    Column("seq_id", Integer, primary_key=True),
    *(
        Column(collection_column(position), String(SELECTION_VALUE_LENGTH), nullable=True)
        for position in range(1, MAX_IDENTIFIER_COLUMNS + 1)
    ),
)
