"""SQLAlchemy Core table definitions for the node graph store.

The tables are assumed to exist already; these definitions only build
queries (and the test schema).
"""

from sqlalchemy import Column, Integer, MetaData, Table, Text

metadata = MetaData()

nodes = Table(
    "nodes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("content", Text, nullable=False),
)

# Endpoints reference nodes.id by convention only.
connections = Table(
    "connections",
    metadata,
    Column("source_id", Integer, nullable=False),
    Column("target_id", Integer, nullable=False),
)
