# nodegraph/db/repositories/graph_repository.py
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncEngine

from nodegraph.db.schema import connections, nodes
from nodegraph.models.graph import Edge, Node, NodeCreate

class GraphRepository:
    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def add_node(self, node_data: NodeCreate) -> Node:
        query = insert(nodes).values(title=node_data.title, content=node_data.content)
        async with self.engine.begin() as conn:
            result = await conn.execute(query)
            node_id = result.inserted_primary_key[0]
        return Node(id=node_id, title=node_data.title, content=node_data.content)

    async def get_all_nodes(self) -> list[Node]:
        query = select(nodes.c.id, nodes.c.title, nodes.c.content)
        async with self.engine.connect() as conn:
            result = await conn.execute(query)
            return [Node.model_validate(dict(row._mapping)) for row in result]

    async def get_all_edges(self) -> list[Edge]:
        query = select(connections.c.source_id, connections.c.target_id)
        async with self.engine.connect() as conn:
            result = await conn.execute(query)
            return [Edge.model_validate(dict(row._mapping)) for row in result]
