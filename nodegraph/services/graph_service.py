# nodegraph/services/graph_service.py
import asyncio
import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from nodegraph.core.exceptions import BadRequestException, StorageException
from nodegraph.db.driver import Database
from nodegraph.db.repositories.graph_repository import GraphRepository
from nodegraph.models.graph import Graph, Node, NodeCreate

logger = logging.getLogger(__name__)

def parse_node_payload(body: str | bytes | None) -> NodeCreate:
    """Parses a raw request body into a NodeCreate, rejecting empty fields."""
    try:
        node_data = NodeCreate.model_validate_json(body or b"")
    except ValidationError as exc:
        logger.debug("Rejected node payload: %s", exc)
        raise BadRequestException(str(exc)) from exc

    if not node_data.title or not node_data.content:
        raise BadRequestException("Title and Content cannot be empty")
    return node_data

class GraphService:
    def __init__(self, database: Database, repo: GraphRepository | None = None):
        self.repo = repo or GraphRepository(database.engine)

    async def create_node(self, body: str | bytes | None) -> Node:
        node_data = parse_node_payload(body)
        node = await self._with_storage_errors(self.repo.add_node, node_data)
        logger.info("Created node %s", node.id)
        return node

    async def get_graph(self) -> Graph:
        async def read_all():
            reads = [
                asyncio.ensure_future(self.repo.get_all_nodes()),
                asyncio.ensure_future(self.repo.get_all_edges()),
            ]
            try:
                return await asyncio.gather(*reads)
            except BaseException:
                # A failed read must not leave its sibling running on the loop.
                for read in reads:
                    read.cancel()
                await asyncio.gather(*reads, return_exceptions=True)
                raise

        nodes, edges = await self._with_storage_errors(read_all)
        return Graph(nodes=nodes, edges=edges)

    async def _with_storage_errors(self, func, *args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (SQLAlchemyError, ValidationError) as exc:
            # ValidationError here means a stored row could not be scanned into a model.
            logger.error("Storage operation %s failed: %s", getattr(func, "__name__", func), exc)
            raise StorageException(str(exc)) from exc
