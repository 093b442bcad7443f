# nodegraph/api/gateway.py
"""Function-gateway transport: API Gateway proxy events in, proxy responses out.

The adapter keeps one event loop for the life of a warm container so the
engine's pooled connections are always used from the loop that opened them.
"""
import asyncio
import base64
import binascii
import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nodegraph.core.config import Settings, settings as default_settings
from nodegraph.core.exceptions import BadRequestException, GraphAPIException, RouteNotFoundException
from nodegraph.core.logging import configure_logging
from nodegraph.db.driver import Database
from nodegraph.services.graph_service import GraphService

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

class GatewayRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    http_method: str = Field(alias="httpMethod")
    path: str
    body: str | None = None
    is_base64_encoded: bool = Field(default=False, alias="isBase64Encoded")

    def decoded_body(self) -> str | bytes | None:
        if self.body is None or not self.is_base64_encoded:
            return self.body
        try:
            return base64.b64decode(self.body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise BadRequestException(f"Invalid base64 body: {exc}") from exc

def _json_response(status_code: int, payload: Any) -> dict:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload, separators=(",", ":")),
    }

class GatewayAdapter:
    def __init__(self, database: Database, loop: asyncio.AbstractEventLoop):
        self.database = database
        self.loop = loop
        self.service = GraphService(database)
        self.routes = {
            ("POST", "/nodes"): self._create_node,
            ("GET", "/nodes"): self._get_nodes,
            ("GET", "/health"): self._health,
        }

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "GatewayAdapter":
        """Connects to the database; raises DatabaseUnavailableException on failure."""
        settings = settings or default_settings
        configure_logging(settings.LOG_LEVEL)
        logger.info("Starting the application...")
        loop = asyncio.new_event_loop()
        try:
            database = loop.run_until_complete(Database(settings.database_url).connect())
        except Exception:
            loop.close()
            raise
        return cls(database, loop)

    def handle(self, event: dict) -> dict:
        try:
            request = GatewayRequest.model_validate(event)
        except ValidationError as exc:
            return _json_response(400, {"message": str(exc)})

        handler = self.routes.get((request.http_method, request.path))
        try:
            if handler is None:
                raise RouteNotFoundException()
            return self.loop.run_until_complete(handler(request))
        except GraphAPIException as exc:
            return _json_response(exc.status_code, {"message": exc.message})

    def close(self) -> None:
        if self.loop.is_closed():
            return
        self.loop.run_until_complete(self.database.close())
        self.loop.close()

    async def _create_node(self, request: GatewayRequest) -> dict:
        node = await self.service.create_node(request.decoded_body())
        return _json_response(201, node.model_dump(mode="json"))

    async def _get_nodes(self, request: GatewayRequest) -> dict:
        graph = await self.service.get_graph()
        return _json_response(200, graph.model_dump(mode="json"))

    async def _health(self, request: GatewayRequest) -> dict:
        return _json_response(200, {"status": "ok"})

_adapter: GatewayAdapter | None = None

def get_adapter() -> GatewayAdapter:
    global _adapter
    if _adapter is None:
        _adapter = GatewayAdapter.from_settings()
    return _adapter

def handler(event: dict, context: Any = None) -> dict:
    """Lambda entry point."""
    return get_adapter().handle(event)
