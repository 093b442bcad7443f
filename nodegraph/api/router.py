# nodegraph/api/router.py
from fastapi import APIRouter, Depends, Request, status

from nodegraph.db.driver import Database, get_database
from nodegraph.models.graph import Graph, Node
from nodegraph.services.graph_service import GraphService

router = APIRouter()

def get_service(database: Database = Depends(get_database)) -> GraphService:
    return GraphService(database)

@router.post("/nodes", status_code=status.HTTP_201_CREATED, response_model=Node, tags=["Nodes"])
async def add_node(
    request: Request,
    service: GraphService = Depends(get_service)
):
    # The raw body goes to the service so both transports share one parser.
    return await service.create_node(await request.body())

@router.get("/nodes", response_model=Graph, tags=["Nodes"])
async def get_full_graph(service: GraphService = Depends(get_service)):
    return await service.get_graph()

@router.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
async def health_check():
    """Fixed liveness payload; never touches storage."""
    return {"status": "ok"}
