# nodegraph/models/graph.py
from pydantic import BaseModel

class Node(BaseModel):
    id: int
    title: str
    content: str

class NodeCreate(BaseModel):
    # Missing fields fall through to the emptiness check in the service.
    title: str = ""
    content: str = ""

class Edge(BaseModel):
    source_id: int
    target_id: int

class Graph(BaseModel):
    nodes: list[Node]
    edges: list[Edge]
