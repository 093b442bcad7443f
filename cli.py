import asyncio
import json

import typer
import uvicorn
from rich.console import Console
from rich.syntax import Syntax

from nodegraph.core.config import settings
from nodegraph.core.exceptions import DatabaseUnavailableException, GraphAPIException
from nodegraph.core.logging import configure_logging
from nodegraph.db.driver import Database
from nodegraph.services.graph_service import GraphService

cli_app = typer.Typer()
console = Console()

async def _run_with_service(operation):
    database = await Database(settings.database_url).connect()
    try:
        return await operation(GraphService(database))
    finally:
        await database.close()

def _run(operation):
    configure_logging(settings.LOG_LEVEL)
    try:
        return asyncio.run(_run_with_service(operation))
    except (GraphAPIException, DatabaseUnavailableException) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc.message}")
        raise typer.Exit(code=1)

def _print_json(payload) -> None:
    console.print(Syntax(json.dumps(payload, indent=2), "json", theme="solarized-dark"))

@cli_app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on."),
):
    """
    Runs the HTTP server.
    """
    uvicorn.run("nodegraph.main:app", host=host, port=port)

@cli_app.command()
def add_node(
    title: str = typer.Option(..., "--title", "-t", help="Title of the new node."),
    content: str = typer.Option(..., "--content", "-c", help="Content of the new node."),
):
    """
    Creates a node through the same validation path as POST /nodes.
    """
    body = json.dumps({"title": title, "content": content})
    node = _run(lambda service: service.create_node(body))
    console.print("[bold green]Created node:[/bold green]")
    _print_json(node.model_dump(mode="json"))

@cli_app.command()
def show_graph():
    """
    Prints every node and edge, as returned by GET /nodes.
    """
    graph = _run(lambda service: service.get_graph())
    console.print(f"[cyan]{len(graph.nodes)} nodes, {len(graph.edges)} edges[/cyan]")
    _print_json(graph.model_dump(mode="json"))


if __name__ == "__main__":
    cli_app()
