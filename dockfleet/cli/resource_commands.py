"""Команды для образов, сетей и томов."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import typer

from dockfleet.cli.output import images_table, networks_table, print_success, volumes_table
from dockfleet.cli.support import command_errors

if TYPE_CHECKING:
    from dockfleet.app import CLIApp
    from dockfleet.connections.endpoint import EndpointConnection

Listing = Dict[str, List[Dict[str, Any]]]


def register_resource_commands(root: typer.Typer, app: "CLIApp") -> None:
    """Подключает images/pull/rmi/networks/volumes."""

    console = app.console

    def collect(
        server: Optional[str],
        single: Callable[["EndpointConnection"], List[Dict[str, Any]]],
        fan_out: Callable[..., Listing],
    ) -> Listing:
        with command_errors(app):
            if server:
                return {server: single(app.registry.require(server))}
            return fan_out(require_endpoints=True)

    @root.command("images")
    def images_command(
        server: Optional[str] = typer.Option(None, "--server", "-s", help="Only list this Docker server."),
    ) -> None:
        """List images on Docker servers."""
        listing = collect(server, lambda endpoint: endpoint.list_images(), app.registry.list_all_images)
        console.print(images_table(listing))

    @root.command("pull")
    def pull_command(
        image: str = typer.Argument(..., help="Image reference, e.g. nginx:1.25."),
        server: str = typer.Option(..., "--server", "-s", help="Docker server to pull on."),
    ) -> None:
        """Pull an image on one Docker server."""
        with command_errors(app):
            image_id = app.registry.require(server).pull_image(image)
        print_success(console, f"Pulled {image} on {server} ({image_id})")

    @root.command("rmi")
    def remove_image_command(
        image: str = typer.Argument(..., help="Image id or reference."),
        force: bool = typer.Option(False, "--force", "-f", help="Remove even if tagged or in use."),
        server: str = typer.Option(..., "--server", "-s", help="Docker server to remove from."),
    ) -> None:
        """Remove an image from one Docker server."""
        with command_errors(app):
            app.registry.require(server).remove_image(image, force=force)
        print_success(console, f"Removed image {image} on {server}")

    @root.command("networks")
    def networks_command(
        server: Optional[str] = typer.Option(None, "--server", "-s", help="Only list this Docker server."),
    ) -> None:
        """List networks on Docker servers."""
        listing = collect(
            server, lambda endpoint: endpoint.list_networks(), app.registry.list_all_networks
        )
        console.print(networks_table(listing))

    @root.command("volumes")
    def volumes_command(
        server: Optional[str] = typer.Option(None, "--server", "-s", help="Only list this Docker server."),
    ) -> None:
        """List volumes on Docker servers."""
        listing = collect(
            server, lambda endpoint: endpoint.list_volumes(), app.registry.list_all_volumes
        )
        console.print(volumes_table(listing))
