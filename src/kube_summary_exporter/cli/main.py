# src/kube_summary_exporter/cli/main.py
"""
This module is the main entry point for the kube-summary-exporter CLI.
"""

import logging
from typing import Optional

import typer
from typing_extensions import Annotated

from ..core.config import config

logger = logging.getLogger(__name__)


app = typer.Typer(
    name="kube-summary-exporter",
    help="Export kubelet /stats/summary filesystem usage as Prometheus metrics.",
    add_completion=False,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def version_callback(value: bool):
    """
    Prints the version of kube-summary-exporter.
    """
    if value:
        from .. import __version__

        typer.echo(f"kube-summary-exporter version: {__version__}")
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of kube-summary-exporter.
    """
    from .. import __version__

    typer.echo(f"kube-summary-exporter version: {__version__}")


@app.command()
def serve(
    listen_address: Annotated[
        Optional[str], typer.Option("--listen-address", help="Listen address, e.g. ':9779' or '127.0.0.1:9779'.")
    ] = None,
    kubeconfig: Annotated[
        Optional[str],
        typer.Option(
            "--kubeconfig",
            help="Path of a kubeconfig file. If not provided the exporter tries the in-cluster "
            "config, then $KUBECONFIG or $HOME/.kube/config.",
        ),
    ] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Logging level.")] = None,
    max_concurrent_fetches: Annotated[
        Optional[int],
        typer.Option("--max-concurrent-fetches", min=1, help="Parallel /stats/summary calls per scrape."),
    ] = None,
):
    """
    Start the HTTP server that answers scrapes on /nodes and /node/{name}.
    """
    if listen_address is not None:
        try:
            config.parse_listen_address(listen_address)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--listen-address")
        config.LISTEN_ADDRESS = listen_address
    if kubeconfig is not None:
        config.KUBECONFIG_PATH = kubeconfig
    if log_level is not None:
        if log_level.upper() not in logging.getLevelNamesMapping():
            raise typer.BadParameter(f"Unknown logging level '{log_level}'.", param_hint="--log-level")
        config.LOG_LEVEL = log_level
    if max_concurrent_fetches is not None:
        config.MAX_CONCURRENT_FETCHES = max_concurrent_fetches

    _configure_logging(config.LOG_LEVEL)

    from ..api.app import run_server

    run_server()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    kube-summary-exporter CLI main entry point.
    """
    pass


if __name__ == "__main__":
    app()
