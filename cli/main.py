"""graphlink CLI — entry-point for running graphs against a model.

Usage:
    python cli/main.py --help

Command groups:
    graph   → talk to the graph execution service (info, folder, trust, run)
    model   → explore a model snapshot (paths, geometry)
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from graphlink.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from graphlink.log import configure_logging

from cli.commands.graph import graph_app
from cli.commands.model import model_app

app = typer.Typer(
    name="graphlink",
    help="Run visual-programming graphs against a design model.",
    no_args_is_help=True,
)
app.add_typer(graph_app, name="graph")
app.add_typer(model_app, name="model")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG | INFO | WARNING."),
) -> None:
    configure_logging(log_level)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
