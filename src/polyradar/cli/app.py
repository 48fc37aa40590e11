"""Root CLI app - entry point and command registration."""

import typer

from polyradar.config import get_settings
from polyradar.config.settings import configure_logging

app = typer.Typer(
    name="polyradar",
    help="Polyradar - Scan, enrich, score and rank Polymarket markets.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "profile": profile}


# Subcommands registered from other modules
from polyradar.cli import api_cmd, scan, trade  # noqa: E402

app.command("scan")(scan.scan_cmd)
app.command("health")(scan.health_cmd)
app.command("config")(scan.config_cmd)
app.add_typer(trade.app, name="trade")
app.add_typer(api_cmd.app, name="api")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
