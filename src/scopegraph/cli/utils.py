"""CLI utilities."""

from pathlib import Path

import click

from scopegraph.config.loader import load_config
from scopegraph.config.models import ScopeGraphConfig
from scopegraph.core.errors import ScopeGraphError
from scopegraph.core.logging import configure_logging


def load_cli_config(ctx: click.Context, root: Path) -> ScopeGraphConfig:
    """Load config for ``root`` and apply its ``logging`` section.

    ``-v`` on the group forces DEBUG on the root level; outputs with an
    explicit level keep it.

    Raises:
        click.ClickException: Invalid config files or values.
    """
    try:
        config = load_config(root)
    except ScopeGraphError as e:
        raise click.ClickException(e.message) from e

    logging_config = config.logging
    if (ctx.find_root().obj or {}).get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    return config
