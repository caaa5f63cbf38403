"""Command line entry point: ``ga-rss <opml> <md-dir>``."""
import asyncio
import logging
import sys

import click

from .config import get_settings
from .errors import ConfigurationError, OutputError
from .logging_config import setup_logging
from .pipeline import DigestPipeline

logger = logging.getLogger(__name__)

USAGE = "usage: ga-rss <opml> <md-dir>"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.command()
@click.argument("opml_path", required=False, type=click.Path(dir_okay=False))
@click.argument("output_dir", required=False, type=click.Path(file_okay=False))
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (default: LOG_LEVEL or INFO).",
)
def main(opml_path, output_dir, log_level):
    """Fetch every feed of OPML_PATH and write Markdown digests to OUTPUT_DIR."""
    if opml_path is None or output_dir is None:
        click.echo(USAGE)
        return

    settings = get_settings()
    setup_logging((log_level or settings.log_level).upper())

    pipeline = DigestPipeline(settings=settings)
    try:
        asyncio.run(pipeline.run(opml_path, output_dir))
    except (ConfigurationError, OutputError) as exc:
        logger.error("%s", exc)
        sys.exit(1)
