"""CLI command to start the exporter."""

import logging
import click
import uvicorn

from ..exporter import ZigbeeExporter
from ..model.config import load_config

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="YAML configuration file path",
)
@click.option(
    "--url",
    help="Gateway REST API url, e.g. http://gateway:4501",
)
@click.option(
    "--username",
    help="Gateway API username",
)
@click.option(
    "--host",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    type=int,
    help="Port to listen for metric scrapes (default: 8000)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (default: INFO)",
)
def main(config, url, username, host, port, log_level):
    """Export Zigbee sensor readings from a deCONZ gateway as Prometheus metrics.

    Examples:
        zigmetrics-serve --url http://gateway:4501 --username 0E87CDA111 --port 9199

        zigmetrics-serve --config zigmetrics.yaml
    """
    try:
        cfg = load_config(
            config,
            url=url,
            username=username,
            host=host,
            port=port,
            log_level=log_level,
        )
    except Exception as e:
        raise click.UsageError(f"Invalid configuration: {e}") from e

    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    exporter = ZigbeeExporter(cfg)
    exporter.start()

    click.echo(f"📍 Metrics: http://{cfg.host}:{cfg.port}/metrics")

    try:
        uvicorn.run(
            exporter.get_api_app(),
            host=cfg.host,
            port=cfg.port,
            log_level=cfg.log_level.lower(),
        )
    except KeyboardInterrupt:
        click.echo("\n🛑 Shutting down...")
    finally:
        exporter.stop()


if __name__ == "__main__":
    main()
