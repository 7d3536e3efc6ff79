"""Command-line interface for elb-pruner.

Commands:
    recommend   Recommend how to consolidate classic ELBs
    fetch       Save an inventory snapshot for offline analysis
    config      Show or change persistent settings
"""

import logging
import sys
import time

import click
from rich.console import Console

from elbpruner import __version__
from elbpruner.config_manager import ConfigManager
from elbpruner.consolidation import ConsolidationEngine, RecommendationAggregator
from elbpruner.exceptions import ElbPrunerError
from elbpruner.inventory import Inventory, fetch_inventory, load_inventory, save_inventory
from elbpruner.report import render_json, render_text

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(message)s")
    logging.getLogger("elbpruner").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group(context_settings={"help_option_names": ["--help", "-h"]})
@click.option("--verbose", "-v", is_flag=True, help="Show detailed execution information")
@click.version_option(version=__version__)
def main(verbose: bool) -> None:
    """elb-pruner - consolidate classic ELBs into ALBs and NLBs.

    Examines the classic load balancers of an AWS account and recommends
    how they could be replaced by fewer ALBs and NLBs per network tier.
    Nothing in the account is changed.

    \b
    EXAMPLES:
        $ elb-pruner recommend --profile prod
        $ elb-pruner fetch --output prod.json --profile prod
        $ elb-pruner recommend --inventory prod.json --format json

    \b
    CONFIGURATION:
        Config file: ~/.elbpruner/config.toml
        Keys: aws_profile, aws_region, replacement_cost_factor, retained_cost_factor
    """
    _setup_logging(verbose)


@main.command()
@click.option("--profile", help="AWS profile name to use", type=str)
@click.option("--region", help="AWS region to inspect", type=str)
@click.option(
    "--inventory",
    "inventory_path",
    help="Read a saved inventory instead of calling AWS",
    type=click.Path(dir_okay=False),
)
@click.option(
    "--save-inventory",
    "save_path",
    help="Also save the fetched inventory to this file",
    type=click.Path(dir_okay=False),
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format",
)
@click.option("--config", help="Config file path", type=click.Path())
@click.option("--verbose", "-v", is_flag=True, help="Show detailed execution information")
def recommend(
    profile: str | None,
    region: str | None,
    inventory_path: str | None,
    save_path: str | None,
    output_format: str,
    config: str | None,
    verbose: bool,
):
    """Recommend how to consolidate classic load balancers.

    \b
    Examples:
        elb-pruner recommend
        elb-pruner recommend --profile prod --region eu-west-1
        elb-pruner recommend --inventory prod.json --format json --verbose
    """
    if verbose:
        _setup_logging(verbose)

    try:
        settings = ConfigManager.load_config(config)

        if inventory_path:
            inventory = load_inventory(inventory_path)
        else:
            start = time.monotonic()
            inventory = fetch_inventory(
                profile=profile or settings.aws_profile,
                region=region or settings.aws_region,
            )
            if output_format == "text":
                click.echo(
                    f"Read AWS account in {time.monotonic() - start:.2f}s, "
                    "generating recommendations...\n"
                )

        if save_path:
            save_inventory(inventory, save_path)

        engine = ConsolidationEngine(inventory.security_groups)
        aggregator = RecommendationAggregator(
            replacement_cost_factor=settings.replacement_cost_factor,
            retained_cost_factor=settings.retained_cost_factor,
        )
        recommendations = aggregator.finalize(engine.run(inventory.load_balancers))
        summary = aggregator.summarize(recommendations)

        if output_format == "json":
            click.echo(render_json(recommendations, summary))
        else:
            render_text(recommendations, summary, console=Console())

    except ElbPrunerError as e:
        _fail(str(e))
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        _fail(f"An unexpected error occurred: {e}. Run with --verbose for details.")


@main.command()
@click.option(
    "--output",
    "-o",
    "output_path",
    required=True,
    help="File to write the inventory to",
    type=click.Path(dir_okay=False),
)
@click.option("--profile", help="AWS profile name to use", type=str)
@click.option("--region", help="AWS region to inspect", type=str)
@click.option("--config", help="Config file path", type=click.Path())
@click.option("--verbose", "-v", is_flag=True, help="Show detailed execution information")
def fetch(
    output_path: str, profile: str | None, region: str | None, config: str | None, verbose: bool
):
    """Save the load balancer inventory to a JSON file.

    \b
    Examples:
        elb-pruner fetch --output prod.json --profile prod
    """
    if verbose:
        _setup_logging(verbose)

    try:
        inventory: Inventory = fetch_inventory(
            profile=ConfigManager.get_profile(profile, config),
            region=ConfigManager.get_region(region, config),
        )
        path = save_inventory(inventory, output_path)
        click.echo(
            f"Saved {len(inventory.load_balancers)} load balancer(s) and "
            f"{len(inventory.security_groups)} security group(s) to {path}"
        )
    except ElbPrunerError as e:
        _fail(str(e))
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        _fail(f"An unexpected error occurred: {e}. Run with --verbose for details.")


@main.group(name="config")
def config_group():
    """Show or change persistent settings."""
    pass


@config_group.command(name="show")
@click.option("--config", help="Config file path", type=click.Path())
def config_show(config: str | None):
    """Show the effective configuration."""
    try:
        settings = ConfigManager.load_config(config)
    except ElbPrunerError as e:
        _fail(str(e))
        return

    click.echo(f"Config file: {ConfigManager.get_config_path(config)}")
    for key, value in vars(settings).items():
        click.echo(f"  {key} = {value if value is not None else '(not set)'}")


@config_group.command(name="set")
@click.argument("key")
@click.argument("value")
@click.option("--config", help="Config file path", type=click.Path())
def config_set(key: str, value: str, config: str | None):
    """Persist a configuration value.

    \b
    Examples:
        elb-pruner config set aws_profile prod
        elb-pruner config set replacement_cost_factor 0.85
    """
    try:
        ConfigManager.update_config(config, **{key: value})
    except ElbPrunerError as e:
        _fail(str(e))
        return

    click.echo(f"Set {key} = {value}")


if __name__ == "__main__":
    main()
