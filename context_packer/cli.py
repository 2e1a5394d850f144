"""Command line entry point for context-packer."""

import json
import logging
import math
from dataclasses import asdict

import click
import yaml

from .config.settings import OptimizerConfig
from .core.optimizer import ContextOptimizer
from .core.tokenizer_service import TokenizerService
from .utils.message_formatter import MessageFormatter


def _finite(value):
    """Replace non-finite floats (required scores) with None for strict JSON."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(item) for item in value]
    return value


def _load_config(path: str) -> OptimizerConfig:
    try:
        return OptimizerConfig.from_file(path)
    except (OSError, ValueError, TypeError, KeyError, yaml.YAMLError) as e:
        raise click.ClickException(f"Could not load {path}: {e}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Pack context sources into a token budget."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--query", "-q", default=None, help="User query appended at the end")
@click.option("--tokenizer", type=click.Choice(sorted(TokenizerService.BACKENDS)), default="heuristic",
              show_default=True, help="Token counting backend")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              show_default=True)
@click.option("--messages", is_flag=True, help="Print chat messages instead of the pack report")
def pack(config_path: str, query: str, tokenizer: str, output_format: str, messages: bool) -> None:
    """Pack the sources declared in CONFIG_PATH."""
    config = _load_config(config_path)
    try:
        optimizer = ContextOptimizer.from_config(config, TokenizerService(backend=tokenizer))
    except (ImportError, ValueError) as e:
        raise click.ClickException(str(e))
    result = optimizer.pack(query)

    if messages:
        click.echo(json.dumps(MessageFormatter().to_messages(result), indent=2, ensure_ascii=False))
        return

    if output_format == "json":
        payload = _finite(asdict(result))
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False, default=str))
        return

    stats = result.stats
    click.echo(f"Model:       {config.model}")
    click.echo(f"Budget:      {stats.budget} tokens")
    click.echo(f"Used:        {stats.total_tokens} tokens ({stats.utilization:.1%})")
    if stats.estimated_cost:
        click.echo(f"Est. cost:   {stats.estimated_cost.input} ({stats.estimated_cost.provider})")

    click.echo("\nItems:")
    for item in result.items:
        click.echo(f"  [{item.placement:<9}] {item.id} ({item.tokens} tokens)")

    click.echo("\nBreakdown:")
    for source, info in stats.breakdown.items():
        line = f"  {source}: {info.tokens} tokens, {info.items} item(s)"
        if info.dropped:
            line += f", {info.dropped} dropped ({info.reason})"
        click.echo(line)

    if result.dropped:
        click.echo("\nDropped:")
        for dropped in result.dropped:
            click.echo(f"  {dropped.id}: {dropped.reason}")

    if result.warnings:
        click.echo("\nWarnings:")
        for warning in result.warnings:
            click.echo(f"  [{warning.type}] {warning.message}")


@main.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
def validate(config_path: str) -> None:
    """Check CONFIG_PATH for configuration issues."""
    issues = _load_config(config_path).validate()
    if not issues:
        click.echo("Configuration is valid.")
        return
    for issue in issues:
        click.echo(f"- {issue}")
    click.get_current_context().exit(1)


if __name__ == "__main__":
    main()
