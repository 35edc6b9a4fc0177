# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import json
from pathlib import Path

import click

from turnmsg.errors import NameTableError, RuleFileError
from turnmsg.logging import LOG_LEVELS, configure_logging
from turnmsg.parser import PlayerNameTable, RuleCatalog
from turnmsg.settings import Settings


def _load_catalog(settings: Settings, rules: Path | None) -> RuleCatalog:
    catalog = RuleCatalog(keyword_mode=settings.keyword_mode)
    try:
        catalog.load_file(rules or settings.rules_file)
    except RuleFileError as e:
        raise click.ClickException(str(e)) from e
    return catalog


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override TURNMSG_LOG_LEVEL.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """turnmsg command line interface."""
    settings = Settings()
    configure_logging(log_level, settings=settings)
    ctx.obj = settings


@cli.command("check")
@click.argument("rules", type=click.Path(path_type=Path), required=False)
@click.pass_obj
def check(settings: Settings, rules: Path | None) -> None:
    """Load a rule file and report how many rules it defines.

    Problems in the file are logged to stderr.
    """
    catalog = _load_catalog(settings, rules)
    click.echo(f"{catalog.num_templates} rules loaded from {rules or settings.rules_file}")


@cli.command("parse")
@click.argument("message", type=click.File("r", encoding="utf-8"))
@click.option("--rules", type=click.Path(path_type=Path), default=None, help="Rule file (default: configured rules).")
@click.option("--names", type=click.Path(path_type=Path), default=None, help="JSON player name table.")
@click.option("--turn", type=int, default=1, show_default=True, help="Turn the message was received.")
@click.pass_obj
def parse(settings: Settings, message, rules: Path | None, names: Path | None, turn: int) -> None:
    """Parse one message (file or '-' for stdin) and print the facts as JSON.

    Examples:
        turnmsg parse storm.txt --turn 42
        turnmsg parse - --names races.json < message.txt
    """
    catalog = _load_catalog(settings, rules)
    try:
        resolver = PlayerNameTable.from_json_file(names) if names else PlayerNameTable()
    except NameTableError as e:
        raise click.BadParameter(str(e), param_hint="--names") from e

    facts = catalog.parse_message(message.read(), resolver, turn)
    click.echo(json.dumps([fact.model_dump(mode="json") for fact in facts], indent=2))


if __name__ == "__main__":
    cli()
