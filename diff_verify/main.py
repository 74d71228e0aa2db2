"""
diff-verify - CLI entrypoint.

Usage:
    diff-verify -p <path|glob> [-p ...] [--dry-run] -- <command> [args...]
    python -m diff_verify.main --help
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from diff_verify import __version__
from diff_verify.core.observability.logging_config import resolve_level, setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DRIFT = 1
EXIT_USAGE = 2
EXIT_FATAL = 3
EXIT_INTERRUPTED = 130

HELP = """Verify that a command generates files which match existing files on disk.

Files matching the path/glob given with -p are copied with a '.tmp'
suffix, then COMMAND is executed, and the newly generated files are
compared with the '.tmp' copies. The copies are moved back afterwards,
so the files on disk end up unchanged. If a diff is found, diff-verify
exits with status 1.

Examples:

\b
    diff-verify -p apps/web/graphql-types.ts -- node_modules/.bin/graphql-codegen --config apps/web/codegen.yml
    diff-verify -p apps/admin-web/locales -- pnpm run nx -- run admin-web:linguiExtract
"""


@click.command(
    help=HELP,
    context_settings={"allow_interspersed_args": False, "help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="diff-verify")
@click.option(
    "--path",
    "-p",
    "paths",
    multiple=True,
    metavar="PATH|GLOB",
    help="A path or glob specifying files expected to be generated by the command. Repeatable.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Skip copying, emitting, diffing and moving files. Only log what would be done.",
)
@click.option(
    "--context",
    "context_lines",
    type=click.IntRange(min=0),
    default=None,
    help="Lines of context around each diff hunk (default: 4).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to a settings file (default: ./diff-verify.yml if present).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(
    ctx: click.Context,
    paths: tuple[str, ...],
    dry_run: bool,
    context_lines: int | None,
    config_path: str | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
    command: tuple[str, ...],
) -> None:
    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    from diff_verify.core.config.loader import ConfigError, load_settings, merge_settings
    from diff_verify.core.errors import VerifyError
    from diff_verify.core.services import reporter
    from diff_verify.core.use_cases.verify import run_verify

    try:
        base = load_settings(Path(config_path) if config_path else None)
    except ConfigError as e:
        reporter.error(str(e))
        sys.exit(EXIT_FATAL)

    settings = merge_settings(
        base,
        paths=paths,
        command=command,
        dry_run=dry_run,
        context_lines=context_lines,
    )

    if not settings.command:
        reporter.error("Missing command")
        click.echo(ctx.get_help())
        ctx.exit(EXIT_USAGE)

    if not settings.paths:
        raise click.UsageError("Missing option '--path' / '-p'.", ctx=ctx)

    try:
        result = run_verify(
            patterns=settings.paths,
            command=settings.command,
            dry_run=settings.dry_run,
            context_lines=settings.context_lines,
        )
    except (VerifyError, OSError) as e:
        reporter.error(str(e))
        sys.exit(EXIT_FATAL)
    except KeyboardInterrupt:
        reporter.error("Interrupted")
        sys.exit(EXIT_INTERRUPTED)

    if result.drift_found:
        logger.info("Drift in %d file(s): %s", len(result.changed_files), ", ".join(result.changed_files))
        sys.exit(EXIT_DRIFT)

    logger.info("No drift in %d file(s)", len(result.targets))


if __name__ == "__main__":
    cli()
