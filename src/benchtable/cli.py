import logging
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from .collector import collect_rows, validate_mode
from .config import ARTIFACT_FORMS, MODES, BenchTableConfig, load_config_file
from .errors import BenchTableError, InvalidInvocationError
from .renderer import render_rows

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    log_level_str = os.getenv("BENCHTABLE_LOG_LEVEL", "WARNING").upper()
    level = logging.DEBUG if verbose else getattr(logging, log_level_str, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        stream=sys.stderr,
    )


def _build_config(config_path: str | None, **overrides: object) -> BenchTableConfig:
    config = BenchTableConfig.from_env()
    if config_path:
        config = load_config_file(Path(config_path), base=config)
    return config.with_overrides(**overrides)


class BenchTableCommand(click.Command):
    """Report usage errors with exit status 1 instead of click's 2."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.show()
            ctx.exit(1)


@click.command(cls=BenchTableCommand)
@click.argument("mode", required=False)
@click.option(
    "--results-dir",
    default=None,
    help="Criterion output root, one subdirectory per group [env: BENCHTABLE_RESULTS_DIR]",
)
@click.option(
    "--data-dir",
    default=None,
    help="Directory holding the benchmarked dataset files [env: BENCHTABLE_DATA_DIR]",
)
@click.option("--baseline", default=None, help="Implementation A (speedup numerator)")
@click.option("--challenger", default=None, help="Implementation B (speedup denominator)")
@click.option(
    "--form",
    "artifact_form",
    type=click.Choice(ARTIFACT_FORMS, case_sensitive=False),
    default=None,
    help="Artifact to read: raw.csv samples or estimates.json point estimate",
)
@click.option(
    "--sort/--no-sort",
    default=None,
    help="Sort rows by bench name (default: sorted when MODE is given)",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML file with config overrides",
)
@click.option(
    "--output",
    "-o",
    default=None,
    help="Output file (default: stdout)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
def main(
    mode: str | None,
    results_dir: str | None,
    data_dir: str | None,
    baseline: str | None,
    challenger: str | None,
    artifact_form: str | None,
    sort: bool | None,
    config_path: str | None,
    output: str | None,
    verbose: bool,
) -> None:
    """Summarize Criterion results as a speedup table.

    MODE: optional operation suffix (encode or decode). Without it, artifacts
    are read from the bare implementation directories.

    Examples:

      # flate2 vs libdeflate, no suffix
      benchtable

      # flate2_encode vs libdeflate_encode, sorted by bench
      benchtable encode

      # Use Criterion's point estimates instead of raw samples
      benchtable --form estimates decode
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = _build_config(
            config_path,
            results_dir=results_dir,
            data_dir=data_dir,
            baseline=baseline,
            challenger=challenger,
            artifact_form=artifact_form,
        )
        validate_mode(mode, config)
    except InvalidInvocationError as e:
        click.echo(f"Usage: benchtable [OPTIONS] [{'|'.join(MODES)}]", err=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except BenchTableError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        rows = collect_rows(config, mode=mode, sort=sort)
    except BenchTableError as e:
        logger.debug("Collection failed (%s)", e.kind, exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    content = "\n".join(render_rows(config.labels, rows))

    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(content + "\n", encoding="utf-8")
        click.echo(f"Table saved to: {out_path}", err=True)
    else:
        click.echo(content)


if __name__ == "__main__":
    main()
