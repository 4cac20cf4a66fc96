"""CLI interface for pys3deploy."""

import logging
from typing import Any, Optional

import click

from .api import S3Client
from .config import DeployConfig, config_files_exist, install_config, load_config
from .exceptions import S3DeployConfigError, S3DeployError
from .output import OutputFormatter
from .sync import SyncEngine

logger = logging.getLogger(__name__)


def _load(out: OutputFormatter, overrides: dict[str, Any]) -> DeployConfig:
    """Load the effective configuration or exit with an error."""
    try:
        return load_config(overrides)
    except S3DeployConfigError as e:
        out.error(str(e))
        if not config_files_exist():
            out.info("Run 'pys3deploy install' to create a configuration file.")
        raise click.exceptions.Exit(1) from e


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pys3deploy")
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool) -> None:
    """pys3deploy - Deploy a directory tree to an Amazon S3 bucket."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pys3deploy").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option(
    "--simulate",
    "-s",
    is_flag=True,
    help="Show what would be uploaded and deleted without changing the bucket",
)
@click.option("--path", "-p", help="Local directory to deploy")
@click.option("--remote-path", "-r", help="Key prefix inside the bucket")
@click.option("--bucket", "-b", help="Target bucket")
@click.option(
    "--fail-fast",
    is_flag=True,
    help="Stop at the first file that cannot be uploaded",
)
@click.pass_context
def deploy(
    ctx: Any,
    simulate: bool,
    path: Optional[str],
    remote_path: Optional[str],
    bucket: Optional[str],
    fail_fast: bool,
) -> None:
    """Upload changed files to the bucket.

    Files whose content already matches the remote object are skipped.
    With the ``delete_old_files`` extra, remote objects without a local
    counterpart are deleted afterwards.
    """
    out: OutputFormatter = ctx.obj["out"]
    config = _load(
        out, {"path": path, "remote_path": remote_path, "aws_bucket": bucket}
    )

    try:
        client = S3Client.from_config(config)
        engine = SyncEngine(client, out, fail_fast=fail_fast)
        report = engine.sync(config, simulate=simulate)
    except KeyboardInterrupt:
        ctx.exit(130)
    except S3DeployError as e:
        out.error(str(e))
        ctx.exit(1)

    if out.json_output:
        out.output_json(report.to_dict())

    if not report.ok:
        ctx.exit(1)


@main.command()
@click.option(
    "--simulate",
    "-s",
    is_flag=True,
    help="Show what would be deleted without changing the bucket",
)
@click.option("--bucket", "-b", help="Bucket to empty")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def empty(ctx: Any, simulate: bool, bucket: Optional[str], yes: bool) -> None:
    """Delete every object in the bucket."""
    out: OutputFormatter = ctx.obj["out"]
    config = _load(out, {"aws_bucket": bucket})

    if not simulate and not yes:
        if not click.confirm(
            f"Delete every object in {config.bucket}?", default=False
        ):
            out.warning("Cancelled.")
            ctx.exit(1)

    try:
        client = S3Client.from_config(config)
        engine = SyncEngine(client, out)
        report = engine.empty(config.bucket, simulate=simulate)
    except KeyboardInterrupt:
        ctx.exit(130)
    except S3DeployError as e:
        out.error(str(e))
        ctx.exit(1)

    if out.json_output:
        out.output_json(report.to_dict())

    if not report.ok:
        ctx.exit(1)


@main.command()
@click.option(
    "--default",
    "default",
    is_flag=True,
    help="Install the per-user file (~/.s3deploy/.s3deploy.yml)",
)
@click.pass_context
def install(ctx: Any, default: bool) -> None:
    """Create a configuration file from the bundled template."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        install_path = install_config(default=default)
    except S3DeployConfigError as e:
        out.error(str(e))
        ctx.exit(1)
    except OSError as e:
        out.error(f"Could not write configuration file: {e}")
        ctx.exit(1)

    if out.json_output:
        out.output_json({"path": str(install_path)})
    else:
        out.success(f"A configuration file has been created at {install_path}")


@main.command(name="config")
@click.pass_context
def show_config(ctx: Any) -> None:
    """Show the effective configuration (secrets masked)."""
    out: OutputFormatter = ctx.obj["out"]
    config = _load(out, {})
    settings = config.to_display_dict()

    if out.json_output:
        out.output_json(settings)
        return

    out.print_summary(
        "Effective configuration",
        [(key, "" if value is None else str(value)) for key, value in settings.items()],
    )


if __name__ == "__main__":
    main()
