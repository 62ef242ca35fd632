from __future__ import annotations

import logging
import sqlite3
import sys
from pathlib import Path
from typing import Optional

import typer

from ryandata_usps_zip4.archive.walker import read_city_state_from_tar
from ryandata_usps_zip4.comparison import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_RATE_LIMIT_PAUSE,
    generate_diff,
    iter_diff_report,
)
from ryandata_usps_zip4.config import Zip4Settings
from ryandata_usps_zip4.export import (
    city_state_to_dataframe,
    diff_report_dataframe,
    export_index_csv,
    lookup_counties,
    read_index_csv,
)
from ryandata_usps_zip4.index import ZipCountyIndex, collect_zip4_counties
from ryandata_usps_zip4.models.errors import Zip4ExtractionError
from ryandata_usps_zip4.remote.client import SmartyClient
from ryandata_usps_zip4.seed import DEFAULT_SEED_BATCH_SIZE, seed_database

logger = logging.getLogger(__name__)

app = typer.Typer(help="Extract county data from the USPS ZIP+4 national product.")

TAR_OPTION_HELP = "Path to the epf-zip4natl tar file."


@app.callback()
def configure(
    verbose: bool = typer.Option(  # noqa: B008
        False,
        "--verbose",
        "-v",
        help="Log extraction progress to stderr.",
    ),
) -> None:
    """Extract county data from the USPS ZIP+4 national product."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=1)


def _load_settings(*required: str) -> Zip4Settings:
    settings = Zip4Settings.from_env()
    try:
        for name in required:
            settings.require(name)
    except Zip4ExtractionError as exc:
        raise _fail(f"Error: {exc}") from exc
    return settings


def _collect_index(tar: Path, password: str) -> ZipCountyIndex:
    try:
        return collect_zip4_counties(tar, password)
    except (Zip4ExtractionError, OSError) as exc:
        raise _fail(f"Failed to collect details: {exc}") from exc


def _smarty_client(settings: Zip4Settings) -> SmartyClient:
    return SmartyClient(
        settings.require("smarty_auth_id"),
        settings.require("smarty_auth_token"),
        base_url=settings.smarty_base_url,
    )


@app.command("county-lookup")
def county_lookup(
    tar: Path = typer.Option(..., "--tar", help=TAR_OPTION_HELP),  # noqa: B008
    zip_code: Optional[str] = typer.Option(  # noqa: B008
        None,
        "--zip",
        help="Single ZIP code to look up. Without it the whole index is written as CSV.",
    ),
    output: Optional[Path] = typer.Option(  # noqa: B008
        None,
        "--output",
        "-o",
        help="CSV file to write (default: stdout).",
    ),
) -> None:
    """Map ZIP codes to the USPS county numbers that serve them."""
    settings = _load_settings("zip_password")
    index = _collect_index(tar, settings.require("zip_password"))

    if zip_code:
        counties = lookup_counties(index, zip_code)
        if counties is None:
            typer.echo(f"No counties found for ZIP Code: {zip_code}")
            raise typer.Exit(code=1)
        typer.echo(f"ZIP Code: {zip_code}, Counties: {', '.join(counties)}")
        return

    export_index_csv(index, output if output is not None else sys.stdout)


@app.command("city-state")
def city_state(
    tar: Path = typer.Option(..., "--tar", help=TAR_OPTION_HELP),  # noqa: B008
    output: Optional[Path] = typer.Option(  # noqa: B008
        None,
        "--output",
        "-o",
        help="CSV file to write (default: stdout).",
    ),
) -> None:
    """Dump City/State detail records as CSV."""
    settings = _load_settings("city_state_password")
    try:
        df = city_state_to_dataframe(
            read_city_state_from_tar(tar, settings.require("city_state_password"))
        )
    except (Zip4ExtractionError, OSError) as exc:
        raise _fail(f"Failed to read city/state data: {exc}") from exc

    df.to_csv(output if output is not None else sys.stdout, index=False)


@app.command("seed-db")
def seed_db(
    tar: Path = typer.Option(..., "--tar", help=TAR_OPTION_HELP),  # noqa: B008
    db: Path = typer.Option(  # noqa: B008
        Path("zip4.db"),
        "--db",
        help="SQLite database file to create or append to.",
    ),
    batch_size: int = typer.Option(  # noqa: B008
        DEFAULT_SEED_BATCH_SIZE,
        "--batch-size",
        min=1,
        help="Rows per insert batch.",
    ),
) -> None:
    """Load ZIP+4 and City/State detail records into a SQLite database."""
    settings = _load_settings("zip_password", "city_state_password")
    try:
        counts = seed_database(
            db,
            tar,
            settings.require("zip_password"),
            settings.require("city_state_password"),
            batch_size=batch_size,
        )
    except (Zip4ExtractionError, OSError, sqlite3.Error) as exc:
        raise _fail(f"Failed to seed database: {exc}") from exc

    for table, rows in counts.items():
        typer.echo(f"Inserted {rows} rows into {table}")


@app.command("diff-single")
def diff_single(
    tar: Path = typer.Option(..., "--tar", help=TAR_OPTION_HELP),  # noqa: B008
    zip_code: str = typer.Option(..., "--zip", help="ZIP code to compare."),  # noqa: B008
) -> None:
    """Compare USPS and Smarty counties for one ZIP code."""
    settings = _load_settings("zip_password", "smarty_auth_id", "smarty_auth_token")

    typer.echo(
        f"Extracting USPS zip data from {tar} and mapping {zip_code} "
        "to corresponding USPS counties..."
    )
    index = _collect_index(tar, settings.require("zip_password"))

    if lookup_counties(index, zip_code) is None:
        raise _fail(f"Error: No counties found for ZIP Code: {zip_code}")

    with _smarty_client(settings) as client:
        try:
            responses = client.query_batch([zip_code])
        except Zip4ExtractionError as exc:
            raise _fail(f"Error querying Smarty API: {exc}") from exc

    for response in responses:
        diff = generate_diff(zip_code, response, index)
        typer.echo(f"ZIP Code Differences for {zip_code}:")
        typer.echo(f"  - USPS FIPS Codes:   {', '.join(diff.usps_fips)}")
        typer.echo(f"  - Smarty FIPS Codes: {', '.join(diff.smarty_fips)}")
        typer.echo(f"  - Mismatch Count:    {diff.mismatch_count}")
        if diff.error_message:
            typer.echo(f"  - Error:             {diff.error_message}")
        else:
            typer.echo("  - Status:            No errors detected.")
        typer.echo("-" * 50)


@app.command("diff-report")
def diff_report(
    tar: Optional[Path] = typer.Option(None, "--tar", help=TAR_OPTION_HELP),  # noqa: B008
    source: Optional[Path] = typer.Option(  # noqa: B008
        None,
        "--source",
        help="CSV written by county-lookup to use instead of reading the tar.",
    ),
    output: Optional[Path] = typer.Option(  # noqa: B008
        None,
        "--output",
        "-o",
        help="CSV file to write (default: stdout).",
    ),
    batch_size: int = typer.Option(  # noqa: B008
        DEFAULT_BATCH_SIZE,
        "--batch-size",
        min=1,
        max=100,
        help="ZIP codes per Smarty request.",
    ),
    pause: float = typer.Option(  # noqa: B008
        DEFAULT_RATE_LIMIT_PAUSE,
        "--pause",
        min=0.0,
        help="Seconds to wait between Smarty requests.",
    ),
) -> None:
    """Compare every ZIP code of the USPS index against Smarty and write a CSV report."""
    if (tar is None) == (source is None):
        raise _fail("Error: Specify exactly one of --tar or --source")

    if source is not None:
        settings = _load_settings("smarty_auth_id", "smarty_auth_token")
        try:
            index = read_index_csv(source)
        except (Zip4ExtractionError, OSError) as exc:
            raise _fail(f"Failed to read {source}: {exc}") from exc
    else:
        settings = _load_settings("zip_password", "smarty_auth_id", "smarty_auth_token")
        logger.info("Extracting USPS zip data from %s and mapping zips to USPS counties", tar)
        index = _collect_index(tar, settings.require("zip_password"))

    with _smarty_client(settings) as client:
        report = diff_report_dataframe(
            iter_diff_report(index, client, batch_size=batch_size, pause=pause)
        )

    report.to_csv(output if output is not None else sys.stdout, index=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
