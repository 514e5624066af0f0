from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer

from nbprefix.config.tfvars import VALID_STATUSES, PrefixDocument, validate_prefix_name
from nbprefix.errors import DocumentError, PrefixError
from nbprefix.models import NamedSubnet, PrefixRecord
from nbprefix.output.export import save_table
from nbprefix.processing.address import (
    format_address,
    parse_cidr,
    parse_network_address,
    parse_prefix_length,
    validate_network_address,
)
from nbprefix.processing.sequence import generate_sequence
from nbprefix.processing.table import (
    document_to_dataframe,
    preview_rows,
    sequence_to_dataframe,
)
from nbprefix.utils.logging import get_logger, set_verbosity

app = typer.Typer(help="Generate consecutive IPv4 prefixes for a NetBox Terraform configuration.")

log = get_logger(__name__)

DEFAULT_TFVARS = Path("terraform.tfvars.json")
DEFAULT_EXAMPLE = Path("terraform.tfvars.json.example")

PREVIEW_HEAD = 5
PREVIEW_TAIL = 2


def _prefix_len_callback(value: str) -> int:
    try:
        return parse_prefix_length(value)
    except PrefixError as e:
        raise typer.BadParameter(str(e))


def _status_callback(value: str) -> str:
    if value not in VALID_STATUSES:
        raise typer.BadParameter(f"must be one of: {', '.join(VALID_STATUSES)}")
    return value


def _base_name_callback(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return validate_prefix_name(value)
    except DocumentError as e:
        raise typer.BadParameter(str(e))


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _build_sequence(
        start: str,
        prefix_len: int,
        count: int,
        base_name: Optional[str],
) -> list[NamedSubnet]:
    """
    Parse the start address and run the generator, turning validation
    failures into a CLI error.
    """
    try:
        address = parse_network_address(start)
        return generate_sequence(address, prefix_len, count, base_name or None)
    except PrefixError as e:
        _fail(str(e))


def _echo_preview(named: list[NamedSubnet]) -> None:
    shown, hidden = preview_rows(sequence_to_dataframe(named), head=PREVIEW_HEAD, tail=PREVIEW_TAIL)

    typer.echo("Subnets to be created:")
    for pos, (index, name, cidr) in enumerate(zip(shown["index"], shown["name"], shown["cidr"])):
        if hidden and pos == PREVIEW_HEAD:
            typer.echo(f"  ... ({hidden} more) ...")
        typer.echo(f"  {index}. {name} -> {cidr}")


CidrOption = typer.Option(
    "/24",
    "--cidr",
    "-c",
    callback=_prefix_len_callback,
    help="Prefix length, e.g. /24, /26, /17 (8-30).",
)
CountOption = typer.Option(
    12,
    "--count",
    "-n",
    help="How many consecutive subnets to create (1-254).",
)
NameOption = typer.Option(
    None,
    "--name",
    callback=_base_name_callback,
    help="Base name for subnets (e.g. 'network' -> network_01, network_02). "
         "Without it names are derived from the address (subnet_10_0_1_0).",
)
FileOption = typer.Option(
    DEFAULT_TFVARS,
    "--file",
    "-f",
    envvar="NBPREFIX_TFVARS",
    help="Terraform variables file (JSON syntax) holding the prefixes map.",
)


@app.callback()
def main_callback(
        verbose: int = typer.Option(
            0,
            "--verbose",
            "-v",
            count=True,
            help="Increase log output (-v info, -vv debug).",
        ),
):
    set_verbosity(verbose)


@app.command()
def check(
        address: str = typer.Argument(..., help="Network address to validate, e.g. 10.0.0.0"),
        prefix_len: str = CidrOption,
):
    """
    Check that ADDRESS is a network address for the given prefix length.

    Prints the correct network address when it is not.
    """
    try:
        value = parse_network_address(address)
        validate_network_address(value, prefix_len)
    except PrefixError as e:
        _fail(str(e))

    typer.echo(f"{format_address(value)}/{prefix_len} is a valid network address")


@app.command()
def generate(
        start: str = typer.Argument(..., help="Starting network address, e.g. 10.0.0.0"),
        prefix_len: str = CidrOption,
        count: int = CountOption,
        base_name: Optional[str] = NameOption,
        output: Optional[Path] = typer.Option(
            None,
            "--output",
            "-o",
            help="Write the full subnet table to a .csv or .json file.",
        ),
        compress: bool = typer.Option(
            False,
            "--gzip",
            help="Also write a gzipped copy of --output.",
        ),
        show_all: bool = typer.Option(
            False,
            "--all",
            help="Print every subnet instead of the shortened preview.",
        ),
):
    """
    Show the consecutive subnets that would be created.

    Example:

        nbprefix generate 10.0.0.0 --cidr /26 --count 4
        nbprefix generate 10.0.0.0 -c /24 -n 100 --name office -o plan.csv
    """
    named = _build_sequence(start, prefix_len, count, base_name)

    if show_all:
        for i, item in enumerate(named, start=1):
            typer.echo(f"  {i}. {item.name} -> {item.cidr}")
    else:
        _echo_preview(named)

    if output is not None:
        out_path = save_table(sequence_to_dataframe(named), output.expanduser().resolve(), compress=compress)
        typer.echo(f"Wrote subnet table to {out_path}")


@app.command()
def add(
        start: str = typer.Argument(..., help="Starting network address, e.g. 10.0.0.0"),
        prefix_len: str = CidrOption,
        count: int = CountOption,
        base_name: Optional[str] = NameOption,
        description: str = typer.Option(
            "Subnet",
            "--description",
            "-d",
            help="Description prefix; each entry gets '<prefix> <cidr>'.",
        ),
        status: str = typer.Option(
            "active",
            "--status",
            "-s",
            callback=_status_callback,
            help="NetBox status for all subnets: container | active | reserved | deprecated",
        ),
        is_pool: bool = typer.Option(
            False,
            "--pool/--no-pool",
            help="Mark the subnets as pools.",
        ),
        tfvars: Path = FileOption,
        example: Path = typer.Option(
            DEFAULT_EXAMPLE,
            "--example",
            envvar="NBPREFIX_TFVARS_EXAMPLE",
            help="Template copied when the variables file does not exist yet.",
        ),
        yes: bool = typer.Option(
            False,
            "--yes",
            "-y",
            help="Do not ask for confirmation.",
        ),
        backup: bool = typer.Option(
            True,
            "--backup/--no-backup",
            help="Keep a .backup copy of the variables file before writing.",
        ),
):
    """
    Generate consecutive subnets and add them to the Terraform variables file.

    Names already present in the file are skipped. Run terraform plan/apply
    afterwards to create the prefixes in NetBox.
    """
    named = _build_sequence(start, prefix_len, count, base_name)

    try:
        doc = PrefixDocument.load(tfvars, example=example)
    except DocumentError as e:
        _fail(str(e))

    _echo_preview(named)

    if not yes and not typer.confirm("Continue with creating these prefixes?", default=False):
        typer.echo("Operation cancelled.")
        raise typer.Exit(code=0)

    log.info("Adding %d /%d prefixes to %s", len(named), prefix_len, doc.path)
    result = doc.add_sequence(
        named,
        description_prefix=description,
        status=status,
        is_pool=is_pool,
    )
    for name in result.skipped:
        typer.secho(f"Skipped: {name} already exists in {doc.path}", fg=typer.colors.YELLOW)

    typer.echo(f"Successfully added {len(result.added)} out of {len(named)} prefixes to {doc.path}")

    if not result.added:
        typer.echo("No new prefixes to create.", err=True)
        raise typer.Exit(code=1)

    try:
        backup_path = doc.save(backup=backup)
    except OSError as e:
        _fail(f"Could not write {doc.path}: {e}")

    if backup_path is not None:
        typer.echo(f"Previous version kept at {backup_path}")
    typer.echo("Run 'terraform plan' and 'terraform apply' to create them in NetBox.")


@app.command("add-prefix")
def add_prefix(
        cidr: str = typer.Argument(..., help="Prefix to add, e.g. 192.168.1.0/24 (any length /0 to /32)."),
        name: str = typer.Option(
            ...,
            "--name",
            help="Unique identifier: starts with a letter, then letters, numbers or underscores.",
        ),
        description: str = typer.Option(
            "",
            "--description",
            "-d",
            help="Free-text description.",
        ),
        status: str = typer.Option(
            "active",
            "--status",
            "-s",
            callback=_status_callback,
            help="NetBox status: container | active | reserved | deprecated",
        ),
        tenant_id: Optional[int] = typer.Option(
            None,
            "--tenant-id",
            min=0,
            help="NetBox tenant ID (optional).",
        ),
        tfvars: Path = FileOption,
        example: Path = typer.Option(
            DEFAULT_EXAMPLE,
            "--example",
            envvar="NBPREFIX_TFVARS_EXAMPLE",
            help="Template copied when the variables file does not exist yet.",
        ),
        backup: bool = typer.Option(
            True,
            "--backup/--no-backup",
            help="Keep a .backup copy of the variables file before writing.",
        ),
):
    """
    Add one prefix to the Terraform variables file.

    Example:

        nbprefix add-prefix 192.168.1.0/24 --name office_lan -d "Office LAN" --tenant-id 3
    """
    try:
        validate_prefix_name(name)
        subnet = parse_cidr(cidr)
    except (DocumentError, PrefixError) as e:
        raise typer.BadParameter(str(e))

    try:
        doc = PrefixDocument.load(tfvars, example=example)
    except DocumentError as e:
        _fail(str(e))

    if name in doc:
        _fail(f"Prefix with name '{name}' already exists in {doc.path}")

    record = PrefixRecord(
        prefix=subnet.cidr,
        description=description,
        status=status,
        tenant_id=tenant_id,
    )
    doc.add(name, record)

    try:
        doc.save(backup=backup)
    except OSError as e:
        _fail(f"Could not write {doc.path}: {e}")

    typer.echo(f"Added prefix '{name}' ({subnet.cidr}) to {doc.path}")
    typer.echo("Run 'terraform plan' and 'terraform apply' to create it in NetBox.")


@app.command("list")
def list_prefixes(
        tfvars: Path = FileOption,
):
    """List the prefixes currently in the Terraform variables file."""
    try:
        doc = PrefixDocument.load(tfvars)
    except DocumentError as e:
        _fail(str(e))

    if not len(doc):
        typer.echo(f"No prefixes in {doc.path}")
        return

    df = document_to_dataframe(doc.prefixes)
    typer.echo(df.to_string(index=False))


def main() -> None:
    """Entry point for console_scripts."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Interrupted by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
