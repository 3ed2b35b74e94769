import json, asyncio, logging
import dataclasses
import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .application.use_cases import decode_store, open_store, run_demo
from .domain.codec import payload_type_for
from .domain.envelope import envelope_from_payload
from .domain.errors import EnvelopeError
from .domain.value_types import EventKind

console = Console()
err_console = Console(stderr=True)

STORE_ENVVAR = "DEFEVENTS_STORE"

# dataclass field -> --field name, where the JSON key differs
_FIELD_ALIASES = {"from_address": "from", "to_address": "to"}


def _field_names(cls: type) -> set[str]:
    return {_FIELD_ALIASES.get(f.name, f.name) for f in dataclasses.fields(cls)}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging")
def cli(verbose):
    """defevents: tagged DeFi event envelopes (encode, store, decode)."""
    _setup_logging(verbose)


@cli.command("demo")
@click.option("--out-dir", type=click.Path(file_okay=False), default=".", show_default=True,
              help="Where raw_event.out.json and typed_event.out.json are written")
@click.option("--store", "store_path", type=str, default="", envvar=STORE_ENVVAR,
              help="Optional envelope store to append the sample to (*.jsonl or parquet dir)")
def demo_cmd(out_dir, store_path):
    """Encode the sample Swap event and write its raw and typed JSON renderings."""
    store = open_store(store_path) if store_path else None
    try:
        paths = asyncio.run(run_demo(out_dir, store=store))
    except EnvelopeError as e:
        raise click.ClickException(str(e))
    console.print(f"[bold]raw[/]: {paths['raw']}")
    console.print(f"[bold]typed[/]: {paths['typed']}")
    if store_path:
        console.print(f"[bold]store[/]: {store_path}")


@cli.command("append")
@click.option("--store", "store_path", required=True, envvar=STORE_ENVVAR, help="Envelope store path")
@click.option("--kind", required=True, help="Swap | Transfer | PairCreated | Mint | Burn (or 0..4)")
@click.option("--contract", required=True, help="Emitter contract address")
@click.option("--field", "fields", multiple=True, help="Payload field as NAME=VALUE; repeat per field")
@click.option("--timestamp", type=int, default=None, help="Creation time (unix seconds); defaults to now")
def append_cmd(store_path, kind, contract, fields, timestamp):
    """Encode one payload and append its envelope to the store."""
    try:
        ek = EventKind.parse(kind)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--kind")

    obj: dict[str, str] = {}
    for f in fields:
        name, sep, value = f.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {f!r}", param_hint="--field")
        obj[name.strip()] = value

    cls = payload_type_for(ek)
    unknown = sorted(set(obj) - _field_names(cls))
    if unknown:
        allowed = ", ".join(sorted(_field_names(cls)))
        raise click.BadParameter(
            f"{ek.display_name} has no field(s) {unknown}; expected {allowed}", param_hint="--field")
    try:
        payload = cls.from_json(obj)
    except KeyError as e:
        raise click.UsageError(f"{ek.display_name} needs --field {e.args[0]}=...")
    except ValueError as e:
        raise click.UsageError(f"{ek.display_name}: {e}")

    try:
        evt = envelope_from_payload(payload, contract, timestamp)
        asyncio.run(open_store(store_path).append(evt))
    except EnvelopeError as e:
        raise click.ClickException(str(e))
    console.print(f"[green]appended[/] {evt.kind_name} ({len(evt.payload)} bytes) → {store_path}")


@cli.command("show")
@click.option("--store", "store_path", required=True, envvar=STORE_ENVVAR, help="Envelope store path")
@click.option("--skip-invalid/--strict", default=False, show_default=True,
              help="Report undecodable envelopes instead of failing on the first one")
def show_cmd(store_path, skip_invalid):
    """Decode every stored envelope and print its typed view."""
    try:
        report = asyncio.run(decode_store(open_store(store_path), skip_invalid=skip_invalid))
    except EnvelopeError as e:
        raise click.ClickException(str(e))

    table = Table(title=store_path, expand=True)
    table.add_column("#", justify="right")
    table.add_column("kind")
    table.add_column("contract")
    table.add_column("payload", overflow="fold")
    for i, view in enumerate(report.views):
        row = view.to_json()
        row.pop("kind"); row.pop("contract_address")
        table.add_row(str(i), view.kind.display_name, view.contract_address, json.dumps(row))
    console.print(table)

    for idx, err in report.failures:
        console.print(Panel(str(err), title=f"envelope #{idx}", border_style="red"))

    s = report.summary()
    console.print(
        f"[bold]summary[/]: "
        f"[green]processed_ok[/]={s['processed_ok']}  "
        f"[red]processed_failed[/]={s['processed_failed']}  "
        f"(total={s['total']})"
    )


if __name__ == "__main__":
    cli()
