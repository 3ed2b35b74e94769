import asyncio, logging, os
import typer
from rich.logging import RichHandler
from ..application.use_cases import decode_store, export_views_parquet, open_store
from ..application.utils import _now_ts_str
from ..domain.errors import EnvelopeError

app = typer.Typer()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """Export decoded envelopes for analysis."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.command()
def export(
    store: str,
    out_dir: str,
    skip_invalid: bool = False,
    run_dir: bool = typer.Option(False, help="Write into a timestamped export_<ts> subdirectory"),
):
    """Decode STORE and write one Parquet file per event kind under OUT_DIR."""
    target = os.path.join(out_dir, f"export_{_now_ts_str()}") if run_dir else out_dir
    try:
        report = asyncio.run(decode_store(open_store(store), skip_invalid=skip_invalid))
    except EnvelopeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    paths = export_views_parquet(report.views, target)
    for p in paths:
        typer.echo(p)
    typer.echo(report.summary())


if __name__ == "__main__":
    app()
