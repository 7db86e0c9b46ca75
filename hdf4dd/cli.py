import logging

import click
import fsspec
import ujson

from hdf4dd.constants import tag_name
from hdf4dd.errors import HDF4Error
from hdf4dd.file import HDF4File

logger = logging.getLogger("hdf4dd.cli")


def str_to_json(ctx, param, value):
    if value and not isinstance(value, dict):
        value = ujson.loads(value)
    return value


def _chunking_summary(info):
    out = {}
    for k, v in info.items():
        if isinstance(v, bytes):
            v = v.hex()
        elif isinstance(v, tuple):
            v = list(v)
        out[k] = v
    return out


def list_records(h, load=False):
    out = []
    for record in h.records():
        if load:
            try:
                record.ensure_loaded()
            except (HDF4Error, OSError) as e:
                logger.error("%s: %s", record, e)
        summary = record.summary()
        if record.chunking is not None:
            summary["chunking"] = _chunking_summary(record.chunking)
        out.append(summary)
    return out


@click.command()
@click.argument("path")
@click.option("--storage-options", help="Arguments that will be passed to fsspec.open()",
              type=click.UNPROCESSED, callback=str_to_json, default=None)
@click.option("--load", is_flag=True, default=False,
              help="Decode every record, following compressed and chunked elements")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print the listing as JSON")
@click.option("--error", type=click.Choice(["warn", "ignore", "raise"]),
              default="warn", show_default=True,
              help="What to do with unsupported special elements")
@click.option("--output", "-o", default=None,
              help="Write the JSON listing to this fsspec URL instead of stdout")
@click.option('--verbose', '-v', is_flag=True)
def cli(path, storage_options, load, as_json, error, output, verbose):
    """List the data descriptors of an HDF4 file"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    with HDF4File(path, storage_options=storage_options, error=error) as h:
        summaries = list_records(h, load=load)
    if output:
        logger.info("Saving to %s", output)
        with fsspec.open(output, mode="wt") as f:
            ujson.dump(summaries, f, indent=2)
        return
    if as_json:
        click.echo(ujson.dumps(summaries, indent=2))
        return
    for s in summaries:
        line = f"{tag_name(s['tag']):>10} <{s['tag']},{s['ref']}> offset: {s['offset']}, length: {s['length']}"
        if s["extended"]:
            line += " (extended)"
        if s["error"]:
            line += f" [{s['error']}]"
        click.echo(line)


if __name__ == "__main__":
    cli()
