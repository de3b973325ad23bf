import json
import logging
from pathlib import Path

import click

from .pipeline import (
    CdsCompileError,
    GeneratorConfig,
    Layout,
    OutputPathError,
    OutputValidationError,
    PipelineGenerator,
    load_csn,
)


@click.command()
@click.option("--prefix", "-p", default=None, type=str, help="Prefix for entity interfaces, e.g. 'I'")
@click.option("--layout", "-l", default=None, type=click.Choice([layout.value for layout in Layout]))
@click.option(
    "--javascript",
    "-j",
    is_flag=True,
    default=False,
    help="Write index.d.ts and index.js per namespace (same as --layout tree)",
)
@click.option("--format", "-f", "format_output", is_flag=True, default=False, help="Format the output with prettier")
@click.option("--json", "dump_csn", is_flag=True, default=False, help="Also write the compiled CSN to <output>.json")
@click.option("--singular", is_flag=True, default=False, help="Name entity interfaces after their singular form")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("cds", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def cds_to_types(prefix, layout, javascript, format_output, dump_csn, singular, config, verbose, cds, output):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            config = GeneratorConfig.from_dict(json.load(f))
    else:
        config = GeneratorConfig()

    # CLI flags override the config file
    if prefix is not None:
        config.interface_prefix = prefix
    if layout is not None:
        config.layout = Layout(layout)
    if javascript:
        config.layout = Layout.TREE
    if format_output:
        config.formatter.enabled = True
    if dump_csn:
        config.dump_csn = True
    if singular:
        config.use_singular_names = True

    try:
        csn = load_csn(cds)
        generator = PipelineGenerator(csn, config)
        if config.dump_csn and generator.csn_dump_path(output).resolve() == Path(cds).resolve():
            raise OutputPathError(f"The compiled CSN would overwrite the input {cds}")
        result = generator.write(output)
    except (CdsCompileError, OutputPathError, OutputValidationError) as e:
        raise click.ClickException(str(e)) from e

    warnings = result.diagnostics.warnings()
    if warnings:
        click.echo(f"{len(warnings)} type(s) could not be fully resolved, see the warnings above", err=True)
    click.echo(f"Wrote types to {output}")
