"""Command line interface for render."""

import logging

import click

from virtualstain import logger
from virtualstain.cli.common import (
    cli_chunk_rows,
    cli_eosin_input,
    cli_method,
    cli_nucleus_input,
    cli_num_workers,
    cli_output_path,
    cli_percentile,
    cli_strength,
    cli_verbose,
    no_input_message,
    prepare_output_path,
    virtualstain_cli,
)


@virtualstain_cli.command()
@cli_nucleus_input()
@cli_eosin_input()
@cli_output_path(default="virtual_he.tif")
@cli_strength(default=2.5)
@cli_method(default="fixed")
@cli_percentile(default=99.999)
# inputs specific to this function
@click.option(
    "--stain-coefficients",
    help="Name of the registered stain coefficients to use. default=he",
    default=None,
)
@click.option(
    "--stain-matrix",
    help="Custom 2x3 stain coefficient matrix, hematoxylin on the first row. "
    "This must be a path to a npy file or a csv file without column headers.",
    default=None,
)
@cli_chunk_rows()
@cli_num_workers(default=1)
@cli_verbose(default=False)
def render(
    nucleus_input: str,
    eosin_input: str,
    output_path: str,
    strength: float,
    method: str,
    percentile: float,
    stain_coefficients: str,
    stain_matrix: str,
    chunk_rows: int,
    num_workers: int,
    *,
    verbose: bool,
) -> None:
    """Make a virtual H&E image from a nucleus and an eosin channel."""
    from virtualstain.tools.stainmodel import StainCoefficients
    from virtualstain.tools.virtual_he import VirtualHERenderer
    from virtualstain.utils import imread_channel, imwrite

    nucleus_input = no_input_message(
        input_file=nucleus_input,
        message="No nucleus image input provided.\n",
    )
    eosin_input = no_input_message(
        input_file=eosin_input,
        message="No eosin image input provided.\n",
    )

    if stain_matrix is not None and stain_coefficients is not None:
        msg = "Use only one of `--stain-matrix` and `--stain-coefficients`."
        raise click.UsageError(msg)

    previous_level = logger.level
    if verbose:
        logger.setLevel(logging.DEBUG)

    try:
        coefficients = (
            StainCoefficients.from_matrix(stain_matrix)
            if stain_matrix is not None
            else stain_coefficients
        )
        renderer = VirtualHERenderer(
            k=strength,
            coefficients=coefficients,
            method=method,
            percentile=percentile,
            chunk_rows=chunk_rows,
            n_workers=num_workers,
        )

        nucleus, nucleus_depth = imread_channel(nucleus_input)
        eosin, eosin_depth = imread_channel(eosin_input)
        logger.debug(
            "Loaded nucleus (%d-bit) and eosin (%d-bit) images of shape %s.",
            nucleus_depth,
            eosin_depth,
            nucleus.shape,
        )

        rgb = renderer.render(nucleus, eosin, nucleus_depth, eosin_depth)

        output_path = prepare_output_path(output_path, "virtual_he.tif")
        imwrite(output_path, rgb)
        logger.info("Virtual H&E image saved to: %s", output_path)
    finally:
        logger.setLevel(previous_level)
