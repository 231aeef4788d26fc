"""Define common code required for cli."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import click


def add_default_to_usage_help(
    usage_help: str,
    default: str | float | bool | None,
) -> str:
    """Adds default value to usage help string.

    Args:
        usage_help (str):
            usage help for click option.
        default (str or int or float):
            default value as string for click option.

    Returns:
        str:
            New usage_help value.

    """
    if default is not None:
        return f"{usage_help} default={default}"

    return usage_help


def cli_nucleus_input(
    usage_help: str = "Path to the nucleus (hematoxylin) channel image.",
) -> Callable:
    """Enables --nucleus-input option for cli."""
    return click.option("--nucleus-input", help=usage_help, type=str)


def cli_eosin_input(
    usage_help: str = "Path to the eosin (autofluorescence) channel image.",
) -> Callable:
    """Enables --eosin-input option for cli."""
    return click.option("--eosin-input", help=usage_help, type=str)


def cli_output_path(
    usage_help: str = "Path to save the output RGB image.",
    default: str | None = None,
) -> Callable:
    """Enables --output-path option for cli."""
    return click.option(
        "--output-path",
        help=add_default_to_usage_help(usage_help, default),
        type=str,
        default=default,
    )


def cli_strength(
    usage_help: str = "Strength factor k adjusting the colour profile of the stain. "
    "Higher values give a darker, more saturated image.",
    default: float = 2.5,
) -> Callable:
    """Enables -k/--strength option for cli."""
    return click.option(
        "-k",
        "--strength",
        help=add_default_to_usage_help(usage_help, default),
        type=float,
        default=default,
    )


def cli_method(
    usage_help: str = "Channel normalization method.",
    default: str = "fixed",
    input_type: click.Choice | None = None,
) -> Callable:
    """Enables --method option for cli."""
    if input_type is None:
        input_type = click.Choice(["fixed", "percentile"], case_sensitive=False)
    return click.option(
        "--method",
        type=input_type,
        default=default,
        help=add_default_to_usage_help(usage_help, default),
    )


def cli_percentile(
    usage_help: str = "Saturation percentile for the percentile method.",
    default: float = 99.999,
) -> Callable:
    """Enables --percentile option for cli."""
    return click.option(
        "--percentile",
        type=float,
        default=default,
        help=add_default_to_usage_help(usage_help, default),
    )


def cli_chunk_rows(
    usage_help: str = "Render in bands of this many rows to reduce memory use. "
    "By default the whole image is processed at once.",
    default: int | None = None,
) -> Callable:
    """Enables --chunk-rows option for cli."""
    return click.option(
        "--chunk-rows",
        type=click.IntRange(min=1),
        default=default,
        help=add_default_to_usage_help(usage_help, default),
    )


def cli_num_workers(
    usage_help: str = "Number of threads used to render bands.",
    default: int = 1,
) -> Callable:
    """Enables --num-workers option for cli."""
    return click.option(
        "--num-workers",
        help=add_default_to_usage_help(usage_help, default),
        type=click.IntRange(min=1),
        default=default,
    )


def cli_verbose(
    usage_help: str = "Prints the console output.",
    *,
    default: bool = True,
) -> Callable:
    """Enables --verbose option for cli."""
    return click.option(
        "--verbose",
        type=bool,
        help=add_default_to_usage_help(usage_help, str(default)),
        default=default,
    )


class VirtualStainCLI(click.Group):
    """Define virtualstain Commandline Interface Click group."""

    def __init__(
        self: VirtualStainCLI,
        *args: tuple[Any, ...],
        **kwargs: dict[str, Any],
    ) -> None:
        """Initialize VirtualStainCLI."""
        super().__init__(*args, **kwargs)  # type: ignore[arg-type]
        self.help = "Make virtual H&E images from fluorescence microscopy images."
        self.help_option_names = ["-h", "--help"]


def no_input_message(
    input_file: str | Path | None = None,
    message: str = "No image input provided.\n",
) -> Path:
    """This function is called if no input is provided.

    Args:
        input_file (str or Path): Path to input file.
        message (str): Error message to display.

    Returns:
        Path:
            Return input path as :class:`Path`.

    """
    if input_file is None:
        ctx = click.get_current_context()
        return ctx.fail(message=message)
    return Path(input_file)


def prepare_output_path(
    output_path: str | Path,
    default_name: str,
) -> Path:
    """Prepares the output file path of a command.

    If `output_path` is an existing directory, `default_name` is saved
    inside it. Parent directories are created when missing.

    Args:
        output_path (str or Path):
            Output file or directory path.
        default_name (str):
            File name used when `output_path` is a directory.

    Returns:
        pathlib.Path: the output file path.

    """
    output_path = Path(output_path)
    if output_path.is_dir():
        output_path = output_path / default_name
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path


virtualstain_cli = VirtualStainCLI()
