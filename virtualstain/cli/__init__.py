"""Console script for virtualstain."""

import sys
from platform import platform, python_version

import click

from virtualstain import __version__
from virtualstain.cli.common import virtualstain_cli
from virtualstain.cli.render import render


def version_msg() -> str:
    """Return a string with virtualstain package version and python version."""
    return f"virtualstain {__version__} (Python {python_version()}) on {platform()}."


@virtualstain_cli.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(
    __version__,
    "--version",
    "-v",
    help="Show the virtualstain version",
    message=version_msg(),
)
def main() -> int:
    """Make virtual H&E images from fluorescence microscopy images."""
    return 0


main.add_command(render)


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
