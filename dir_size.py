# /// script
# dependencies = [
#   "python-dotenv",
#   "typeguard",
# ]
# ///

"""A tool to sum the sizes of the top-level entries in a directory"""

import errno
import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from typeguard import typechecked

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = "WARNING"


class UnitParseError(ValueError):
    """Raised when a unit token is not one of the known keywords"""


class Unit(Enum):
    BYTE = 1
    KILOBYTE = 1024
    MEGABYTE = 1024 * 1024
    GIGABYTE = 1024 * 1024 * 1024

    @classmethod
    def from_str(cls, token: str) -> "Unit":
        """Parse a unit keyword (byte, kilo, mega, giga), ignoring case"""
        units = {
            "byte": cls.BYTE,
            "kilo": cls.KILOBYTE,
            "mega": cls.MEGABYTE,
            "giga": cls.GIGABYTE,
        }
        try:
            return units[token.lower()]
        except KeyError:
            raise UnitParseError(f"Invalid unit: {token}") from None


@typechecked
def get_unit(args: list[str]) -> Union[Unit, UnitParseError]:
    """
    Resolve the unit from the full argument list (program name included).

    Anything other than exactly three arguments means bytes. A bad unit token
    is returned as a UnitParseError instead of being raised.
    """
    if len(args) != 3:
        return Unit.BYTE

    try:
        return Unit.from_str(args[2])
    except UnitParseError as e:
        return e


@typechecked
def get_factor(unit_result: Union[Unit, UnitParseError]) -> int:
    """Map a resolved unit to its divisor; a parse failure counts as bytes"""
    if isinstance(unit_result, Unit):
        return unit_result.value

    logger.debug(f"Ignoring unit: {unit_result}")
    return 1


@typechecked
def calculate_dir_total(path: Union[str, Path], factor: int) -> int:
    """
    Sum the sizes of the immediate, non-hidden entries of a directory.

    Args:
        path: Directory to scan (not recursed into)
        factor: Divisor applied to the byte total, must be at least 1

    Returns:
        The byte total divided by factor, truncated

    Raises:
        OSError: If the directory cannot be listed or an entry cannot be stat-ed
    """
    if factor < 1:
        raise ValueError(f"Factor must be positive, got {factor}")

    # Path("") would silently become the current directory
    if not str(path):
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)

    total = 0
    for entry in Path(path).iterdir():
        if entry.name.startswith("."):
            logger.debug(f"Skipping hidden entry: {entry.name}")
            continue

        # Follows symlinks, so a dangling link raises here and aborts the sum
        size = entry.stat().st_size
        logger.debug(f"{entry.name}: {size} bytes")
        total += size

    return total // factor


def configure_logging() -> None:
    """Set up logging from DIR_SIZE_LOG_LEVEL (defaults to WARNING)"""
    level_name = os.getenv("DIR_SIZE_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.setLevel(level)


@typechecked
def main(argv: Optional[list[str]] = None) -> None:
    """Print the total size of a directory's top-level entries"""
    load_dotenv()
    configure_logging()

    # Usage: dir_size <path> [byte|kilo|mega|giga]
    args = list(sys.argv if argv is None else argv)

    if len(args) < 2:
        print("Missing arguments")
        sys.exit(1)

    unit = get_unit(args)
    factor = get_factor(unit)
    logger.debug(f"Unit: {unit}, factor: {factor}")

    path = args[1]
    try:
        total_size = calculate_dir_total(path, factor)
    except OSError as e:
        # Reported but not reflected in the exit code
        print(f"Error: {e}", file=sys.stderr)
        return

    print(f"Total size: {total_size}")


if __name__ == "__main__":
    main()
