"""Command-line interface for media-filter."""

import argparse
import logging
import sys
from pathlib import Path

from media_filter.config import Configuration, load_configuration
from media_filter.filters import FILTERS, create_filter, load_filters
from media_filter.manager import MediaFilterManager, write_derivative


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def load_config(args: argparse.Namespace) -> Configuration:
    """Build the configuration from --config, or from the environment only."""
    if args.config is not None:
        return load_configuration(args.config)
    return Configuration(from_env=True)


def filter_file(args: argparse.Namespace) -> int:
    """Execute the filter-file command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    input_path = args.input.resolve()
    if not input_path.is_file():
        logger.error(f"Input file not found: {input_path}")
        return 1

    try:
        media_filter = create_filter(args.filter, load_config(args))
        output_path = args.output or input_path.with_name(
            media_filter.filtered_name(input_path.name)
        )

        derivative = media_filter.get_destination_stream(
            input_path.open("rb"), verbose=args.verbose
        )
        write_derivative(derivative, output_path)

        logger.info(f"Filtered {input_path.name} with {media_filter.name}")
        logger.info(f"  Bundle: {media_filter.bundle_name}")
        logger.info(f"  Output: {output_path}")

        return 0

    except Exception as e:
        logger.error(f"Failed to filter {input_path.name}: {e}")
        return 1


def filter_item(args: argparse.Namespace) -> int:
    """Execute the filter-item command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    item_path = args.item.resolve()
    if not item_path.is_dir():
        logger.error(f"Item directory not found: {item_path}")
        return 1

    try:
        config = load_config(args)
        names = [n.strip() for n in args.plugins.split(",") if n.strip()] if args.plugins else None
        manager = MediaFilterManager(
            load_filters(config, names),
            force=args.force,
            verbose=args.verbose,
        )
        manifest = manager.filter_item(item_path)

        logger.info(f"Filtered item: {manifest.id}")
        for name, bundle in manifest.bundles.items():
            logger.info(f"  {name}: {len(bundle.bitstreams)} bitstreams")

        if manifest.filter_errors:
            logger.warning(f"  Errors: {len(manifest.filter_errors)}")
            for error in manifest.filter_errors:
                logger.warning(f"    - {error}")
            return 1

        return 0

    except Exception as e:
        logger.error(f"Failed to filter item: {e}")
        return 1


def list_filters(args: argparse.Namespace) -> int:
    """Execute the list-filters command."""
    for name, filter_class in FILTERS.items():
        descriptor = filter_class.descriptor
        print(
            f"{name}\t{descriptor.bundle_name}\t{descriptor.format_string}\t"
            f"{descriptor.description}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="media-filter",
        description="Derive extracted text and thumbnails from repository bitstreams",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to a JSON configuration file",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    file_parser = subparsers.add_parser(
        "filter-file",
        help="Apply one media filter to a single file",
        description="Run a media filter over one source file and write the derivative.",
    )
    file_parser.add_argument(
        "--filter",
        type=str,
        required=True,
        choices=sorted(FILTERS),
        help="Name of the media filter to apply",
    )
    file_parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Path to the source file",
    )
    file_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Path for the derivative (default: next to the input, with the filter's suffix)",
    )
    file_parser.set_defaults(func=filter_file)

    item_parser = subparsers.add_parser(
        "filter-item",
        help="Apply the configured media filters to an item directory",
        description="Derive bitstreams for every ORIGINAL file of an item and record them in its manifest.",
    )
    item_parser.add_argument(
        "--item",
        type=Path,
        required=True,
        help="Path to the item directory",
    )
    item_parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Regenerate derivatives that already exist",
    )
    item_parser.add_argument(
        "-p", "--plugins",
        type=str,
        default=None,
        help="Comma-separated filter names (default: filter.plugins setting, or all)",
    )
    item_parser.set_defaults(func=filter_item)

    list_parser = subparsers.add_parser(
        "list-filters",
        help="List the available media filters",
    )
    list_parser.set_defaults(func=list_filters)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
