"""
imgpipe Command Line Interface

Usage:
    imgpipe <command> [options]

Commands:
    run         Apply a pipeline document and write the result
    operations  List available operations
    version     Show version information

Examples:
    imgpipe run banner.json -o banner.png
    imgpipe run thumb.json -o thumb.jpg --quality 80
    imgpipe operations
"""

import sys
import argparse
import logging

from imgpipe import __version__


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='imgpipe',
        description='Declarative image transformation pipeline',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        '-V', '--version',
        action='version',
        version=f'imgpipe {__version__}',
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Run command
    run_parser = subparsers.add_parser(
        'run',
        help='Apply a pipeline document and write the result',
    )
    run_parser.add_argument('config', help='Pipeline document (JSON)')
    run_parser.add_argument(
        '-o', '--output',
        required=True,
        help='Output image file',
    )
    run_parser.add_argument(
        '-f', '--format',
        default=None,
        help='Output format (default: from the output extension)',
    )
    run_parser.add_argument(
        '--quality',
        type=int,
        default=None,
        help='Quality for JPEG/WEBP output (default: settings.jpeg_quality)',
    )
    run_parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log each pipeline step',
    )
    run_parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress progress output',
    )

    # Operations command
    subparsers.add_parser(
        'operations',
        help='List available operations',
    )

    # Version command
    subparsers.add_parser(
        'version',
        help='Show version information',
    )

    # Parse arguments
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    # Dispatch to appropriate command
    if args.command == 'run':
        return run_pipeline(args)
    elif args.command == 'operations':
        return run_operations(args)
    elif args.command == 'version':
        return run_version(args)
    else:
        parser.print_help()
        return 1


def run_pipeline(args):
    """Run a pipeline document."""
    from imgpipe.core.codec import save
    from imgpipe.core.config import settings
    from imgpipe.core.errors import ImgPipeError
    from imgpipe.pipeline import load_document

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        pipeline = load_document(args.config)
        if not args.quiet:
            print(f"Applying {pipeline.total_operations} operations from {args.config}")
        image = pipeline.apply_all().get_image()
        path = save(image, args.output, fmt=args.format, quality=args.quality)
    except (ImgPipeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Wrote {image.width}x{image.height} {image.kind.value} to {path}")
    return 0


def run_operations(args):
    """List registered operations."""
    from imgpipe.pipeline import describe_operations

    for name, description in describe_operations().items():
        print(f"  {name:<16} {description}")
    return 0


def run_version(args):
    """Print build information."""
    from imgpipe.core.build_info import version_str

    print(version_str())
    return 0


if __name__ == '__main__':
    sys.exit(main())
