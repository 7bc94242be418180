#!/usr/bin/env python3
"""
Command-Line Interface for the SCEL converter

Usage:
    python -m scel_decoder                          # Convert ./*.scel to result.txt
    python -m scel_decoder -c config.yaml           # Run with a config file
    python -m scel_decoder -i dicts -o words.txt    # Custom input/output
    python -m scel_decoder --info file.scel         # Show a file's header
"""

import argparse
import sys

from .converter import ScelConverter, setup_logging
from .models import ConverterConfig, ErrorPolicy, OutputFormat
from .scel import ScelError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scel2txt",
        description="Convert Sogou .scel dictionaries to a plain word list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  scel2txt                                  # Convert ./*.scel to result.txt
  scel2txt -c config.yaml                   # Run with a config file
  scel2txt -i dicts -o words.txt -f ibus    # Write "word pinyin count" lines
  scel2txt --abort-on-error                 # Stop at the first malformed file
  scel2txt --info dicts/example.scel        # Show header and exit
        """
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to YAML config file (default: built-in defaults)",
    )
    parser.add_argument(
        "-i", "--input-dir",
        default=None,
        help="Directory containing dictionary files (default: .)",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file (default: result.txt)",
    )
    parser.add_argument(
        "-e", "--extension",
        default=None,
        help="Input file extension (default: scel)",
    )
    parser.add_argument(
        "-f", "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=None,
        help="Output line format (default: words)",
    )
    parser.add_argument(
        "--abort-on-error",
        action="store_true",
        help="Stop at the first malformed file instead of skipping it",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat unpaired UTF-16 surrogates as malformed input",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from config or INFO)",
    )
    parser.add_argument(
        "--info",
        metavar="FILE",
        default=None,
        help="Show the header of one dictionary file and exit",
    )
    return parser


def apply_overrides(config: ConverterConfig, args: argparse.Namespace) -> ConverterConfig:
    """Apply command-line options on top of the loaded config."""
    if args.input_dir is not None:
        config.input_dir = args.input_dir
    if args.output is not None:
        config.output_path = args.output
    if args.extension is not None:
        config.extension = args.extension
    if args.format is not None:
        config.output_format = OutputFormat(args.format)
    if args.abort_on_error:
        config.on_error = ErrorPolicy.ABORT
    if args.strict:
        config.strict_utf16 = True
    if args.log_level is not None:
        config.log_level = args.log_level
    return config


def main(argv=None):
    """Command-line entry point."""
    args = build_parser().parse_args(argv)

    # Load config
    if args.config:
        try:
            config = ConverterConfig.from_yaml(args.config)
        except FileNotFoundError:
            print(f"Error: Config file not found: {args.config}")
            sys.exit(1)
        except Exception as e:
            print(f"Error loading config: {e}")
            sys.exit(1)
    else:
        config = ConverterConfig()

    config = apply_overrides(config, args)
    setup_logging(config.log_level, config.log_file)
    converter = ScelConverter(config)

    # Handle --info
    if args.info:
        try:
            dictionary = converter.decode_file(args.info)
        except (OSError, ScelError) as e:
            print(f"Error: {e}")
            sys.exit(1)

        header = dictionary.header
        print("\n" + "=" * 50)
        print("DICTIONARY INFO")
        print("=" * 50)
        print(f"File:        {args.info}")
        print(f"Name:        {header.name}")
        print(f"Category:    {header.category}")
        print(f"Description: {header.description}")
        print(f"Sample:      {header.sample}")
        print(f"Syllables:   {len(dictionary.pinyin_table)}")
        print(f"Entries:     {len(dictionary.entries)}")
        print("=" * 50)
        sys.exit(0)

    try:
        result = converter.run()
    except (OSError, ScelError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print("\n" + "=" * 50)
    print("CONVERSION COMPLETE")
    print("=" * 50)
    print(f"Files decoded: {len(result.processed)}")
    print(f"Files skipped: {len(result.skipped)}")
    print(f"Words written: {result.lines_written}")
    print(f"Result:        {config.output_path}")
    print("=" * 50)


if __name__ == "__main__":
    main()
