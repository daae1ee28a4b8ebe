"""Main entry point for the chart series layout tool."""
import argparse
import json
import logging
import sys

from pythonjsonlogger import jsonlogger

from chartshape.config import Config, load_config
from chartshape.pipeline import LayoutPipeline
from chartshape.api import LayoutAPI


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_formatter(log_format: str) -> logging.Formatter:
    """Formatter for the configured log format; json emits one object per line."""
    if log_format == "json":
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt=DATE_FORMAT,
            rename_fields={"asctime": "time", "levelname": "level", "name": "logger"}
        )
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(log_level: str, log_format: str):
    """Setup logging configuration."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(log_format))

    logging.basicConfig(level=level, handlers=[handler])

    # Reduce noise from some libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def read_input(path: str):
    """Read chart data as JSON from a file, or stdin when path is '-'."""
    if path == "-":
        return json.load(sys.stdin)
    with open(path, 'r') as f:
        return json.load(f)


def write_output(payload: dict, path: str = None):
    """Write the result as JSON to a file or stdout."""
    text = json.dumps(payload, indent=2)
    if path:
        with open(path, 'w') as f:
            f.write(text + "\n")
    else:
        print(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Chart Series Layout - normalize chart data and compute stacking offsets"
    )
    parser.add_argument(
        "--config",
        "-c",
        help="Path to configuration YAML file"
    )
    parser.add_argument(
        "--input",
        "-i",
        help="Path to JSON chart data ('-' for stdin)"
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Write JSON result to this file instead of stdout"
    )
    parser.add_argument(
        "--categories",
        help="Comma separated x labels for raw values"
    )
    parser.add_argument(
        "--stack",
        action="store_true",
        default=None,
        help="Compute stacking baselines (y0)"
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        help="Limit the number of x ticks returned"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP API instead of a one-off layout"
    )
    return parser


def main(argv=None):
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.serve and not args.input:
        parser.error("one of --input or --serve is required")

    # Load configuration
    try:
        config = load_config(args.config) if args.config else Config()
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    # Setup logging
    setup_logging(config.global_.log_level, config.global_.log_format)
    logger = logging.getLogger(__name__)

    if args.config:
        logger.info(f"Configuration loaded from: {args.config}")

    pipeline = LayoutPipeline(config)

    if args.serve:
        api = LayoutAPI(pipeline)
        logger.info(f"Starting layout API on port {config.global_.api_port}")
        try:
            api.run(host=config.global_.bind_address, port=config.global_.api_port)
        except Exception as e:
            logger.error(f"Layout API error: {e}", exc_info=True)
            return 1
        return 0

    try:
        data = read_input(args.input)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read input {args.input}: {e}")
        return 1

    categories = args.categories.split(",") if args.categories else None
    try:
        result = pipeline.run(
            data,
            categories=categories,
            stacked=args.stack,
            max_ticks=args.max_ticks
        )
    except Exception as e:
        logger.error(f"Layout failed for {args.input}: {e}", exc_info=True)
        return 1

    write_output(result.to_dict(), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
