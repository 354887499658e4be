import argparse
import logging
import sys
from dataclasses import replace

from fractalgen.coloring import available_color_schemes
from fractalgen.config import RenderConfig, load_config
from fractalgen.iterators import available_functions
from fractalgen.render import create_fractal_image
from fractalgen.utils import parse_complex

logger = logging.getLogger("fractalgen")


def setup_logging(verbose=False):
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
        logger.addHandler(console_handler)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Render an escape-time fractal to a PNG file.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--outfile", "-outfile", type=str, default="fractal.png",
                        help="The file to save the image to, this should be a .png")
    parser.add_argument("--config", type=str, metavar="PATH",
                        help="YAML file with render settings. Flags given here override it.")

    # everything below defaults to None so the config file (or built-in
    # defaults) fills in whatever was not passed
    parser.add_argument("--function", type=str.lower, choices=available_functions())
    parser.add_argument("--start", type=str, help="Start constant, e.g. 0.8+0.6j")
    parser.add_argument("--center-x", type=float)
    parser.add_argument("--center-y", type=float)
    parser.add_argument("--zoom", type=float)
    parser.add_argument("--max-iter", type=int)
    parser.add_argument("--escape", type=float, help="Escape threshold")
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--scheme", type=str,
                        help="One of: " + ", ".join(available_color_schemes()))
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker processes (default: one per CPU)")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def build_config(args):
    """Built-in defaults < config file < explicit flags."""
    config = load_config(args.config) if args.config else RenderConfig()

    overrides = {}
    if args.function is not None:
        overrides["function"] = args.function
    if args.start is not None:
        overrides["start"] = parse_complex(args.start)
    if args.center_x is not None or args.center_y is not None:
        cx, cy = config.center
        overrides["center"] = (
            cx if args.center_x is None else args.center_x,
            cy if args.center_y is None else args.center_y,
        )
    if args.zoom is not None:
        overrides["zoom"] = args.zoom
    if args.max_iter is not None:
        overrides["max_iterations"] = args.max_iter
    if args.escape is not None:
        overrides["escape_threshold"] = args.escape
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    if args.scheme is not None:
        overrides["scheme"] = args.scheme
    return replace(config, **overrides)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = build_config(args)
        fractal_params, rendering_params = config.to_params()
    except (OSError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(
        f"function={config.function}, start={config.start}, center={config.center}, "
        f"zoom={config.zoom}, saving to {args.outfile}"
    )
    try:
        create_fractal_image(fractal_params, rendering_params, args.outfile, workers=args.workers)
    except OSError as e:
        logger.error(f"Failed to write {args.outfile}: {e}")
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
