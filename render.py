import os
import sys
import time
import warnings
from argparse import ArgumentParser, BooleanOptionalAction
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf
import PIL.Image

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from mandelrender import (
    ConfigurationError,
    PaletteNotFoundError,
    PaletteRegistry,
    RenderParameters,
    Viewport,
    default_registry,
    render_image,
)
from mandelrender.renderer import BACKENDS, DEFAULT_VIEWPORT, default_workers


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set through a color palette.")

    parser.add_argument('--width', type=int, dest='width', metavar='WIDTH', default=1600,
                        help='output image width in pixels')
    parser.add_argument('--height', type=int, dest='height', metavar='HEIGHT', default=1200,
                        help='output image height in pixels')

    parser.add_argument('--xmin', type=float, dest='x_min', metavar='XMIN', default=DEFAULT_VIEWPORT.x_min,
                        help='left edge of the viewport in the complex plane')
    parser.add_argument('--xmax', type=float, dest='x_max', metavar='XMAX', default=DEFAULT_VIEWPORT.x_max,
                        help='right edge of the viewport in the complex plane')
    parser.add_argument('--ymin', type=float, dest='y_min', metavar='YMIN', default=DEFAULT_VIEWPORT.y_min,
                        help='bottom edge of the viewport in the complex plane')
    parser.add_argument('--ymax', type=float, dest='y_max', metavar='YMAX', default=DEFAULT_VIEWPORT.y_max,
                        help='top edge of the viewport in the complex plane')

    parser.add_argument('--iters', type=int, dest='max_iterations', metavar='MAX_ITERATIONS', default=1200,
                        help='maximum number of iterations before a point is considered inside the set')

    parser.add_argument('--palette', type=str, dest='palette', metavar='PALETTE', default='NebulaSpectre',
                        help='palette name (case-sensitive). Use "mpl:<name>" for a matplotlib colormap.')
    parser.add_argument('--list-palettes', action='store_true', dest='list_palettes',
                        help='print the built-in palette names and exit')

    parser.add_argument('--procs', type=int, dest='workers', metavar='WORKERS', default=default_workers(),
                        help='number of concurrent row workers (default: CPU count)')
    parser.add_argument('--smooth', action=BooleanOptionalAction, default=True,
                        help='use smooth (continuous escape-time) coloring')
    parser.add_argument('--backend', choices=BACKENDS, default='tensorflow',
                        help='per-row evaluator: vectorized TensorFlow (default) or scalar Python')

    parser.add_argument('--outfile', type=str, dest='outfile', metavar='OUTFILE', default='mandelbrot.png',
                        help='output image filename')
    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default=None,
                        help='file format for the output. Defaults to the outfile extension, or "png".')
    parser.add_argument('--show', action='store_true', dest='show',
                        help='open the rendered image in the system viewer')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_params(opt) -> RenderParameters:
    params = RenderParameters(
        width=opt.width,
        height=opt.height,
        viewport=Viewport(opt.x_min, opt.x_max, opt.y_min, opt.y_max),
        max_iterations=opt.max_iterations,
        workers=opt.workers,
        smooth=bool(opt.smooth),
        backend=opt.backend,
    )
    params.validate()
    return params


def resolve_output(opt) -> tuple[Path, str]:
    output_path = Path(opt.outfile).expanduser()
    image_format = (opt.format or output_path.suffix or "png").lower().lstrip(".")
    if not image_format:
        image_format = "png"
    if not output_path.suffix:
        output_path = output_path.with_suffix(f".{image_format}")
    return output_path.resolve(), image_format


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if pil_format == "JPEG" and image.mode == "RGBA":
        image = image.convert("RGB")
    image.save(str(output_path), format=pil_format)


def main(argv=None, registry: PaletteRegistry | None = None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    registry = registry if registry is not None else default_registry()

    if opt.list_palettes:
        for name in registry.names():
            print(name)
        return 0

    try:
        params = resolve_params(opt)
        gradient = registry.get(opt.palette)
    except PaletteNotFoundError as exc:
        print(f"palette {exc.name!r} not found. Available palettes:", file=sys.stderr)
        for name in exc.available:
            print(f"  - {name}", file=sys.stderr)
        return 2
    except ConfigurationError as exc:
        parser.error(str(exc))

    output_path, image_format = resolve_output(opt)

    log("TensorFlow version: %s" % tf.__version__)
    log(f"Rendering {params.width}x{params.height}, {params.max_iterations} iterations, "
        f"{params.worker_count} workers, backend={params.backend}, smooth={params.smooth}")

    started = time.perf_counter()
    raster = render_image(params, gradient)
    log(f"Rendered in {time.perf_counter() - started:.2f}s")

    image = PIL.Image.fromarray(raster)
    write_single_image(image, output_path, image_format)
    print(f"Saved {output_path} ({params.width}x{params.height}) using palette {gradient.name}")

    if opt.show:
        image.show()
    return 0


if __name__ == '__main__':
    sys.exit(main())
