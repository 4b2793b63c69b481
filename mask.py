import os
import sys
import warnings
from dataclasses import dataclass
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


import numpy as np
import PIL.Image

from mandgrid import BACKENDS, HEIGHT, ITERATIONS, WIDTH, Mand, Pixel

from argparse import ArgumentParser

VALID_FORMATS = ("npy", "raw", "png")


@dataclass(frozen=True)
class MaskParameters:
    """Viewport and grid requested on the command line."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    width: int
    height: int
    max_iterations: int
    backend: str


@dataclass
class OutputConfig:
    path: Path
    format: str


def build_parser():
    parser = ArgumentParser(description='Compute the Mandelbrot membership mask of a viewport.')

    parser.add_argument('--x-min', type=float, dest='x_min', help='lower bound of the real axis',
                        metavar='X_MIN', default=-2.0)

    parser.add_argument('--x-max', type=float, dest='x_max', help='upper bound of the real axis',
                        metavar='X_MAX', default=1.0)

    parser.add_argument('--y-min', type=float, dest='y_min', help='lower bound of the imaginary axis',
                        metavar='Y_MIN', default=-1.5)

    parser.add_argument('--y-max', type=float, dest='y_max', help='upper bound of the imaginary axis',
                        metavar='Y_MAX', default=1.5)

    parser.add_argument('--width', type=int, dest='width', help='number of pixel columns',
                        metavar='WIDTH', default=WIDTH)

    parser.add_argument('--height', type=int, dest='height', help='number of pixel rows',
                        metavar='HEIGHT', default=HEIGHT)

    parser.add_argument('--max-iterations', type=int, dest='max_iterations',
                        help='iteration budget before a point is considered bounded',
                        metavar='MAX_ITERATIONS', default=ITERATIONS)

    parser.add_argument('--backend', choices=BACKENDS, default='tensorflow',
                        help='"tensorflow" evaluates the grid in one batch; "scalar" evaluates pixel by pixel.')

    parser.add_argument('--format', type=str, dest='format',
                        help='output format: "npy" (height x width uint8 array), "raw" (flat bytes, 0=out 1=in) '
                             'or "png" (monochrome mask). Default: inferred from --output, else "npy".',
                        metavar='FORMAT')

    parser.add_argument('--output', dest='output', type=str, help='destination file for the mask.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_parameters(opt) -> MaskParameters:
    return MaskParameters(
        x_min=opt.x_min,
        x_max=opt.x_max,
        y_min=opt.y_min,
        y_max=opt.y_max,
        width=opt.width,
        height=opt.height,
        max_iterations=opt.max_iterations,
        backend=opt.backend,
    )


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    output_arg = getattr(opt, "output", None)
    explicit_format = (getattr(opt, "format", None) or "").lower().lstrip(".")

    if explicit_format and explicit_format not in VALID_FORMATS:
        parser.error(f"Unknown format '{explicit_format}'. Valid choices: {', '.join(VALID_FORMATS)}.")

    if output_arg:
        if str(output_arg).endswith(tuple(filter(None, {os.sep, os.altsep}))) or str(output_arg).endswith("/"):
            parser.error("--output must be a file path.")
        output_path = Path(output_arg).expanduser()
        if output_path.exists() and output_path.is_dir():
            parser.error("--output must point to a file, not a directory.")
        suffix = output_path.suffix.lower().lstrip(".")
        if explicit_format:
            if suffix and suffix != explicit_format:
                parser.error(f"--output extension .{suffix} does not match --format {explicit_format}.")
            image_format = explicit_format
        elif suffix in VALID_FORMATS:
            image_format = suffix
        elif suffix:
            parser.error(f"Cannot infer the format from extension .{suffix}; pass --format.")
        else:
            image_format = "npy"
        if not suffix:
            output_path = output_path.with_suffix(f".{image_format}")
    else:
        image_format = explicit_format or "npy"
        output_path = Path(f"mask.{image_format}")

    return OutputConfig(path=output_path.expanduser().resolve(), format=image_format)


def mono_image(mand: Mand) -> PIL.Image.Image:
    """Two-level image of the mask: points in the set are black, escaping points white."""

    mono = np.where(mand.to_image() == Pixel.In, 0, 255).astype(np.uint8)
    return PIL.Image.fromarray(mono)


def write_mask(mand: Mand, config: OutputConfig) -> Path:
    """Persist the classification buffer of ``mand`` in the configured format."""

    output_path = config.path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if config.format == "npy":
        with open(output_path, "wb") as f:
            np.save(f, mand.to_image())
    elif config.format == "raw":
        output_path.write_bytes(mand.pixels().tobytes())
    else:
        mono_image(mand).save(str(output_path), format="PNG")
    return output_path


def select_device():
    """Place the batch kernel on the first visible GPU, falling back to the CPU."""

    import tensorflow as tf

    if _suppress_messages:
        tf.get_logger().setLevel("ERROR")
        for handler in tf.get_logger().handlers:
            handler.setLevel("ERROR")

    log("TensorFlow version: %s" % tf.__version__)

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    params = resolve_parameters(opt)
    output_config = resolve_output_config(opt, parser)

    device = select_device() if params.backend == "tensorflow" else None

    log("Viewport: x=[%s, %s] y=[%s, %s]" % (params.x_min, params.x_max, params.y_min, params.y_max))
    log("Grid: %dx%d, max iterations %d, backend %s"
        % (params.width, params.height, params.max_iterations, params.backend))

    try:
        mand = Mand(
            params.x_min,
            params.x_max,
            params.y_min,
            params.y_max,
            width=params.width,
            height=params.height,
            iterations=params.max_iterations,
            backend=params.backend,
            device=device,
        )
    except ValueError as e:
        parser.error(str(e))

    log("Pixels in set: %d of %d" % (mand.count(Pixel.In), len(mand)))

    path = write_mask(mand, output_config)
    log("Wrote %s mask to %s" % (output_config.format, path))
    return 0


if __name__ == '__main__':
    sys.exit(main())
