import os
import sys
import time
from argparse import ArgumentParser
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])

# TensorFlow is only imported for the tensorflow backend; keep its C++ logging quiet if it is.
if not _cli_verbose and os.environ.get("TF_CPP_MIN_LOG_LEVEL") is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


from mandelbrot import (
    BACKENDS,
    RenderConfig,
    default_threads,
    parse_bounds,
    parse_complex,
    parse_threads,
    plan_bands,
    render,
    write_image,
)

POSITIONAL_ARGUMENTS = (
    ("output", "OUTPUT", Path),
    ("bounds", "WxH", parse_bounds),
    ("upper_left", "UL_RE,UL_IM", parse_complex),
    ("lower_right", "LR_RE,LR_IM", parse_complex),
    ("threads", "THREADS", parse_threads),
)

USAGE = "%(prog)s [options] [OUTPUT [WxH [UL_RE,UL_IM [LR_RE,LR_IM [THREADS]]]]]"


def build_parser():
    # Positionals are collected by parse_known_args: corner values such as
    # -1.2,0.35 start with a dash and would be rejected as unknown options.
    parser = ArgumentParser(
        usage=USAGE,
        description='Render the Mandelbrot set as a grayscale image, one thread per band of rows.',
        epilog='Defaults: OUTPUT mandelbrot.png, WxH 1000x750, corners -1.2,0.35 and -1.0,0.20, '
               'THREADS the number of CPUs. Non-positive THREADS values are raised to 1.',
    )

    parser.add_argument('--backend', choices=BACKENDS, default='numpy',
                        help='band renderer: pure "python", vectorized "numpy" (default) or "tensorflow"')

    parser.add_argument('--device', type=str, dest='device', metavar='DEVICE', default=None,
                        help='TensorFlow device for the tensorflow backend, e.g. "/GPU:0". Default: "/CPU:0".')

    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default=None,
                        help='image format. Can be any extension supported by Pillow. Default: the output suffix, or "png".')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging of bands and timings.')

    return parser


def resolve_config(opt, positional, parser: ArgumentParser) -> RenderConfig:
    unknown = [arg for arg in positional if arg.startswith("--")]
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")
    if len(positional) > len(POSITIONAL_ARGUMENTS):
        parser.error(f"unrecognized arguments: {' '.join(positional[len(POSITIONAL_ARGUMENTS):])}")

    values = {"threads": default_threads()}
    for (name, metavar, parse), text in zip(POSITIONAL_ARGUMENTS, positional):
        try:
            values[name] = parse(text)
        except ValueError as exc:
            parser.error(f"argument {name}: invalid {metavar} value '{text}' ({exc})")

    if "output" in values:
        values["output"] = values["output"].expanduser()

    return RenderConfig(
        backend=opt.backend,
        device=opt.device,
        image_format=opt.format,
        verbose=bool(opt.verbose),
        **values,
    )


def main(argv=None):
    parser = build_parser()
    opt, positional = parser.parse_known_args(argv)
    config = resolve_config(opt, positional, parser)

    global VERBOSE
    VERBOSE = config.verbose

    print("create image {0} with bounds {1[0]}x{1[1]}, upper left {2}, lower right {3}, threads {4}".format(
        config.output, config.bounds, config.upper_left, config.lower_right, config.threads))
    bands = plan_bands(config.bounds, config.upper_left, config.lower_right, config.threads)
    log("backend %s%s, %d bands of up to %d rows" % (
        config.backend,
        " on %s" % config.device if config.device else "",
        len(bands),
        bands[0].height,
    ))

    start = time.perf_counter()
    pixels = render(
        config.bounds,
        config.upper_left,
        config.lower_right,
        config.threads,
        backend=config.backend,
        device=config.device,
    )
    log("rendered in %.3fs" % (time.perf_counter() - start))

    start = time.perf_counter()
    try:
        path = write_image(pixels, config.bounds, config.output, config.image_format)
    except (OSError, ValueError, KeyError) as exc:
        print(f"error: cannot write image {config.output}: {exc}", file=sys.stderr)
        return 1
    log("wrote %s in %.3fs" % (path, time.perf_counter() - start))
    return 0


if __name__ == '__main__':
    sys.exit(main())
