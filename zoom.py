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


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from argparse import ArgumentParser

from mandelbrot import (
    DEFAULT_VIEWPORT,
    MAX_ITERATION,
    MEMBER_COLOR,
    SCALE_FACTOR,
    FrameSequenceSurface,
    GifSurface,
    ImageSurface,
    InteractiveViewer,
    MultiSurface,
    Renderer,
    Viewport,
    ZoomPlanner,
    colormap_palette,
    parse_click,
    parse_hex_color,
    rainbow_palette,
    random_palette,
)


def select_device():
    gpus = tf.config.list_physical_devices('GPU')
    if gpus:
        try:
            for gpu in gpus:
                tf.config.experimental.set_memory_growth(gpu, True)
            log("GPU found, using %s" % gpus[0].name)
            return '/GPU:0'
        except RuntimeError as e:
            log(e)
            return '/CPU:0'
    log("No GPU found, using CPU")
    return '/CPU:0'


@dataclass
class OutputConfig:
    modes: tuple[str, ...]
    image_path: Path | None
    gif_path: Path | None
    frame_dir: Path | None
    image_format: str


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set and zoom in on clicked pixels.')

    parser.add_argument('--width', type=int,
                        dest='width', help='raster width in pixels',
                        metavar='WIDTH', default=640)

    parser.add_argument('--height', type=int,
                        dest='height', help='raster height in pixels',
                        metavar='HEIGHT', default=480)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='number of iterations after which a point counts as a member',
                        metavar='MAX_ITERATIONS', default=MAX_ITERATION)

    parser.add_argument('--real-start', type=float, dest='real_start', metavar='REAL_START',
                        default=DEFAULT_VIEWPORT.real_start, help='left edge of the starting viewport')
    parser.add_argument('--real-end', type=float, dest='real_end', metavar='REAL_END',
                        default=DEFAULT_VIEWPORT.real_end, help='right edge of the starting viewport')
    parser.add_argument('--imaginary-start', type=float, dest='imaginary_start', metavar='IMAGINARY_START',
                        default=DEFAULT_VIEWPORT.imaginary_start, help='top edge of the starting viewport')
    parser.add_argument('--imaginary-end', type=float, dest='imaginary_end', metavar='IMAGINARY_END',
                        default=DEFAULT_VIEWPORT.imaginary_end, help='bottom edge of the starting viewport')

    parser.add_argument('--scale-factor', type=float,
                        dest='scale_factor', help='factor applied to the viewport size on every click, between 0 and 1',
                        metavar='SCALE_FACTOR', default=SCALE_FACTOR)

    parser.add_argument('--click', dest='clicks', action='append', metavar='X,Y', default=[],
                        help='pixel to zoom in on. May be repeated; every click renders one more frame.')

    parser.add_argument('--palette', choices=['rainbow', 'random', 'colormap'], default='rainbow',
                        help='How escape counts are colored.')
    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap used by --palette colormap (e.g. "viridis")',
                        metavar='COLORMAP', default='twilight_shifted')
    parser.add_argument('--invert', action='store_true', help='Invert the selected colormap.')
    parser.add_argument('--seed', type=int, default=None, help='Seed for --palette random.')
    parser.add_argument('--member-color', type=str, default='#000000',
                        help='Hex color for points inside the Mandelbrot set.')

    parser.add_argument('--backend', choices=['tensorflow', 'python'], default='tensorflow',
                        help='Evaluate the whole raster with TensorFlow or pixel by pixel in Python.')
    parser.add_argument('--device', type=str, default=None,
                        help='TensorFlow device, e.g. "/CPU:0". Defaults to the first GPU when available.')

    parser.add_argument('--mode', dest='modes', action='append', metavar='MODE',
                        help='Output modes to generate. May be repeated. Choices: image, frames, gif, interactive.')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination for single-file outputs (gif/image) or container directory when both are requested.')

    parser.add_argument('--frame-dir', dest='frame_dir', type=str,
                        help='Directory in which to store the frame sequence.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for image-based outputs. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    valid_modes = {"image", "frames", "gif", "interactive"}
    modes = list(opt.modes or ["image"])

    normalized_modes: list[str] = []
    for mode in modes:
        if mode not in valid_modes:
            parser.error(f"Unknown output mode '{mode}'. Valid choices: {', '.join(sorted(valid_modes))}.")
        if mode not in normalized_modes:
            normalized_modes.append(mode)
    modes_set = set(normalized_modes)

    image_format = (opt.format or "png").lower().lstrip(".") or "png"

    frame_dir: Path | None = None
    if "frames" in modes_set:
        frame_dir = Path(opt.frame_dir or "./frames").expanduser().resolve()
    elif opt.frame_dir is not None:
        parser.error("--frame-dir is only valid with the frames mode.")

    file_modes = [mode for mode in normalized_modes if mode in {"gif", "image"}]
    image_path: Path | None = None
    gif_path: Path | None = None

    if not file_modes:
        if opt.output:
            parser.error("--output is only valid when gif or image modes are requested.")
    elif len(file_modes) == 1:
        mode = file_modes[0]
        expected_suffix = ".gif" if mode == "gif" else f".{image_format}"
        if opt.output:
            output_path = Path(opt.output).expanduser()
            if output_path.exists() and output_path.is_dir():
                parser.error("--output must point to a file, not a directory, when a single file mode is active.")
            if output_path.suffix:
                if output_path.suffix.lower() != expected_suffix:
                    parser.error(f"--output extension {output_path.suffix} does not match the {mode} mode ({expected_suffix}).")
            else:
                output_path = output_path.with_suffix(expected_suffix)
        else:
            output_path = Path("movie.gif" if mode == "gif" else f"frame_final.{image_format}")
        if mode == "gif":
            gif_path = output_path.expanduser().resolve()
        else:
            image_path = output_path.expanduser().resolve()
    else:
        base_dir = Path(opt.output).expanduser() if opt.output else Path.cwd()
        if base_dir.exists() and not base_dir.is_dir():
            parser.error("--output must be a directory when both gif and image modes are active.")
        gif_path = (base_dir / "movie.gif").expanduser().resolve()
        image_path = (base_dir / f"frame_final.{image_format}").expanduser().resolve()

    return OutputConfig(
        modes=tuple(normalized_modes),
        image_path=image_path,
        gif_path=gif_path,
        frame_dir=frame_dir,
        image_format=image_format,
    )


def build_palette(opt):
    try:
        member_rgb = parse_hex_color(opt.member_color)
    except ValueError:
        print(f"Invalid member_color '{opt.member_color}', defaulting to black.")
        member_rgb = MEMBER_COLOR

    if opt.palette == 'random':
        return random_palette(opt.max_iterations, seed=opt.seed, member_color=member_rgb)
    if opt.palette == 'colormap':
        return colormap_palette(opt.colormap, opt.max_iterations, invert=opt.invert, member_color=member_rgb)
    return rainbow_palette(opt.max_iterations, member_color=member_rgb)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.max_iterations < 1:
        parser.error("--max-iterations must be at least 1.")

    try:
        viewport = Viewport(opt.real_start, opt.real_end, opt.imaginary_start, opt.imaginary_end)
        planner = ZoomPlanner(opt.width, opt.height, opt.scale_factor)
        clicks = [parse_click(text) for text in opt.clicks]
        viewports = list(planner.replay(viewport, clicks))
    except ValueError as exc:
        parser.error(str(exc))

    output_config = resolve_output_config(opt, parser)

    log("TensorFlow version: %s" % tf.__version__)
    device = opt.device
    if opt.backend == 'tensorflow' and device is None:
        device = select_device()

    frame_count = len(viewports)
    surfaces = []
    image_surface = None
    if output_config.frame_dir is not None:
        digits = max(3, len(str(frame_count - 1)))
        surfaces.append(FrameSequenceSurface(output_config.frame_dir, output_config.image_format, digits=digits))
    if output_config.gif_path is not None:
        surfaces.append(GifSurface(output_config.gif_path))
    if output_config.image_path is not None:
        image_surface = ImageSurface(output_config.image_path, output_config.image_format)

    writers = MultiSurface(surfaces)
    renderer = Renderer(
        palette=build_palette(opt),
        max_iterations=opt.max_iterations,
        backend=opt.backend,
        device=device,
        surface=writers,
    )

    pixels = b""
    try:
        for i, frame_viewport in enumerate(viewports):
            print("frame {0} out of {1}".format(i, frame_count), end='\r')
            log(f"viewport real=[{frame_viewport.real_start:.6g}, {frame_viewport.real_end:.6g}] "
                f"imaginary=[{frame_viewport.imaginary_start:.6g}, {frame_viewport.imaginary_end:.6g}]")
            pixels = renderer.render(frame_viewport, opt.width, opt.height)
            viewport = frame_viewport
    finally:
        writers.close()
    print()

    if image_surface is not None:
        image_surface.present(opt.width, opt.height, pixels)
        log("wrote %s" % image_surface.path)

    if "interactive" in output_config.modes:
        renderer.surface = None
        viewer = InteractiveViewer(renderer, opt.width, opt.height, viewport, opt.scale_factor)
        viewer.show()

    return viewport


if __name__ == '__main__':
    main()
