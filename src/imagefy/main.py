"""
Main entry point: convert a file to PNG images, or PNG images back to a file.
"""

import argparse
import os
import sys
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .config import Settings, load_settings
from .container import ContainerHeader, image_capacity
from .console import ConsoleUI
from .decoder import image_to_file
from .encoder import file_to_image
from .errors import (
    EmptyImageSequence,
    ImagefyError,
    ImagefyIOError,
    OutputAlreadyExists,
    PathNotFound,
    PathTypeMismatch,
    UsageError,
)
from .local_storage import IMAGE_SUFFIX, LocalImageStorage
from .utils import format_size


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imagefy",
        description="Convert a file into PNG images and back.",
        epilog=(
            "Examples:\n"
            "  File to images:  imagefy example.exe -o ./example_image/\n"
            "  Images to file:  imagefy ./example_image/ --image -o example.exe"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", nargs="+", help="File to encode, or image directory / image paths to decode.")
    parser.add_argument("-o", "--output", default=None, help="Output path, directory or file (default: current directory).")
    parser.add_argument("-i", "--image", action="store_true", help="Convert images back to a file.")
    parser.add_argument("--width", type=int, default=settings.width, help=f"Image width when encoding (default: {settings.width}).")
    parser.add_argument("--height", type=int, default=settings.height, help=f"Image height when encoding (default: {settings.height}).")
    parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation prompts.")
    parser.add_argument("--log-level", default=settings.log_level, help=f"Log level (default: {settings.log_level}).")
    return parser


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def check_header_fits(inputs: Sequence[str], width: int, height: int) -> None:
    """Raise ``HeaderTooLarge`` before anything is created on disk."""
    if len(inputs) != 1 or not os.path.isfile(inputs[0]):
        return
    input_file = inputs[0]
    try:
        file_size = os.path.getsize(input_file)
    except OSError as e:
        raise ImagefyIOError(f"Could not stat \"{input_file}\": {e}") from e
    header = ContainerHeader(os.path.basename(os.path.normpath(input_file)), file_size)
    header.check_fits(image_capacity(width, height))


def check_encode_arguments(inputs: Sequence[str], output: Optional[str], ui: ConsoleUI) -> Tuple[str, str]:
    """
    Validate the encode inputs and create the output directory.

    Returns
    -------
    tuple
        The input file and the newly created output directory.
    """
    if len(inputs) != 1:
        raise UsageError("Multiple input files are not allowed.")
    input_file = inputs[0]
    if os.path.isdir(input_file):
        raise PathTypeMismatch(f"Path \"{input_file}\" is not a file.")

    output_dir = output if output is not None else "."
    if os.path.isdir(output_dir):
        stem = os.path.splitext(os.path.basename(os.path.normpath(input_file)))[0]
        output_dir = os.path.join(output_dir, f"{stem}_image")
    if os.path.isfile(output_dir):
        raise PathTypeMismatch(f"Output \"{output_dir}\" is an existing file, not a directory.")
    if os.path.exists(output_dir):
        raise OutputAlreadyExists(f"Directory \"{output_dir}\" already exists.")

    ui.info("-", f"Creating directory \"{output_dir}\"")
    ui.confirm("Continue?")
    try:
        os.mkdir(output_dir)
    except OSError as e:
        raise ImagefyIOError(f"Could not create directory \"{output_dir}\": {e}") from e
    return input_file, output_dir


def check_decode_arguments(inputs: Sequence[str], output: Optional[str]) -> Tuple[List[str], str]:
    """
    Expand the decode inputs into an ordered image list and check the output path.
    """
    if len(inputs) == 1 and os.path.isdir(inputs[0]):
        image_paths = LocalImageStorage(inputs[0]).retrieve_image_paths()
        if not image_paths:
            raise EmptyImageSequence(f"No {IMAGE_SUFFIX} images in \"{inputs[0]}\".")
    else:
        image_paths = list(inputs)
        for path in image_paths:
            if not os.path.isfile(path) or not path.lower().endswith(IMAGE_SUFFIX):
                raise PathTypeMismatch(f"Path \"{path}\" is not an image.")

    output_path = output if output is not None else "."
    if os.path.isfile(output_path):
        raise OutputAlreadyExists(f"File \"{output_path}\" already exists.")
    return image_paths, output_path


def run(args: argparse.Namespace, ui: ConsoleUI) -> None:
    missing = [path for path in args.input if not os.path.exists(path)]
    if missing:
        raise PathNotFound(f"Path \"{missing[0]}\" doesn't exist.")

    if args.image:
        image_paths, output_path = check_decode_arguments(args.input, args.output)
        ui.info("-", f"{len(image_paths)} images to read.")
        result = image_to_file(image_paths, output_path)
        ui.info("+", f"file name: {result.file_name}")
        ui.info("+", f"file size: {format_size(result.file_size)}")
        if result.bytes_written < result.file_size:
            ui.warn(f"Only {result.bytes_written} of {result.file_size} bytes recovered, images are missing.")
        ui.info("=", f"result path: \"{result.output_path}\"")
    else:
        if args.width <= 0 or args.height <= 0:
            raise UsageError(f"Image dimensions must be positive, got {args.width}x{args.height}.")
        check_header_fits(args.input, args.width, args.height)
        input_file, output_dir = check_encode_arguments(args.input, args.output, ui)
        result = file_to_image(args.width, args.height, input_file, output_dir)
        ui.info("+", f"file size: {format_size(result.file_size)}")
        ui.info("+", f"{result.image_count} images written.")
        ui.info("=", f"result path: \"{output_dir}\"")


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        settings = load_settings()
    except ValueError as e:
        ConsoleUI().error(str(e))
        return 1
    args = build_parser(settings).parse_args(argv)
    ui = ConsoleUI(assume_yes=args.yes)
    try:
        configure_logging(args.log_level)
    except ValueError as e:
        ui.error(f"Invalid log level: {e}")
        return 1

    try:
        run(args, ui)
    except ImagefyError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        ui.error(str(e))
        return 1
    ui.info("=", "Finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
