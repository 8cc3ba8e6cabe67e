# ============================================
# file: src/htmlrefine_shell/core/handlers/process_handler.py
# ============================================
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm.auto import tqdm

from htmlrefine.controllers.process_controller import ProcessController, ProcessResult
from htmlrefine.services.inspect_service import InspectService
from htmlrefine_shell.core.managers.config_manager import config_manager
from htmlrefine_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

process_help_text = """
  clean   [FILE ...] [-o <dir>] [--no-progress]
      Strips presentation attributes and converts specification lists to tables.
  style   [FILE ...] [-o <dir>] [--no-progress]
      Applies the fixed class vocabulary and labels table cells.
  convert [FILE ...] [-o <dir>] [--no-progress]
      Runs clean, then style on the cleaned result. Writes the styled markup.
  inspect [FILE ...] [-o <dir>] [--no-progress]
      Prints an indented tree dump of the parsed input.

  Without FILE arguments the markup is read from stdin and written to stdout.
""".strip()
COMMAND_HIERARCHY = {"clean": None, "style": None, "convert": None, "inspect": None}

DEFAULT_SUFFIXES = {
    "clean": ".clean.html",
    "style": ".styled.html",
    "convert": ".styled.html",
    "inspect": ".tree.txt",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="htmlrefine",
        description="Clean pasted HTML and turn specification lists into tables.",
        epilog=process_help_text,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subs = parser.add_subparsers(dest="subcommand", help="Sub-command help")
    for name, help_text in (
            ("clean", "Sanitize and restructure markup."),
            ("style", "Apply the class vocabulary."),
            ("convert", "Clean, then style."),
            ("inspect", "Dump the parsed tree."),
    ):
        sub = subs.add_parser(name, help=help_text)
        sub.add_argument("files", metavar="FILE", nargs="*", type=Path,
                         help="Input files (default: read stdin).")
        sub.add_argument("-o", "--output-dir", type=Path, default=None,
                         help="Write results into this directory instead of stdout.")
        sub.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    return parser


def run_command(controller: ProcessController, command: str, raw: str) -> ProcessResult:
    """Runs one sub-command over one input and returns the result to emit."""
    if command == "convert":
        conversion = controller.convert(raw)
        if conversion.cleaned.fail_closed:
            logger.warning("Clean step fell back to the original input: %s", conversion.cleaned.error)
        return conversion.styled
    return controller.process(command, raw)


def handle_process(args: List[str], stdin: Optional[str] = None) -> int:
    """
    Entry point for the clean/style/convert/inspect sub-commands.

    Args:
        args: Command line arguments (without the program name).
        stdin: Markup to use instead of reading sys.stdin when no files are given.

    Returns:
        0 for success, 1 for argument or I/O errors.
    """
    parser = build_parser()
    if not args:
        parser.print_help()
        return 0

    try:
        pargs = parser.parse_args(args)
    except SystemExit as e:
        # --help exits with 0, argument errors with 2.
        return 0 if e.code == 0 else 1

    if pargs.subcommand not in COMMAND_HIERARCHY:
        parser.print_help()
        return 1

    encoding = config_manager.get_nested("cli.encoding", "utf-8")
    preview_length = config_manager.get_nested("inspector.preview_length", 20)
    try:
        preview_length = int(preview_length)
    except (TypeError, ValueError):
        logger.error("Invalid inspector.preview_length in settings: %r", preview_length)
        print(f"❌ Error: inspector.preview_length must be a whole number, got {preview_length!r}", file=sys.stderr)
        return 1
    controller = ProcessController(inspector=InspectService(preview_length=preview_length))

    # --- stdin mode ---
    if not pargs.files:
        raw = stdin if stdin is not None else sys.stdin.read()
        result = run_command(controller, pargs.subcommand, raw)
        if result.fail_closed:
            logger.warning("'%s' returned the input unchanged: %s", pargs.subcommand, result.error)
        sys.stdout.write(result.output)
        if result.output and not result.output.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    # --- file mode ---
    suffix = config_manager.get_nested(f"cli.suffixes.{pargs.subcommand}", DEFAULT_SUFFIXES[pargs.subcommand])
    show_progress = (
        not pargs.no_progress
        and bool(config_manager.get_nested("cli.show_progress", True))
        and len(pargs.files) > 1
    )
    iterator = tqdm(pargs.files, desc=f"Running {pargs.subcommand}", unit="file", leave=False) \
        if show_progress else pargs.files

    failures = 0
    fallbacks = 0
    for path in iterator:
        try:
            raw = path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Could not read %s: %s", path, e)
            print(f"❌ Error: could not read {path}: {e}", file=sys.stderr)
            failures += 1
            continue

        result = run_command(controller, pargs.subcommand, raw)
        if result.fail_closed:
            fallbacks += 1
            logger.warning("%s: '%s' returned the input unchanged: %s", path, pargs.subcommand, result.error)

        if pargs.output_dir is None:
            print(result.output)
            continue

        target = PathUtils.get_output_path(pargs.output_dir, path, suffix)
        try:
            target.write_text(result.output, encoding=encoding)
        except OSError as e:
            logger.error("Could not write %s: %s", target, e)
            print(f"❌ Error: could not write {target}: {e}", file=sys.stderr)
            failures += 1
            continue
        logger.info("Wrote %s", target)

    processed = len(pargs.files) - failures
    logger.info("%s: %d/%d files processed, %d unchanged after fallback.",
                pargs.subcommand, processed, len(pargs.files), fallbacks)
    return 1 if failures else 0
