from __future__ import annotations

import logging
import sys

from htmlrefine_shell.core.handlers.process_handler import handle_process
from htmlrefine_shell.core.managers.config_manager import config_manager
from htmlrefine_shell.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Initialize logging based on configuration."""
    configure_logger(
        config_manager.get_nested("debug.level", "WARNING"),
        module_specific_levels=config_manager.get_nested("logging.module_levels"),
        silenced_loggers=config_manager.get_nested("logging.silenced"),
    )


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for running htmlrefine from the command line."""
    setup_logging()
    args = sys.argv[1:] if argv is None else argv
    logger.debug("htmlrefine started with arguments: %s", args)
    return handle_process(args)


if __name__ == "__main__":
    sys.exit(main())
