# src/htmlrefine_shell/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    @staticmethod
    def get_shell_package_root() -> Path:
        """Returns the directory of the htmlrefine_shell package (holds settings.json)."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"

    @staticmethod
    def get_output_path(output_dir: Path, source: Path, suffix: str) -> Path:
        """
        Returns the target path for a processed file inside `output_dir`.
        Creates the directory if it doesn't exist.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir / f"{source.stem}{suffix}"
