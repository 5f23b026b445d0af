import os
from pathlib import Path

from skillshelf.constants import APP_DIRNAME, PREFERENCES_FILENAME, TRASH_DIRNAME


class AppPaths:
    """Filesystem locations owned by the application itself."""

    def __init__(self, root: Path | None = None) -> None:
        self._root = root or self.default_root()

    @staticmethod
    def default_root() -> Path:
        override = os.environ.get("SKILLSHELF_HOME")
        if override:
            return Path(override).expanduser()
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
        return base / APP_DIRNAME

    @property
    def root(self) -> Path:
        return self._root

    @property
    def preferences_path(self) -> Path:
        return self.root / PREFERENCES_FILENAME

    @property
    def trash_dir(self) -> Path:
        return self.root / TRASH_DIRNAME

    @property
    def log_file(self) -> Path | None:
        value = os.environ.get("SKILLSHELF_LOG_FILE")
        return Path(value).expanduser() if value else None
