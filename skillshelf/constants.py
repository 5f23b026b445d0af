from typing import Final


SKILL_FILENAME: Final[str] = "SKILL.md"
GIT_DIRNAME: Final[str] = ".git"
TRASH_DIRNAME: Final[str] = ".trash"
PREFERENCES_FILENAME: Final[str] = "preferences.json"
APP_DIRNAME: Final[str] = "skillshelf"

STAGING_PREFIX: Final[str] = ".skillshelf-staging-"

SNAPSHOT_SCAN_MAX_DEPTH: Final[int] = 4
ROOT_SCAN_MAX_DEPTH: Final[int] = 6

SCAN_IGNORED_DIRS: Final[tuple[str, ...]] = (
    "node_modules",
    "target",
    "dist",
    "build",
)

ALLOWED_REMOTE_HOSTS: Final[tuple[str, ...]] = ("github.com",)
ALLOWED_REMOTE_SCHEMES: Final[tuple[str, ...]] = ("https",)
