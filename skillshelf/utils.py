import json
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any


_SLUG_BREAK_RE = re.compile(r"[^a-z0-9]+")


def now_stamp() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_json_safe(path: Path) -> tuple[Any | None, str | None]:
    if not path.exists():
        return None, None
    if path.stat().st_size == 0:
        return None, None
    try:
        return read_json(path), None
    except (OSError, ValueError) as exc:
        return None, str(exc)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    with tmp_path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=False)
        handle.write("\n")
    os.replace(tmp_path, path)


def expand_home(path: str | Path) -> Path:
    text = str(path)
    if text == "~":
        return Path.home()
    if text.startswith("~/"):
        return Path.home() / text[2:]
    return Path(text)


def slugify(value: str) -> str:
    slug = _SLUG_BREAK_RE.sub("-", value.lower()).strip("-")
    return slug or "skill"


def unique_child(base: Path, preferred: str) -> Path:
    candidate = base / preferred
    if not candidate.exists():
        return candidate
    for n in range(1, 1000):
        candidate = base / f"{preferred}-{n}"
        if not candidate.exists():
            return candidate
    return base / f"{preferred}-{now_stamp()}"


def compact_home_path(path: str | Path) -> str:
    text = str(path)
    home = str(Path.home())
    if text == home:
        return "~"
    home_prefix = f"{home}/"
    if text.startswith(home_prefix):
        return f"~/{text[len(home_prefix):]}"
    return text


def compact_home_paths_in_text(text: str) -> str:
    home = str(Path.home())
    if text == home:
        return "~"
    return text.replace(f"{home}/", "~/")
