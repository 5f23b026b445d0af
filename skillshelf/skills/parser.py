"""Parse and serialize SKILL.md manifests with YAML frontmatter.

Parsing never fails: partially-authored manifests still yield a name (from a
heading or the directory) and an empty description.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from skillshelf.constants import SKILL_FILENAME
from skillshelf.skills.models import SkillMetadata, SkillRecord

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)
_HEADING_RE = re.compile(r"^#(?!#)[ \t]*(.*?)[ \t#]*$")
_KEY_RE = re.compile(r"^([A-Za-z_][\w-]*)[ \t]*:[ \t]*(.*)$")


def split_frontmatter(text: str) -> tuple[str | None, str]:
    stripped = text.lstrip("\ufeff").lstrip()
    match = _FRONTMATTER_RE.match(stripped)
    if not match:
        return None, text
    return match.group(1), stripped[match.end() :]


def parse_manifest(text: str, fallback_name: str = "") -> SkillMetadata:
    header, body = split_frontmatter(text)
    fields = _read_header(header) if header is not None else {}

    name = _as_text(fields.get("name"))
    if not name:
        name = _first_heading(body) or fallback_name.strip()
    description = _as_text(fields.get("description"))

    extra = {
        key: value
        for key, value in fields.items()
        if key not in ("name", "description")
    }
    return SkillMetadata(name=name, description=description, extra=extra)


def parse_skill_dir(path: Path, root_id: str) -> SkillRecord:
    manifest = path / SKILL_FILENAME
    text = manifest.read_text(encoding="utf-8", errors="replace")
    metadata = parse_manifest(text, fallback_name=path.name)
    return SkillRecord(
        name=metadata.name,
        description=metadata.description,
        path=path,
        root_id=root_id,
        updated_at=manifest.stat().st_mtime,
    )


def serialize_manifest(metadata: SkillMetadata, body: str = "") -> str:
    fm: dict[str, Any] = {}
    if metadata.name:
        fm["name"] = metadata.name
    if metadata.description:
        fm["description"] = metadata.description
    fm.update(metadata.extra)

    if not body:
        body = f"# {metadata.name or 'New Skill'}\n\n{metadata.description}\n".rstrip() + "\n"

    parts: list[str] = []
    if fm:
        parts.append("---")
        parts.append(yaml.safe_dump(fm, default_flow_style=False, sort_keys=False).rstrip())
        parts.append("---")
        parts.append("")
    parts.append(body)
    return "\n".join(parts)


def _read_header(header: str) -> dict[str, Any]:
    # BaseLoader keeps every scalar a string: "on", "0123" and "null" stay as written.
    try:
        raw = yaml.load(header, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        raw = None
    if isinstance(raw, dict):
        return {str(key): value for key, value in raw.items()}
    return _scan_key_values(header)


def _scan_key_values(header: str) -> dict[str, Any]:
    """Line-based fallback for headers YAML refuses to load."""
    result: dict[str, Any] = {}
    lines = header.splitlines()
    index = 0
    while index < len(lines):
        match = _KEY_RE.match(lines[index])
        index += 1
        if not match:
            continue
        key, value = match.group(1), match.group(2).strip()
        if value in (">", "|", ">-", "|-"):
            parts: list[str] = []
            while index < len(lines) and lines[index][:1] in (" ", "\t"):
                parts.append(lines[index].strip())
                index += 1
            value = " ".join(part for part in parts if part)
        elif len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        result.setdefault(key, value)
    return result


def _first_heading(body: str) -> str:
    for line in body.splitlines():
        match = _HEADING_RE.match(line)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return ""


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return ""
    return str(value).strip()
