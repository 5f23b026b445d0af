"""Interactive Textual picker for choosing one skill out of a snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, OptionList, Static
from textual.widgets.option_list import Option

from skillshelf.skills.parser import parse_skill_dir


@dataclass(frozen=True)
class SkillCandidate:
    path: Path
    relative_path: str
    name: str
    description: str


def describe_candidates(snapshot_root: Path, paths: Sequence[Path]) -> list[SkillCandidate]:
    candidates: list[SkillCandidate] = []
    for path in paths:
        record = parse_skill_dir(path, "snapshot")
        relative = path.relative_to(snapshot_root).as_posix() if path != snapshot_root else "."
        candidates.append(
            SkillCandidate(
                path=path,
                relative_path=relative,
                name=record.name,
                description=record.description,
            )
        )
    return candidates


class SkillPickerApp(App[Optional[int]]):
    """Pick exactly one skill; quitting picks nothing."""

    TITLE = "Skill Picker"
    CSS = """
    Screen {
        layout: vertical;
    }
    #info {
        height: 3;
        content-align: center middle;
        background: $primary-darken-2;
        color: $text;
        padding: 0 1;
    }
    OptionList {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("enter", "confirm", "Install"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, source: str, candidates: Sequence[SkillCandidate]) -> None:
        super().__init__()
        self._source = source
        self._candidates = list(candidates)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(
            f"Source: {self._source} | "
            f"Skills: {len(self._candidates)} | "
            f"Use [enter] install, [q] quit",
            id="info",
        )
        options = [
            Option(
                f"{candidate.name}  ({candidate.relative_path})"
                + (f" - {candidate.description}" if candidate.description else ""),
                id=str(index),
            )
            for index, candidate in enumerate(self._candidates)
        ]
        yield OptionList(*options)
        yield Footer()

    def on_mount(self) -> None:
        options = self.query_one(OptionList)
        if self._candidates:
            options.highlighted = 0
        options.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(event.option_index)

    def action_confirm(self) -> None:
        self.exit(self.query_one(OptionList).highlighted)

    def action_quit_app(self) -> None:
        self.exit(None)

    def candidate_at(self, index: int | None) -> SkillCandidate | None:
        if index is None:
            return None
        return self._candidates[index]


def pick_skill(source: str, snapshot_root: Path, paths: Sequence[Path]) -> Path | None:
    candidates = describe_candidates(snapshot_root, paths)
    app = SkillPickerApp(source, candidates)
    chosen = app.candidate_at(app.run())
    return chosen.path if chosen is not None else None
