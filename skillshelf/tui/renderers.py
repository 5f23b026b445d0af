from rich.console import Console
from rich.markup import escape

from skillshelf.files.models import FileEntry, PathRemap, RecoverableHandle
from skillshelf.skills.models import DiscoveredSkillsRoot, DiscoveryResult, SkillRecord
from skillshelf.tools.models import SourceInfo, ToolInfo
from skillshelf.tui.enums import UIStyle
from skillshelf.tui.sections import UISection
from skillshelf.tui.tables import FilesTable, SkillsTable, ToolsTable
from skillshelf.utils import compact_home_path, compact_home_paths_in_text


class SkillsConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_skills(self, result: DiscoveryResult) -> None:
        if not result.groups:
            self.console.print(
                UISection.note(
                    "skills", "No skills found in enabled tools.", style=UIStyle.YELLOW.value
                )
            )
        else:
            self.console.print(
                UISection.wrap(
                    "skills",
                    SkillsTable.groups_table(result.groups),
                    style=UIStyle.BLUE.value,
                    subtitle=f"{len(result.groups)} skills",
                )
            )
        if any(group.has_description_diff for group in result.groups):
            self.console.print(
                UISection.note(
                    "variants",
                    "* the same skill has different descriptions across tools",
                    style=UIStyle.DIM.value,
                )
            )
        self.render_warnings(result.warnings)

    def render_warnings(self, warnings: list[str]) -> None:
        if not warnings:
            return
        self.console.print(UISection.bullets("skipped", warnings, style=UIStyle.YELLOW.value))

    def render_skill(self, record: SkillRecord, entries: list[FileEntry]) -> None:
        self.console.print(
            UISection.wrap("skill", SkillsTable.detail_block(record), style=UIStyle.BLUE.value)
        )
        self.console.print(
            UISection.wrap("files", FilesTable.entries_table(entries), style=UIStyle.CYAN.value)
        )

    def render_entries(self, entries: list[FileEntry]) -> None:
        if not entries:
            self.console.print(
                UISection.note("files", "No files.", style=UIStyle.DIM.value)
            )
            return
        self.console.print(
            UISection.wrap("files", FilesTable.entries_table(entries), style=UIStyle.CYAN.value)
        )

    def render_skill_saved(self, record: SkillRecord, verb: str) -> None:
        self.console.print(
            UISection.note(
                "skill",
                f"Skill {verb}: [bold]{escape(record.name)}[/bold]\n"
                f"{compact_home_path(record.path)}",
                style=UIStyle.GREEN.value,
            )
        )

    def render_trashed(self, handle: RecoverableHandle) -> None:
        self.console.print(
            UISection.note(
                "trash",
                f"Moved to trash: {compact_home_path(handle.original_path)}\n"
                f"Recoverable at: {compact_home_path(handle.trashed_path)}",
                style=UIStyle.YELLOW.value,
            )
        )

    def render_renamed(self, remap: PathRemap) -> None:
        self.console.print(
            UISection.note(
                "files",
                f"Renamed {escape(remap.old)} -> {escape(remap.new)}",
                style=UIStyle.GREEN.value,
            )
        )

    def render_done(self, message: str) -> None:
        self.console.print(
            UISection.note("done", escape(compact_home_paths_in_text(message)), style=UIStyle.GREEN.value)
        )

    def render_tools(self, items: list[ToolInfo]) -> None:
        self.console.print(
            UISection.wrap("tools", ToolsTable.tools_table(items), style=UIStyle.BLUE.value)
        )

    def render_sources(self, items: list[SourceInfo]) -> None:
        self.console.print(
            UISection.wrap(
                "sources", ToolsTable.sources_table(items), style=UIStyle.MAGENTA.value
            )
        )

    def render_discovered_roots(self, items: list[DiscoveredSkillsRoot]) -> None:
        if not items:
            self.console.print(
                UISection.note(
                    "scan", "No skill directories found.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.bullets(
                "scan",
                [f"{item.path} ({item.skill_count} skills)" for item in items],
                style=UIStyle.CYAN.value,
            )
        )
