from rich.markup import escape
from rich.table import Column, Table

from skillshelf.files.models import FileEntry
from skillshelf.skills.models import SkillGroup, SkillRecord
from skillshelf.tools.models import SourceInfo, ToolInfo, ToolKind
from skillshelf.tui.enums import TOOL_STATUS_STYLE, ToolStatus, UIStyle
from skillshelf.utils import compact_home_path


class SkillsTable:
    @staticmethod
    def groups_table(groups: list[SkillGroup]) -> Table:
        table = Table(
            Column(header="Skill", width=28),
            Column(header="Tools", width=24, overflow="fold"),
            Column(header="Description", overflow="ellipsis"),
            Column(header="Path", overflow="ellipsis", max_width=48),
            expand=True,
            header_style="bold",
        )
        for group in groups:
            name = escape(group.name)
            if group.has_description_diff:
                name = f"{name} [{UIStyle.YELLOW.value}]*[/{UIStyle.YELLOW.value}]"
            table.add_row(
                name,
                ", ".join(group.root_ids),
                escape(group.primary.description),
                compact_home_path(group.primary.path),
            )
        return table

    @staticmethod
    def detail_block(record: SkillRecord):
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Id", escape(record.id))
        table.add_row("Name", escape(record.name))
        table.add_row("Description", escape(record.description) or "-")
        table.add_row("Path", compact_home_path(record.path))
        table.add_row("Tool", record.root_id)
        return table


class FilesTable:
    @staticmethod
    def entries_table(entries: list[FileEntry]) -> Table:
        table = Table(
            Column(header="Entry", overflow="fold"),
            Column(header="Type", width=6),
            expand=True,
            header_style="bold",
        )
        for entry in entries:
            depth = entry.relative_path.count("/")
            label = f"{'  ' * depth}{escape(entry.name)}"
            if entry.is_dir:
                table.add_row(f"[{UIStyle.CYAN.value}]{label}/[/{UIStyle.CYAN.value}]", "dir")
            else:
                table.add_row(label, "file")
        return table


class ToolsTable:
    @staticmethod
    def tools_table(items: list[ToolInfo]) -> Table:
        table = Table(
            Column(header="Tool", width=16),
            Column(header="Name", width=22),
            Column(header="Status", width=10),
            Column(header="Detected", width=9),
            Column(header="Skills path", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            status = ToolStatus.of(item.enabled)
            style = TOOL_STATUS_STYLE[status]
            name = item.name if item.kind == ToolKind.BUILTIN else f"{item.name} (custom)"
            table.add_row(
                item.id,
                escape(name),
                f"[{style}]{status.value}[/{style}]",
                "yes" if item.detected else "no",
                compact_home_path(item.skills_path),
            )
        return table

    @staticmethod
    def sources_table(items: list[SourceInfo]) -> Table:
        table = Table(
            Column(header="Source", width=22),
            Column(header="Repository", overflow="fold"),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            table.add_row(escape(item.name), item.repo_url, escape(item.description))
        return table
