import functools
import json
import os
from pathlib import Path
from typing import Any, Callable, Dict

import click
from rich.console import Console

from skillshelf.commands import SkillCommands
from skillshelf.config import AppPaths
from skillshelf.errors import SkillAppError
from skillshelf.files.models import ConflictPolicy
from skillshelf.files.trash import LocalTrash
from skillshelf.log import configure_logging
from skillshelf.preferences import JsonPreferenceStore
from skillshelf.skills.models import SkillMetadata
from skillshelf.skills.parser import serialize_manifest
from skillshelf.skills.registry import discover_skill_roots
from skillshelf.tools import ToolDefinition, ToolsService
from skillshelf.tools.builtin import CURATED_SOURCES
from skillshelf.tui.renderers import SkillsConsoleUI
from skillshelf.tui.skill_picker import pick_skill


CONFLICT_VALUES = [policy.value for policy in ConflictPolicy]


def _conflict_option() -> Callable:
    return click.option(
        "--on-conflict",
        "on_conflict",
        required=True,
        type=click.Choice(CONFLICT_VALUES, case_sensitive=False),
        help="What to do when the destination skill directory already exists.",
    )


def _tool_option(help_text: str) -> Callable:
    return click.option("--tool", "tool_id", required=True, help=help_text)


def _app_errors(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SkillAppError as exc:
            raise click.ClickException(str(exc))

    return wrapper


def _paths(obj: Dict[str, Any]) -> AppPaths:
    paths = obj.get("paths")
    if paths is None:
        paths = AppPaths()
        obj["paths"] = paths
    return paths


def _tools(obj: Dict[str, Any]) -> ToolsService:
    service = obj.get("tools")
    if service is None:
        service = ToolsService(JsonPreferenceStore(_paths(obj).preferences_path))
        obj["tools"] = service
    return service


def _commands(obj: Dict[str, Any], include_disabled: bool = True) -> SkillCommands:
    tools = _tools(obj)
    return SkillCommands(
        roots=tools.roots(include_disabled=include_disabled),
        trash=LocalTrash(_paths(obj).trash_dir),
        fetcher=obj.get("fetcher"),
    )


def _tui_chooser(source: str) -> Callable:
    def choose(paths, snapshot_root: Path):
        return pick_skill(source, snapshot_root, paths)

    return choose


def _skill_path(commands: SkillCommands, value: str) -> Path:
    """Accept a filesystem path or a ``<tool>:<directory>`` skill id."""
    root_id, sep, name = value.partition(":")
    if sep and name and not os.path.exists(value):
        for root in commands.roots:
            if root.id == root_id:
                return root.path / name
    return Path(value).expanduser().absolute()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Manage agent skills across AI coding tools."""
    ctx.ensure_object(dict)
    configure_logging(verbose=verbose, log_file=_paths(ctx.obj).log_file)


@cli.command("list", help="List skills merged across tools.")
@click.option("--all-tools", is_flag=True, help="Include disabled tools.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables.")
@click.pass_obj
@_app_errors
def list_cmd(obj: Dict[str, Any], all_tools: bool, as_json: bool) -> None:
    result = _commands(obj, include_disabled=all_tools).list_skills()
    if as_json:
        click.echo(
            json.dumps(
                {
                    "skills": [group.as_dict() for group in result.groups],
                    "warnings": result.warnings,
                },
                indent=2,
            )
        )
        return
    SkillsConsoleUI(Console()).render_skills(result)


@cli.command(help="Show a skill and its files.")
@click.argument("skill")
@click.pass_obj
@_app_errors
def show(obj: Dict[str, Any], skill: str) -> None:
    commands = _commands(obj)
    skill_path = _skill_path(commands, skill)
    SkillsConsoleUI(Console()).render_skill(
        commands.show_skill(skill_path), commands.list_entries(skill_path)
    )


@cli.command(help="Create a new skill in a tool's skills directory.")
@_tool_option("Tool whose skills directory receives the skill.")
@click.option("--name", required=True)
@click.option("--description", default="")
@click.pass_obj
@_app_errors
def new(obj: Dict[str, Any], tool_id: str, name: str, description: str) -> None:
    content = serialize_manifest(SkillMetadata(name=name, description=description))
    record = _commands(obj).create_skill(tool_id, content)
    SkillsConsoleUI(Console()).render_skill_saved(record, verb="created")


@cli.command(help="Move a whole skill to the trash.")
@click.argument("skill")
@click.pass_obj
@_app_errors
def delete(obj: Dict[str, Any], skill: str) -> None:
    commands = _commands(obj)
    handle = commands.delete_skill(_skill_path(commands, skill))
    SkillsConsoleUI(Console()).render_trashed(handle)


@cli.group(help="Browse and edit the files of one skill.")
def files() -> None:
    pass


@files.command("list", help="List a skill's files, directories first.")
@click.argument("skill")
@click.pass_obj
@_app_errors
def files_list(obj: Dict[str, Any], skill: str) -> None:
    commands = _commands(obj)
    SkillsConsoleUI(Console()).render_entries(
        commands.list_entries(_skill_path(commands, skill))
    )


@files.command("read", help="Print a file of a skill.")
@click.argument("skill")
@click.argument("relative_path")
@click.pass_obj
@_app_errors
def files_read(obj: Dict[str, Any], skill: str, relative_path: str) -> None:
    commands = _commands(obj)
    click.echo(commands.read_entry(_skill_path(commands, skill), relative_path), nl=False)


@files.command("write", help="Write a file of a skill (text from --text or stdin).")
@click.argument("skill")
@click.argument("relative_path")
@click.option("--text", default=None, help="Content to write; stdin when omitted.")
@click.pass_obj
@_app_errors
def files_write(
    obj: Dict[str, Any], skill: str, relative_path: str, text: str | None
) -> None:
    commands = _commands(obj)
    content = text if text is not None else click.get_text_stream("stdin").read()
    commands.write_entry(_skill_path(commands, skill), relative_path, content)
    SkillsConsoleUI(Console()).render_done(f"Wrote {relative_path}")


@files.command("mkdir", help="Create a directory inside a skill.")
@click.argument("skill")
@click.argument("relative_path")
@click.pass_obj
@_app_errors
def files_mkdir(obj: Dict[str, Any], skill: str, relative_path: str) -> None:
    commands = _commands(obj)
    commands.create_directory(_skill_path(commands, skill), relative_path)
    SkillsConsoleUI(Console()).render_done(f"Created {relative_path}/")


@files.command("mv", help="Rename or move a file or directory inside a skill.")
@click.argument("skill")
@click.argument("old_relative_path")
@click.argument("new_relative_path")
@click.pass_obj
@_app_errors
def files_mv(
    obj: Dict[str, Any], skill: str, old_relative_path: str, new_relative_path: str
) -> None:
    commands = _commands(obj)
    remap = commands.rename_entry(
        _skill_path(commands, skill), old_relative_path, new_relative_path
    )
    SkillsConsoleUI(Console()).render_renamed(remap)


@files.command("rm", help="Move a file to the trash.")
@click.argument("skill")
@click.argument("relative_path")
@click.pass_obj
@_app_errors
def files_rm(obj: Dict[str, Any], skill: str, relative_path: str) -> None:
    commands = _commands(obj)
    handle = commands.delete_entry(_skill_path(commands, skill), relative_path)
    SkillsConsoleUI(Console()).render_trashed(handle)


@files.command("rmdir", help="Move an empty directory to the trash.")
@click.argument("skill")
@click.argument("relative_path")
@click.pass_obj
@_app_errors
def files_rmdir(obj: Dict[str, Any], skill: str, relative_path: str) -> None:
    commands = _commands(obj)
    handle = commands.delete_empty_directory(_skill_path(commands, skill), relative_path)
    SkillsConsoleUI(Console()).render_trashed(handle)


@cli.command("import", help="Import a skill from a GitHub repository URL.")
@click.argument("url")
@_tool_option("Tool whose skills directory receives the skill.")
@_conflict_option()
@click.option("--path", "sub_path", default=None, help="Skill directory inside the repository.")
@click.option(
    "--interactive", is_flag=True, help="Pick among all skills found in the repository."
)
@click.pass_obj
@_app_errors
def import_cmd(
    obj: Dict[str, Any],
    url: str,
    tool_id: str,
    on_conflict: str,
    sub_path: str | None,
    interactive: bool,
) -> None:
    choose = _tui_chooser(url) if interactive and sub_path is None else None
    record = _commands(obj).import_skill(
        url,
        tool_id,
        ConflictPolicy(on_conflict.lower()),
        sub_path=sub_path,
        choose=choose,
    )
    SkillsConsoleUI(Console()).render_skill_saved(record, verb="imported")


@cli.command(help="Install a skill from an owner/repo registry source.")
@click.argument("source")
@click.argument("skill_id")
@_tool_option("Tool whose skills directory receives the skill.")
@_conflict_option()
@click.pass_obj
@_app_errors
def install(
    obj: Dict[str, Any], source: str, skill_id: str, tool_id: str, on_conflict: str
) -> None:
    record = _commands(obj).install_from_registry(
        source, skill_id, tool_id, ConflictPolicy(on_conflict.lower())
    )
    SkillsConsoleUI(Console()).render_skill_saved(record, verb="installed")


@cli.command(help="Copy a skill into another tool.")
@click.argument("skill")
@_tool_option("Tool that receives the copy.")
@_conflict_option()
@click.pass_obj
@_app_errors
def copy(obj: Dict[str, Any], skill: str, tool_id: str, on_conflict: str) -> None:
    commands = _commands(obj)
    record = commands.copy_skill(
        _skill_path(commands, skill), tool_id, ConflictPolicy(on_conflict.lower())
    )
    SkillsConsoleUI(Console()).render_skill_saved(record, verb="copied")


@cli.command(help="List curated skill repositories.")
def sources() -> None:
    SkillsConsoleUI(Console()).render_sources(list(CURATED_SOURCES))


@cli.command(help="Store or clear the GitHub token.")
@click.argument("value", required=False, default="")
@click.pass_obj
@_app_errors
def token(obj: Dict[str, Any], value: str) -> None:
    service = _tools(obj)
    service.set_token(value)
    state = "stored" if service.has_token() else "cleared"
    SkillsConsoleUI(Console()).render_done(f"GitHub token {state}.")


@cli.group(help="Manage the AI tools whose skills are shown.")
def tools() -> None:
    pass


@tools.command("list", help="List built-in and custom tools.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables.")
@click.pass_obj
@_app_errors
def tools_list(obj: Dict[str, Any], as_json: bool) -> None:
    items = _tools(obj).list_tools()
    if as_json:
        click.echo(json.dumps([item.as_dict() for item in items], indent=2))
        return
    SkillsConsoleUI(Console()).render_tools(items)


@tools.command("enable", help="Show a tool's skills.")
@click.argument("tool_id")
@click.pass_obj
@_app_errors
def tools_enable(obj: Dict[str, Any], tool_id: str) -> None:
    service = _tools(obj)
    service.enable(tool_id)
    SkillsConsoleUI(Console()).render_tools(service.list_tools())


@tools.command("disable", help="Hide a tool's skills.")
@click.argument("tool_id")
@click.pass_obj
@_app_errors
def tools_disable(obj: Dict[str, Any], tool_id: str) -> None:
    service = _tools(obj)
    service.disable(tool_id)
    SkillsConsoleUI(Console()).render_tools(service.list_tools())


@tools.command("add", help="Register or update a custom tool.")
@click.argument("tool_id")
@click.option("--name", required=True)
@click.option("--skills-path", required=True)
@click.option("--config-path", default="")
@click.option("--cli", "is_cli", is_flag=True, help="The tool is a command-line agent.")
@click.pass_obj
@_app_errors
def tools_add(
    obj: Dict[str, Any],
    tool_id: str,
    name: str,
    skills_path: str,
    config_path: str,
    is_cli: bool,
) -> None:
    service = _tools(obj)
    service.upsert_custom_tool(
        ToolDefinition(
            id=tool_id,
            name=name,
            config_path=config_path,
            skills_path=skills_path,
            cli=is_cli,
        )
    )
    SkillsConsoleUI(Console()).render_tools(service.list_tools())


@tools.command("remove", help="Forget a custom tool; its skills stay on disk.")
@click.argument("tool_id")
@click.pass_obj
@_app_errors
def tools_remove(obj: Dict[str, Any], tool_id: str) -> None:
    service = _tools(obj)
    service.delete_custom_tool(tool_id)
    SkillsConsoleUI(Console()).render_tools(service.list_tools())


@tools.command("order", help="Persist the display order of tools.")
@click.argument("tool_ids", nargs=-1, required=True)
@click.pass_obj
@_app_errors
def tools_order(obj: Dict[str, Any], tool_ids: tuple[str, ...]) -> None:
    service = _tools(obj)
    service.reorder(list(tool_ids))
    SkillsConsoleUI(Console()).render_tools(service.list_tools())


@tools.command("scan", help="Find directories that hold skills, to use as a skills path.")
@click.argument("directory", type=click.Path(path_type=Path, file_okay=False))
def tools_scan(directory: Path) -> None:
    SkillsConsoleUI(Console()).render_discovered_roots(
        discover_skill_roots(directory.expanduser())
    )


def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
