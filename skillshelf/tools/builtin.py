"""Agent tools known out of the box, and curated skill repositories."""

from skillshelf.tools.models import SourceInfo, ToolDefinition


BUILTIN_TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition("cursor", "Cursor", "~/.cursor", "~/.cursor/skills"),
    ToolDefinition("gemini", "Gemini CLI", "~/.gemini", "~/.gemini/skills", cli=True),
    ToolDefinition(
        "antigravity",
        "Antigravity",
        "~/.gemini/antigravity",
        "~/.gemini/antigravity/skills",
    ),
    ToolDefinition("trae", "Trae", "~/.trae", "~/.trae/skills"),
    ToolDefinition("claude-code", "Claude Code", "~/.claude", "~/.claude/skills", cli=True),
    ToolDefinition("codex", "Codex", "~/.codex", "~/.codex/skills", cli=True),
    ToolDefinition("openclaw", "OpenClaw", "~/.openclaw", "~/.openclaw/skills"),
    ToolDefinition(
        "opencode", "OpenCode", "~/.config/opencode", "~/.config/opencode/skills", cli=True
    ),
    ToolDefinition("goose", "Goose", "~/.config/goose", "~/.config/goose/skills", cli=True),
    ToolDefinition("letta", "Letta", "~/.letta", "~/.letta/skills", cli=True),
    ToolDefinition("amp", "Amp", "~/.config/amp", "~/.config/agents/skills", cli=True),
    ToolDefinition("github-copilot", "GitHub Copilot", "~/.copilot", "~/.copilot/skills"),
    ToolDefinition(
        "windsurf", "Windsurf", "~/.codeium/windsurf", "~/.codeium/windsurf/skills"
    ),
    ToolDefinition("cline", "Cline", "~/.cline", "~/.cline/skills"),
    ToolDefinition("roo-code", "Roo Code", "~/.roo", "~/.roo/skills"),
    ToolDefinition("marscode", "MarsCode", "~/.marscode", "~/.marscode/skills"),
    ToolDefinition("tongyi-lingma", "Tongyi Lingma", "~/.lingma", "~/.lingma/skills"),
    ToolDefinition("baidu-comate", "Baidu Comate", "~/.comate", "~/.comate/skills"),
)

BUILTIN_TOOL_IDS: frozenset[str] = frozenset(tool.id for tool in BUILTIN_TOOLS)


CURATED_SOURCES: tuple[SourceInfo, ...] = tuple(
    sorted(
        (
            SourceInfo(
                id="cc-plugins",
                name="Claude Code Plugins + Skills",
                repo_url="https://github.com/jeremylongshore/claude-code-plugins-plus-skills",
                description="Mixed plugin and skill examples for Claude-style workflows.",
                tags=("claude", "skills"),
            ),
            SourceInfo(
                id="composio",
                name="Awesome Claude Skills (Composio)",
                repo_url="https://github.com/ComposioHQ/awesome-claude-skills",
                description="Curated list of reusable Claude skills.",
                tags=("claude", "awesome-list"),
            ),
            SourceInfo(
                id="antigravity-awesome",
                name="Antigravity Awesome Skills",
                repo_url="https://github.com/sickn33/antigravity-awesome-skills",
                description="Skills tailored for Antigravity environments.",
                tags=("antigravity", "skills"),
            ),
            SourceInfo(
                id="openclaw-awesome",
                name="Awesome OpenClaw Skills",
                repo_url="https://github.com/VoltAgent/awesome-openclaw-skills",
                description="Community source for OpenClaw skill packs.",
                tags=("openclaw", "skills"),
            ),
            SourceInfo(
                id="superpowers",
                name="Obra Superpowers",
                repo_url="https://github.com/obra/superpowers",
                description="Collection of workflow superpowers compatible with agent tools.",
                tags=("automation", "productivity"),
            ),
        ),
        key=lambda source: source.name,
    )
)
