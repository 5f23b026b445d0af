from skillshelf.tools.models import ToolDefinition, ToolInfo, ToolKind
from skillshelf.tools.service import ToolsService

__all__ = ["ToolDefinition", "ToolInfo", "ToolKind", "ToolsService"]
