from enum import Enum


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"


class ToolStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"

    @classmethod
    def of(cls, enabled: bool) -> "ToolStatus":
        return cls.ENABLED if enabled else cls.DISABLED


TOOL_STATUS_STYLE = {
    ToolStatus.ENABLED: UIStyle.GREEN.value,
    ToolStatus.DISABLED: UIStyle.YELLOW.value,
}
