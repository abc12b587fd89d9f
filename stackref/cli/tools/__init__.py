from .base import Tool, ToolConfig, find_templates
from .check_tool import CheckTool
from .version_tool import VersionTool
from .watch_tool import WatchTool

__all__ = [
    "Tool",
    "ToolConfig",
    "find_templates",
    "CheckTool",
    "WatchTool",
    "VersionTool",
]
