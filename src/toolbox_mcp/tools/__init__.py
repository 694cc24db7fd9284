"""Tool bodies exposed through ``tools/call``."""

from toolbox_mcp.tools.random_data import RandomDataTool, pick_todo_id
from toolbox_mcp.tools.system_info import collect_system_info, get_system_info

__all__ = [
    "RandomDataTool",
    "collect_system_info",
    "get_system_info",
    "pick_todo_id",
]
