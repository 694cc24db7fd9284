"""``get_system_info`` tool: a snapshot of the server process and host."""

from __future__ import annotations

import json
import os
import platform
import sys
import time
import tracemalloc
from typing import Any

import psutil

from toolbox_mcp.mcp.protocol import CallToolResult

NAME = "get_system_info"
DESCRIPTION = "Get system information about the current environment"
INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {},
    "required": [],
}


def _memory_usage(process: psutil.Process) -> dict[str, int]:
    mem = process.memory_info()
    usage = {
        "rss": mem.rss,
        "vms": mem.vms,
        "allocatedBlockCount": sys.getallocatedblocks(),
    }
    if tracemalloc.is_tracing():
        current, peak = tracemalloc.get_traced_memory()
        usage["tracedCurrent"] = current
        usage["tracedPeak"] = peak
    return usage


def collect_system_info() -> dict[str, Any]:
    """Return platform, interpreter, working directory, memory and uptime details."""
    process = psutil.Process()
    return {
        "platform": sys.platform,
        "pythonVersion": platform.python_version(),
        "implementation": platform.python_implementation(),
        "arch": platform.machine(),
        "cwd": os.getcwd(),
        "env": len(os.environ),
        "memoryUsage": _memory_usage(process),
        "uptime": round(time.time() - process.create_time(), 3),
    }


async def get_system_info() -> CallToolResult:
    return CallToolResult.from_text(json.dumps(collect_system_info(), indent=2))
