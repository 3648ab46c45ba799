"""Operator procedures.

Each procedure validates its environment, delegates to an external command
and reports status. They share no runtime state.
"""

from .base import BaseProcedure, ProcedureResult
from .build import BuildProcedure
from .install import InstallProcedure
from .run import RunProcedure
from .sysinfo import SysInfoProcedure

__all__ = [
    "BaseProcedure",
    "ProcedureResult",
    "BuildProcedure",
    "InstallProcedure",
    "RunProcedure",
    "SysInfoProcedure",
]
