"""
External association tool invocation
"""

from .external import (
    ExternalAssociationTool,
    ExternalToolError,
    ToolExecutionError,
    ToolOutputError,
    ToolTimeoutError,
)

__all__ = [
    'ExternalAssociationTool',
    'ExternalToolError',
    'ToolExecutionError',
    'ToolOutputError',
    'ToolTimeoutError',
]
