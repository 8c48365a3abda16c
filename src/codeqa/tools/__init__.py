"""Code exploration tools the agent can call."""

from .base import Tool, ToolContext
from .registry import ToolRegistry, create_default_registry
from .list_directory import ListDirectoryTool, list_directory
from .glob_search import GlobTool, glob_search
from .grep_search import GrepTool, grep_search
from .read_file import ReadFileTool, read_file
from .file_outline import FileOutlineTool, extract_outline, get_file_outline
from .find_definition import FindDefinitionTool, find_definition
from .related_files import RelatedFilesTool, get_related_files

__all__ = [
    "Tool",
    "ToolContext",
    "ToolRegistry",
    "create_default_registry",
    "ListDirectoryTool",
    "GlobTool",
    "GrepTool",
    "ReadFileTool",
    "FileOutlineTool",
    "FindDefinitionTool",
    "RelatedFilesTool",
    "list_directory",
    "glob_search",
    "grep_search",
    "read_file",
    "get_file_outline",
    "extract_outline",
    "find_definition",
    "get_related_files",
]
