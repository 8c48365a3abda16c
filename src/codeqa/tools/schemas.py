"""Pydantic argument schemas for the exploration tools."""

from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ToolArgs(BaseModel):
    """Base class for tool arguments.

    Unknown keys are ignored and explicit JSON ``null`` values fall back to the
    field default, so that loosely formatted model output still validates.
    """

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


def _require_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


class ListDirectoryArgs(ToolArgs):
    """Input schema for list_directory."""

    path: str = Field(
        default="",
        description="Directory path relative to the project root. Defaults to the root.",
    )
    max_depth: int = Field(default=3, description="Maximum depth to traverse (default: 3)")


class GlobArgs(ToolArgs):
    """Input schema for glob_search."""

    pattern: str = Field(description="Glob pattern, e.g. '**/*.cs' or 'src/**/*Service*.ts'")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        return _require_text(v, "pattern")


class GrepArgs(ToolArgs):
    """Input schema for grep_search."""

    pattern: str = Field(description="Regular expression to search for (case-insensitive)")
    include: str = Field(
        default="",
        description="Optional file glob filter, e.g. '*.cs' or '*.{ts,tsx}'",
    )

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("pattern is required")
        return v


class ReadFileArgs(ToolArgs):
    """Input schema for read_file."""

    file_path: str = Field(description="File path, relative to the project root or absolute")
    offset: int = Field(default=0, description="0-based line offset to start reading from")
    max_lines: int = Field(default=500, description="Maximum number of lines to read (default: 500)")

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        return _require_text(v, "file_path")

    @field_validator("offset")
    @classmethod
    def validate_offset(cls, v: int) -> int:
        if v < 0:
            raise ValueError("offset must be >= 0")
        return v

    @field_validator("max_lines")
    @classmethod
    def validate_max_lines(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_lines must be > 0")
        return v


class FileOutlineArgs(ToolArgs):
    """Input schema for get_file_outline."""

    file_path: str = Field(description="File path, relative to the project root or absolute")

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        return _require_text(v, "file_path")


class FindDefinitionArgs(ToolArgs):
    """Input schema for find_definition."""

    symbol: str = Field(description="Name of the type, function or variable to locate")
    include: str = Field(
        default="",
        description="Optional file glob filter, e.g. '*.cs'. Restricts patterns to that language.",
    )

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        return _require_text(v, "symbol")


class RelatedFilesArgs(ToolArgs):
    """Input schema for get_related_files."""

    file_path: str = Field(description="File path, relative to the project root or absolute")

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        return _require_text(v, "file_path")
