"""
Pydantic models for strongly-typed configuration validation.

Every field has a default, so a run without a config file uses
``ParserConfig()``.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class SlicePolicy(str, Enum):
    """How data lines shorter than the column offsets are handled."""
    CLIP = "clip"  # Missing columns become empty values
    STRICT = "strict"  # Raise ColumnSliceError, failing the file


class EncodingErrors(str, Enum):
    """Decoding error handlers accepted for input files."""
    STRICT = "strict"
    REPLACE = "replace"
    IGNORE = "ignore"


class OutputConfig(BaseModel):
    """Output file settings."""
    flush_every: Optional[int] = Field(
        1000,
        description="Flush CSV to disk every N rows (None=every row, 0=on close only)",
        ge=0
    )
    encoding: str = Field("utf-8", description="Output CSV encoding")


class ParserConfig(BaseModel):
    """Main parser configuration."""
    input_encoding: str = Field("utf-8", description="Printout file encoding")
    encoding_errors: EncodingErrors = Field(
        EncodingErrors.STRICT,
        description="How undecodable bytes in printouts are handled"
    )
    file_mask: Optional[str] = Field(
        None,
        description="Regex pattern to filter input files by filename (None = accept all files)"
    )
    max_files: Optional[int] = Field(
        None,
        description="Maximum number of files to process (None = no limit)",
        gt=0
    )
    max_file_size: Optional[int] = Field(
        None,
        description="Maximum file size in bytes (None = no limit)",
        gt=0
    )
    progress_interval: int = Field(
        10000,
        description="Log progress every N lines",
        gt=0
    )
    slice_policy: SlicePolicy = Field(
        SlicePolicy.CLIP,
        description="Handling of data lines too short for the header offsets"
    )
    fail_fast: bool = Field(
        False,
        description="Stop the batch on the first file that fails"
    )
    output: OutputConfig = Field(
        default_factory=OutputConfig,
        description="Output file configuration"
    )

    model_config = {"extra": "forbid"}

    @field_validator("input_encoding")
    @classmethod
    def validate_encoding_not_empty(cls, value):
        """Reject an empty encoding name."""
        if not value or not value.strip():
            raise ValueError("input_encoding must not be empty")
        return value

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ParserConfig":
        """
        Create ParserConfig from dictionary with comprehensive validation.

        Args:
            config_dict: Configuration dictionary (loaded from JSON)

        Returns:
            Validated ParserConfig instance

        Raises:
            ValidationError: If configuration is invalid
        """
        return cls.model_validate(config_dict)

    @classmethod
    def from_json_file(cls, config_path: str) -> "ParserConfig":
        """
        Load and validate configuration from JSON file.

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If file doesn't exist
        """
        import json
        from pathlib import Path

        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(path, encoding='utf-8') as f:
            config_dict = json.load(f)

        return cls.from_dict(config_dict)
