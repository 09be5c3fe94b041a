"""
Pydantic schemas for the Godot docs → llms.md conversion.

This module is the single source of truth for the data models shared by the
transformation passes, the pipeline runner and the CLI.

Architecture:
- LanguageFilter: which code-tab language survives pre-processing
- PropertyRecord / MethodRecord: declarations recovered from description prose
- DocumentResult: outcome of processing one source document
- ConversionSummary: outcome of a whole run
- RepositoryInfo: the documentation checkout a run was produced from
"""

from enum import Enum
from typing import List, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# CONFIGURATION ENUMS
# ============================================================================

class LanguageFilter(str, Enum):
    """Target language selector for multi-language code tabs."""
    GDSCRIPT = "gdscript"
    CSHARP = "csharp"
    BOTH = "both"


# ============================================================================
# RECONSTRUCTION SCHEMAS
# ============================================================================

class PropertyRecord(BaseModel):
    """A property declaration found in a "Property Descriptions" section."""
    type: str = Field(description="Declared type, e.g. 'Vector2' or 'Array[StringName]'")
    name: str = Field(description="Property identifier")
    default_value: Optional[str] = Field(None, description="Default value text, without backticks")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "type": "Vector2",
            "name": "global_position",
            "default_value": "Vector2(0, 0)",
        }
    })


class MethodRecord(BaseModel):
    """A method declaration found in a "Method Descriptions" section."""
    return_type: str = Field(description="Return type with annotations stripped ('void' if empty)")
    signature: str = Field(description="Normalized signature: **name**(params)")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "return_type": "void",
            "signature": "**apply_scale**(ratio: Vector2)",
        }
    })


# ============================================================================
# PIPELINE SCHEMAS
# ============================================================================

class DocumentResult(BaseModel):
    """Outcome of running one document through the pipeline."""
    source_path: str = Field(description="Absolute path of the source .rst file")
    label: str = Field(description="Path relative to the docs root, used as the document header")
    status: Literal["success", "failed"]
    markdown: Optional[str] = Field(None, description="Final Markdown including its header")
    error: Optional[str] = Field(None, description="Error message when status is 'failed'")
    duration_seconds: float = Field(default=0.0)


class DocumentFailure(BaseModel):
    """A document excluded from the output."""
    label: str
    error: str


class ConversionSummary(BaseModel):
    """Outcome of a complete conversion run."""
    attempted: int = Field(description="Number of documents handed to the pipeline")
    successful: int = Field(description="Number of documents included in the output")
    failed: int = Field(description="Number of documents dropped after a failure")
    documents: List[str] = Field(
        default_factory=list,
        description="Markdown of successful documents, in input order"
    )
    failures: List[DocumentFailure] = Field(default_factory=list)
    duration_seconds: float = Field(default=0.0)
    concurrency: int
    language: LanguageFilter


# ============================================================================
# REPOSITORY SCHEMAS
# ============================================================================

class RepositoryInfo(BaseModel):
    """Documentation checkout used for a run."""
    path: str
    branch: Optional[str] = None
    commit_hash: Optional[str] = Field(None, description="Short (8 character) commit hash")
    commit_date: Optional[str] = Field(None, description="Commit date, YYYY-MM-DD")
