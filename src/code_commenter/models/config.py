"""Configuration models for code-commenter."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from code_commenter.constants import LargeFileDefaults, ParallelProcessing
from code_commenter.models.documentation import DocOptions


class CommenterConfig(BaseModel):
    """Settings shared by the CLI, the processor and the MCP tools.

    Keys may be given in snake_case or in the camelCase form used by
    ``code-commenter.config.json`` files (``todoTemplate``, ``dryRun``, ...).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    todo: bool = True
    todo_template: Optional[str] = Field(default=None, alias="todoTemplate")
    summary_template: Optional[str] = Field(default=None, alias="summaryTemplate")
    param_section_template: Optional[str] = Field(default=None, alias="jsdocTemplate")
    example: bool = False
    output: Optional[str] = None
    dry_run: bool = Field(default=False, alias="dryRun")
    continue_on_error: bool = Field(default=True, alias="continueOnError")
    strict: bool = False
    workers: int = Field(default=ParallelProcessing.DEFAULT_WORKERS, ge=0)
    large_file_line_threshold: int = Field(default=LargeFileDefaults.LINE_THRESHOLD, gt=0, alias="largeFileLineThreshold")
    large_file_byte_threshold: int = Field(default=LargeFileDefaults.BYTE_THRESHOLD, gt=0, alias="largeFileByteThreshold")

    @field_validator("todo_template", "summary_template", "param_section_template")
    @classmethod
    def _non_blank_template(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("template must not be blank")
        return value

    def merged_with(self, overrides: Dict[str, Any]) -> "CommenterConfig":
        """Return a copy with non-None overrides applied on top.

        Args:
            overrides: Field values keyed by snake_case name

        Returns:
            New validated configuration
        """
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return CommenterConfig.model_validate(data)

    def to_doc_options(self, is_typed_language: bool) -> DocOptions:
        """Build renderer options for one source language."""
        return DocOptions(
            is_typed_language=is_typed_language,
            include_example=self.example,
            include_todo_placeholder=self.todo,
            todo_template=self.todo_template,
            custom_summary_template=self.summary_template,
            custom_param_section=self.param_section_template,
        )
