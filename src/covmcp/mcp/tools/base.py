"""Base classes for tool parameters."""

from __future__ import annotations

from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _snake_or_camel(field_name: str) -> AliasChoices:
    # Schemas advertise the first choice; clients of the camelCase contract still validate
    return AliasChoices(field_name, to_camel(field_name))


class BaseParams(BaseModel):
    """Base class for all tool parameters.

    Uses extra="forbid" to reject unknown fields with clear errors. Every field
    is accepted under its snake_case name or its camelCase form (lcovPath,
    filePath).
    """

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=AliasGenerator(validation_alias=_snake_or_camel),
    )


class ReportParams(BaseParams):
    """Parameters shared by every tool that reads a coverage report."""

    lcov_path: str | None = Field(
        default=None,
        description="Path to the coverage report (LCOV or Cobertura XML). "
        "Defaults to ./coverage/lcov.info relative to the server's working directory.",
    )
