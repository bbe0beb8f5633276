from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


class FormatterConfig(BaseModel):
    """Formatting settings, loaded from caplfmt.toml or built from defaults.

    Instances are frozen so a single value can be shared by every worker of a batch.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_width: int = Field(default=100, ge=1)
    tab_spaces: int = Field(default=2, ge=1)
    max_blank_lines: int = Field(default=1, ge=0)
    reflow_comments: bool = True


@dataclass
class FormatResult:
    source: str
    modified: bool
    errors: list[str] = field(default_factory=list)
