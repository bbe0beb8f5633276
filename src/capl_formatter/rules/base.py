from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class Transformation:
    """Replace source[start:end] with new_content."""

    start: int
    end: int
    new_content: str
    priority: int = 0


@dataclass
class FormattingContext:
    source: str
    file_path: str = ""

    @property
    def lines(self) -> list[str]:
        return self.source.splitlines(keepends=True)


class FormattingRule(ABC):
    @property
    @abstractmethod
    def rule_id(self) -> str: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def analyze(self, context: FormattingContext) -> list[Transformation]:
        """Return the transformations this rule wants applied to the context."""
