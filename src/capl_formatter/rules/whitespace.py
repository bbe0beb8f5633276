import re

from ..models import FormatterConfig
from .base import FormattingContext, FormattingRule, Transformation


class WhitespaceCleanupRule(FormattingRule):
    """Strips trailing whitespace and guarantees a final newline."""

    def __init__(self, config: FormatterConfig):
        self.config = config

    @property
    def rule_id(self) -> str:
        return "F001"

    @property
    def name(self) -> str:
        return "whitespace-cleanup"

    def analyze(self, context: FormattingContext) -> list[Transformation]:
        transformations = []

        # 1. Trailing whitespace
        for m in re.finditer(r"[ \t]+$", context.source, re.MULTILINE):
            transformations.append(Transformation(m.start(), m.end(), ""))

        # 2. EOF newline
        if context.source and not context.source.endswith("\n"):
            end = len(context.source)
            transformations.append(Transformation(end, end, "\n"))

        return transformations
