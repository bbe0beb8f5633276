import textwrap

from ..models import FormatterConfig
from .base import FormattingContext, FormattingRule, Transformation
from .indentation import scan_lines

MIN_REFLOW_WIDTH = 20


class CommentReflowRule(FormattingRule):
    """Reflows standalone // comments to stay within max_width."""

    def __init__(self, config: FormatterConfig):
        self.config = config

    @property
    def rule_id(self) -> str:
        return "F012"

    @property
    def name(self) -> str:
        return "comment-reflow"

    def analyze(self, context: FormattingContext) -> list[Transformation]:
        if not self.config.reflow_comments:
            return []

        transformations = []
        infos = scan_lines(context.source)

        offset = 0
        for line, info in zip(context.source.split("\n"), infos):
            line_start = offset
            offset += len(line) + 1

            stripped = line.lstrip()
            if info.in_comment or not stripped.startswith("//"):
                continue
            if len(line) <= self.config.max_width or self._should_exclude(stripped):
                continue

            indent = line[: len(line) - len(stripped)]
            prefix = indent + "// "
            width = max(self.config.max_width - len(prefix), MIN_REFLOW_WIDTH)
            wrapped = textwrap.wrap(stripped[2:].strip(), width=width, break_long_words=False)
            if not wrapped:
                continue

            new_line = "\n".join(prefix + part for part in wrapped)
            if new_line != line:
                transformations.append(Transformation(line_start, line_start + len(line), new_line))

        return transformations

    def _should_exclude(self, comment: str) -> bool:
        # Doc comments and ASCII-art banners keep their layout
        if comment.startswith("///"):
            return True
        if "+-" in comment or "| " in comment or "---" in comment or "***" in comment:
            return True
        return False
