import logging
from pathlib import Path

from .errors import FormatError
from .models import FormatResult, FormatterConfig
from .rules.base import FormattingContext, FormattingRule, Transformation
from .rules.comments import CommentReflowRule
from .rules.indentation import IndentationRule, scan_lines
from .rules.whitespace import WhitespaceCleanupRule

logger = logging.getLogger(__name__)


class FormatterEngine:
    """Core engine for formatting CAPL sources through text transformations."""

    def __init__(self, config: FormatterConfig):
        self.config = config
        self.rules: list[FormattingRule] = []

    @classmethod
    def default(cls, config: FormatterConfig) -> "FormatterEngine":
        """Engine with the standard rule set registered."""
        engine = cls(config)
        engine.add_rule(WhitespaceCleanupRule(config))
        return engine

    def add_rule(self, rule: FormattingRule) -> None:
        """Register a new formatting rule."""
        self.rules.append(rule)

    def format_string(self, source: str, file_path: str = "") -> FormatResult:
        """Formats a CAPL string through rule passes, indentation and comment reflow."""
        original = source
        current_source = source.replace("\r\n", "\n")

        try:
            # Phase 1: Text rules until they stop changing the source
            max_passes = 2
            for _ in range(max_passes):
                pass_modified = False
                for rule in self.rules:
                    context = FormattingContext(source=current_source, file_path=file_path)
                    transforms = rule.analyze(context)
                    if transforms:
                        new_source = self._apply_transformations(current_source, transforms)
                        if new_source != current_source:
                            current_source = new_source
                            pass_modified = True
                if not pass_modified:
                    break

            # Phase 2: Vertical whitespace (before indentation)
            current_source = self._cleanup_vertical_whitespace(current_source)

            # Phase 3: Indentation, then reflow comments at their final column
            for rule in (IndentationRule(self.config), CommentReflowRule(self.config)):
                context = FormattingContext(source=current_source, file_path=file_path)
                current_source = self._apply_transformations(current_source, rule.analyze(context))

        except FormatError as e:
            logger.debug("Cannot format %s: %s", file_path or "<string>", e)
            return FormatResult(source=original, modified=False, errors=[str(e)])

        return FormatResult(source=current_source, modified=current_source != original)

    def _cleanup_vertical_whitespace(self, source: str) -> str:
        """Empties whitespace-only lines and limits runs of blank lines.

        Blank lines inside block comments are kept as they are.
        """
        lines = [line if line.strip() else "" for line in source.split("\n")]
        infos = scan_lines("\n".join(lines))
        limit = self.config.max_blank_lines

        kept: list[str] = []
        pending = 0
        for line, info in zip(lines, infos):
            if info.in_comment:
                kept.append(line)
                pending = 0
                continue
            if not line:
                pending += 1
                continue

            # No blank lines at the start of the file, right after { or right before }
            if kept and not kept[-1].endswith("{") and not line.lstrip().startswith("}"):
                kept.extend([""] * min(pending, limit))
            pending = 0
            kept.append(line)

        return "\n".join(kept) + "\n" if kept else ""

    def _apply_transformations(self, source: str, transforms: list[Transformation]) -> str:
        """Applies non-overlapping character-based transformations in a single pass."""
        sorted_transforms = sorted(transforms, key=lambda t: (t.start, t.end, t.priority))
        result = []
        last_offset = 0
        for t in sorted_transforms:
            if t.start < last_offset:
                continue
            result.append(source[last_offset : t.start])
            result.append(t.new_content)
            last_offset = t.end
        result.append(source[last_offset:])
        return "".join(result)


def format_file(path: Path | str, settings: FormatterConfig) -> str:
    """Format one CAPL file and return the new text. The file itself is not written."""
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise FormatError(f"not valid UTF-8: {e.reason}") from e

    result = FormatterEngine.default(settings).format_string(source, str(path))
    if result.errors:
        raise FormatError(result.errors[0])
    return result.source
