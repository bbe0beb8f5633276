import re
from dataclasses import dataclass

from ..errors import FormatError
from ..models import FormatterConfig
from .base import FormattingContext, FormattingRule, Transformation

_CODE, _BLOCK_COMMENT, _STRING, _CHAR = range(4)


@dataclass
class LineInfo:
    depth: int
    closers: int
    in_parens: bool
    in_comment: bool


def scan_lines(source: str) -> list[LineInfo]:
    """Compute the brace nesting of every line, skipping strings and comments.

    Raises FormatError when braces do not balance or a block comment never ends.
    """
    state = _CODE
    depth = 0
    parens = 0
    open_braces: list[int] = []
    comment_start = 0
    infos: list[LineInfo] = []

    for row, line in enumerate(source.split("\n")):
        info = LineInfo(depth=depth, closers=0, in_parens=parens > 0, in_comment=state == _BLOCK_COMMENT)
        seen_code = False
        i = 0
        while i < len(line):
            ch = line[i]
            pair = line[i : i + 2]

            if state == _BLOCK_COMMENT:
                if pair == "*/":
                    state = _CODE
                    i += 2
                    continue
                i += 1
                continue

            if state in (_STRING, _CHAR):
                if ch == "\\":
                    i += 2
                    continue
                if ch == ('"' if state == _STRING else "'"):
                    state = _CODE
                i += 1
                continue

            if pair == "//":
                break
            if pair == "/*":
                state = _BLOCK_COMMENT
                comment_start = row
                seen_code = True
                i += 2
                continue

            if ch == "}" and not seen_code:
                info.closers += 1
            elif not ch.isspace():
                seen_code = True

            if ch == '"':
                state = _STRING
            elif ch == "'":
                state = _CHAR
            elif ch == "{":
                open_braces.append(row)
                depth += 1
            elif ch == "}":
                if not open_braces:
                    raise FormatError("unexpected token '}'", line=row + 1)
                open_braces.pop()
                depth -= 1
            elif ch in "([":
                parens += 1
            elif ch in ")]":
                parens = max(parens - 1, 0)
            i += 1

        # String and character literals never span lines
        if state in (_STRING, _CHAR):
            state = _CODE
        infos.append(info)

    if state == _BLOCK_COMMENT:
        raise FormatError("unterminated block comment", line=comment_start + 1)
    if open_braces:
        raise FormatError("unclosed '{'", line=open_braces[0] + 1)
    return infos


class IndentationRule(FormattingRule):
    """Re-indents every code line by brace depth using tab_spaces spaces per level."""

    def __init__(self, config: FormatterConfig):
        self.config = config

    @property
    def rule_id(self) -> str:
        return "F002"

    @property
    def name(self) -> str:
        return "indentation"

    def analyze(self, context: FormattingContext) -> list[Transformation]:
        transformations = []
        infos = scan_lines(context.source)

        offset = 0
        for line, info in zip(context.source.split("\n"), infos):
            line_start = offset
            offset += len(line) + 1

            stripped = line.strip()
            # Block comment bodies keep their own layout
            if not stripped or info.in_comment:
                continue

            level = info.depth - info.closers
            if info.in_parens and not stripped.startswith((")", "]")):
                level += 1
            target_indent = " " * (max(level, 0) * self.config.tab_spaces)

            current_ws = re.match(r"[ \t]*", line).group(0)
            if current_ws != target_indent:
                transformations.append(
                    Transformation(line_start, line_start + len(current_ws), target_indent)
                )
        return transformations
