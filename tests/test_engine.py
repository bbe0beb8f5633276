import pytest
from capl_formatter.engine import FormatterEngine, format_file
from capl_formatter.errors import FormatError
from capl_formatter.models import FormatResult, FormatterConfig
from capl_formatter.rules.base import FormattingContext, FormattingRule, Transformation
from capl_formatter.rules.whitespace import WhitespaceCleanupRule


class MockRule(FormattingRule):
    @property
    def rule_id(self) -> str:
        return "T001"

    @property
    def name(self) -> str:
        return "mock"

    def analyze(self, context: FormattingContext) -> list[Transformation]:
        start = context.source.find("old")
        if start == -1:
            return []
        return [Transformation(start, start + 3, "new")]


def test_formatter_config_defaults():
    config = FormatterConfig()
    assert config.max_width == 100
    assert config.tab_spaces == 2
    assert config.max_blank_lines == 1
    assert config.reflow_comments is True


def test_engine_applies_rules():
    config = FormatterConfig()
    engine = FormatterEngine(config=config)
    engine.add_rule(MockRule())

    result = engine.format_string("This is old code\n")

    assert isinstance(result, FormatResult)
    assert result.source == "This is new code\n"
    assert result.modified is True


def test_engine_no_change():
    engine = FormatterEngine(FormatterConfig())
    engine.add_rule(MockRule())

    source = "This is clean code\n"
    result = engine.format_string(source)

    assert result.source == source
    assert result.modified is False


def test_whitespace_cleanup_simple():
    config = FormatterConfig()
    engine = FormatterEngine(config)
    engine.add_rule(WhitespaceCleanupRule(config))

    result = engine.format_string("int x = 1;   \nint y = 2;")
    assert result.source == "int x = 1;\nint y = 2;\n"
    assert result.modified is True


def test_crlf_is_normalized():
    engine = FormatterEngine.default(FormatterConfig())
    result = engine.format_string("int x;\r\nint y;\r\n")
    assert result.source == "int x;\nint y;\n"
    assert result.modified is True


def test_indentation_by_brace_depth():
    engine = FormatterEngine.default(FormatterConfig())
    source = 'on start\n{\nwrite("hi");\nif (x) {\ny = 1;\n}\n}\n'
    expected = 'on start\n{\n  write("hi");\n  if (x) {\n    y = 1;\n  }\n}\n'

    assert engine.format_string(source).source == expected


def test_indentation_uses_tab_spaces():
    engine = FormatterEngine.default(FormatterConfig(tab_spaces=4))
    result = engine.format_string("on start {\n      x = 1;\n}\n")
    assert result.source == "on start {\n    x = 1;\n}\n"


def test_indentation_else_on_closing_line():
    engine = FormatterEngine.default(FormatterConfig())
    source = "if (a) {\nx();\n} else {\ny();\n}\n"
    expected = "if (a) {\n  x();\n} else {\n  y();\n}\n"
    assert engine.format_string(source).source == expected


def test_indentation_continues_open_parentheses():
    engine = FormatterEngine.default(FormatterConfig())
    result = engine.format_string("foo(a,\nb);\n")
    assert result.source == "foo(a,\n  b);\n"


def test_braces_in_strings_and_comments_are_ignored():
    engine = FormatterEngine.default(FormatterConfig())
    source = 'write("{");\n// }\nchar c = \'{\';\n/* { */\n'
    result = engine.format_string(source)
    assert result.errors == []
    assert result.source == source


def test_block_comment_body_keeps_layout():
    engine = FormatterEngine.default(FormatterConfig())
    source = "on start {\n/*\n      keep me\n*/\nx = 1;\n}\n"
    expected = "on start {\n  /*\n      keep me\n*/\n  x = 1;\n}\n"
    assert engine.format_string(source).source == expected


def test_unexpected_closing_brace_is_reported():
    engine = FormatterEngine.default(FormatterConfig())
    source = "on start {\n}\n}\n"

    result = engine.format_string(source)

    assert result.modified is False
    assert result.source == source
    assert result.errors == ["line 3: unexpected token '}'"]


def test_unclosed_brace_is_reported():
    engine = FormatterEngine.default(FormatterConfig())
    result = engine.format_string("on start {\nx = 1;\n")
    assert result.errors == ["line 1: unclosed '{'"]


def test_unterminated_block_comment_is_reported():
    engine = FormatterEngine.default(FormatterConfig())
    result = engine.format_string("int x;\n/* never closed\n")
    assert result.errors == ["line 2: unterminated block comment"]


def test_blank_lines_collapse_to_limit():
    source = "int a;\n\n\n\nint b;\n"

    one = FormatterEngine.default(FormatterConfig()).format_string(source)
    none = FormatterEngine.default(FormatterConfig(max_blank_lines=0)).format_string(source)

    assert one.source == "int a;\n\nint b;\n"
    assert none.source == "int a;\nint b;\n"


def test_blank_lines_removed_at_block_edges():
    engine = FormatterEngine.default(FormatterConfig())
    result = engine.format_string("on start {\n\n\nx();\n\n}\n")
    assert result.source == "on start {\n  x();\n}\n"


def test_comment_reflow_line():
    config = FormatterConfig(max_width=40)
    engine = FormatterEngine.default(config)
    source = "// " + " ".join(["word"] * 15) + "\n"

    lines = engine.format_string(source).source.splitlines()

    assert len(lines) == 3
    assert all(line.startswith("// ") for line in lines)
    assert all(len(line) <= 40 for line in lines)
    assert sum(len(line.split()) - 1 for line in lines) == 15


def test_comment_reflow_keeps_indentation():
    config = FormatterConfig(max_width=40)
    engine = FormatterEngine.default(config)
    source = "on start {\n// " + " ".join(["word"] * 15) + "\n}\n"

    lines = engine.format_string(source).source.splitlines()

    body = lines[1:-1]
    assert len(body) > 1
    assert all(line.startswith("  // ") for line in body)
    assert all(len(line) <= 40 for line in body)


def test_comment_reflow_skips_banners():
    engine = FormatterEngine.default(FormatterConfig(max_width=20))
    source = "// " + "-" * 40 + "\n"
    assert engine.format_string(source).source == source


def test_comment_reflow_can_be_disabled():
    engine = FormatterEngine.default(FormatterConfig(max_width=20, reflow_comments=False))
    source = "// " + " ".join(["word"] * 15) + "\n"
    assert engine.format_string(source).source == source


def test_formatting_is_idempotent():
    engine = FormatterEngine.default(FormatterConfig(max_width=40))
    source = (
        "variables {\n"
        "int x = 1;   \n"
        "\n\n\n"
        "}\n"
        "on start\n"
        "{\n"
        'write("start {");  \n'
        "// a rather long comment that has to be wrapped over several lines\n"
        "if (x > 0) {\n"
        "x = x - 1;\n"
        "}\n"
        "else\n"
        "{\n"
        "x = 0;\n"
        "}\n"
        "}"
    )

    first = engine.format_string(source)
    second = engine.format_string(first.source)

    assert first.modified is True
    assert second.source == first.source
    assert second.modified is False


def test_format_file_returns_text_without_writing(tmp_path):
    path = tmp_path / "node.can"
    path.write_text("on start {\nx = 1;\n}", encoding="utf-8")

    formatted = format_file(path, FormatterConfig())

    assert formatted == "on start {\n  x = 1;\n}\n"
    assert path.read_text(encoding="utf-8") == "on start {\nx = 1;\n}"


def test_format_file_raises_format_error(tmp_path):
    path = tmp_path / "broken.can"
    path.write_text("}\n", encoding="utf-8")

    with pytest.raises(FormatError, match="unexpected token"):
        format_file(path, FormatterConfig())


def test_format_file_rejects_non_utf8(tmp_path):
    path = tmp_path / "latin1.can"
    path.write_bytes(b"// caf\xe9\n")

    with pytest.raises(FormatError, match="not valid UTF-8"):
        format_file(path, FormatterConfig())


def test_format_file_missing_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        format_file(tmp_path / "missing.can", FormatterConfig())


def test_blank_lines_inside_block_comments_are_kept():
    engine = FormatterEngine.default(FormatterConfig())
    source = "/*\n  header {\n\n\n  body\n\n*/\nint x;\n"

    result = engine.format_string(source)

    assert result.errors == []
    assert result.source == source


def test_blank_lines_around_block_comment_are_limited():
    engine = FormatterEngine.default(FormatterConfig())
    source = "int x;\n\n\n\n/* note */\n\n\n\nint y;\n"
    assert engine.format_string(source).source == "int x;\n\n/* note */\n\nint y;\n"
