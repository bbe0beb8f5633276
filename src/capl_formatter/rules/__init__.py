from .base import FormattingContext, FormattingRule, Transformation
from .comments import CommentReflowRule
from .indentation import IndentationRule
from .whitespace import WhitespaceCleanupRule

__all__ = [
    "FormattingRule",
    "FormattingContext",
    "Transformation",
    "WhitespaceCleanupRule",
    "IndentationRule",
    "CommentReflowRule",
]
