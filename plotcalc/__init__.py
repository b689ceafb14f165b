"""A graphing calculator: expression parsing, evaluation, plotting state and a pygame window."""

__version__ = "0.1.0"
__all__ = ["parser", "evaluator", "state", "app"]