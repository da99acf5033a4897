"""Grammar-file driven tokenizer and SLR(1) parser with CST and AST output."""

__version__ = "0.1.0"

__all__ = ["cli", "grammar", "model", "parser", "report", "tokenizer"]