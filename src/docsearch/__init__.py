"""docsearch — in-memory word and phrase search over a folder of Word documents."""

__version__ = "0.1.0"
