class CookbookError(Exception):
    """Base class for all errors raised by the cookbook package."""


class ParseError(CookbookError, ValueError):
    """An ingredient line did not match the ingredient grammar.

    Attributes:
        lineno: 1-based line number within the parsed text.
        column: 1-based column where scanning stopped.
        line: the offending line (without line terminators).
        expected: what the scanner was looking for at ``column``.
    """

    def __init__(self, lineno: int, column: int, line: str, expected: str):
        self.lineno = lineno
        self.column = column
        self.line = line
        self.expected = expected
        if column > len(line):
            found = "end of line"
        else:
            found = repr(line[column - 1])
        super().__init__(
            f"line {lineno}, column {column}: expected {expected}, found {found}"
        )


class EncodeError(CookbookError):
    pass


class DecodeError(CookbookError):
    pass


class NotFound(CookbookError, LookupError):
    pass


class StorageError(CookbookError):
    pass
