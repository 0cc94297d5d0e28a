from typing import Optional


class LoaderException(Exception):
    """Base class for problems with a program file, raised before any cycle runs."""


class ProgramFileNotFoundException(LoaderException):
    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f'[ERROR] program file not found: {self.path}'


class ProgramFormatException(LoaderException):
    def __init__(self, reason: str, line: int, column: Optional[int] = None) -> None:
        super().__init__(reason, line, column)
        self.reason = reason
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.column is None:
            return f'[ERROR] {self.reason} (line {self.line})'
        return f'[ERROR] {self.reason} (line {self.line}, column {self.column})'


class UnsupportedVariantException(Exception):
    def __init__(self, variant: str) -> None:
        super().__init__(variant)
        self.variant = variant

    def __str__(self) -> str:
        return f'[ERROR] babyvm doesnt support the {self.variant!r} instruction set!'


class InvariantViolation(AssertionError):
    """A decoded instruction that a correct decoder can never produce reached the executor.

    Never caught: it means the decoder or the caller is broken.
    """
