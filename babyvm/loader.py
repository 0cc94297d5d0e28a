"""Program loader.

A program file holds one store line per text line, 32 characters of '0'/'1'
each. Character j is bit j of the word, so the first character read is the
least significant bit. Missing trailing lines leave their words zero.
"""

import logging
import os
from typing import Iterable

from babyvm.exceptions import ProgramFileNotFoundException, ProgramFormatException
from babyvm.isa.baby import STORE_SIZE
from babyvm.isa.word import WORD_BITS
from babyvm.types import Word

logger = logging.getLogger(__name__)


def parse_line(text: str, line_number: int) -> Word:
    """Convert one program line into a word.

    Args:
        text: The line, with or without its line ending
        line_number: 0-based line index, used in error messages
    Returns:
        The word, first character in bit 0
    Raises:
        ProgramFormatException: on a character other than '0'/'1' or a line shorter than 32 bits
    """
    text = text.rstrip('\r\n')
    word = 0
    for column in range(WORD_BITS):
        if column >= len(text):
            raise ProgramFormatException(f'line ends before {WORD_BITS} bits', line_number, column)
        char = text[column]
        if char == '1':
            word |= 1 << column
        elif char != '0':
            raise ProgramFormatException(
                f'invalid character in program file: {char!r} (ASCII {ord(char)})',
                line_number,
                column,
            )
    return word


def parse_program(lines: Iterable[str], store_size: int = STORE_SIZE) -> list[Word]:
    """Convert program lines into exactly store_size words.

    Lines beyond the store are ignored; characters after the 32nd on a line too.
    """
    words = [0] * store_size
    for line_number, text in enumerate(lines):
        if line_number >= store_size:
            logger.warning(f'Program has more than {store_size} lines, ignoring the rest')
            break
        words[line_number] = parse_line(text, line_number)
    return words


def load_program(path: str, store_size: int = STORE_SIZE) -> list[Word]:
    """Read a program file.

    Raises:
        ProgramFileNotFoundException: if the file does not exist
        ProgramFormatException: if the file is malformed
    """
    if not os.path.isfile(path):
        raise ProgramFileNotFoundException(path)
    with open(path, 'r') as f:
        return parse_program(f.read().splitlines(), store_size)


def dump_program(words: Iterable[Word]) -> str:
    """Render words in the program file format, one line per word."""
    return ''.join(''.join('1' if word >> j & 1 else '0' for j in range(WORD_BITS)) + '\n' for word in words)
