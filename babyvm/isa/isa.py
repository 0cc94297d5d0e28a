from abc import ABC, abstractmethod
from typing import Optional

from babyvm.isa.register import Register


class ISA(ABC):
    """Abstract base class for instruction-set implementations."""

    name: Optional[str]
    cpu_regs: Optional[list[Register]]

    def __init__(self) -> None:
        pass

    @abstractmethod
    def name2reg(self, name: str) -> Register:
        """Convert register name to register object. Must be implemented by subclasses."""

    @abstractmethod
    def decode(self, word: int) -> object:
        """Decode a raw instruction word. Must be implemented by subclasses."""

    @abstractmethod
    def encode(self, opcode: int, line: int, addressing_mode: int = 0) -> int:
        """Encode instruction fields into a word. Must be implemented by subclasses."""
