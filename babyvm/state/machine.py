"""Machine state of the Baby and records of executed cycles."""

from typing import Optional

from babyvm.isa.baby import STORE_SIZE
from babyvm.serialization import SerializableMixin
from babyvm.types import Word


class MachineState(SerializableMixin):
    """The store and registers of one machine.

    Created zeroed, populated by the loader, then mutated in place by every
    cycle. The caller owns it and hands it to the CPU.

    Attributes:
        store (list[Word]): Words 0..store_size-1, instructions and data alike.
        accumulator (Word): The A register.
        instruction_pointer (Word): Address of the last-fetched line (CI).
        instruction_register (Word): Most recently fetched raw instruction (PI).
    """

    store: list[Word]
    accumulator: Word
    instruction_pointer: Word
    instruction_register: Word

    def __init__(self, store_size: int = STORE_SIZE) -> None:
        if store_size < 1:
            raise ValueError(f'Store must hold at least one word, got {store_size}')
        self.store = [0] * store_size
        self.accumulator = 0
        self.instruction_pointer = 0
        self.instruction_register = 0

    @property
    def store_size(self) -> int:
        return len(self.store)

    def reset(self) -> None:
        """Zero the store and every register."""
        self.store = [0] * len(self.store)
        self.accumulator = 0
        self.instruction_pointer = 0
        self.instruction_register = 0

    def copy(self) -> 'MachineState':
        clone = MachineState(len(self.store))
        clone.store = list(self.store)
        clone.accumulator = self.accumulator
        clone.instruction_pointer = self.instruction_pointer
        clone.instruction_register = self.instruction_register
        return clone

    def __repr__(self) -> str:
        return (
            f'MachineState(store_size={len(self.store)}, accumulator={hex(self.accumulator)}, '
            f'instruction_pointer={hex(self.instruction_pointer)}, '
            f'instruction_register={hex(self.instruction_register)})'
        )

    def __eq__(self, value: object) -> bool:
        if not isinstance(value, MachineState):
            return NotImplemented
        return (
            self.store == value.store
            and self.accumulator == value.accumulator
            and self.instruction_pointer == value.instruction_pointer
            and self.instruction_register == value.instruction_register
        )

    def __ne__(self, value: object) -> bool:
        if not isinstance(value, MachineState):
            return NotImplemented
        return not self.__eq__(value)

    def __hash__(self) -> int:
        return hash((tuple(self.store), self.accumulator, self.instruction_pointer, self.instruction_register))


class CycleRecord(SerializableMixin):
    """One executed cycle: the instruction that ran and the state it left behind.

    Attributes:
        cycle (int): 1-based cycle number.
        word (Word): The fetched instruction word.
        mnemonic (str): Disassembly of the word.
        stopped (bool): Whether the instruction was STP.
        state (MachineState): Copy of the machine state after the cycle.
    """

    cycle: int
    word: Word
    mnemonic: str
    stopped: bool
    state: MachineState

    def __init__(
        self,
        cycle: Optional[int] = None,
        word: Optional[Word] = None,
        mnemonic: Optional[str] = None,
        stopped: bool = False,
        state: Optional[MachineState] = None,
    ) -> None:
        if cycle is None or word is None or mnemonic is None or state is None:
            raise Exception('Invalid arguments to CycleRecord constructor!')
        self.cycle = cycle
        self.word = word
        self.mnemonic = mnemonic
        self.stopped = stopped
        self.state = state

    def __repr__(self) -> str:
        return f'CycleRecord(cycle={self.cycle}, word={hex(self.word)}, mnemonic={self.mnemonic!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CycleRecord):
            return NotImplemented
        return (
            self.cycle == other.cycle
            and self.word == other.word
            and self.mnemonic == other.mnemonic
            and self.stopped == other.stopped
            and self.state == other.state
        )

    def __hash__(self) -> int:
        return hash((self.cycle, self.word, self.mnemonic, self.stopped, self.state))
