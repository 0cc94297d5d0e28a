"""Baby CPU: the fetch-decode-execute cycle.

Drives a caller-owned MachineState through the CPU interface, one cycle
per call to step().
"""

import logging
from typing import Callable, Optional, Sequence

from babyvm.isa.baby import Baby
from babyvm.isa.baby_executor import BabyExecutor, Signal
from babyvm.isa.baby_isa import BabyInstruction
from babyvm.isa.register import Register
from babyvm.isa.word import to_word
from babyvm.state.machine import MachineState
from babyvm.types import CpuRegisterMap, Word

from .cpu import CPU

logger = logging.getLogger(__name__)

CycleCallback = Callable[[int, BabyInstruction, Signal], None]


class BabyCPU(CPU):
    """Baby CPU implementing the fetch-decode-execute cycle."""

    def __init__(self, isa: Optional[Baby] = None, machine: Optional[MachineState] = None) -> None:
        """Initialize the Baby CPU.

        Args:
            isa: Instruction-set variant, the extended one with a 32-word store by default
            machine: State to drive; a zeroed one sized for the ISA when omitted
        """
        self.isa = isa if isa is not None else Baby()
        self.machine = machine if machine is not None else MachineState(self.isa.store_size)
        if self.machine.store_size != self.isa.store_size:
            raise ValueError(
                f'Machine store holds {self.machine.store_size} words but the ISA addresses {self.isa.store_size}',
            )
        self.executor = BabyExecutor(self.isa)

    def load_store(self, words: Sequence[Word]) -> None:
        """Populate the store from the start, zero-filling the remaining lines.

        Args:
            words: Store contents, at most store_size words
        """
        if len(words) > self.machine.store_size:
            raise ValueError(f'{len(words)} words do not fit a store of {self.machine.store_size}')
        self.machine.store = [to_word(w) for w in words] + [0] * (self.machine.store_size - len(words))

    def fetch(self) -> None:
        """Advance CI by one, then load store[CI] into PI.

        CI is bounded to the addressable range so it always indexes the store.
        """
        pointer = to_word(self.machine.instruction_pointer + 1) & self.isa.line_mask
        # Only needed when the store size is not a power of two
        pointer %= self.machine.store_size
        word = self.machine.store[pointer]
        self.machine.instruction_pointer = pointer
        self.machine.instruction_register = word

        logger.debug(f'fetch: instruction pointer {pointer}, instruction register {word:#010x}')

    def decode(self) -> BabyInstruction:
        instruction = self.isa.decode(self.machine.instruction_register)
        logger.debug(
            f'decode: opcode {instruction.opcode}, line {instruction.line}, addressing mode {instruction.addressing_mode}',
        )
        return instruction

    def cycle(self) -> tuple[BabyInstruction, Signal]:
        """Run fetch, decode and execute once, in that order.

        Returns:
            Tuple of (decoded instruction, signal)
        """
        self.fetch()
        instruction = self.decode()
        return instruction, self.executor.execute(instruction, self.machine)

    def step(self) -> Signal:
        """Run one cycle.

        Returns:
            Signal.STOP once STP has executed, Signal.CONTINUE otherwise
        """
        return self.cycle()[1]

    def run(self, max_cycles: Optional[int] = None, on_cycle: Optional[CycleCallback] = None) -> tuple[int, Signal]:
        """Repeat cycles until STP or until max_cycles cycles have run.

        Args:
            max_cycles: Upper bound on the number of cycles, unbounded when None
            on_cycle: Called after every cycle with (cycle number, instruction, signal)

        Returns:
            Tuple of (cycles executed, signal of the last cycle)
        """
        cycles = 0
        signal = Signal.CONTINUE
        while signal is Signal.CONTINUE and (max_cycles is None or cycles < max_cycles):
            instruction, signal = self.cycle()
            cycles += 1
            if on_cycle is not None:
                on_cycle(cycles, instruction, signal)
        logger.debug(f'run: {cycles} cycles, last signal {signal.name}')
        return cycles, signal

    def execute(self, word: Word) -> tuple[MachineState, MachineState]:
        """Execute one instruction word in place of a fetched one.

        PI is set to the word and CI is left alone, so jumps and skips
        act on the current pointer.

        Args:
            word: Raw instruction word

        Returns:
            Tuple of (state_before, state_after)
        """
        state_before = self.machine.copy()
        self.machine.instruction_register = to_word(word)
        self.executor.execute(self.decode(), self.machine)
        return state_before, self.machine.copy()

    def write_reg(self, reg: Register, value: int) -> None:
        """Write a value to a register, wrapped to 32 bits."""
        setattr(self.machine, reg.field, to_word(value))

    def read_reg(self, reg: Register) -> int:
        return getattr(self.machine, reg.field)

    def get_cpu_state(self) -> CpuRegisterMap:
        return CpuRegisterMap({reg: self.read_reg(reg) for reg in self.isa.cpu_regs})
