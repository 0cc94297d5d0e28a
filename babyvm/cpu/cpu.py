from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

from babyvm.exceptions import UnsupportedVariantException
from babyvm.isa.register import Register
from babyvm.types import CpuRegisterMap

if TYPE_CHECKING:
    from babyvm.cpu.baby_cpu import BabyCPU


class CPU(ABC):
    @abstractmethod
    def __init__(self):
        pass

    @abstractmethod
    def write_reg(self, reg: Register, value: int) -> None:
        """Write value to register.

        Args:
            reg: Register to write to
            value: Value to write
        """

    def write_regs(self, regs: Sequence[Register], values: Sequence[int] | int) -> None:
        """Write values to multiple registers.

        Args:
            regs: List of registers to write to
            values: List of values to write, or single value to write to all registers
        """
        seq_values: Sequence[int]
        if isinstance(values, int):
            seq_values = tuple([values for _ in regs])
        else:
            seq_values = values
        for reg, val in zip(regs, seq_values, strict=True):
            self.write_reg(reg, val)

    @abstractmethod
    def read_reg(self, reg: Register) -> int:
        """Read value from register.

        Args:
            reg: Register to read from

        Returns:
            Value read from the register
        """

    @abstractmethod
    def get_cpu_state(self) -> CpuRegisterMap:
        """Get current CPU register state.

        Returns:
            Dictionary mapping registers to their current values
        """

    def set_cpu_state(self, cpu_state: CpuRegisterMap) -> None:
        for reg, value in cpu_state.items():
            self.write_reg(reg, value)

    @abstractmethod
    def execute(self, word: int) -> tuple[object, object]:
        """Execute a single instruction word against the current state, without fetching.

        Args:
            word: Raw instruction word

        Returns:
            Tuple of (state before, state after)
        """

    @abstractmethod
    def step(self) -> object:
        """Run one fetch-decode-execute cycle.

        Returns:
            Signal telling the driver whether to continue
        """


class CPUFactory:
    @staticmethod
    def create_cpu(variant: str, store_size: int | None = None) -> 'BabyCPU':
        from babyvm.cpu.baby_cpu import BabyCPU  # noqa: PLC0415
        from babyvm.isa.baby import STORE_SIZE, Baby  # noqa: PLC0415
        from babyvm.isa.baby_isa import INSTRUCTION_SETS  # noqa: PLC0415

        instruction_set = INSTRUCTION_SETS.get(variant.upper())
        if instruction_set is None:
            raise UnsupportedVariantException(variant)
        return BabyCPU(Baby(instruction_set, STORE_SIZE if store_size is None else store_size))
