"""Manchester Baby ISA - a 32-word stored-program machine.

This ISA has:
- a store of 32 words of 32 bits, holding both instructions and data
- 3 registers: A (accumulator), CI (instruction pointer), PI (instruction register)
- 8 instructions in the original variant, 11 plus immediate addressing in the extended one
- No condition flags (CMP tests the sign bit of A directly)
"""

from babyvm.isa import baby_registers
from babyvm.isa.baby_isa import (
    EXTENDED_ISA,
    OPCODE_SHIFT,
    AddressingMode,
    BabyInstruction,
    InstructionSet,
    decode_word,
    encode_instruction,
)
from babyvm.isa.isa import ISA
from babyvm.isa.register import Register
from babyvm.isa.word import line_bits, line_mask
from babyvm.types import LineAddress, Word

STORE_SIZE = 32
# The line field must stay below the opcode field
MAX_STORE_SIZE = 1 << OPCODE_SHIFT


class Baby(ISA):
    """One instruction-set variant bound to a store size.

    The store size fixes the width of the line field; the instruction set
    fixes the opcode width and whether bit 31 selects immediate addressing.
    """

    def __init__(self, instruction_set: InstructionSet = EXTENDED_ISA, store_size: int = STORE_SIZE) -> None:
        super().__init__()
        if not 1 <= store_size <= MAX_STORE_SIZE:
            raise ValueError(f'Store size must be between 1 and {MAX_STORE_SIZE}, got {store_size}')

        self.name = instruction_set.name
        self.instruction_set = instruction_set
        self.store_size = store_size
        self.line_bits = line_bits(store_size)
        self.line_mask = line_mask(store_size)

        self.cpu_regs = baby_registers.get_baby_state_format()
        self.acc_reg = baby_registers.BABY_REG_A()
        self.pc_reg = baby_registers.BABY_REG_CI()
        self.ir_reg = baby_registers.BABY_REG_PI()

        self.register_alias = {
            'A': 'A',
            'ACC': 'A',
            'ACCUMULATOR': 'A',
            'CI': 'CI',
            'IP': 'CI',
            'PI': 'PI',
            'IR': 'PI',
        }

    def __repr__(self) -> str:
        return f'Baby({self.name}, store_size={self.store_size})'

    def name2reg(self, name: str) -> Register:
        """Convert register name (or alias) to register object."""
        canonical = self.register_alias.get(name.upper())
        for reg in self.cpu_regs:
            if reg.name == canonical:
                return reg
        raise ValueError(f'Unknown Baby register: {name}')

    def decode(self, word: Word) -> BabyInstruction:
        return decode_word(word, self.instruction_set, self.line_mask)

    def encode(
        self,
        opcode: int,
        line: LineAddress = 0,
        addressing_mode: int = AddressingMode.DIRECT,
    ) -> Word:
        """Encode an instruction for this variant.

        Raises:
            ValueError: if the opcode is undefined, the line lies outside the store
                or immediate addressing is requested from the original variant
        """
        if not 0 <= line < self.store_size:
            raise ValueError(f'Line {line} outside a store of {self.store_size} words')
        return encode_instruction(opcode, line, self.instruction_set, self.line_mask, addressing_mode)

    def disassemble(self, word: Word) -> str:
        return self.decode(word).mnemonic
