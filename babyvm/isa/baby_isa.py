"""Manchester Baby instruction set.

Two historical variants share one instruction word layout (bit 0 is the least
significant bit, i.e. the first character of a program line):

  bits 0..k-1:   line, the operand address (k = ceil(log2(store size)), 5 for 32 lines)
  bits 13..15:   opcode (original variant, 3 bits)
  bits 13..16:   opcode (extended variant, 4 bits)
  bit 31:        addressing mode (extended variant only), 0 = direct, 1 = immediate

Instructions:
0:     JMP    CI = operand
1:     JRP    CI = CI - operand
2:     LDN    A = -operand
3:     STO    store[line] = A
4, 5:  SUB    A = A - operand
6:     CMP    skip the next instruction if A < 0
7:     STP    stop
8:     LDA    A = operand          (extended)
9:     STN    store[line] = -A     (extended)
10:    ADD    A = A + operand      (extended)
"""

from dataclasses import dataclass
from enum import IntEnum

from babyvm.exceptions import InvariantViolation
from babyvm.types import LineAddress, Word

OPCODE_SHIFT = 13
ADDRESSING_MODE_BIT = 31


class BabyOpcode(IntEnum):
    """Baby instruction opcodes."""

    JMP = 0
    JRP = 1
    LDN = 2
    STO = 3
    SUB = 4
    SUB_ALT = 5
    CMP = 6
    STP = 7
    LDA = 8
    STN = 9
    ADD = 10

    @property
    def mnemonic(self) -> str:
        # Opcode 5 is a second encoding of SUB
        if self is BabyOpcode.SUB_ALT:
            return 'SUB'
        return self.name


class AddressingMode(IntEnum):
    DIRECT = 0
    IMMEDIATE = 1


# Opcodes that use the line field as a store address whatever the addressing mode
STORING_OPCODES = frozenset([BabyOpcode.STO, BabyOpcode.STN])

# Opcodes that ignore the line field
NO_OPERAND_OPCODES = frozenset([BabyOpcode.CMP, BabyOpcode.STP])


@dataclass(frozen=True)
class InstructionSet:
    """Parameters distinguishing one instruction-set variant from another.

    Attributes:
        name: Variant name, e.g. 'ORIGINAL'
        opcode_bits: Width of the opcode field starting at bit 13
        has_addressing_mode: Whether bit 31 selects immediate addressing
        opcodes: Opcodes the variant defines
    """

    name: str
    opcode_bits: int
    has_addressing_mode: bool
    opcodes: frozenset[BabyOpcode]

    @property
    def opcode_mask(self) -> int:
        return (1 << self.opcode_bits) - 1

    def resolve_opcode(self, opcode: int) -> BabyOpcode:
        """Map a decoded opcode field onto the variant's opcode table.

        Raises:
            InvariantViolation: if the variant does not define the opcode
        """
        if opcode not in self.opcodes:
            raise InvariantViolation(f'Opcode {opcode} is not defined by the {self.name} instruction set')
        return BabyOpcode(opcode)


ORIGINAL_ISA = InstructionSet(
    name='ORIGINAL',
    opcode_bits=3,
    has_addressing_mode=False,
    opcodes=frozenset(op for op in BabyOpcode if op <= BabyOpcode.STP),
)

EXTENDED_ISA = InstructionSet(
    name='EXTENDED',
    opcode_bits=4,
    has_addressing_mode=True,
    opcodes=frozenset(BabyOpcode),
)

INSTRUCTION_SETS = {isa.name: isa for isa in (ORIGINAL_ISA, EXTENDED_ISA)}


@dataclass(frozen=True)
class BabyInstruction:
    """A decoded instruction word.

    `opcode` holds the raw opcode field; it is only checked against the
    instruction set when the instruction is executed.
    """

    opcode: int
    line: LineAddress
    addressing_mode: int = AddressingMode.DIRECT

    @property
    def is_immediate(self) -> bool:
        return self.addressing_mode == AddressingMode.IMMEDIATE

    @property
    def mnemonic(self) -> str:
        """Get the instruction in assembler notation, e.g. 'LDN 5' or 'ADD #5'."""
        try:
            opcode = BabyOpcode(self.opcode)
        except ValueError:
            return f'??? {self.opcode}'
        if opcode in NO_OPERAND_OPCODES:
            return opcode.mnemonic
        if self.is_immediate and opcode not in STORING_OPCODES:
            return f'{opcode.mnemonic} #{self.line}'
        return f'{opcode.mnemonic} {self.line}'


def decode_word(word: Word, instruction_set: InstructionSet, line_mask: int) -> BabyInstruction:
    """Split an instruction word into its fields.

    Args:
        word: Raw 32-bit instruction word
        instruction_set: Variant defining the opcode width and the addressing-mode bit
        line_mask: Mask covering the line field, see word.line_mask

    Returns:
        Decoded BabyInstruction; decoding never fails
    """
    line = word & line_mask
    opcode = (word >> OPCODE_SHIFT) & instruction_set.opcode_mask
    if instruction_set.has_addressing_mode:
        addressing_mode = AddressingMode((word >> ADDRESSING_MODE_BIT) & 1)
    else:
        addressing_mode = AddressingMode.DIRECT
    return BabyInstruction(opcode, line, addressing_mode)


def encode_instruction(
    opcode: int,
    line: LineAddress,
    instruction_set: InstructionSet,
    line_mask: int,
    addressing_mode: int = AddressingMode.DIRECT,
) -> Word:
    """Build an instruction word from its fields.

    Raises:
        ValueError: if a field does not fit the variant's layout
    """
    if opcode not in instruction_set.opcodes:
        raise ValueError(f'Opcode {opcode} is not defined by the {instruction_set.name} instruction set')
    if not 0 <= line <= line_mask:
        raise ValueError(f'Line {line} does not fit the line field (mask {line_mask:#x})')
    if addressing_mode not in (AddressingMode.DIRECT, AddressingMode.IMMEDIATE):
        raise ValueError(f'Invalid addressing mode: {addressing_mode}')
    if addressing_mode == AddressingMode.IMMEDIATE and not instruction_set.has_addressing_mode:
        raise ValueError(f'The {instruction_set.name} instruction set has no immediate addressing')
    return (addressing_mode << ADDRESSING_MODE_BIT) | (opcode << OPCODE_SHIFT) | line
