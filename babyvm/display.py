"""Human-readable rendering of machine state.

Words are printed first bit first, the way they are written in program files:
the leftmost character is bit 0.
"""

from typing import Optional

from babyvm.isa.baby import Baby
from babyvm.isa.baby_isa import ADDRESSING_MODE_BIT, OPCODE_SHIFT
from babyvm.isa.word import WORD_BITS
from babyvm.state.machine import MachineState
from babyvm.types import Word


def field_boundaries(isa: Baby) -> list[int]:
    """Bit positions where a new instruction field starts.

    The line field ends at isa.line_bits, the opcode field spans bits 13 up to
    13 + opcode width, and the extended variant's addressing-mode bit is bit 31.
    """
    boundaries = {isa.line_bits, OPCODE_SHIFT, OPCODE_SHIFT + isa.instruction_set.opcode_bits}
    if isa.instruction_set.has_addressing_mode:
        boundaries.add(ADDRESSING_MODE_BIT)
    return sorted(b for b in boundaries if 0 < b < WORD_BITS)


def format_word(word: Word, boundaries: Optional[list[int]] = None, separator: str = ' ') -> str:
    """Render a word first bit first.

    Args:
        word: Value to render
        boundaries: Bit positions before which to insert the separator
        separator: Text inserted at each boundary
    """
    bits = ['1' if word >> i & 1 else '0' for i in range(WORD_BITS)]
    if not boundaries:
        return ''.join(bits)
    for boundary in sorted(boundaries, reverse=True):
        bits.insert(boundary, separator)
    return ''.join(bits)


def format_state(
    machine: MachineState,
    isa: Optional[Baby] = None,
    fields: bool = False,
    disassemble: bool = False,
) -> str:
    """Render the store, the accumulator and the instruction pointer.

    Args:
        machine: State to render
        isa: Variant used for field separators and disassembly
        fields: Separate the instruction fields of every word
        disassemble: Append the mnemonic of every store line
    """
    if isa is None and (fields or disassemble):
        raise ValueError('Field separators and disassembly need an ISA')
    boundaries = field_boundaries(isa) if fields and isa is not None else None

    out = ['store:']
    for i, word in enumerate(machine.store):
        row = '{:<4}{}'.format(f'{i}:', format_word(word, boundaries))
        if disassemble and isa is not None:
            row += f'  ; {isa.disassemble(word)}'
        out.append(row)
    out.append(f'accumulator: {format_word(machine.accumulator, boundaries)}')
    out.append(f'instruction pointer: {format_word(machine.instruction_pointer, boundaries)}')
    return '\n'.join(out)
