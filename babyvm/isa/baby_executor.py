"""Manchester Baby instruction executor.

Executes decoded Baby instructions against a MachineState.
"""

import logging
from enum import Enum

from babyvm.exceptions import InvariantViolation
from babyvm.isa.baby import Baby
from babyvm.isa.baby_isa import AddressingMode, BabyInstruction, BabyOpcode
from babyvm.isa.word import is_negative, negate, to_word
from babyvm.state.machine import MachineState
from babyvm.types import Word

logger = logging.getLogger(__name__)


class Signal(Enum):
    """What the driver should do after a cycle."""

    CONTINUE = 1
    STOP = 0


class BabyExecutor:
    """Executes Baby instructions for one instruction-set variant."""

    def __init__(self, isa: Baby) -> None:
        self.isa = isa

    def check_instruction(self, instruction: BabyInstruction, machine: MachineState) -> BabyOpcode:
        """Validate the decoded fields and return the opcode they select.

        Raises:
            InvariantViolation: if a field is outside what a correct decoder produces
        """
        opcode = self.isa.instruction_set.resolve_opcode(instruction.opcode)
        if not 0 <= instruction.line < machine.store_size:
            raise InvariantViolation(f'Line {instruction.line} out of range for a store of {machine.store_size} words')
        if instruction.addressing_mode not in (AddressingMode.DIRECT, AddressingMode.IMMEDIATE):
            raise InvariantViolation(f'Addressing mode {instruction.addressing_mode} out of range')
        if instruction.is_immediate and not self.isa.instruction_set.has_addressing_mode:
            raise InvariantViolation(f'The {self.isa.name} instruction set has no immediate addressing')
        return opcode

    def fetch_operand(self, instruction: BabyInstruction, machine: MachineState) -> Word:
        """Direct mode reads store[line]; immediate mode uses line itself."""
        if instruction.is_immediate:
            return instruction.line
        return machine.store[instruction.line]

    def execute(self, instruction: BabyInstruction, machine: MachineState) -> Signal:
        """Execute one instruction, mutating the machine in place.

        Args:
            instruction: The decoded instruction
            machine: State to mutate

        Returns:
            Signal.STOP for STP, Signal.CONTINUE otherwise
        """
        opcode = self.check_instruction(instruction, machine)
        line = instruction.line
        operand = self.fetch_operand(instruction, machine)

        logger.debug(f'execute: {instruction.mnemonic} (opcode {int(opcode)}, line {line}, operand {operand:#x})')

        match opcode:
            case BabyOpcode.JMP:
                machine.instruction_pointer = operand
            case BabyOpcode.JRP:
                machine.instruction_pointer = to_word(machine.instruction_pointer - operand)
            case BabyOpcode.LDN:
                machine.accumulator = negate(operand)
            case BabyOpcode.STO:
                # A store target is always an address, even under immediate addressing
                machine.store[line] = machine.accumulator
            case BabyOpcode.SUB | BabyOpcode.SUB_ALT:
                machine.accumulator = to_word(machine.accumulator - operand)
            case BabyOpcode.CMP:
                if is_negative(machine.accumulator):
                    machine.instruction_pointer = to_word(machine.instruction_pointer + 1)
            case BabyOpcode.STP:
                return Signal.STOP
            case BabyOpcode.LDA:
                machine.accumulator = operand
            case BabyOpcode.STN:
                machine.store[line] = negate(machine.accumulator)
            case BabyOpcode.ADD:
                machine.accumulator = to_word(machine.accumulator + operand)
            case _:
                raise InvariantViolation(f'Unhandled opcode: {opcode}')

        return Signal.CONTINUE
