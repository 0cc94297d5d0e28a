"""Tests for the Baby instruction executor.

Test the semantics of every opcode against a MachineState.
"""

import pytest

from babyvm.exceptions import InvariantViolation
from babyvm.isa.baby import Baby
from babyvm.isa.baby_executor import BabyExecutor, Signal
from babyvm.isa.baby_isa import EXTENDED_ISA, ORIGINAL_ISA, AddressingMode, BabyInstruction, BabyOpcode
from babyvm.state.machine import MachineState

DIRECT = AddressingMode.DIRECT
IMMEDIATE = AddressingMode.IMMEDIATE


@pytest.fixture
def machine():
    """A zeroed 32-word machine."""
    return MachineState()


@pytest.fixture
def extended():
    return BabyExecutor(Baby(EXTENDED_ISA))


@pytest.fixture
def original():
    return BabyExecutor(Baby(ORIGINAL_ISA))


class TestJumps:
    """Test JMP and JRP."""

    def test_jmp_loads_pointer_from_store(self, original, machine):
        machine.store[10] = 20
        signal = original.execute(BabyInstruction(BabyOpcode.JMP, 10), machine)
        assert signal is Signal.CONTINUE
        assert machine.instruction_pointer == 20

    def test_jmp_immediate(self, extended, machine):
        extended.execute(BabyInstruction(BabyOpcode.JMP, 6, IMMEDIATE), machine)
        assert machine.instruction_pointer == 6

    def test_jrp_subtracts(self, original, machine):
        machine.instruction_pointer = 9
        machine.store[3] = 4
        original.execute(BabyInstruction(BabyOpcode.JRP, 3), machine)
        assert machine.instruction_pointer == 5

    def test_jrp_wraps(self, original, machine):
        """Relative jumps below zero wrap modulo 2**32."""
        machine.instruction_pointer = 1
        machine.store[3] = 2
        original.execute(BabyInstruction(BabyOpcode.JRP, 3), machine)
        assert machine.instruction_pointer == 0xFFFFFFFF

    def test_jrp_by_negative_operand_jumps_forward(self, original, machine):
        machine.instruction_pointer = 4
        machine.store[3] = 0xFFFFFFFD  # -3
        original.execute(BabyInstruction(BabyOpcode.JRP, 3), machine)
        assert machine.instruction_pointer == 7


class TestLoadStore:
    """Test LDN, STO, LDA and STN."""

    def test_ldn_negates(self, original, machine):
        machine.store[7] = 5
        original.execute(BabyInstruction(BabyOpcode.LDN, 7), machine)
        assert machine.accumulator == 0xFFFFFFFB

    def test_ldn_zero(self, original, machine):
        machine.accumulator = 99
        original.execute(BabyInstruction(BabyOpcode.LDN, 7), machine)
        assert machine.accumulator == 0

    def test_sto(self, original, machine):
        machine.accumulator = 0xDEADBEEF
        original.execute(BabyInstruction(BabyOpcode.STO, 31), machine)
        assert machine.store[31] == 0xDEADBEEF

    def test_sto_immediate_still_addresses_line(self, extended, machine):
        """STO line=4 under immediate mode writes store[4]."""
        machine.accumulator = 42
        signal = extended.execute(BabyInstruction(BabyOpcode.STO, 4, IMMEDIATE), machine)
        assert signal is Signal.CONTINUE
        assert machine.store[4] == 42
        assert machine.accumulator == 42

    def test_lda_direct_and_immediate(self, extended, machine):
        machine.store[2] = 77
        extended.execute(BabyInstruction(BabyOpcode.LDA, 2, DIRECT), machine)
        assert machine.accumulator == 77
        extended.execute(BabyInstruction(BabyOpcode.LDA, 2, IMMEDIATE), machine)
        assert machine.accumulator == 2

    def test_stn(self, extended, machine):
        machine.accumulator = 1
        extended.execute(BabyInstruction(BabyOpcode.STN, 12), machine)
        assert machine.store[12] == 0xFFFFFFFF
        assert machine.accumulator == 1

    def test_stn_immediate_still_addresses_line(self, extended, machine):
        machine.accumulator = 3
        extended.execute(BabyInstruction(BabyOpcode.STN, 4, IMMEDIATE), machine)
        assert machine.store[4] == 0xFFFFFFFD


class TestArithmetic:
    """Test SUB and ADD."""

    @pytest.mark.parametrize('opcode', [BabyOpcode.SUB, BabyOpcode.SUB_ALT])
    def test_sub_both_encodings(self, original, machine, opcode):
        machine.accumulator = 10
        machine.store[5] = 3
        original.execute(BabyInstruction(opcode, 5), machine)
        assert machine.accumulator == 7

    def test_sub_wraps(self, original, machine):
        machine.accumulator = 0
        machine.store[5] = 1
        original.execute(BabyInstruction(BabyOpcode.SUB, 5), machine)
        assert machine.accumulator == 0xFFFFFFFF

    def test_add_immediate(self, extended, machine):
        """ADD #5 with A=3 gives 8 and leaves the store alone."""
        machine.accumulator = 3
        store_before = list(machine.store)
        signal = extended.execute(BabyInstruction(BabyOpcode.ADD, 5, IMMEDIATE), machine)
        assert signal is Signal.CONTINUE
        assert machine.accumulator == 8
        assert machine.store == store_before

    def test_add_direct_wraps(self, extended, machine):
        machine.accumulator = 0xFFFFFFFF
        machine.store[1] = 2
        extended.execute(BabyInstruction(BabyOpcode.ADD, 1), machine)
        assert machine.accumulator == 1


class TestControl:
    """Test CMP and STP."""

    def test_cmp_skips_when_negative(self, original, machine):
        """CMP with bit 31 set advances CI by one and changes nothing else."""
        machine.accumulator = 0x80000000
        machine.instruction_pointer = 6
        before = machine.copy()
        signal = original.execute(BabyInstruction(BabyOpcode.CMP, 0), machine)
        assert signal is Signal.CONTINUE
        assert machine.instruction_pointer == 7
        assert machine.accumulator == before.accumulator
        assert machine.store == before.store
        assert machine.instruction_register == before.instruction_register

    def test_cmp_no_skip_when_positive(self, original, machine):
        machine.accumulator = 0x7FFFFFFF
        machine.instruction_pointer = 6
        original.execute(BabyInstruction(BabyOpcode.CMP, 0), machine)
        assert machine.instruction_pointer == 6

    def test_cmp_zero_is_not_negative(self, original, machine):
        machine.instruction_pointer = 6
        original.execute(BabyInstruction(BabyOpcode.CMP, 0), machine)
        assert machine.instruction_pointer == 6

    def test_stp(self, original, machine):
        machine.accumulator = 5
        before = machine.copy()
        assert original.execute(BabyInstruction(BabyOpcode.STP, 0), machine) is Signal.STOP
        assert machine == before


class TestInvariants:
    """Instructions a correct decoder can never produce are fatal."""

    def test_extended_opcode_on_original(self, original, machine):
        with pytest.raises(InvariantViolation):
            original.execute(BabyInstruction(BabyOpcode.ADD, 0), machine)

    def test_undefined_opcode(self, extended, machine):
        with pytest.raises(InvariantViolation):
            extended.execute(BabyInstruction(14, 0), machine)

    def test_line_out_of_range(self, extended, machine):
        with pytest.raises(InvariantViolation):
            extended.execute(BabyInstruction(BabyOpcode.LDN, 32), machine)

    def test_addressing_mode_out_of_range(self, extended, machine):
        with pytest.raises(InvariantViolation):
            extended.execute(BabyInstruction(BabyOpcode.LDN, 1, 2), machine)

    def test_immediate_on_original(self, original, machine):
        with pytest.raises(InvariantViolation):
            original.execute(BabyInstruction(BabyOpcode.LDN, 1, IMMEDIATE), machine)

    def test_violation_is_not_a_runtime_error(self):
        """InvariantViolation is an assertion failure, not a recoverable exception type."""
        assert issubclass(InvariantViolation, AssertionError)

    def test_state_untouched_on_violation(self, extended, machine):
        machine.accumulator = 9
        before = machine.copy()
        with pytest.raises(InvariantViolation):
            extended.execute(BabyInstruction(BabyOpcode.STO, 40), machine)
        assert machine == before
