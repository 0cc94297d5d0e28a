"""Manchester Baby register definitions.

The machine has three 32-bit registers besides the store. Their historical
names are kept as register names: A (accumulator), CI (control instruction,
the instruction pointer) and PI (present instruction, the instruction register).
"""

from babyvm.isa.register import Register


class BABY_REG_A(Register):
    """A: the accumulator."""

    def __init__(self):
        self.name = 'A'
        self.reg_id = 0
        self.bits = 32
        self.field = 'accumulator'


class BABY_REG_CI(Register):
    """CI: address of the last-fetched line."""

    def __init__(self):
        self.name = 'CI'
        self.reg_id = 1
        self.bits = 32
        self.field = 'instruction_pointer'


class BABY_REG_PI(Register):
    """PI: the most recently fetched raw instruction word."""

    def __init__(self):
        self.name = 'PI'
        self.reg_id = 2
        self.bits = 32
        self.field = 'instruction_register'


def get_baby_state_format() -> list[Register]:
    """Get the standard register order [A, CI, PI]."""
    return [BABY_REG_A(), BABY_REG_CI(), BABY_REG_PI()]
