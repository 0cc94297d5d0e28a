"""Type aliases for babyvm.

This module contains the type aliases used throughout the codebase
to make signatures more readable.
"""

from typing import TypeAlias

from babyvm.isa.register import Register

# 32-bit unsigned store word / register value
Word: TypeAlias = int

# Store address carried in the line field of an instruction
LineAddress: TypeAlias = int

# CPU state representation as register-value mapping
CpuRegisterMap: TypeAlias = dict[Register, int]
