from abc import ABC, abstractmethod
from typing import Optional


class Register(ABC):
    """Abstract base class for machine registers. Only subclasses should be instantiated.

    `field` names the MachineState attribute the register is backed by.
    """

    name: str
    reg_id: int
    bits: int
    field: str

    @abstractmethod
    def __init__(self, repr_str: Optional[str] = None) -> None:
        pass

    def __hash__(self) -> int:
        return hash(self.reg_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Register):
            return NotImplemented
        return self.reg_id == other.reg_id

    def __ne__(self, other: object) -> bool:
        return not (self == other)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}()'
