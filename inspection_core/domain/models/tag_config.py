# Standard library imports
from dataclasses import dataclass


@dataclass
class TagConfig:
    """
    Controller address of one tag, as defined in the tag configuration file.

    `tag_no` is the integer id used throughout the core; `plc_no` and
    `address` say where a write must be sent.
    """
    id: int
    tag_no: int
    name: str
    plc_no: int
    address: int
    length: int = 1
    algo_no: int = 0
    data_type: int = 0
    bit_no: int = 0
    offset: int = 0
    span: int = 0
    description: str = ""
    remark: str = ""
    can_write: bool = False

    @property
    def is_addressable(self) -> bool:
        return self.address > 0
