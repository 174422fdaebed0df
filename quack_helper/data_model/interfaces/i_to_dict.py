# quack_helper/data_model/interfaces/i_to_dict.py
from __future__ import annotations

from typing import Dict, List, Union

from typing_extensions import Protocol, TypeAlias, runtime_checkable

RecursiveDictStr: TypeAlias = Union[
    str, int, bool, None, List["RecursiveDictStr"], Dict[str, "RecursiveDictStr"]
]


@runtime_checkable
class IToDict(Protocol):
    def to_dict(self) -> dict[str, RecursiveDictStr]: ...
