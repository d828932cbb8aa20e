"""Simple field model (``w:fldSimple``)."""

from typing import Any, Dict

from .base import Models


class SimpleField(Models):
    """Field whose instruction is held on the element, with runs as cached result."""

    def __init__(self, instruction: str):
        super().__init__()
        self.instruction = instruction

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['instruction'] = self.instruction
        return result
