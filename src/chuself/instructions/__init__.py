"""Custom commands and system-instruction composition."""

from .composer import InstructionComposer
from .conditions import ConditionEvaluator, TimeOfDayConditionEvaluator
from .models import CustomCommand
from .repository import CommandRepository

__all__ = [
    "CommandRepository",
    "ConditionEvaluator",
    "CustomCommand",
    "InstructionComposer",
    "TimeOfDayConditionEvaluator",
]
