"""System-instruction composition and injection."""

from collections.abc import Sequence
from datetime import datetime

import structlog

from ..history.manager import epoch_millis
from ..history.models import ChatMessage, Role
from .conditions import ConditionEvaluator, TimeOfDayConditionEvaluator
from .models import CustomCommand

logger = structlog.get_logger()


class InstructionComposer:
    """Builds the system instruction active "now" and places it in history.

    Hidden design decisions:
    - How command conditions are evaluated (delegated to a ConditionEvaluator)
    - How instructions are joined
    - Where and with which timestamp the system message is inserted
    """

    def __init__(self, evaluator: ConditionEvaluator | None = None):
        self._evaluator = evaluator or TimeOfDayConditionEvaluator()

    def is_active(self, command: CustomCommand, now: datetime) -> bool:
        """Whether a command applies at the given time.

        Commands without a condition always apply; a condition that the
        evaluator does not understand never applies.
        """
        if not command.is_conditional:
            return True
        return bool(self._evaluator.evaluate(command.condition, now))

    def active_instruction(
        self,
        commands: Sequence[CustomCommand],
        now: datetime | None = None,
    ) -> str:
        """Concatenate the instructions of every active command.

        Args:
            commands: All user-defined commands
            now: Evaluation time (defaults to the current local time)

        Returns:
            Instructions joined by blank lines, or "" if none apply
        """
        now = now or datetime.now()
        active = [
            command.instruction.strip()
            for command in commands
            if command.instruction.strip() and self.is_active(command, now)
        ]
        logger.debug("instructions_composed", active=len(active), total=len(commands))
        return "\n\n".join(active)

    def inject(
        self,
        history: Sequence[ChatMessage],
        instruction: str,
        before: int | None = None,
    ) -> list[ChatMessage]:
        """Ensure the instruction is the single system message of a history.

        Idempotent: when a system message with exactly this content is
        already present it is moved first and every other system message
        is dropped.
        Otherwise all system messages are removed and a new one is put first.

        Args:
            history: Ordered messages
            instruction: Active instruction text; empty leaves history as is
            before: Timestamp of the triggering user message; the system
                message is stamped one millisecond earlier

        Returns:
            New list of messages
        """
        if not instruction:
            return list(history)

        existing = next(
            (m for m in history if m.is_system and m.content == instruction), None
        )
        if existing is not None:
            return [existing, *(m for m in history if not m.is_system)]

        if before is None:
            before = history[0].timestamp if history else epoch_millis()

        system_message = ChatMessage(
            role=Role.SYSTEM, content=instruction, timestamp=before - 1
        )
        return [system_message, *(m for m in history if not m.is_system)]
