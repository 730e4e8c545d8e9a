"""Turn orchestration for the conversational assistant.

Wires the core services together: every user utterance is routed, then
answered from memory, by an external service handler, or by the configured
LLM provider with a composed system instruction and a windowed context.
"""

from collections.abc import Callable, Collection, Sequence
from datetime import datetime

import structlog

from ..config import (
    BUSY_REPLY,
    CHAT_HISTORY_KEY,
    ERROR_REPLY,
    MAX_HISTORY_LENGTH,
    MEMORY_STORAGE_KEY,
    NO_API_KEY_REPLY,
    WINDOW_STRIDE,
)
from ..events import SYNC_COMPLETED, EventEmitter
from ..history import ChatMessage, ConversationHistory, Role, window_for_dispatch
from ..instructions import CommandRepository, InstructionComposer
from ..llm import ModelConfig, ProviderConfigurationError, ProviderDispatcher, ProviderError
from ..memory import MemoryStore
from ..routing import Intent, IntentKind, IntentRouter, ServiceHandler, ServiceKind
from ..sync import SyncService
from .data_structures import TurnResult
from .formatting import format_memory_results

logger = structlog.get_logger()


class Assistant:
    """Conversational assistant over explicit, injected services.

    Hidden design decisions:
    - Routing order (memory query, service request, chat)
    - Where the system instruction is injected (dispatch context only)
    - How failures become user-visible replies

    Only one turn runs at a time; a second send while a turn is in flight
    gets a busy notice and is not recorded.
    """

    def __init__(
        self,
        history: ConversationHistory,
        memory: MemoryStore,
        commands: CommandRepository,
        dispatcher: ProviderDispatcher,
        model_config: ModelConfig | None = None,
        composer: InstructionComposer | None = None,
        router: IntentRouter | None = None,
        service_handler: ServiceHandler | None = None,
        connected_services: Collection[ServiceKind] = frozenset(),
        sync: SyncService | None = None,
        events: EventEmitter | None = None,
        max_context: int = MAX_HISTORY_LENGTH,
        window_stride: int = WINDOW_STRIDE,
        remember_turns: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the assistant.

        Args:
            history: Conversation history manager
            memory: Memory store for recall and for saving turns
            commands: Source of custom commands
            dispatcher: Provider dispatcher
            model_config: Active model configuration (None until configured)
            composer: System-instruction composer
            router: Intent router
            service_handler: Handler for external-service requests
            connected_services: Integrations the router may delegate to
            sync: Optional remote sync, pushed after each turn
            events: Optional emitter; a completed sync reloads history
            max_context: Maximum messages sent per request
            window_stride: Sampling stride for older context
            remember_turns: Save successful chat turns into memory
            clock: Local wall-clock source for instruction conditions
        """
        self._history = history
        self._memory = memory
        self._commands = commands
        self._dispatcher = dispatcher
        self._model_config = model_config
        self._composer = composer or InstructionComposer()
        self._router = router or IntentRouter()
        self._service_handler = service_handler
        self._connected = frozenset(connected_services) if service_handler else frozenset()
        self._sync = sync
        self._max_context = max_context
        self._window_stride = window_stride
        self._remember_turns = remember_turns
        self._clock = clock
        self._busy = False

        if events is not None:
            events.subscribe(SYNC_COMPLETED, lambda _event, _payload: self._history.reload())

    @property
    def history(self) -> ConversationHistory:
        return self._history

    @property
    def model_config(self) -> ModelConfig | None:
        return self._model_config

    def set_model_config(self, config: ModelConfig | None) -> None:
        """Replace the active model configuration wholesale."""
        self._model_config = config

    @property
    def busy(self) -> bool:
        return self._busy

    def build_context(self, messages: Sequence[ChatMessage], before: int) -> list[ChatMessage]:
        """Compose the active instruction into messages and window them."""
        instruction = self._composer.active_instruction(self._commands.load(), self._clock())
        context = self._composer.inject(messages, instruction, before=before)
        return window_for_dispatch(context, self._max_context, self._window_stride)

    async def _ask_provider(self, messages: Sequence[ChatMessage], before: int) -> tuple[str, str | None]:
        """Dispatch to the configured provider.

        Returns:
            (reply text, error detail or None)
        """
        if self._model_config is None:
            return NO_API_KEY_REPLY, NO_API_KEY_REPLY

        context = self.build_context(messages, before)
        try:
            reply = await self._dispatcher.send(
                self._model_config.provider, context, self._model_config
            )
        except ProviderConfigurationError as e:
            return str(e), str(e)
        except ProviderError as e:
            logger.error("chat_turn_failed", provider=e.provider, error=str(e))
            return ERROR_REPLY, str(e)
        return reply, None

    async def _ask_service(self, service: ServiceKind, text: str) -> tuple[str, str | None]:
        try:
            reply = await self._service_handler.handle(service, text)
        except Exception as e:
            logger.error("service_request_failed", service=service.value, error=str(e))
            return ERROR_REPLY, str(e)
        return reply, None

    def _answer_from_memory(self, text: str) -> str:
        results = self._memory.search_text(text)
        logger.info("memory_query_answered", results=len(results))
        return format_memory_results(results)

    async def _push_changes(self, *categories: str) -> None:
        if self._sync is not None:
            await self._sync.push(*(categories or (CHAT_HISTORY_KEY, MEMORY_STORAGE_KEY)))

    async def send(self, text: str) -> TurnResult | None:
        """Run one user turn.

        Args:
            text: The user's message

        Returns:
            The turn outcome, or None for blank input
        """
        if not text.strip():
            return None

        intent = self._router.classify(text, self._connected)
        if self._busy:
            notice = ChatMessage(role=Role.ASSISTANT, content=BUSY_REPLY, timestamp=self._history.next_timestamp())
            return TurnResult(reply=notice, intent=intent, error="busy")

        self._busy = True
        try:
            user_message = self._history.new_message(Role.USER, text)
            self._history.append(user_message)
            logger.info("turn_started", intent=intent.kind.value)

            error: str | None = None
            if intent.kind == IntentKind.MEMORY_QUERY:
                reply = self._answer_from_memory(text)
            elif intent.kind == IntentKind.SERVICE_REQUEST:
                reply, error = await self._ask_service(intent.service, text)
            else:
                reply, error = await self._ask_provider(self._history.messages, user_message.timestamp)

            reply_message = self._history.new_message(Role.ASSISTANT, reply)
            self._history.append(reply_message)

            memory_entry = None
            if self._remember_turns and error is None and intent.kind == IntentKind.CHAT:
                memory_entry = self._memory.save(text, reply)

            await self._push_changes()
            return TurnResult(reply=reply_message, intent=intent, error=error, memory=memory_entry)
        finally:
            self._busy = False

    async def regenerate(self, timestamp: int) -> TurnResult | None:
        """Replace an assistant reply with a fresh provider response.

        Everything after the regenerated reply is dropped, matching a
        rewind of the conversation to that point.

        Args:
            timestamp: Timestamp of the assistant message to regenerate

        Returns:
            The new outcome, or None if no user message precedes it
        """
        previous = self._history.truncate_before(timestamp)
        user_messages = [m for m in previous if m.role == Role.USER]
        if not user_messages or self._busy:
            return None

        self._busy = True
        try:
            reply, error = await self._ask_provider(previous, user_messages[-1].timestamp)
            reply_message = self._history.new_message(Role.ASSISTANT, reply)
            self._history.replace([*previous, reply_message])
            await self._push_changes()
            return TurnResult(reply=reply_message, intent=Intent.chat(), error=error)
        finally:
            self._busy = False

    async def delete_message(self, timestamp: int) -> bool:
        """Delete one message and push the remaining history."""
        deleted = self._history.delete(timestamp)
        if deleted:
            await self._push_changes(CHAT_HISTORY_KEY)
        return deleted

    async def clear_history(self) -> None:
        """Empty the history locally and remotely so a later sync cannot restore it."""
        self._history.clear()
        await self._push_changes(CHAT_HISTORY_KEY)

    async def delete_memory(self, entry_id: str) -> bool:
        deleted = self._memory.delete(entry_id)
        if deleted:
            await self._push_changes(MEMORY_STORAGE_KEY)
        return deleted

    async def clear_memories(self) -> None:
        self._memory.clear()
        await self._push_changes(MEMORY_STORAGE_KEY)
