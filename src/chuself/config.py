"""Configuration constants for chuself.

Centralizes magic numbers, storage keys and provider defaults shared by the
core packages and the CLI.
"""

# Storage keys (stable, shared with the remote sync categories)
CHAT_HISTORY_KEY = "gemini-chat-history"
MEMORY_STORAGE_KEY = "chat-memory-storage"
COMMANDS_KEY = "custom-ai-commands"
MODEL_CONFIG_KEY = "ai-model-config"

# Conversation history
MAX_HISTORY_LENGTH = 10  # Messages sent to a provider per turn
MAX_RETAINED_MESSAGES = 1000  # Messages kept in the local log
WINDOW_STRIDE = 3  # Sampling stride for older context

# Memory
MAX_MEMORIES = 200
DEFAULT_SEARCH_LIMIT = 5
MIN_RELEVANCE_SCORE = 0.05
USER_INPUT_WEIGHT = 1.0
ASSISTANT_REPLY_WEIGHT = 0.7
TAGS_WEIGHT = 1.5
RECENCY_WEIGHT = 0.1
RECENCY_WINDOW_DAYS = 30

# Sync
SYNC_COOLDOWN_SECONDS = 30.0

# Provider defaults
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
REQUEST_TIMEOUT_SECONDS = 60.0

DEFAULT_MODELS = {
    "gemini": "gemini-1.5-flash-latest",
    "groq": "llama-3.1-8b-instant",
    "openrouter": "openai/gpt-4o-mini",
}

APP_TITLE = "Chuself AI"
APP_URL = "https://github.com/chuself/chuself"

# User-visible replies
ERROR_REPLY = (
    "I apologize, but I encountered an error while processing your request. "
    "Please try again."
)
NO_API_KEY_REPLY = "No API key configured. Please configure your model settings."
NO_MODEL_REPLY = "No model selected. Please configure your model settings."
BUSY_REPLY = "Please wait for the current response to finish."
