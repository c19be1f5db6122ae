# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is read from environment variables, optionally through
a local .env file (see src/voice_todo/config.py). Keep real secrets in .env,
which is gitignored.
"""

ENV_VARS = {
    # App / logging
    "VOICE_TODO_APP_NAME": "App display name (default: voice-todo).",
    "VOICE_TODO_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Console
    "VOICE_TODO_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # LLM / OpenRouter
    "VOICE_TODO_OPENROUTER_API_KEY": (
        "OpenRouter API key. OPENROUTER_API_KEY is accepted too. Without a key the offline keyword parser is used."
    ),
    "VOICE_TODO_OPENROUTER_BASE_URL": "OpenAI-compatible base URL (default: https://openrouter.ai/api/v1).",
    "VOICE_TODO_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "VOICE_TODO_LLM_TEMPERATURE": "Sampling temperature (default: 0.3).",
    "VOICE_TODO_LLM_MAX_TOKENS": "Completion token cap (default: 300).",
    "VOICE_TODO_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "VOICE_TODO_APP_TITLE": "Optional OpenRouter metadata header title (default: app name).",
    # Timeouts (seconds)
    "VOICE_TODO_LLM_FIRST_TOKEN_TIMEOUT_SECONDS": "Give up on a model if no content arrives in time (default: 20).",
    "VOICE_TODO_LLM_READ_TIMEOUT_SECONDS": "HTTP read timeout, never below the first-token timeout (default: 25).",
    "VOICE_TODO_LLM_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "VOICE_TODO_COMMAND_TIMEOUT_SECONDS": "Wall-clock limit per voice command, 0 disables it (default: 0).",
    # Paths (gitignored)
    "VOICE_TODO_DATA_DIR": "Local data directory for logs and the task snapshot (default: .local/voice_todo).",
    "VOICE_TODO_TASKS_SNAPSHOT_PATH": "Task snapshot JSON path (default: <data_dir>/tasks.json).",
    "VOICE_TODO_SAVE_TASKS": "Load/save the task snapshot between sessions (true/false, default: true).",
}
