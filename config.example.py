# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use a local, gitignored .env.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO).",
    # Backend
    "TODO_SUPABASE_URL": "Project URL, e.g. https://<project>.supabase.co (SUPABASE_URL also accepted).",
    "TODO_SUPABASE_ANON_KEY": "Public anon key (SUPABASE_ANON_KEY also accepted).",
    "TODO_TASKS_TABLE": "Table holding the tasks (default: tasks).",
    # HTTP
    "TODO_HTTP_TIMEOUT_SECONDS": "Read/write timeout per request (default: 10).",
    "TODO_HTTP_CONNECT_TIMEOUT_SECONDS": "Connect timeout (default: 5).",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory for logs and session (default: .local/todo).",
    "TODO_SESSION_PATH": "Auth session JSON path (default: <data_dir>/session.json).",
    "TODO_PERSIST_SESSION": "Keep the user signed in between runs (true/false, default: true).",
}
