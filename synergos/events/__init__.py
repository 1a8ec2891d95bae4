"""Event stream — in-process, best-effort fan-out shared by every subsystem."""
