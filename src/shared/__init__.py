"""Cross-context building blocks: logging and role-scoped access."""
