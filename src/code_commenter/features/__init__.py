"""Feature modules for code-commenter."""
