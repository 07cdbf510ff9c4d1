"""Generate JSDoc comments for undocumented JavaScript and TypeScript functions."""

__version__ = "1.0.0"
