"""Build an LLM review prompt from a GitHub pull request and its linked issues."""

__version__ = "0.1.0"
