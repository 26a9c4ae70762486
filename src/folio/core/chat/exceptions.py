"""Exceptions raised inside the chat pipeline."""


class InvalidChatInput(Exception):
    """The message or conversation history failed validation.

    ``str(exc)`` is the user-facing reason.
    """


class ContextFetchError(Exception):
    """Portfolio context could not be loaded from storage."""
