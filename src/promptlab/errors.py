"""
Error types raised by the prompt store.

Every public operation either returns normally or raises one of these.
"""

from __future__ import annotations


class PromptLabError(Exception):
    """Base class for all prompt store errors."""


class NotFoundError(PromptLabError):
    """A prompt or a specific version does not exist."""


class PromptNotFound(NotFoundError):
    def __init__(self, name: str):
        super().__init__(f"Prompt '{name}' does not exist")
        self.name = name


class VersionNotFound(NotFoundError):
    def __init__(self, name: str, version: str):
        super().__init__(f"Version {version} of prompt '{name}' does not exist")
        self.name = name
        self.version = version


class PromptExists(PromptLabError):
    def __init__(self, name: str):
        super().__init__(f"Prompt '{name}' already exists")
        self.name = name


class InvalidName(PromptLabError):
    def __init__(self, name: str):
        super().__init__(f"Invalid prompt name: {name!r}")
        self.name = name


class NoChange(PromptLabError):
    """Save was called with content identical to the latest version."""

    def __init__(self, name: str):
        super().__init__(f"Content of '{name}' has not changed, nothing to save")
        self.name = name


class StorageError(PromptLabError):
    """Underlying read, write or (de)serialization failure."""


class VersionExists(StorageError):
    """Attempt to overwrite an immutable version file."""

    def __init__(self, name: str, version: str):
        super().__init__(f"Version {version} of prompt '{name}' is already written")
        self.name = name
        self.version = version
