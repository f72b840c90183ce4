"""Registry error types.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""


class RegistryError(Exception):
    """Base class for command registry errors."""

    pass


class CommandValidationError(RegistryError):
    """Raised when a command name or language is rejected."""

    pass


class CommandExistsError(RegistryError):
    """Raised when a command name is already taken."""

    def __init__(self, name: str):
        super().__init__(f"Command {name} already exists")
        self.name = name


class CommandNotFoundError(RegistryError):
    """Raised when no artifact exists for a command name."""

    def __init__(self, name: str):
        super().__init__(f"Command {name} does not exist")
        self.name = name
