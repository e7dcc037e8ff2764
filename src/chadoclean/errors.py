"""Exception types raised by the chadoxml tools."""


class ChadoxmlError(Exception):
    """Base class for every error raised by chadoclean."""


class ConfigurationError(ChadoxmlError):
    """A run was misconfigured before any stream processing began."""


class SourceNotFoundError(ConfigurationError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Can't find source file {path}!")


class DestinationExistsError(ConfigurationError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"destination file {path} already exists!")


class EmbeddedWiggleError(ChadoxmlError):
    """The source still carries wiggle payloads the stripper cannot handle."""

    def __init__(self, path, count: int):
        self.path = path
        self.count = count
        super().__init__(
            f"{path} contains embedded wiggle files! This script can only "
            f"process chadoxml files without embedded wiggles."
        )


class UnterminatedElementError(ChadoxmlError):
    """The stream ended while a tracked element was still open (strict mode only)."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"stream ended inside an open element (state: {state})")
