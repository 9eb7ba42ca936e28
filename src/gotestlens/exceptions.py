# src/gotestlens/exceptions.py

"""
Exception hierarchy for gotestlens.
"""


class GotestlensError(Exception):
    """Base class for all gotestlens errors."""

    pass


class ConfigurationError(GotestlensError):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        full_message = message
        if path:
            full_message += f" (Config: '{path}')"
        super().__init__(full_message)


class TestRunnerError(GotestlensError):
    """Raised when the test command cannot be executed at all."""

    def __init__(self, message: str, command: list[str] | None = None):
        self.command = command or []
        super().__init__(f"[Runner] {message}")


class EventDecodeError(GotestlensError):
    """A line of test output could not be decoded into a test event."""

    def __init__(self, line: str, reason: str, details: Exception | None = None):
        self.line = line
        self.reason = reason
        self.details = details
        super().__init__(reason)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class PathResolutionError(GotestlensError):
    """Resolving a package's source directory failed."""

    def __init__(
        self,
        message: str,
        package: str,
        filename: str | None = None,
        exit_code: int | None = None,
        stderr: str | None = None,
    ):
        self.package = package
        self.filename = filename
        self.exit_code = exit_code
        self.stderr = stderr
        full_message = f"[Resolver] {message} (Package: '{package}')"
        super().__init__(full_message)
        if stderr and hasattr(self, "add_note"):
            self.add_note(f"stderr: {stderr.strip()}")


# 🔼⚙️
