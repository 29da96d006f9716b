"""Exceptions raised while running and parsing external tools."""


class PortsError(Exception):
    """Base class for all ports errors."""

    def __init__(self, tool: str, message: str) -> None:
        super().__init__(message)
        self.tool = tool
        self.message = message

    def __str__(self) -> str:
        return self.message


class CommandError(PortsError):
    """The external tool could not be run successfully."""


class ExecutableNotFound(CommandError):
    """The tool is not installed or not on PATH."""

    def __init__(self, tool: str) -> None:
        super().__init__(tool, f"Unable to locate the {tool} executable on the system.")


class ExecutableNotRunnable(CommandError):
    """The tool exists but the current user may not execute it."""

    def __init__(self, tool: str) -> None:
        super().__init__(tool, f"Permission denied when running the {tool} executable.")


class UnexpectedCommandFailure(CommandError):
    """The tool ran but reported a failure."""

    def __init__(self, tool: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(tool, f"The {tool} command has failed in an unexpected way.")
        self.returncode = returncode
        self.stderr = stderr


class ParseError(PortsError):
    """The tool's output does not have the expected shape."""


class MissingHeader(ParseError):
    def __init__(self, tool: str) -> None:
        super().__init__(tool, f"The {tool} output is missing the header.")


class MissingExpectedColumns(ParseError):
    def __init__(self, tool: str, missing: list[str] | None = None) -> None:
        super().__init__(tool, f"The {tool} output is missing expected properties.")
        self.missing = missing or []


class MalformedDetailLine(ParseError):
    """A detail line has fewer values than the header requires."""

    def __init__(self, tool: str, line: list[str] | None = None) -> None:
        super().__init__(tool, f"The {tool} output contains a malformed line.")
        self.line = line or []
