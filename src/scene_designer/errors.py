"""Exception hierarchy for the scene designer engine and tool exchange."""
from __future__ import annotations


class SceneDesignerError(Exception):
    """Base class for every failure the engine reports to its callers."""

    kind = "SceneDesignerError"


class InvalidConfigError(SceneDesignerError, ValueError):
    """Configuration rejected before composition (bad grid/cell values, bad name)."""

    kind = "InvalidConfig"


class MissingTemplateError(SceneDesignerError, LookupError):
    """A descriptor references a template the host cannot resolve."""

    kind = "MissingTemplate"

    def __init__(self, template_ref: str):
        super().__init__(f"Template '{template_ref}' is not registered with the scene host")
        self.template_ref = template_ref


class SceneFileSystemError(SceneDesignerError, OSError):
    """Directory creation or file write failed. No partial file is left behind."""

    kind = "FileSystemError"


class ProtocolError(SceneDesignerError):
    kind = "ProtocolError"


class MissingArgumentError(ProtocolError):
    kind = "MissingArgument"

    def __init__(self, tool: str, argument: str):
        super().__init__(f"Missing required argument '{argument}' for {tool}")
        self.tool = tool
        self.argument = argument


class InvalidArgumentTypeError(ProtocolError):
    kind = "InvalidArgumentType"

    def __init__(self, tool: str, argument: str, expected: str, value: object):
        super().__init__(
            f"Argument '{argument}' for {tool} must be a {expected}, got {type(value).__name__}"
        )
        self.tool = tool
        self.argument = argument


class UnknownToolError(ProtocolError):
    kind = "UnknownTool"

    def __init__(self, tool: str):
        super().__init__(f"Unknown tool: {tool}")
        self.tool = tool


class ConfirmationRequiredError(ProtocolError):
    """A destructive operation was requested without explicit confirmation."""

    kind = "DestructiveOperation"
