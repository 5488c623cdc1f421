"""Custom exceptions for dirgo."""


class DirgoError(Exception):
    """Base exception for all dirgo errors."""


class ScanRootError(DirgoError):
    """Raised when the scan root itself cannot be listed."""

    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot scan directory '{root}': {reason}")


class UnsupportedFormatError(DirgoError):
    """Raised when an output format selector is not one of tree, toon, json."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"Unsupported output format '{fmt}' (expected tree, toon or json)")


class TomlError(DirgoError):
    """Base exception for the minimal TOML reader."""


class TomlSyntaxError(TomlError):
    """Raised when a TOML line cannot be understood."""

    def __init__(self, line_no: int, line: str, reason: str = "invalid syntax"):
        self.line_no = line_no
        self.line = line
        super().__init__(f"line {line_no}: {reason}: {line!r}")


class TomlStructureError(TomlError):
    """Raised when a table path collides with an existing non-table value."""

    def __init__(self, path: list[str]):
        self.path = path
        super().__init__(f"'{'.'.join(path)}' is already defined as a non-table value")
