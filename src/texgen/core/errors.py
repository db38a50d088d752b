"""Exception taxonomy for texture synthesis."""


class TexgenError(Exception):
    """Base exception for all texgen errors."""

    def __init__(self, message: str, code: str = "TEXGEN_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class InvalidModeError(TexgenError, ValueError):
    """Requested pattern mode is not one of the known styles."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_MODE")


class SurfaceError(TexgenError):
    """A drawing surface could not be created."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="SURFACE_ERROR")


class RenderError(TexgenError):
    """A texture generator failed while drawing or encoding."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="RENDER_ERROR")


class ConfigError(TexgenError):
    """Configuration file missing or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIG_ERROR")
