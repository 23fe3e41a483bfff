"""Exceptions raised by the registries and converted to outcomes by the engine."""


class MizanError(Exception):
    """Base class for morphology errors."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidRootError(MizanError):
    """Root text is not three Arabic letters, or uses a bare alef as a radical."""


class InvalidTemplateError(MizanError):
    """Scheme rule is empty or lacks one of the markers 1, 2, 3."""
