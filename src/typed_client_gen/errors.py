"""Error types raised by the client code generator."""


class GeneratorError(Exception):
    """Base class for every error raised while building client code."""


class MisuseError(GeneratorError, TypeError):
    """An emitter called the line writer with an argument it cannot accept."""


class MissingFieldError(GeneratorError, ValueError):
    """A field the build cannot do without is absent from the input graph."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Missing required field: {field}")


class InvalidTargetError(GeneratorError, ValueError):
    """The requested output target is not one of the known targets."""

    def __init__(self, target: object, known: list[str]) -> None:
        self.target = target
        super().__init__(f"Invalid target {target!r}, expected one of: {', '.join(known)}")


class InvalidUrlError(GeneratorError, ValueError):
    """A configured base URL is not an absolute http(s) URL."""

    def __init__(self, url: object) -> None:
        self.url = url
        super().__init__(f"Invalid URL {url!r}, expected an absolute http or https URL")
