"""Error types raised at the I/O-adjacent boundaries of the pipeline.

Layout and distortion arithmetic never fail on valid input; only reading
fonts and encoding the final image can. Each error carries enough context to
diagnose the failure without retrying.
"""


class GlyphwarpError(Exception):
    """Base class for every error raised by glyphwarp."""
    pass


class EmptyInputError(GlyphwarpError, ValueError):
    """Raised when asked to render an empty string.

    The render is aborted before any canvas is allocated.
    """

    def __init__(self, message="Can't generate image without input"):
        super().__init__(message)


class FontLoadError(GlyphwarpError):
    """Raised when a font directory or font file cannot be read.

    Attributes:
        path (Path | str | None): The directory or file that failed to load.
    """

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class FontParseError(FontLoadError):
    """Raised when a font file was read but is not a usable typeface."""
    pass


class EncodeError(GlyphwarpError):
    """Raised when the finished canvas cannot be encoded.

    Attributes:
        text (str): The input text of the render that failed to encode.
    """

    def __init__(self, message, text=None):
        super().__init__(message)
        self.text = text
