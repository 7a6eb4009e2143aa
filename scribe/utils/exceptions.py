"""Root exception shared by all SCRIBE contexts."""


class ScribeError(Exception):
    """Base class for every error raised deliberately by the pipeline."""

    pass
