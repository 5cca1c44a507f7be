"""Chat exceptions."""


class GenerationError(Exception):
    """The generation API failed, timed out or returned nothing."""
