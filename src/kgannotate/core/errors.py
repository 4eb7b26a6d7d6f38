class KgAnnotateError(Exception):
    """Base error for all user-facing kgannotate exceptions."""


class ConfigurationError(KgAnnotateError):
    """Raised when configuration is invalid or incomplete."""


class AnnotationInputError(KgAnnotateError):
    """Raised when an annotation file cannot be read or is malformed."""


class MutationGenerationError(KgAnnotateError):
    """Raised when a mutation cannot be built from an annotation."""


class EmptyIdentifierError(MutationGenerationError):
    """Raised when entity text normalizes to an empty name_id."""
