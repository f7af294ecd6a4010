# tracker/errors.py


class TrackerError(Exception):
    """Base class for errors the UI reports back to the user."""


class SymptomValidationError(TrackerError):
    """A symptom log request is missing required input."""


class KnowledgeBaseError(TrackerError):
    """The health knowledge document has the wrong shape."""


class ProfileValidationError(TrackerError):
    """A profile update carries an unusable name or phone number."""
