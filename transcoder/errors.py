"""Exception types shared across the pipeline."""


class ConfigError(ValueError):
    """Configuration could not be resolved; raised before any stage starts."""


class InvalidTransition(RuntimeError):
    """A job was driven outside its state machine."""


class CollaboratorError(RuntimeError):
    """Base for failures raised inside a stage collaborator."""


class DetectionError(CollaboratorError):
    pass


class PreparationError(CollaboratorError):
    pass


class TranscriptionError(CollaboratorError):
    pass
