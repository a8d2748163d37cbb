"""Error kinds raised across the commit pipeline."""


class AicommError(Exception):
    """Base class for errors reported to the operator."""


class EnvironmentCheckError(AicommError):
    """Not a repository, missing credential, or local engine offline."""


class ConfigError(AicommError):
    """Malformed or out-of-range settings file."""


class DiffError(AicommError):
    """Querying the repository for a diff failed."""


class GenerationError(AicommError):
    """Model output could not be turned into a commit message.

    Never leaves the generator; it is converted to the fallback message.
    """


class UserAbort(AicommError):
    """The operator chose to abort. Not a failure."""


class EmptyMessageError(AicommError):
    """The final commit message was blank."""


class CommitError(AicommError):
    """Nothing to commit, or git rejected the commit."""


class PushError(AicommError):
    """Push could not be performed; the message names the remediation."""
