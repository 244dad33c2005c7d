class AlignerrError(Exception):
    """
    Any error which aborts an alignerr command.

    `message' is the one-line explanation shown to the operator;
    `verbose' optionally carries extra detail such as git's stderr.
    """

    def __init__(self, message, verbose=None):
        super(AlignerrError, self).__init__(message)
        self.message = message
        self.verbose = verbose


class ConfigError(AlignerrError):
    """The user configuration file could not be read."""
    pass


class PromptError(AlignerrError):
    """A required value was neither supplied nor entered."""
    pass


class VCSError(AlignerrError):
    """A version control query failed."""
    pass


class ArchiveError(AlignerrError):
    """Raised when creating or extracting a snapshot archive fails"""
    pass


class SubmissionError(AlignerrError):
    """A submission directory operation failed."""
    pass


class MissingStateError(SubmissionError):
    """
    The submission directory lacks state written by `init' (the
    directory itself, its metadata, or its archive).
    """
    pass


class SubmissionConflictError(SubmissionError):
    """Today's submission directory already belongs to another task."""
    pass
