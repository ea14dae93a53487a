"""Exceptions raised by the directory organizer."""


class OrganizerError(Exception):
    """Base error for the project."""


class InvalidParameterError(OrganizerError, ValueError):
    """Missing or unusable directory, keyword or keyword list."""


class EnumerationError(OrganizerError):
    """The directory could not be listed."""


class PoolShutdownError(OrganizerError, RuntimeError):
    """A task was submitted after the pool began shutting down."""


class DirectoryCreationError(OrganizerError):
    pass


class ContentReadError(OrganizerError):
    pass


class MoveError(OrganizerError):
    pass


class SourceMissingError(MoveError):
    pass


class DestinationExistsError(MoveError):
    pass
