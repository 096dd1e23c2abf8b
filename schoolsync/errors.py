"""Exception types raised by the migration job."""


class MigrationError(Exception):
    """Base class for migration errors."""


class ConfigurationError(MigrationError):
    """A required collaborator or setting is unavailable before the run starts."""


class MappingError(MigrationError):
    """A source record cannot be mapped to a target payload."""


class MissingKeyError(MappingError):
    """A source record has no unique key (uid/id)."""


class CreationError(MigrationError):
    """The target system refused or failed to create a record.

    The message is written verbatim to the checkpoint file, so it must only
    carry a human-readable description of the failure.
    """


class HygraphError(MigrationError):
    """A GraphQL request against Hygraph failed."""


class CheckpointError(MigrationError):
    """A checkpoint entry could not be parsed."""
