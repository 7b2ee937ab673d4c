"""Error taxonomy.

Two tiers:
- Fatal errors (source, init descriptor, decoding) stop the current run or file.
- Unit errors are scoped to a single package and end up in a FailureReport.
"""

from __future__ import annotations


class BlueprintError(Exception):
    """Base class for everything the runner raises on purpose."""


class SourceError(BlueprintError):
    pass


class SourceFetchError(SourceError):
    """Cloning the remote blueprint store failed."""


class SourceSyncError(SourceError):
    """Opening or pulling an existing blueprint checkout failed."""


class MissingInitError(SourceError):
    """No init.yaml / init.json / init.toml at the blueprint root."""


class InitConfigError(BlueprintError):
    """The init descriptor or runner config has the wrong shape."""


class DecodeError(BlueprintError):
    """A blueprint file could not be read or decoded."""


class UnitError(BlueprintError):
    def __init__(self, unit: str, message: str) -> None:
        super().__init__(message)
        self.unit = unit


class UnsupportedManagerError(UnitError):
    pass


class UnsupportedActionError(UnitError):
    pass


class ExecutionError(UnitError):
    pass
