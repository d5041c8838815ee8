class CwPlatformError(Exception):
    """Base class for every error raised by the platform scripts."""


class ConfigLookupFailure(CwPlatformError):
    """Chain id, option or contract label is missing from the config."""


class ClientUnavailable(CwPlatformError):
    """Wallet or chain client could not be constructed."""


class ArtifactReadFailure(CwPlatformError):
    """Contract bytecode could not be read."""


class BroadcastFailure(CwPlatformError):
    """Transaction was rejected or its result could not be fetched."""


class QueryFailure(CwPlatformError):
    """Smart query request failed."""


class InvalidFundingParameters(CwPlatformError):
    """Execute message lacks the fields required to attach funds."""


class PageFetchFailure(CwPlatformError):
    """One page of a paginated listing could not be fetched.

    Recorded by the enumerator, never raised by it.
    """

    def __init__(self, iteration: int, cursor, cause: Exception):
        super().__init__(f"page {iteration} (start_after={cursor!r}) failed: {cause}")
        self.iteration = iteration
        self.cursor = cursor
        self.cause = cause


class EventExtractionMismatch(CwPlatformError):
    """Fewer (or more) code ids were extracted than messages were sent."""

    def __init__(self, expected: int, extracted: int):
        super().__init__(f"expected {expected} code ids, extracted {extracted}")
        self.expected = expected
        self.extracted = extracted
