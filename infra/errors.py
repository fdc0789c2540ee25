"""
Error taxonomy for the provisioning program.

Every error aborts the plan. Nothing here retries or compensates: resources
already created are left to the engine's own rollback policy.
"""


class InfraError(Exception):
    """Base class for provisioning errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(InfraError):
    """Raised when a required option is missing or malformed."""
    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)


class InvalidPrefixError(InfraError):
    """Raised when a subnet partition request does not fit its parent block."""
    pass


class ResourceCreationError(InfraError):
    """Raised when a plan stage fails while declaring its resources."""
    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage}: {cause}")
