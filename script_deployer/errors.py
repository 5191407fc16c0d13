class DeployerError(Exception):
    """Base class for every error the deployer reports."""


class FatalDeployError(DeployerError):
    """Stops the deployer with exit code 1."""


class InputValidationError(FatalDeployError):
    """The file to deploy does not exist at startup."""


class ClientInitError(FatalDeployError):
    """The HTTP session could not be constructed."""


class InitialUploadError(FatalDeployError):
    """The first upload attempt failed."""


class WatchSubscriptionError(FatalDeployError):
    """The file watch could not be established."""


# Logged by the watch loop, never raised

class RedeployUploadError(DeployerError):
    """An upload triggered by a file change failed."""


class NotificationChannelError(DeployerError):
    """The event channel closed or reported an error."""
