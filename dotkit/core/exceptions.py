"""
Centralized exception hierarchy for dotkit.

Errors fall into two families. Fatal provisioning errors abort the run and
surface as a non-zero exit status. Recoverable tool errors are caught at the
per-tool or per-step boundary and recorded in the run report.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class DotkitError(Exception):
    """Base exception for all dotkit errors."""

    pass


# ============================================================================
# Fatal Exceptions
# ============================================================================


class FatalProvisioningError(DotkitError):
    """Base exception for errors that abort the provisioning run."""

    pass


class LayoutError(FatalProvisioningError):
    """Raised when a standard directory cannot be created."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot create directory {path}: {reason}")


class ConfigToolBootstrapError(FatalProvisioningError):
    """Raised when the configuration-application tool cannot be installed."""

    def __init__(self, tool_name: str, reason: str):
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(f"Failed to bootstrap {tool_name}: {reason}")


class ConfigApplyError(FatalProvisioningError):
    """Raised when applying the operator's configuration fails."""

    def __init__(self, message: str, output: str = ""):
        self.output = output
        if output:
            message = f"{message}\n{output}"
        super().__init__(message)


class SettingsError(FatalProvisioningError):
    """Raised when the settings file cannot be parsed or is invalid."""

    pass


# ============================================================================
# Recoverable Exceptions
# ============================================================================


class RecoverableToolError(DotkitError):
    """Base exception for failures that are recorded but never abort the run."""

    pass


class PackageManagerUnavailableError(RecoverableToolError):
    """Package manager is missing and could not be bootstrapped."""

    pass


class PackageInstallError(RecoverableToolError):
    """A package manager reported a failure installing a package."""

    def __init__(self, manager: str, package: str, returncode: int, details: str = ""):
        self.manager = manager
        self.package = package
        self.returncode = returncode
        self.details = details
        msg = f"{manager} failed to install {package} (exit {returncode})"
        if details:
            msg += f": {details}"
        super().__init__(msg)


class DownloadError(RecoverableToolError):
    """An install script could not be fetched."""

    pass


class ScriptInstallError(RecoverableToolError):
    """A fetched install script failed."""

    pass


class SourceBuildError(RecoverableToolError):
    """Building a tool from source failed."""

    pass
