class ConfigHelperError(Exception):
    """Base class for errors raised by confighelper."""


class BuildError(ConfigHelperError):
    """The build command could not be run at all."""


class CacheRemovalError(ConfigHelperError):
    """The build cache could not be removed; the restart must not continue."""


class RestartError(ConfigHelperError):
    """The process replacement could not be started."""
