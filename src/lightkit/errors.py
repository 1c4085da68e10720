from typing import Optional


class LightkitError(Exception):
    """Base class for every error raised by lightkit."""


class ConfigError(LightkitError):
    """The lamp configuration is missing a section or a key."""


class LampRequestError(LightkitError):
    """A request to a lamp failed to go through or was refused."""

    def __init__(self, url: str, message: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(f"{url}: {message}")


class SceneListError(LightkitError):
    """A device answered the scene query with something that is not a list of names."""
