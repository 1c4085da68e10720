"""The interface every lamp vendor implements.

A vendor module supplies pure encoder functions, one per signal kind, and
a `Lamp` subclass that lists them in ``encoders`` and knows its base url.
Sending, querying and failure handling live here and are shared by all
vendors.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Optional

from lightkit.api.http_client import HttpClient
from lightkit.commands.base import (
    Brightness,
    Colour,
    DeviceCommand,
    GetSignal,
    On,
    Palette,
    Signal,
)
from lightkit.errors import LampRequestError

logger = logging.getLogger(__name__)

Encoder = Callable[[Signal], Optional[DeviceCommand]]


class Lamp(ABC):
    # Signal type -> encoder. Signal types not listed are unsupported.
    encoders: ClassVar[dict[type, Encoder]] = {}
    # Query -> endpoint. Queries not listed are unsupported.
    queries: ClassVar[dict[GetSignal, str]] = {}

    def __init__(self, name: str, *, timeout: float = 5):
        self.name = name
        self.timeout = timeout
        self._client: Optional[HttpClient] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @abstractmethod
    def address(self) -> str:
        """The base url every endpoint is appended to."""

    @property
    def client(self) -> HttpClient:
        if self._client is None:
            self._client = HttpClient(self.address(), timeout=self.timeout)
        return self._client

    def close(self) -> None:
        """Release the HTTP session, if one was opened."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def encode(self, signal: Signal) -> Optional[DeviceCommand]:
        encoder = self.encoders.get(type(signal))
        if encoder is None:
            return None
        return encoder(signal)

    def send(self, signal: Signal) -> Optional[DeviceCommand]:
        """Encode and PUT the signal, raising `LampRequestError` on failure.

        Returns the command that was sent, or None when the lamp does not
        support the signal and nothing was sent.
        """
        cmd = self.encode(signal)
        if cmd is None:
            logger.debug("%s: %s not supported, skipping", self.name, type(signal).__name__)
            return None

        self.client.put(cmd.endpoint, cmd.body)
        return cmd

    def apply(self, signal: Signal) -> bool:
        """Send the signal, logging instead of raising when the lamp fails.

        Returns False only when a request was attempted and failed.
        """
        try:
            cmd = self.send(signal)
        except LampRequestError as e:
            logger.warning("%s: %s failed: %s", self.name, type(signal).__name__, e)
            return False

        if cmd is not None:
            logger.debug("%s: %s ok", self.name, cmd.endpoint)
        return True

    def query(self, signal: GetSignal) -> Optional[str]:
        """GET the endpoint for the query and return the raw body.

        Returns None if the lamp has no such query. Request failures are
        raised as `LampRequestError`.
        """
        endpoint = self.queries.get(signal)
        if endpoint is None:
            return None
        return self.client.get(endpoint)

    def on(self) -> bool:
        return self.apply(On(state=True))

    def off(self) -> bool:
        return self.apply(On(state=False))

    def brightness(self, value: int) -> bool:
        return self.apply(Brightness(value=value))

    def colour(self, hue: int, sat: int, bri: int) -> bool:
        return self.apply(Colour(hue=hue, sat=sat, bri=bri))

    def palette(self, hue: float, saturation: float, value: float) -> bool:
        return self.apply(Palette.of(hue, saturation, value))
