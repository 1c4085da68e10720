import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ValidationError

from lightkit.commands.base import GetSignal
from lightkit.errors import SceneListError
from lightkit.lamps.base import Lamp

logger = logging.getLogger(__name__)


class SceneList(BaseModel):
    names: list[str] = []


class SceneRepository:
    """Scene names of a lamp, cached in a json snapshot on disk.

    The snapshot never expires; delete the file to pick up new scenes.
    """

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)

    def load(self, lamp: Optional[Lamp] = None) -> SceneList:
        scenes = self.from_file()
        if scenes is not None:
            return scenes

        if lamp is None:
            raise SceneListError(f"no scene cache at {self.path} and no lamp to ask")

        scenes = self.from_lamp(lamp)
        try:
            self.to_file(scenes)
        except OSError as e:
            logger.warning("Unable to write scene cache %s: %s", self.path, e)
        return scenes

    def from_file(self) -> Optional[SceneList]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.debug("Unable to read scene cache %s: %s", self.path, e)
            return None

        try:
            return SceneList.model_validate_json(text)
        except ValidationError as e:
            logger.info("Ignoring unreadable scene cache %s: %s", self.path, e)
            return None

    @staticmethod
    def from_lamp(lamp: Lamp) -> SceneList:
        text = lamp.query(GetSignal.SCENES)
        if text is None:
            raise SceneListError(f"{lamp.name} does not store scenes")

        try:
            return SceneList(names=json.loads(text))
        except (ValueError, ValidationError) as e:
            raise SceneListError(f"{lamp.name} sent an invalid scene list: {text!r}") from e

    def to_file(self, scenes: SceneList) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(scenes.model_dump_json(), encoding="utf-8")
        logger.debug("Wrote %d scene names to %s", len(scenes.names), self.path)
