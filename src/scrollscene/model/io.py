"""
Input/Output Manager (JSON)
Handles loading and saving the static scene description.
"""
import json
import logging
import os
from dataclasses import replace
from typing import Optional

from scrollscene import config
from scrollscene.model.scene import SceneConfig, SceneConfigError

logger = logging.getLogger(__name__)


class IOManager:

    @staticmethod
    def load_scene(filepath: Optional[str] = None) -> SceneConfig:
        """
        Read and validate a scene description.

        Relative asset URIs are resolved against the directory of the scene file.
        """
        filepath = filepath or config.DEFAULT_SCENE_PATH
        logger.info(f"Loading scene from: {filepath}")
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise SceneConfigError(f"Cannot read scene file '{filepath}': {e}") from e
        except json.JSONDecodeError as e:
            raise SceneConfigError(f"Scene file '{filepath}' is not valid JSON: {e}") from e

        scene = SceneConfig.from_dict(data)
        base_dir = os.path.dirname(os.path.abspath(filepath))
        IOManager._resolve_uris(scene, base_dir)

        logger.info(
            f"Scene '{scene.title}' loaded: {len(scene.layers)} layers, "
            f"{len(scene.segments)} segments, {len(scene.triggers)} triggers."
        )
        return scene

    @staticmethod
    def save_scene(scene: SceneConfig, filepath: str) -> None:
        logger.info(f"Saving scene to: {filepath}")
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(scene.to_dict(), f, indent=2, ensure_ascii=False)

    @staticmethod
    def _resolve_uris(scene: SceneConfig, base_dir: str) -> None:
        def resolve(uri: Optional[str]) -> Optional[str]:
            if uri is None or os.path.isabs(uri):
                return uri
            return os.path.join(base_dir, uri)

        scene.layers = [replace(layer, image=resolve(layer.image)) for layer in scene.layers]
        scene.triggers = [replace(z, image=resolve(z.image)) for z in scene.triggers]
        scene.decorations = [replace(d, image=resolve(d.image)) for d in scene.decorations]
        scene.assets = [replace(a, uri=resolve(a.uri)) for a in scene.assets]
        scene.music = resolve(scene.music)
