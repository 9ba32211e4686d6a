import json
import logging
import os
from typing import Optional

from .room import RoomBuildResult

logger = logging.getLogger(__name__)


class RoomExporter:
    """
    Writes a built room to disk: the scene through trimesh (format from the
    file extension, e.g. .glb or .obj) and the opening records as JSON.
    """

    @staticmethod
    def export_scene(result: RoomBuildResult, output_path: str,
                     file_type: Optional[str] = None) -> str:
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        result.scene.export(output_path, file_type=file_type)
        logger.info("Exported room scene to %s", output_path)
        return output_path

    @staticmethod
    def export_openings(result: RoomBuildResult, output_path: str) -> str:
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump([record.model_dump() for record in result.openings], f, indent=4)
        return output_path
