import argparse
import logging
import os
import sys
from datetime import datetime

import yaml
from pydantic import ValidationError

from room_core.config import load_room_config
from room_core.exporters import RoomExporter
from room_core.lighting import window_light_placement
from room_core.room import RoomBuilder


def main(argv=None):
    parser = argparse.ArgumentParser(description="Room shell generator")
    parser.add_argument("config_file", help="Path to room YAML file")
    parser.add_argument("-o", "--output", help="Output mesh path (.glb, .obj, ...)")
    parser.add_argument("--openings-json", help="Where to write the opening records")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_room_config(args.config_file)
    except (ValidationError, yaml.YAMLError) as e:
        print(f"Invalid room configuration: {e}")
        return 1

    print(f"Room: {config.width}x{config.depth}, walls {config.wall_height} high, "
          f"{config.wall_thickness} thick")

    result = RoomBuilder(config).build()

    for wall in result.walls:
        print(f"  {wall.name}: {wall.mesh.metadata.get('region_count', 1)} regions, "
              f"{len(wall.openings)} openings")
    for record in result.openings:
        x, y, z = record.global_position
        print(f"  {record.type} at ({x:.3f}, {y:.3f}, {z:.3f}) "
              f"{record.size.width:.3f}x{record.size.height:.3f}")

    light = window_light_placement(result, config.wall_thickness)
    source = "window" if light.from_opening else "fallback"
    print(f"Window light ({source}): {light.position} {light.width:.3f}x{light.height:.3f}")

    output = args.output
    if output is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output = os.path.join("outputs", f"run_{timestamp}", "room.glb")

    RoomExporter.export_scene(result, output)
    openings_path = args.openings_json or os.path.join(os.path.dirname(output) or ".", "openings.json")
    RoomExporter.export_openings(result, openings_path)

    print(f"Generated {output} and {openings_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
