import os
import yaml

from Modules import StudyStore
from Modules.Curriculum import normalize_chapters
from Modules.Logger import Logger


def read_curriculum(path):
    """
    Reads a curriculum file (YAML or JSON) holding a list of chapters, or a
    map with a 'chapters' list.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("chapters") or []
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of chapters")
    return normalize_chapters(data)


def seed_chapters(path, force=False):
    """
    Writes the chapters from a curriculum file into the chapters collection.
    An existing non-empty collection is kept unless force is set.
    Returns the number of chapters written, 0 when skipped.
    """
    chapters = read_curriculum(path)

    def apply(existing):
        if existing and not force:
            return existing, 0
        return chapters, len(chapters)

    written = StudyStore.update("chapters", apply)
    if written:
        Logger.info(f"Seeded {written} chapters from {os.path.abspath(path)}")
    else:
        Logger.info("Chapters already present; seed skipped")
    return written
