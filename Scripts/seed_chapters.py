import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from Modules import Seed
from Modules import StudyStore
from Modules.Settings import load_settings, configure_logging

USAGE = "Usage: python Scripts/seed_chapters.py <curriculum.yml|json> [--force]"


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    args = [a for a in argv if not a.startswith('--')]
    force = '--force' in argv
    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 1

    settings = load_settings()
    configure_logging(settings)
    StudyStore.set_data_dir(settings['data_dir'])

    try:
        written = Seed.seed_chapters(args[0], force=force)
    except (OSError, ValueError) as e:
        print(f"Seed failed: {e}", file=sys.stderr)
        return 1
    if written:
        print(f"Seeded {written} chapters into {StudyStore.get_collection_path('chapters')}")
    else:
        print("Chapters already present; pass --force to overwrite.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
