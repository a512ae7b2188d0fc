import sys
from pathlib import Path


# Make the flat top-level modules importable when running pytest from the repo root
THIS_DIR = Path(__file__).resolve().parent
ROOT_DIR = THIS_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))
