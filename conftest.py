import sys
from pathlib import Path

# `apps` and `storefront` live under backend/; make them importable when
# pytest is started from the repository root.
BACKEND_DIR = Path(__file__).resolve().parent / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))
