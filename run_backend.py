#!/usr/bin/env python
"""Script to run the task tracker API server."""
import sys
from pathlib import Path

# Make the package importable when run from a checkout
project_dir = Path(__file__).resolve().parent
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))

import uvicorn

from tasktracker.config import HOST, PORT

if __name__ == "__main__":
    uvicorn.run(
        "tasktracker.main:app",
        host=HOST,
        port=PORT,
        reload=True
    )
