# xiuchart/version.py
from __future__ import annotations
import os

# Package version; XIU_VERSION overrides it for preview deployments.
VERSION = os.getenv("XIU_VERSION", "0.1.0")
