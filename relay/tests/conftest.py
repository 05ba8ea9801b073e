from __future__ import annotations

import os

# Settings require a credential at import time of the app module.
os.environ.setdefault("OPENAI_API_KEY", "sk-test-not-a-real-key")
