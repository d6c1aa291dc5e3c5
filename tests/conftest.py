"""Root conftest — sets env vars BEFORE any kendesktop module is imported.

Points the config dir at a throwaway temp dir and forces the in-memory
credential store so no test can reach the real OS keychain.
"""

import os
import tempfile

# Force-set (not setdefault) to prevent real env vars from leaking into tests
os.environ["KEN_DESKTOP_DIR"] = tempfile.mkdtemp(prefix="kendesktop-test-")
os.environ["KEN_DESKTOP_STORE_BACKEND"] = "memory"
os.environ.pop("KEN_DESKTOP_KEYCHAIN_SERVICE", None)
os.environ.pop("KEN_DESKTOP_LOG_LEVEL", None)
