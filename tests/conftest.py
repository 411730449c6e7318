import os

# Settings are read once at import time of inkwell.main; provide a test key
# before any test module imports the app.
TEST_ENCRYPTION_KEY = "0123456789abcdef" * 4
os.environ.setdefault("ENCRYPTION_KEY", TEST_ENCRYPTION_KEY)
