import os
import sys
import warnings
from pathlib import Path

# Ignore warnings from app.shared
warnings.filterwarnings("ignore", category=DeprecationWarning, module="app.shared.*")

# Set test environment variables
os.environ.update(
    {
        "DEMO_MODE": "true",
        "SESSION_SECRET": "test-session-secret",
        "SESSION_COOKIE_NAME": "session",
        "DEACTIVATED_RETENTION_DAYS": "7",
        "TELEGRAM_WEBHOOK_SECRET": "",
    }
)

# Ensure the project root is on sys.path so `app` packages resolve
PROJECT_ROOT = Path(__file__).resolve().parents[1]
root_str = str(PROJECT_ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

# Import storage fixtures so they are available to all tests
from tests.fixtures.mongo_fixtures import *  # noqa: E402, F403
from tests.fixtures.redis_fixtures import *  # noqa: E402, F403
from tests.fixtures.user_fixtures import *  # noqa: E402, F403
