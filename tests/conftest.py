"""
Pytest configuration.
Puts the project root on sys.path so tests can import adapters, services, api, etc.
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from test_fixtures import (  # noqa: E402,F401
    admin_api,
    api,
    customer_api,
    db_session,
    owner_api,
    sandbox_client,
    sandbox_store,
)
