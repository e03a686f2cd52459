from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TMP_ROOT = Path(tempfile.mkdtemp(prefix="userhub-tests-"))

# Must run before anything calls load_config().
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_ROOT / 'userhub-test.db'}"
os.environ["LOG_FILE"] = str(_TMP_ROOT / "userhub-test.log")
os.environ["AVATAR_DIR"] = str(_TMP_ROOT / "avatars")
os.environ["AVATAR_BASE_URL"] = "/static/avatars"
os.environ["UPLOAD_TMP_DIR"] = str(_TMP_ROOT / "tmp")
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-secret-0123456789abcdef"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret-0123456789abcdef"
os.environ.pop("ALLOWED_ORIGINS", None)

import pytest  # noqa: E402

from userhub.infrastructure.db import ENGINE, Base  # noqa: E402


@pytest.fixture()
def reset_database():
    from userhub.infrastructure.db import models  # noqa: F401

    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)
