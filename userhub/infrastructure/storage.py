# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Avatar storage adapter."""

from __future__ import annotations

import re
import shutil
import uuid
from pathlib import Path

from userhub.domain.users.entities import StoredAvatar
from userhub.domain.users.repositories import AvatarStorage
from userhub.shared.logging import logger

_SAFE_NAME = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(name: str | None, *, fallback: str = "upload") -> str:
    cleaned = _SAFE_NAME.sub("_", (name or "").strip()).strip("._")
    return cleaned[:128] or fallback


class LocalAvatarStorage(AvatarStorage):
    """Stores avatar images on the local filesystem and serves them under a base URL."""

    def __init__(self, root: Path, base_url: str) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)
        self._base_url = base_url.rstrip("/")

    def _resolve(self, relative_path: str) -> Path:
        path = (self._root / relative_path).resolve()
        if not path.is_relative_to(self._root.resolve()):
            msg = "Attempted directory traversal outside storage root"
            raise ValueError(msg)
        return path

    def _key_for(self, url: str) -> str | None:
        prefix = f"{self._base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix) :]

    def upload(self, local_path: Path) -> StoredAvatar | None:
        key = f"{uuid.uuid4().hex}{local_path.suffix.lower()}"
        try:
            target = self._resolve(key)
            shutil.move(str(local_path), target)
        except OSError:
            logger.exception(f"storage: upload failed src={local_path}")
            self.discard(local_path)
            return None

        logger.debug(f"storage: stored avatar key={key} size={target.stat().st_size}")
        return StoredAvatar(url=f"{self._base_url}/{key}", key=key)

    def delete(self, url: str) -> bool:
        key = self._key_for(url)
        if not key:
            logger.debug(f"storage: skip delete of foreign url={url}")
            return False
        try:
            path = self._resolve(key)
        except ValueError:
            logger.warning(f"storage: refused delete outside root url={url}")
            return False
        if not path.exists():
            return False
        path.unlink()
        logger.debug(f"storage: deleted avatar key={key}")
        return True

    def discard(self, local_path: Path) -> None:
        try:
            local_path.unlink(missing_ok=True)
        except OSError:
            logger.warning(f"storage: temp file not removed path={local_path}")


__all__ = ["LocalAvatarStorage", "safe_filename"]
