"""
Credential Store for the Workspace facade.

This module provides a standardized interface for reading and writing the
persisted token blob. The blob is stored verbatim as JSON: whatever the
OAuth provider handed back, serialized by google-auth.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class CredentialStore(ABC):
    """Abstract base class for credential blob storage."""

    @abstractmethod
    def exists(self) -> bool:
        """Check whether a credential blob has been persisted."""
        pass

    @abstractmethod
    def load(self) -> Dict[str, Any]:
        """Load the persisted credential blob."""
        pass

    @abstractmethod
    def save(self, blob: Dict[str, Any]) -> None:
        """Persist the credential blob, replacing any previous one."""
        pass

    def last_modified(self) -> Optional[float]:
        """Unix time the blob was last written, if the store knows it."""
        return None


class TokenFileStore(CredentialStore):
    """Credential store backed by a single JSON token file."""

    def __init__(self, path: str) -> None:
        """
        Initialize the token file store.

        Args:
            path: Location of the token file. It does not need to exist yet.
        """
        self.path = os.path.expanduser(path)

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def last_modified(self) -> Optional[float]:
        return os.path.getmtime(self.path) if self.exists() else None

    def load(self) -> Dict[str, Any]:
        """
        Read the token file.

        Decoding errors are not caught: a malformed blob is a failure the
        caller has to see, not a reason to start a new authorization.
        """
        with open(self.path, "r") as f:
            blob = json.load(f)
        logger.debug("Loaded credential blob from %s", self.path)
        return blob

    def save(self, blob: Dict[str, Any]) -> None:
        """Write the blob atomically (temporary file + os.replace)."""
        target_dir = os.path.dirname(self.path) or "."
        os.makedirs(target_dir, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(dir=target_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(blob, f, indent=2)
            os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
        logger.info("Stored credential blob at %s", self.path)
