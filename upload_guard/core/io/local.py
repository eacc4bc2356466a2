import os
import logging
from pathlib import Path
from typing import List
from .provider import StorageProvider

class SecurityViolationError(Exception):
    pass

class LocalProvider(StorageProvider):
    def __init__(self, allowed_roots: List[str] = None):
        """
        allowed_roots: List of absolute paths that are allowed to be accessed.
                       If None, no restriction (use with caution).
        """
        self.allowed_roots = [Path(r).resolve() for r in allowed_roots] if allowed_roots else None

    def _validate_path(self, path_str: str) -> Path:
        path = Path(path_str).resolve()
        if self.allowed_roots:
            is_allowed = False
            for root in self.allowed_roots:
                if path == root or root in path.parents:
                    is_allowed = True
                    break
            if not is_allowed:
                raise SecurityViolationError(f"Access denied: {path} is not in allowed roots.")
        return path

    def exists(self, path: str) -> bool:
        try:
            p = self._validate_path(path)
            return p.exists()
        except SecurityViolationError:
            return False

    def read_bytes(self, path: str) -> bytes:
        p = self._validate_path(path)
        return p.read_bytes()

    def write_bytes(self, path: str, data: bytes):
        p = self._validate_path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)

    def delete(self, path: str):
        p = self._validate_path(path)
        try:
            p.unlink()
        except FileNotFoundError:
            logging.debug(f"Nothing to delete at {p}")

    def move(self, src_path: str, dest_path: str):
        src = self._validate_path(src_path)
        dest = self._validate_path(dest_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        # os.replace overwrites atomically on the same filesystem
        os.replace(src, dest)
