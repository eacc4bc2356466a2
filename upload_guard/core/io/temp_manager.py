import logging
from contextlib import contextmanager
from .provider import StorageProvider

class TempFileManager:
    """
    Manages staging files written next to an upload while it is being
    rewritten (e.g. resized), so a failed rewrite never leaves the
    original half-overwritten.
    """

    SUFFIX = "-resized"

    @staticmethod
    @contextmanager
    def staging_path(provider: StorageProvider, path: str):
        """
        Context manager that yields a sibling path for staged output.
        Whatever is left at that path is removed on exit, whether the
        caller moved it into place, failed half-way or raised.
        """
        temp_path = f"{path}{TempFileManager.SUFFIX}"
        try:
            yield temp_path
        finally:
            try:
                if provider.exists(temp_path):
                    logging.debug(f"Removing leftover staging file {temp_path}")
                    provider.delete(temp_path)
            except OSError as e:
                logging.warning(f"Failed to remove staging file {temp_path}: {e}")
