from abc import ABC, abstractmethod

class StorageProvider(ABC):
    """Abstract base class for the storage backends uploads live on"""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check if path exists"""
        pass

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """Read file content as bytes"""
        pass

    @abstractmethod
    def write_bytes(self, path: str, data: bytes):
        """Write bytes to file, replacing any previous content"""
        pass

    @abstractmethod
    def delete(self, path: str):
        """
        Delete file. Must be a no-op when the file is already gone,
        rejected uploads may be discarded more than once.
        """
        pass

    @abstractmethod
    def move(self, src_path: str, dest_path: str):
        """Move/Rename file within the same provider, overwriting dest_path"""
        pass
