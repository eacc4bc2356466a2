from .local import LocalProvider

class FileSystemManager:
    _instance = None

    def __init__(self, config: dict):
        self.config = config or {}

        # Initialize Local Provider with security limits
        allowed = self.config.get('allowed_roots', [])
        self.local_provider = LocalProvider(allowed_roots=allowed)

    @classmethod
    def get_instance(cls, config: dict = None):
        if cls._instance is None:
            if config is None:
                raise ValueError("FileSystemManager not initialized")
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        cls._instance = None
