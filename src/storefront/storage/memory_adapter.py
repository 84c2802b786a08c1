"""In-memory object storage for development and testing."""

from storefront.storage.port import ObjectStorage, StorageError


class MemoryStorage(ObjectStorage):
    """Keeps uploads in a dict for test assertions."""

    def __init__(self, base_url: str = "memory://uploads"):
        self.base_url = base_url
        self.objects: dict[str, dict] = {}
        self.should_succeed = True

    def configure(self, should_succeed: bool = True):
        self.should_succeed = should_succeed

    def upload(self, data: bytes, key: str, content_type: str) -> str:
        if not self.should_succeed:
            raise StorageError(f"Failed to upload {key}")
        self.objects[key] = {"data": data, "content_type": content_type}
        return f"{self.base_url}/{key}"

    def reset(self):
        self.objects.clear()
        self.should_succeed = True
