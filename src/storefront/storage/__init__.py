"""Object storage factory."""

from storefront.storage.memory_adapter import MemoryStorage
from storefront.storage.port import ObjectStorage
from storefront.storage.s3_adapter import S3Storage


def build_storage(settings) -> ObjectStorage:
    if settings.storage == "s3":
        return S3Storage(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            public_url=settings.s3_public_url,
        )
    if settings.storage == "memory":
        return MemoryStorage()
    raise ValueError(f"Unknown storage backend '{settings.storage}'")
