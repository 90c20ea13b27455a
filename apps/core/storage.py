"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Storage port for uploaded files. Wraps a Django storage
             backend behind put/get/delete by key so upload flows do not
             depend on local-filesystem specifics.
-------------------------------------------------------------------------
"""
from typing import Optional

from django.core.files.base import File
from django.core.files.storage import Storage, default_storage


class FileStore:
    """
    Key-addressed file store backed by a Django Storage.

    Args:
        storage: Backend to write to. Defaults to ``default_storage``
            (``MEDIA_ROOT`` on the local filesystem).
    """

    def __init__(self, storage: Optional[Storage] = None) -> None:
        self.storage = storage or default_storage

    def put(self, key: str, content: File) -> str:
        """
        Write content under key.

        Returns:
            The key actually used (the backend may alter it to avoid clashes).
        """
        return self.storage.save(key, content)

    def get(self, key: str) -> File:
        """Open the file stored under key for reading."""
        return self.storage.open(key, 'rb')

    def delete(self, key: str) -> None:
        """Remove the file stored under key; missing keys are ignored."""
        if self.storage.exists(key):
            self.storage.delete(key)

    def exists(self, key: str) -> bool:
        return self.storage.exists(key)

    def url(self, key: str) -> str:
        return self.storage.url(key)


def get_file_store() -> FileStore:
    """Return the file store used for proof uploads."""
    return FileStore()
