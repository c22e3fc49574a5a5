"""
Fletのページに紐づくキーバリューストア
Webモードではclient_storageがブラウザのlocalStorageになる
"""
import flet as ft

from speaklevel.services.storage_service import KeyValueStore


class ClientStorageKeyValueStore(KeyValueStore):
    """page.client_storageを使った永続ストア"""

    def __init__(self, page: ft.Page) -> None:
        self.page = page

    def get(self, key: str) -> str | None:
        if not self.page.client_storage.contains_key(key):
            return None
        return self.page.client_storage.get(key)

    def set(self, key: str, value: str) -> None:
        self.page.client_storage.set(key, value)

    def remove(self, key: str) -> None:
        if self.page.client_storage.contains_key(key):
            self.page.client_storage.remove(key)


class PageSessionKeyValueStore(KeyValueStore):
    """page.sessionを使ったセッション単位のストア（リロードで消える）"""

    def __init__(self, page: ft.Page) -> None:
        self.page = page

    def get(self, key: str) -> str | None:
        if not self.page.session.contains_key(key):
            return None
        return self.page.session.get(key)

    def set(self, key: str, value: str) -> None:
        self.page.session.set(key, value)

    def remove(self, key: str) -> None:
        if self.page.session.contains_key(key):
            self.page.session.remove(key)
