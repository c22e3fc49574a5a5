"""
CredentialServiceのテスト
"""
from unittest.mock import Mock

from speaklevel.services.credential_service import CREDENTIAL_ACKNOWLEDGED_KEY, CredentialService
from speaklevel.services.storage_service import MemoryKeyValueStore


class TestCredentialService:
    """CredentialServiceのテストクラス"""

    def test_initial_key(self):
        credentials = CredentialService(api_key="sk-test")

        assert credentials.get_api_key() == "sk-test"
        assert credentials.has_api_key() is True

    def test_empty_key_is_missing(self):
        """空文字のキーは未設定として扱う"""
        credentials = CredentialService(api_key="")

        assert credentials.get_api_key() is None
        assert credentials.has_api_key() is False

    def test_set_api_key_notifies_listeners(self):
        credentials = CredentialService()
        listener = Mock()
        credentials.add_listener(listener)

        credentials.set_api_key("  sk-new  ")

        assert credentials.get_api_key() == "sk-new"
        listener.assert_called_once_with("sk-new")

    def test_set_blank_key_clears(self):
        credentials = CredentialService(api_key="sk-test")

        credentials.set_api_key("   ")

        assert credentials.has_api_key() is False

    def test_acknowledged_flag(self):
        """確認済みフラグはセッションストアに保存される"""
        store = MemoryKeyValueStore()
        credentials = CredentialService(session_store=store)

        assert credentials.is_acknowledged() is False
        credentials.mark_acknowledged()
        assert credentials.is_acknowledged() is True
        assert store.get(CREDENTIAL_ACKNOWLEDGED_KEY) == "true"

        credentials.clear_acknowledged()
        assert credentials.is_acknowledged() is False

    def test_acknowledged_without_session_store(self):
        credentials = CredentialService()

        credentials.mark_acknowledged()

        assert credentials.is_acknowledged() is False
