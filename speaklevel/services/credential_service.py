"""
APIキー管理サービス
プロセス全体で共有するAPIキーと、キー選択ダイアログのインターフェースを提供する
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, List

from speaklevel.services.storage_service import KeyValueStore

logger = logging.getLogger(__name__)

# 同一セッション内でキー選択を確認済みであることを示すフラグ
CREDENTIAL_ACKNOWLEDGED_KEY = "speaklevel_ai_credential_acknowledged"


class CredentialDialog(ABC):
    """ホスト側が提供するキー選択ダイアログ"""

    @abstractmethod
    def has_selected_credential(self) -> bool:
        """キーが選択済みかどうか"""

    @abstractmethod
    async def open_selector(self) -> None:
        """
        キー選択ダイアログを開く

        ダイアログが閉じられたことだけを通知し、キーが有効であることは保証しない
        """


class CredentialService:
    """APIキーを保持し、変更を通知するサービスクラス"""

    def __init__(self, api_key: str | None = None, session_store: KeyValueStore | None = None) -> None:
        """
        初期化処理

        Args:
            api_key: 起動時に設定されたAPIキー
            session_store: セッション単位のフラグを保存するストア
        """
        self._api_key: str | None = api_key or None
        self.session_store = session_store
        self._listeners: List[Callable[[str | None], None]] = []

    def get_api_key(self) -> str | None:
        """
        現在のAPIキーを取得

        呼び出し側はこの値をキャッシュせず、必要な時に毎回取得すること

        Returns:
            APIキー、未設定の場合はNone
        """
        return self._api_key

    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, api_key: str | None) -> None:
        """
        APIキーを更新してリスナーに通知

        Args:
            api_key: 新しいAPIキー（Noneまたは空文字で解除）
        """
        self._api_key = (api_key or "").strip() or None
        logger.info("APIキーが%sされました", "設定" if self._api_key else "解除")
        for listener in list(self._listeners):
            listener(self._api_key)

    def add_listener(self, listener: Callable[[str | None], None]) -> None:
        """APIキー変更時のコールバックを登録"""
        self._listeners.append(listener)

    def is_acknowledged(self) -> bool:
        """このセッションでキー選択を確認済みかどうか"""
        if self.session_store is None:
            return False
        return self.session_store.get(CREDENTIAL_ACKNOWLEDGED_KEY) == "true"

    def mark_acknowledged(self) -> None:
        if self.session_store is not None:
            self.session_store.set(CREDENTIAL_ACKNOWLEDGED_KEY, "true")

    def clear_acknowledged(self) -> None:
        if self.session_store is not None:
            self.session_store.remove(CREDENTIAL_ACKNOWLEDGED_KEY)
