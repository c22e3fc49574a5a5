"""
ローカルストレージサービス
ユーザー認証不要で、キーバリューストアにテスト履歴を保存する
"""
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from speaklevel.config import APP_DATA_DIR
from speaklevel.models.exceptions import StorageError
from speaklevel.models.schemas import TestAttempt

logger = logging.getLogger(__name__)

# 履歴を保存するキー
STORAGE_KEY = "speaklevel_ai_history"


class KeyValueStore(ABC):
    """文字列を保存するキーバリューストアのインターフェース"""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """値を取得（存在しない場合はNone）"""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """値を保存（既存の値は置き換える）"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """値を削除（存在しなくてもエラーにしない）"""


class MemoryKeyValueStore(KeyValueStore):
    """メモリ上のキーバリューストア（セッション単位のフラグやテスト用）"""

    def __init__(self) -> None:
        self._values: Dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """キーごとに1つのJSONファイルへ保存するキーバリューストア"""

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        初期化処理
        データ保存ディレクトリを作成する

        Args:
            data_dir: 保存先ディレクトリ（指定しない場合はアプリケーションデータディレクトリ）
        """
        self.data_dir: Path = data_dir or APP_DATA_DIR / "storage"
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        file_path: Path = self._path(key)
        if not file_path.exists():
            return None
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        # 書き込み途中で壊れないよう一時ファイルから置き換える
        file_path: Path = self._path(key)
        tmp_path: Path = file_path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        tmp_path.replace(file_path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class HistoryStorageService:
    """テスト履歴（新しい順）を保存・読み込むサービスクラス"""

    def __init__(self, store: KeyValueStore) -> None:
        """
        初期化処理

        Args:
            store: 履歴を保存するキーバリューストア
        """
        self.store = store

    def _write_history(self, history: List[TestAttempt]) -> None:
        payload: List[Dict[str, Any]] = [attempt.to_storage_dict() for attempt in history]
        try:
            self.store.set(STORAGE_KEY, json.dumps(payload, ensure_ascii=False))
        except OSError as e:
            logger.error("履歴の保存に失敗しました: %s", e)
            raise StorageError(f"履歴の保存に失敗しました: {e}") from e

    def get_history(self) -> List[TestAttempt]:
        """
        テスト履歴を取得

        Returns:
            テスト結果のリスト（新しい順）、保存データがない場合は空リスト
        """
        try:
            data: str | None = self.store.get(STORAGE_KEY)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("履歴の読み込みに失敗しました: %s", e)
            return []
        if not data:
            return []

        try:
            raw_history = json.loads(data)
            return [TestAttempt.model_validate(item) for item in raw_history]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning("履歴データが壊れているため空として扱います: %s", e)
            return []

    def save_attempt(self, attempt: TestAttempt) -> None:
        """
        テスト結果を履歴の先頭に追加して保存

        Args:
            attempt: 保存するテスト結果

        Raises:
            StorageError: 同じIDが既に存在する場合、または書き込みに失敗した場合
        """
        history: List[TestAttempt] = self.get_history()
        if any(existing.id == attempt.id for existing in history):
            raise StorageError(f"同じIDのテスト結果が既に存在します: {attempt.id}")
        history.insert(0, attempt)
        self._write_history(history)
        logger.info("テスト結果を保存しました: %s (%s)", attempt.id, attempt.level.value)

    def get_attempt_by_id(self, attempt_id: str) -> TestAttempt | None:
        """
        IDでテスト結果を取得

        Args:
            attempt_id: テストID

        Returns:
            テスト結果、存在しない場合はNone
        """
        return next((a for a in self.get_history() if a.id == attempt_id), None)

    def delete_attempt(self, attempt_id: str) -> bool:
        """
        テスト結果を1件削除

        Args:
            attempt_id: テストID

        Returns:
            削除した場合True、存在しない場合False
        """
        history: List[TestAttempt] = self.get_history()
        remaining: List[TestAttempt] = [a for a in history if a.id != attempt_id]
        if len(remaining) == len(history):
            return False
        self._write_history(remaining)
        return True

    def clear_history(self) -> None:
        """すべての履歴を削除"""
        try:
            self.store.remove(STORAGE_KEY)
        except OSError as e:
            raise StorageError(f"履歴の削除に失敗しました: {e}") from e

    def next_attempt_id(self, now: datetime) -> str:
        """
        時刻から一意なテストIDを生成

        Args:
            now: 基準となる日時

        Returns:
            ミリ秒単位のタイムスタンプ文字列（重複する場合は1ずつ増やす）
        """
        existing_ids = {attempt.id for attempt in self.get_history()}
        candidate: int = int(now.timestamp() * 1000)
        while str(candidate) in existing_ids:
            candidate += 1
        return str(candidate)
