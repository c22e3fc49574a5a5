"""
API接続チェックサービス
選択されたAPIキーでOpenAI APIに接続できるかを確認する
"""
import logging
from enum import Enum

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ApiStatus(str, Enum):
    """API接続状態"""

    AVAILABLE = "available"  # 利用可能
    MISSING = "missing"  # キー未設定
    INVALID = "invalid"  # キーが無効
    UNAVAILABLE = "unavailable"  # 一時的に利用できない


class ApiCheckResult(BaseModel):
    """API接続チェックの結果"""

    name: str = "OpenAI API"
    status: ApiStatus
    message: str


class APICheckService:
    """API接続状態をチェックするサービスクラス"""

    async def check_openai_api(self, api_key: str | None) -> ApiCheckResult:
        """
        OpenAI APIの接続状態をチェック

        Args:
            api_key: 確認するAPIキー

        Returns:
            API接続チェックの結果
        """
        if not api_key:
            return ApiCheckResult(status=ApiStatus.MISSING, message="API 키가 설정되지 않았습니다.")

        client = AsyncOpenAI(api_key=api_key, max_retries=0)
        try:
            # 簡単なリクエストで接続確認（models.list()を呼び出して確認）
            await client.models.list()
            return ApiCheckResult(status=ApiStatus.AVAILABLE, message="API 키가 유효합니다.")
        except openai.AuthenticationError as e:
            logger.warning("APIキーが無効です: %s", e)
            return ApiCheckResult(status=ApiStatus.INVALID, message="API 키가 유효하지 않습니다.")
        except openai.APIError as e:
            logger.warning("API接続エラー: %s", e)
            return ApiCheckResult(status=ApiStatus.UNAVAILABLE, message=f"API 연결 오류: {e}")
        finally:
            await client.close()
