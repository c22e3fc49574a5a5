"""
アプリケーション設定
"""
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel


def get_app_data_dir() -> Path:
    """
    アプリケーションのデータディレクトリを取得

    Returns:
        アプリケーションデータディレクトリのパス
    """
    if sys.platform == "win32":
        # Windowsの場合、AppData\Local\SpeakLevelAIを使用
        app_data: str | None = os.getenv("LOCALAPPDATA")
        if app_data:
            app_dir: Path = Path(app_data) / "SpeakLevelAI"
            app_dir.mkdir(exist_ok=True)
            return app_dir
    elif sys.platform == "darwin":
        # macOSの場合、~/Library/Application Support/SpeakLevelAIを使用
        app_support: Path = Path.home() / "Library" / "Application Support" / "SpeakLevelAI"
        app_support.mkdir(parents=True, exist_ok=True)
        return app_support
    # その他のOSまたはフォールバック
    return Path.home() / ".speaklevel_ai"


def get_log_file() -> Path:
    """
    ログファイルのパスを取得

    Returns:
        ログファイルのパス
    """
    return get_app_data_dir() / "app.log"


def _env_flag(name: str, default: bool) -> bool:
    value: str | None = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class AppSettings(BaseModel):
    """環境変数から読み込むアプリケーション設定"""

    openai_api_key: str | None = None  # 起動時に静的に与えられたAPIキー
    openai_model: str = "gpt-4o-audio-preview"  # 音声入力に対応したモデル
    auto_advance_delay: float = 0.8  # 次の文章へ進むまでの演出用ディレイ（秒）
    reconcile_credential: bool = True  # キー選択後に接続確認を行うか
    sample_rate: int = 16000  # 録音サンプルレート

    @classmethod
    def from_env(cls) -> "AppSettings":
        """
        環境変数から設定を構築

        OPENAI_API_KEYまたはOPENAI_APIのどちらかをサポートする

        Returns:
            AppSettingsオブジェクト
        """
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_API") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-audio-preview"),
            auto_advance_delay=float(os.getenv("SPEAKLEVEL_AUTO_ADVANCE_DELAY", "0.8")),
            reconcile_credential=_env_flag("SPEAKLEVEL_RECONCILE_CREDENTIAL", True),
            sample_rate=int(os.getenv("SPEAKLEVEL_SAMPLE_RATE", "16000")),
        )


def load_settings(env_path: Path | None = None) -> AppSettings:
    """
    .envファイルを読み込んでから設定を返す

    Args:
        env_path: .envファイルのパス（指定しない場合はカレントディレクトリから探す）

    Returns:
        AppSettingsオブジェクト
    """
    if env_path is not None and env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()
    return AppSettings.from_env()


# アプリケーションデータディレクトリ
APP_DATA_DIR = get_app_data_dir()

# ログファイル
LOG_FILE = get_log_file()
