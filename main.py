"""
SpeakLevel AI - メインエントリーポイント
デスクトップアプリとして起動、または --web でブラウザから利用する
"""
import logging
import sys
from pathlib import Path

import flet as ft

from speaklevel.config import APP_DATA_DIR, LOG_FILE, AppSettings, load_settings
from speaklevel.gui.api_key_dialog import ApiKeyDialog
from speaklevel.gui.history_window import HistoryWindow
from speaklevel.gui.home_window import HomeWindow
from speaklevel.gui.page_storage import ClientStorageKeyValueStore, PageSessionKeyValueStore
from speaklevel.gui.result_window import ResultWindow
from speaklevel.gui.test_window import TestWindow
from speaklevel.models.schemas import TestAttempt
from speaklevel.services.api_check_service import APICheckService
from speaklevel.services.audio_service import AudioService
from speaklevel.services.credential_service import CredentialService
from speaklevel.services.openai_service import OpenAIService
from speaklevel.services.storage_service import HistoryStorageService, JsonFileKeyValueStore, KeyValueStore
from speaklevel.services.test_session import SessionOptions, TestSession

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """コンソールとログファイルへの出力を設定"""
    APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(LOG_FILE, encoding="utf-8"),
        ],
    )


# .envファイルの読み込み（実行ファイルのディレクトリまたはカレントディレクトリから）
if getattr(sys, "frozen", False):
    # PyInstallerでビルドされた場合
    application_path = Path(sys.executable).parent
else:
    application_path = Path(__file__).parent

SETTINGS: AppSettings = load_settings(application_path / ".env")


class App:
    """アプリケーションのメインクラス"""

    def __init__(self, page: ft.Page, settings: AppSettings) -> None:
        """
        初期化処理

        Args:
            page: Fletのページオブジェクト
            settings: アプリケーション設定
        """
        self.page = page
        self.settings = settings
        self.page.title = "SpeakLevel AI"
        self.page.theme_mode = ft.ThemeMode.LIGHT
        self.page.bgcolor = ft.colors.GREY_50

        # Webモードではブラウザのストレージ、デスクトップではローカルファイルに保存
        history_store: KeyValueStore = (
            ClientStorageKeyValueStore(page) if page.web else JsonFileKeyValueStore()
        )
        self.storage_service = HistoryStorageService(history_store)
        self.credentials = CredentialService(
            api_key=settings.openai_api_key,
            session_store=PageSessionKeyValueStore(page),
        )
        self.api_check_service = APICheckService()
        self.openai_service = OpenAIService(self.credentials, model=settings.openai_model)
        self.audio_service = AudioService(sample_rate=settings.sample_rate)
        self.api_key_dialog = ApiKeyDialog(page, self.credentials)
        self.home_window: HomeWindow | None = None
        self.credentials.add_listener(self._on_credential_changed)

        self.show_home()

    def show_home(self) -> None:
        """ホーム画面を表示"""
        self.page.clean()
        home_window = HomeWindow(
            self.page,
            self.credentials,
            self.api_check_service,
            on_start_callback=self.show_test,
            on_history_callback=self.show_history,
        )
        home_window.build()
        self.home_window = home_window

    def show_test(self) -> None:
        """テスト画面を表示"""
        self.home_window = None
        self.page.clean()
        session = TestSession(
            recorder=self.audio_service,
            evaluator=self.openai_service,
            storage=self.storage_service,
            credentials=self.credentials,
            dialog=self.api_key_dialog,
            api_checker=self.api_check_service,
            options=SessionOptions(
                reconcile_credential=self.settings.reconcile_credential,
                auto_advance_delay=self.settings.auto_advance_delay,
            ),
        )
        test_window = TestWindow(
            self.page,
            session,
            on_complete_callback=self.show_result,
            on_exit_callback=self.show_home,
        )
        test_window.build()

    def show_result(self, attempt: TestAttempt | None = None, attempt_id: str | None = None) -> None:
        """結果画面を表示"""
        self.home_window = None
        if attempt is None and attempt_id is not None:
            attempt = self.storage_service.get_attempt_by_id(attempt_id)
        self.page.clean()
        result_window = ResultWindow(
            self.page,
            attempt,
            on_retry_callback=self.show_test,
            on_history_callback=self.show_history,
        )
        result_window.build()

    def show_history(self) -> None:
        """履歴画面を表示"""
        self.home_window = None
        history_window = HistoryWindow(
            self.page,
            self.storage_service,
            on_open_callback=lambda attempt_id: self.show_result(attempt_id=attempt_id),
            on_start_callback=self.show_test,
        )
        history_window.build()

    def _on_credential_changed(self, api_key: str | None) -> None:
        """APIキーが変更されたらホーム画面の接続状態を再確認"""
        logger.info("APIキーが変更されました")
        if self.home_window is not None:
            self.page.run_task(self.home_window.check_api)


def main(page: ft.Page) -> None:
    """アプリケーションの起動"""
    App(page, SETTINGS)


if __name__ == "__main__":
    setup_logging()
    view = ft.AppView.WEB_BROWSER if "--web" in sys.argv else ft.AppView.FLET_APP
    logger.info("SpeakLevel AI を起動します (view=%s)", view)
    ft.app(target=main, view=view)
