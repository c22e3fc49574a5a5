"""
ホーム画面のGUIコンポーネント
"""
import flet as ft
from typing import Callable

from speaklevel.services.api_check_service import APICheckService, ApiCheckResult, ApiStatus
from speaklevel.services.credential_service import CredentialService


class HomeWindow:
    """ホーム画面のウィンドウクラス"""

    def __init__(
        self,
        page: ft.Page,
        credentials: CredentialService,
        api_check_service: APICheckService,
        on_start_callback: Callable[[], None] | None = None,
        on_history_callback: Callable[[], None] | None = None,
    ) -> None:
        """
        初期化処理

        Args:
            page: Fletのページオブジェクト
            credentials: APIキーを提供するサービス
            api_check_service: API接続チェックサービス
            on_start_callback: 開始ボタンがクリックされたときに呼ばれるコールバック関数
            on_history_callback: 履歴ボタンがクリックされたときに呼ばれるコールバック関数
        """
        self.page = page
        self.credentials = credentials
        self.api_check_service = api_check_service
        self.on_start_callback = on_start_callback
        self.on_history_callback = on_history_callback

        # UIコンポーネント
        self.api_status_text: ft.Text | None = None

    def build(self) -> None:
        """ウィジェットの構築"""
        # タイトル
        title = ft.Text(
            "SpeakLevel AI",
            size=36,
            weight=ft.FontWeight.BOLD,
            text_align=ft.TextAlign.CENTER,
            color=ft.colors.BLUE_700,
        )

        # 説明文
        description = ft.Text(
            "SpeakLevel AI는 음성 분석 기술을 사용하여 발음, 억양, 유창성을 평가합니다.\n"
            "50단계의 문장 테스트를 통해 CEFR 기준의 레벨을 확인해 보세요.",
            size=16,
            text_align=ft.TextAlign.CENTER,
            color=ft.colors.BLACK,
        )

        features = ft.Row(
            [
                self._create_feature_card("🎙️", "실시간 음성 분석", "읽은 문장을 AI가 텍스트로 변환하여 분석합니다."),
                self._create_feature_card("📊", "상세 피드백", "발음, 억양, 속도 등 항목별로 개선점을 알려줍니다."),
                self._create_feature_card("🏅", "CEFR 레벨 매핑", "A1부터 C2까지 국제 표준 레벨로 평가합니다."),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            wrap=True,
        )

        self.api_status_text = ft.Text("API 상태 확인 중...", size=14, color=ft.colors.GREY_600)

        start_button = ft.ElevatedButton(
            "무료 테스트 시작하기",
            on_click=self._on_start_clicked,
            width=240,
            height=50,
            bgcolor=ft.colors.BLUE_600,
            color=ft.colors.WHITE,
        )
        history_button = ft.OutlinedButton(
            "내 기록 확인하기",
            on_click=self._on_history_clicked,
            width=240,
            height=50,
        )

        # レイアウト
        self.page.add(
            ft.Container(
                content=ft.Column(
                    [
                        ft.Container(height=20),
                        title,
                        ft.Container(height=10),
                        description,
                        ft.Container(height=30),
                        ft.Row(
                            [start_button, ft.Container(width=20), history_button],
                            alignment=ft.MainAxisAlignment.CENTER,
                        ),
                        ft.Container(height=10),
                        self.api_status_text,
                        ft.Container(height=30),
                        features,
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    spacing=0,
                    scroll=ft.ScrollMode.AUTO,
                ),
                padding=40,
                expand=True,
            )
        )
        self.page.update()

        # API接続状態の確認
        self.page.run_task(self.check_api)

    def _create_feature_card(self, icon: str, title: str, description: str) -> ft.Container:
        """機能紹介カードの作成"""
        return ft.Container(
            content=ft.Column(
                [
                    ft.Text(icon, size=32),
                    ft.Text(title, size=18, weight=ft.FontWeight.BOLD),
                    ft.Text(description, size=14, color=ft.colors.GREY_700, text_align=ft.TextAlign.CENTER),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            width=260,
            padding=20,
            margin=10,
            border=ft.border.all(1, ft.colors.GREY_300),
            border_radius=10,
            bgcolor=ft.colors.WHITE,
        )

    async def check_api(self) -> ApiCheckResult:
        """API接続状態をチェックして表示を更新"""
        result: ApiCheckResult = await self.api_check_service.check_openai_api(self.credentials.get_api_key())
        if self.api_status_text:
            self.api_status_text.value = f"{result.name}: {result.message}"
            self.api_status_text.color = (
                ft.colors.GREEN_700 if result.status == ApiStatus.AVAILABLE else ft.colors.ORANGE_700
            )
            self.page.update()
        return result

    def _on_start_clicked(self, e: ft.ControlEvent) -> None:
        """開始ボタンがクリックされたときの処理"""
        if self.on_start_callback:
            self.on_start_callback()

    def _on_history_clicked(self, e: ft.ControlEvent) -> None:
        """履歴ボタンがクリックされたときの処理"""
        if self.on_history_callback:
            self.on_history_callback()
