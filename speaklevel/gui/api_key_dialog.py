"""
APIキー選択ダイアログ
"""
import asyncio

import flet as ft

from speaklevel.services.credential_service import CredentialDialog, CredentialService


class ApiKeyDialog(CredentialDialog):
    """OpenAI APIキーを入力するダイアログ"""

    def __init__(self, page: ft.Page, credentials: CredentialService) -> None:
        """
        初期化処理

        Args:
            page: Fletのページオブジェクト
            credentials: 入力されたキーを保存するサービス
        """
        self.page = page
        self.credentials = credentials
        self.key_field: ft.TextField | None = None
        self.dialog: ft.AlertDialog | None = None
        self._closed: asyncio.Event | None = None

    def has_selected_credential(self) -> bool:
        return self.credentials.has_api_key()

    def _build_dialog(self) -> ft.AlertDialog:
        self.key_field = ft.TextField(
            label="OpenAI API Key",
            password=True,
            can_reveal_password=True,
            value=self.credentials.get_api_key() or "",
            width=400,
        )
        return ft.AlertDialog(
            modal=True,
            title=ft.Text("API 키 설정"),
            content=ft.Column(
                [
                    ft.Text("음성 분석에 사용할 OpenAI API 키를 입력해주세요.", size=14),
                    ft.Text("키는 이 세션 동안 메모리에만 보관됩니다.", size=12, color=ft.colors.GREY_600),
                    self.key_field,
                ],
                tight=True,
            ),
            actions=[
                ft.TextButton("취소", on_click=self._on_cancel_clicked),
                ft.ElevatedButton("저장", on_click=self._on_save_clicked),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )

    async def open_selector(self) -> None:
        """ダイアログを開き、閉じられるまで待つ"""
        self._closed = asyncio.Event()
        self.dialog = self._build_dialog()
        self.page.open(self.dialog)
        await self._closed.wait()

    def _close(self) -> None:
        if self.dialog is not None:
            self.page.close(self.dialog)
        if self._closed is not None:
            self._closed.set()

    async def _on_save_clicked(self, e: ft.ControlEvent) -> None:
        """保存ボタンがクリックされたときの処理"""
        if self.key_field is not None and self.key_field.value:
            self.credentials.set_api_key(self.key_field.value)
        self._close()

    async def _on_cancel_clicked(self, e: ft.ControlEvent) -> None:
        """キャンセルボタンがクリックされたときの処理"""
        self._close()
