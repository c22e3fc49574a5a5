"""
履歴画面のGUIコンポーネント
"""
import logging
from typing import Callable, List

import flet as ft

from speaklevel.models.exceptions import StorageError
from speaklevel.models.schemas import TestAttempt
from speaklevel.services.evaluation_service import level_criteria
from speaklevel.services.storage_service import HistoryStorageService

logger = logging.getLogger(__name__)


class HistoryWindow:
    """履歴画面のウィンドウクラス"""

    def __init__(
        self,
        page: ft.Page,
        storage_service: HistoryStorageService,
        on_open_callback: Callable[[str], None] | None = None,
        on_start_callback: Callable[[], None] | None = None,
    ) -> None:
        """
        初期化処理

        Args:
            page: Fletのページオブジェクト
            storage_service: 履歴ストレージ
            on_open_callback: 履歴項目がクリックされたときのコールバック（テストIDを受け取る）
            on_start_callback: テスト開始ボタンが押されたときのコールバック
        """
        self.page = page
        self.storage_service = storage_service
        self.on_open_callback = on_open_callback
        self.on_start_callback = on_start_callback
        self.history: List[TestAttempt] = []
        self.confirm_dialog: ft.AlertDialog | None = None
        self.summary_text: ft.Text | None = None

    def build(self) -> None:
        """ウィジェットの構築"""
        self.page.clean()
        self.history = self.storage_service.get_history()

        self.summary_text = ft.Text(
            f"총 {len(self.history)}개의 테스트 결과가 있습니다.", size=14, color=ft.colors.GREY_600
        )
        header_controls: List[ft.Control] = [
            ft.Column([ft.Text("테스트 기록", size=32, weight=ft.FontWeight.BOLD), self.summary_text])
        ]
        if self.history:
            header_controls.append(
                ft.OutlinedButton("기록 삭제", icon=ft.icons.DELETE, on_click=self._on_clear_clicked)
            )

        if self.history:
            body: ft.Control = ft.Column([self._create_history_item(a) for a in self.history], spacing=10)
        else:
            body = ft.Column(
                [
                    ft.Text("아직 테스트 기록이 없습니다.", size=16, color=ft.colors.GREY_600),
                    ft.ElevatedButton("테스트 시작하기", on_click=self._on_start_clicked),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            )

        self.page.add(
            ft.Container(
                content=ft.Column(
                    [
                        ft.Row(header_controls, alignment=ft.MainAxisAlignment.SPACE_BETWEEN, width=760),
                        ft.Container(height=20),
                        body,
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    scroll=ft.ScrollMode.AUTO,
                ),
                padding=40,
                expand=True,
            )
        )
        self.page.update()

    def _create_history_item(self, attempt: TestAttempt) -> ft.Container:
        """履歴1件分の表示を作成"""
        criteria = level_criteria(attempt.level)
        local_date = attempt.date.astimezone()
        return ft.Container(
            content=ft.Row(
                [
                    ft.Container(
                        content=ft.Text(attempt.level.value, size=20, weight=ft.FontWeight.BOLD, color=ft.colors.WHITE),
                        width=56,
                        height=56,
                        border_radius=12,
                        bgcolor=criteria.color,
                        alignment=ft.alignment.center,
                    ),
                    ft.Column(
                        [
                            ft.Text(f"{criteria.label} Level", size=18, weight=ft.FontWeight.BOLD),
                            ft.Text(local_date.strftime("%Y-%m-%d · %H:%M"), size=12, color=ft.colors.GREY_600),
                        ],
                        expand=True,
                    ),
                    ft.Text(f"{attempt.overall_score:.0f}", size=24, weight=ft.FontWeight.BOLD, color=ft.colors.BLUE_600),
                    ft.IconButton(
                        icon=ft.icons.DELETE_OUTLINE,
                        icon_color=ft.colors.GREY_500,
                        tooltip="삭제",
                        on_click=lambda e, attempt_id=attempt.id: self._on_delete_clicked(attempt_id),
                    ),
                ],
            ),
            width=760,
            padding=15,
            border=ft.border.all(1, ft.colors.GREY_200),
            border_radius=16,
            bgcolor=ft.colors.WHITE,
            on_click=lambda e, attempt_id=attempt.id: self._on_item_clicked(attempt_id),
        )

    def _on_item_clicked(self, attempt_id: str) -> None:
        if self.on_open_callback:
            self.on_open_callback(attempt_id)

    def _on_delete_clicked(self, attempt_id: str) -> None:
        """履歴を1件削除"""
        try:
            self.storage_service.delete_attempt(attempt_id)
        except StorageError as ex:
            logger.error("履歴の削除に失敗しました: %s", ex)
            self._show_error("기록을 삭제하지 못했습니다.")
            return
        self.build()

    def _show_error(self, message: str) -> None:
        self.page.snack_bar = ft.SnackBar(content=ft.Text(message), bgcolor=ft.colors.RED_700)
        self.page.snack_bar.open = True
        self.page.update()

    def _on_clear_clicked(self, e: ft.ControlEvent) -> None:
        """削除ボタンがクリックされたときの処理（確認ダイアログを表示）"""
        self.confirm_dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text("기록 삭제"),
            content=ft.Text("모든 기록을 삭제하시겠습니까?"),
            actions=[
                ft.TextButton("취소", on_click=self._on_clear_cancelled),
                ft.ElevatedButton("삭제", on_click=self._on_clear_confirmed),
            ],
        )
        self.page.open(self.confirm_dialog)

    def _on_clear_cancelled(self, e: ft.ControlEvent) -> None:
        self.page.close(self.confirm_dialog)

    def _on_clear_confirmed(self, e: ft.ControlEvent) -> None:
        """履歴をすべて削除"""
        self.page.close(self.confirm_dialog)
        try:
            self.storage_service.clear_history()
        except StorageError as ex:
            logger.error("履歴の削除に失敗しました: %s", ex)
            self._show_error("기록을 삭제하지 못했습니다.")
            return
        self.build()

    def _on_start_clicked(self, e: ft.ControlEvent) -> None:
        if self.on_start_callback:
            self.on_start_callback()
