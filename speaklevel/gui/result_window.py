"""
結果画面のGUIコンポーネント
"""

import flet as ft
from typing import Callable, List, Tuple

from speaklevel.models.schemas import EvaluationResult, LevelCriteria, TestAttempt
from speaklevel.services.evaluation_service import level_criteria

# 画面に表示する文章ごとのフィードバック数
FEEDBACK_PREVIEW_COUNT = 5


class ResultWindow:
    """結果画面のウィンドウクラス"""

    def __init__(
        self,
        page: ft.Page,
        attempt: TestAttempt | None,
        on_retry_callback: Callable[[], None] | None = None,
        on_history_callback: Callable[[], None] | None = None,
    ) -> None:
        """
        初期化処理

        Args:
            page: Fletのページオブジェクト
            attempt: 表示するテスト結果（見つからない場合はNone）
            on_retry_callback: 再テストボタンが押されたときのコールバック
            on_history_callback: 履歴ボタンが押されたときのコールバック
        """
        self.page = page
        self.attempt = attempt
        self.on_retry_callback = on_retry_callback
        self.on_history_callback = on_history_callback

    def build(self) -> None:
        """ウィジェットの構築"""
        if self.attempt is None:
            self._build_not_found()
            return

        criteria: LevelCriteria = level_criteria(self.attempt.level)

        # レベル表示
        level_badge = ft.Container(
            content=ft.Text(self.attempt.level.value, size=48, weight=ft.FontWeight.BOLD, color=ft.colors.WHITE),
            width=128,
            height=128,
            border_radius=64,
            bgcolor=criteria.color,
            alignment=ft.alignment.center,
        )

        header = ft.Column(
            [
                level_badge,
                ft.Text(f"{criteria.label} Level", size=28, weight=ft.FontWeight.BOLD),
                ft.Text(criteria.description, size=16, color=ft.colors.GREY_700, text_align=ft.TextAlign.CENTER),
                ft.Text(f"종합 점수 {self.attempt.overall_score:.1f}", size=20, weight=ft.FontWeight.BOLD),
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        )

        retry_button = ft.ElevatedButton(
            "다시 테스트하기",
            on_click=self._on_retry_clicked,
            width=200,
            height=50,
            bgcolor=ft.colors.BLUE_600,
            color=ft.colors.WHITE,
        )
        history_button = ft.OutlinedButton(
            "기록 보러가기",
            on_click=self._on_history_clicked,
            width=200,
            height=50,
        )

        content = ft.Container(
            content=ft.Column(
                [
                    ft.Container(height=20),
                    header,
                    ft.Container(height=30),
                    ft.Row(
                        [
                            self._create_score_chart(),
                            ft.Container(width=40),
                            self._create_score_details(),
                        ],
                        alignment=ft.MainAxisAlignment.CENTER,
                        vertical_alignment=ft.CrossAxisAlignment.START,
                        wrap=True,
                    ),
                    ft.Container(height=30),
                    self._create_feedback_section(),
                    ft.Container(height=30),
                    ft.Row(
                        [retry_button, ft.Container(width=20), history_button],
                        alignment=ft.MainAxisAlignment.CENTER,
                    ),
                    ft.Container(height=20),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                scroll=ft.ScrollMode.AUTO,
            ),
            padding=40,
            expand=True,
            bgcolor=ft.colors.WHITE,
        )

        self.page.add(content)
        self.page.update()

    def _build_not_found(self) -> None:
        """結果が見つからない場合の画面"""
        self.page.add(
            ft.Container(
                content=ft.Column(
                    [
                        ft.Text("결과를 찾을 수 없습니다.", size=24, weight=ft.FontWeight.BOLD),
                        ft.ElevatedButton("기록 보러가기", on_click=self._on_history_clicked),
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                ),
                padding=40,
                alignment=ft.alignment.center,
                expand=True,
            )
        )
        self.page.update()

    def _score_items(self) -> List[Tuple[str, float, str, str]]:
        details = self.attempt.details
        return [
            ("Accuracy", details.avg_accuracy, ft.colors.BLUE_600, "정확한 발음 구사력"),
            ("Intonation", details.avg_intonation, ft.colors.INDIGO_600, "억양 및 리듬감"),
            ("Fluency", details.avg_fluency, ft.colors.CYAN_600, "말하기의 유창성 및 속도"),
        ]

    def _create_score_chart(self) -> ft.Container:
        """項目別スコアの棒グラフを作成（FletにRadarChartがないので棒グラフで代用）"""
        bar_groups = []
        for i, (label, score, color, _) in enumerate(self._score_items()):
            bar_groups.append(
                ft.BarChartGroup(
                    x=i,
                    bar_rods=[
                        ft.BarChartRod(
                            from_y=0,
                            to_y=score,
                            width=40,
                            color=color,
                            tooltip=f"{label}: {score:.1f}",
                            border_radius=ft.border_radius.all(5),
                        )
                    ],
                )
            )

        chart = ft.BarChart(
            bar_groups=bar_groups,
            border=ft.border.all(1, ft.colors.GREY_200),
            bottom_axis=ft.ChartAxis(
                labels=[
                    ft.ChartAxisLabel(value=i, label=ft.Text(label))
                    for i, (label, _, _, _) in enumerate(self._score_items())
                ],
                labels_size=40,
            ),
            left_axis=ft.ChartAxis(labels_size=40, title=ft.Text("Score")),
            horizontal_grid_lines=ft.ChartGridLines(color=ft.colors.GREY_300, width=1, dash_pattern=[3, 3]),
            max_y=100,
            interactive=True,
            expand=True,
        )

        return ft.Container(
            content=chart,
            width=400,
            height=300,
            padding=20,
            border=ft.border.all(1, ft.colors.GREY_300),
            border_radius=10,
            bgcolor=ft.colors.WHITE,
        )

    def _create_score_details(self) -> ft.Container:
        """スコア詳細表示を作成"""
        rows = []
        for label, score, color, description in self._score_items():
            rows.append(
                ft.Column(
                    [
                        ft.Row(
                            [
                                ft.Text(label, size=16, weight=ft.FontWeight.BOLD),
                                ft.Text(f"{score:.1f}", size=16, weight=ft.FontWeight.BOLD, color=color),
                            ],
                            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                        ),
                        ft.Text(description, size=12, color=ft.colors.GREY_600),
                        ft.ProgressBar(value=score / 100, color=color, bgcolor=ft.colors.GREY_200),
                    ],
                    spacing=4,
                )
            )

        return ft.Container(
            content=ft.Column(rows, spacing=20),
            width=320,
            padding=20,
            border=ft.border.all(1, ft.colors.GREY_300),
            border_radius=10,
            bgcolor=ft.colors.WHITE,
        )

    def _create_feedback_section(self) -> ft.Container:
        """文章ごとのフィードバック（先頭の数件）を作成"""
        scores: List[EvaluationResult] = self.attempt.individual_scores
        items = []
        for i, score in enumerate(scores[:FEEDBACK_PREVIEW_COUNT]):
            items.append(
                ft.Container(
                    content=ft.Column(
                        [
                            ft.Text(f"Sentence {i + 1}", size=12, weight=ft.FontWeight.BOLD, color=ft.colors.BLUE_600),
                            ft.Text(f"\"{score.transcribed}\"", size=14, italic=True),
                            ft.Text(score.feedback, size=14, color=ft.colors.GREY_800),
                        ],
                        spacing=4,
                    ),
                    padding=15,
                    border=ft.border.all(1, ft.colors.GREY_200),
                    border_radius=10,
                )
            )
        if len(scores) > FEEDBACK_PREVIEW_COUNT:
            items.append(
                ft.Text(
                    f"외 {len(scores) - FEEDBACK_PREVIEW_COUNT}개의 문장 분석 결과가 있습니다.",
                    size=12,
                    color=ft.colors.GREY_500,
                )
            )

        return ft.Container(
            content=ft.Column(
                [ft.Text("AI 상세 피드백", size=22, weight=ft.FontWeight.BOLD)] + items,
                spacing=10,
            ),
            width=760,
            padding=20,
        )

    def _on_retry_clicked(self, e: ft.ControlEvent) -> None:
        """再テストボタンがクリックされたときの処理"""
        if self.on_retry_callback:
            self.on_retry_callback()

    def _on_history_clicked(self, e: ft.ControlEvent) -> None:
        """履歴ボタンがクリックされたときの処理"""
        if self.on_history_callback:
            self.on_history_callback()
