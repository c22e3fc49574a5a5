"""
評価サービス
1文ごとの評価結果を集計してテスト結果（CEFRレベル）を算出する
"""
from datetime import datetime
from typing import Dict, List, Sequence, Tuple

from speaklevel.models.schemas import (
    AttemptDetails,
    CEFRLevel,
    EvaluationResult,
    LevelCriteria,
    TestAttempt,
)


# 下限値の降順に並べたしきい値表（スコアが下限値を「超える」場合にそのレベル）
LEVEL_THRESHOLDS: Tuple[Tuple[float, CEFRLevel], ...] = (
    (90, CEFRLevel.C2),
    (75, CEFRLevel.C1),
    (55, CEFRLevel.B2),
    (35, CEFRLevel.B1),
    (15, CEFRLevel.A2),
)

LEVEL_CRITERIA: Dict[CEFRLevel, LevelCriteria] = {
    CEFRLevel.A1: LevelCriteria(
        label="Beginner",
        description="기초적인 표현을 이해하고 간단한 문장을 따라 말할 수 있습니다.",
        color="#94A3B8",
    ),
    CEFRLevel.A2: LevelCriteria(
        label="Elementary",
        description="일상적인 표현을 전달할 수 있지만 발음과 리듬에 더 연습이 필요합니다.",
        color="#22C55E",
    ),
    CEFRLevel.B1: LevelCriteria(
        label="Intermediate",
        description="익숙한 주제에 대해 비교적 명확하게 말할 수 있습니다.",
        color="#14B8A6",
    ),
    CEFRLevel.B2: LevelCriteria(
        label="Upper Intermediate",
        description="자연스러운 속도로 대부분의 문장을 정확하게 말할 수 있습니다.",
        color="#3B82F6",
    ),
    CEFRLevel.C1: LevelCriteria(
        label="Advanced",
        description="복잡한 문장도 유창하고 자연스러운 억양으로 말할 수 있습니다.",
        color="#6366F1",
    ),
    CEFRLevel.C2: LevelCriteria(
        label="Proficient",
        description="원어민에 가까운 정확성과 억양, 유창성을 갖추고 있습니다.",
        color="#A855F7",
    ),
}


def determine_level(overall_score: float) -> CEFRLevel:
    """
    総合スコアからCEFRレベルを判定

    Args:
        overall_score: 総合スコア（0〜100）

    Returns:
        下限値を超えた最も高いレベル（どれも超えない場合はA1）
    """
    for lower_bound, level in LEVEL_THRESHOLDS:
        if overall_score > lower_bound:
            return level
    return CEFRLevel.A1


def level_criteria(level: CEFRLevel) -> LevelCriteria:
    """レベルの表示情報を取得"""
    return LEVEL_CRITERIA[level]


class EvaluationService:
    """評価結果を統合的に集計するサービスクラス"""

    def calculate_details(self, results: Sequence[EvaluationResult]) -> AttemptDetails:
        """
        項目別の平均スコアを計算

        Args:
            results: 1文ごとの評価結果

        Returns:
            項目別平均（AttemptDetailsオブジェクト）
        """
        if not results:
            raise ValueError("評価結果が空のため平均を計算できません")

        count: int = len(results)
        return AttemptDetails(
            avg_accuracy=sum(r.accuracy for r in results) / count,
            avg_intonation=sum(r.intonation for r in results) / count,
            avg_fluency=sum(r.fluency for r in results) / count,
        )

    def build_attempt(
        self,
        results: Sequence[EvaluationResult],
        attempt_id: str,
        date: datetime,
    ) -> TestAttempt:
        """
        テスト結果を作成

        Args:
            results: 1文ごとの評価結果（出題順）
            attempt_id: テストID
            date: 完了日時

        Returns:
            テスト結果（TestAttemptオブジェクト）
        """
        details: AttemptDetails = self.calculate_details(results)

        # 総合スコアの計算（各項目平均の平均）
        overall_score: float = (
            details.avg_accuracy + details.avg_intonation + details.avg_fluency
        ) / 3

        individual_scores: List[EvaluationResult] = list(results)
        return TestAttempt(
            id=attempt_id,
            date=date,
            overall_score=overall_score,
            level=determine_level(overall_score),
            details=details,
            individual_scores=individual_scores,
        )
