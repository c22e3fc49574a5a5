"""
データモデル（スキーマ定義）
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# 評価失敗を表す予約済みの書き起こしテキスト
FAILED_TRANSCRIPTION = "[분석 실패]"


class CEFRLevel(str, Enum):
    """CEFRレベル（A1 < A2 < B1 < B2 < C1 < C2）"""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


class Sentence(BaseModel):
    """読み上げ用の文章"""

    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    difficulty: int = Field(ge=1, le=5)  # 難易度（1〜5）


class EvaluationResult(BaseModel):
    """1文ごとの評価結果のデータモデル"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    accuracy: float = Field(ge=0, le=100)  # 正確性スコア
    intonation: float = Field(ge=0, le=100)  # 抑揚・リズムスコア
    fluency: float = Field(ge=0, le=100)  # 流暢さスコア
    transcribed: str  # 実際に話された内容の書き起こし
    feedback: str  # 韓国語のフィードバック

    @property
    def is_failure_marker(self) -> bool:
        """予約済みの失敗マーカーを持つかどうか"""
        return self.transcribed == FAILED_TRANSCRIPTION


class EvaluationErrorKind(str, Enum):
    """評価失敗の分類"""

    CREDENTIAL_MISSING = "credential_missing"
    CREDENTIAL_INVALID = "credential_invalid"
    BACKEND_NOT_PROVISIONED = "backend_not_provisioned"
    GENERIC = "generic"


class EvaluationFailure(BaseModel):
    """分類済みの評価失敗"""

    model_config = ConfigDict(frozen=True)

    kind: EvaluationErrorKind
    message: str  # ユーザーに表示するメッセージ（韓国語）

    @property
    def is_credential_error(self) -> bool:
        return self.kind in (
            EvaluationErrorKind.CREDENTIAL_MISSING,
            EvaluationErrorKind.CREDENTIAL_INVALID,
        )

    def to_result(self) -> EvaluationResult:
        """表示用のセンチネル評価結果に変換"""
        return EvaluationResult(
            accuracy=0,
            intonation=0,
            fluency=0,
            transcribed=FAILED_TRANSCRIPTION,
            feedback=self.message,
        )


EvaluationOutcome = EvaluationResult | EvaluationFailure


class AttemptDetails(BaseModel):
    """項目別の平均スコア"""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    avg_accuracy: float
    avg_intonation: float
    avg_fluency: float


class TestAttempt(BaseModel):
    """テスト1回分の結果のデータモデル"""

    # pytestがテストクラスとして収集しないようにする
    __test__ = False

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    date: datetime
    overall_score: float
    level: CEFRLevel
    details: AttemptDetails
    individual_scores: List[EvaluationResult]

    def to_storage_dict(self) -> dict:
        """保存用のJSON互換辞書（camelCaseキー）に変換"""
        return self.model_dump(mode="json", by_alias=True)


class LevelCriteria(BaseModel):
    """レベルごとの表示情報"""

    model_config = ConfigDict(frozen=True)

    label: str
    description: str
    color: str


class AudioArtifact(BaseModel):
    """録音された音声データ（エンコード済み）"""

    model_config = ConfigDict(frozen=True)

    data: bytes = b""  # 音声データ（バイト列）
    mime_type: str = "audio/wav"
    sample_rate: int = 16000

    @property
    def is_empty(self) -> bool:
        return len(self.data) == 0

    @property
    def audio_format(self) -> str:
        """APIに渡す音声フォーマット名（wav, mp3など）"""
        return self.mime_type.split("/")[-1]
