"""
OpenAI APIサービス
録音した音声を目標文章と照らし合わせて評価する
"""

import base64
import logging
from typing import Any, Dict

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from speaklevel.models.schemas import (
    AudioArtifact,
    EvaluationErrorKind,
    EvaluationFailure,
    EvaluationOutcome,
    EvaluationResult,
)
from speaklevel.services.credential_service import CredentialService

logger = logging.getLogger(__name__)


# レスポンスの形式を5項目に固定するJSONスキーマ
EVALUATION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "accuracy": {
            "type": "number",
            "description": "Score from 0 to 100 representing how accurately the user spoke the target sentence.",
        },
        "intonation": {
            "type": "number",
            "description": "Score from 0 to 100 for rhythm and musicality of speech.",
        },
        "fluency": {
            "type": "number",
            "description": "Score from 0 to 100 for smoothness and speed.",
        },
        "transcribed": {
            "type": "string",
            "description": "The transcribed text of what the user actually said.",
        },
        "feedback": {
            "type": "string",
            "description": "A short, helpful feedback sentence in Korean for improvement.",
        },
    },
    "required": ["accuracy", "intonation", "fluency", "transcribed", "feedback"],
    "additionalProperties": False,
}

# ユーザーに表示するエラーメッセージ
ERROR_MESSAGES: Dict[EvaluationErrorKind, str] = {
    EvaluationErrorKind.CREDENTIAL_MISSING: "API 키를 찾을 수 없습니다. 환경 설정을 확인하거나 키를 선택해주세요.",
    EvaluationErrorKind.CREDENTIAL_INVALID: "API 키가 유효하지 않거나 만료되었습니다. 키를 다시 선택해주세요.",
    EvaluationErrorKind.BACKEND_NOT_PROVISIONED: "API 키가 아직 활성화되지 않았습니다. 잠시 후 다시 시도해 주세요.",
    EvaluationErrorKind.GENERIC: "분석 중 오류가 발생했습니다. 잠시 후 다시 시도해 주세요.",
}


def build_prompt(target_text: str) -> str:
    """
    評価用の指示プロンプトを作成

    Args:
        target_text: 読み上げる目標文章

    Returns:
        プロンプト文字列
    """
    return (
        "You are an English speaking level evaluator.\n"
        f'Evaluate this audio based on the target sentence: "{target_text}".\n'
        "Return a JSON object with accuracy, intonation, fluency, transcribed text, "
        "and helpful feedback in Korean. If the audio is silent or unrelated to the "
        "target sentence, give low scores."
    )


class OpenAIService:
    """OpenAI APIを使用して発話を評価するサービスクラス"""

    def __init__(self, credentials: CredentialService, model: str = "gpt-4o-audio-preview") -> None:
        """
        初期化処理

        Args:
            credentials: APIキーを提供するサービス（呼び出しのたびに最新の値を読む）
            model: 使用するモデル名
        """
        self.credentials = credentials
        self.model: str = model
        self.temperature: float = 0.1

    def _failure(self, kind: EvaluationErrorKind) -> EvaluationFailure:
        return EvaluationFailure(kind=kind, message=ERROR_MESSAGES[kind])

    def _classify_error(self, error: Exception) -> EvaluationErrorKind:
        """APIエラーを失敗の種類に分類"""
        if isinstance(error, openai.AuthenticationError):
            return EvaluationErrorKind.CREDENTIAL_INVALID
        if isinstance(error, (openai.PermissionDeniedError, openai.NotFoundError)):
            # 新しいキーやプロジェクトの反映待ちで一時的に発生する
            return EvaluationErrorKind.BACKEND_NOT_PROVISIONED
        return EvaluationErrorKind.GENERIC

    async def analyze_speech(self, audio: AudioArtifact, target_text: str) -> EvaluationOutcome:
        """
        音声を目標文章と照らし合わせて評価

        Args:
            audio: 録音した音声データ
            target_text: 読み上げる目標文章

        Returns:
            評価結果（EvaluationResult）、または分類済みの失敗（EvaluationFailure）
        """
        api_key: str | None = self.credentials.get_api_key()
        if not api_key:
            logger.warning("APIキーが設定されていないため評価をスキップします")
            return self._failure(EvaluationErrorKind.CREDENTIAL_MISSING)

        audio_base64: str = base64.b64encode(audio.data).decode("ascii")
        # リトライは呼び出し側（ユーザーの再録音）に任せる
        client = AsyncOpenAI(api_key=api_key, max_retries=0)
        try:
            response = await client.chat.completions.create(
                model=self.model,
                modalities=["text"],
                temperature=self.temperature,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "input_audio",
                                "input_audio": {"data": audio_base64, "format": audio.audio_format},
                            },
                            {"type": "text", "text": build_prompt(target_text)},
                        ],
                    }
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "speech_evaluation",
                        "strict": True,
                        "schema": EVALUATION_SCHEMA,
                    },
                },
            )
            content: str | None = response.choices[0].message.content if response.choices else None
            if not content:
                logger.error("AI評価のレスポンスが空です")
                return self._failure(EvaluationErrorKind.GENERIC)
            return EvaluationResult.model_validate_json(content.strip())
        except ValidationError as e:
            logger.error("AI評価のレスポンスを解析できません: %s", e)
            return self._failure(EvaluationErrorKind.GENERIC)
        except openai.OpenAIError as e:
            kind: EvaluationErrorKind = self._classify_error(e)
            logger.error("AI評価に失敗しました (%s): %s", kind.value, e)
            return self._failure(kind)
        finally:
            await client.close()
