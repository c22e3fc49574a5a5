"""
OpenAIService（発話評価クライアント）のテスト
"""

import base64
import json
from unittest.mock import AsyncMock, Mock, patch

import httpx
import openai
import pytest

from speaklevel.models.schemas import (
    FAILED_TRANSCRIPTION,
    AudioArtifact,
    EvaluationErrorKind,
    EvaluationFailure,
    EvaluationResult,
)
from speaklevel.services.credential_service import CredentialService
from speaklevel.services.openai_service import EVALUATION_SCHEMA, OpenAIService, build_prompt

TARGET_TEXT = "Hello, my name is Alex."


def status_error(error_class, status_code: int):
    """openaiのHTTPステータスエラーを作成"""
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status_code, request=request)
    return error_class("error", response=response, body=None)


def make_response(content: str | None) -> Mock:
    """モックレスポンスを作成"""
    response = Mock()
    response.choices = [Mock()]
    response.choices[0].message.content = content
    return response


class TestOpenAIService:
    """OpenAIServiceのテストクラス"""

    @pytest.fixture
    def audio(self):
        return AudioArtifact(data=b"RIFF-audio-bytes")

    @pytest.fixture
    def mock_client(self):
        """モックOpenAIクライアント"""
        client = Mock()
        client.chat.completions.create = AsyncMock()
        client.close = AsyncMock()
        return client

    @pytest.fixture
    def service(self):
        return OpenAIService(CredentialService(api_key="test_key"), model="gpt-4o-audio-preview")

    @pytest.mark.asyncio
    async def test_analyze_speech_success(self, service, audio, mock_client):
        """評価成功のテスト"""
        mock_client.chat.completions.create.return_value = make_response(
            json.dumps(
                {
                    "accuracy": 85,
                    "intonation": 72.5,
                    "fluency": 90,
                    "transcribed": "Hello my name is Alex",
                    "feedback": "발음이 정확합니다.",
                }
            )
        )

        with patch("speaklevel.services.openai_service.AsyncOpenAI", return_value=mock_client):
            outcome = await service.analyze_speech(audio, TARGET_TEXT)

        assert isinstance(outcome, EvaluationResult)
        assert outcome.accuracy == 85
        assert outcome.intonation == 72.5
        assert outcome.fluency == 90
        assert outcome.transcribed == "Hello my name is Alex"
        assert outcome.feedback == "발음이 정확합니다."
        mock_client.chat.completions.create.assert_awaited_once()
        mock_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_request_contains_audio_prompt_and_schema(self, service, audio, mock_client):
        """リクエストに音声・プロンプト・レスポンス形式が含まれる"""
        mock_client.chat.completions.create.return_value = make_response(
            '{"accuracy": 1, "intonation": 2, "fluency": 3, "transcribed": "a", "feedback": "b"}'
        )

        with patch("speaklevel.services.openai_service.AsyncOpenAI", return_value=mock_client) as mock_openai:
            await service.analyze_speech(audio, TARGET_TEXT)

        mock_openai.assert_called_once_with(api_key="test_key", max_retries=0)
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-audio-preview"
        assert kwargs["temperature"] == 0.1
        content = kwargs["messages"][0]["content"]
        audio_part = next(part for part in content if part["type"] == "input_audio")
        text_part = next(part for part in content if part["type"] == "text")
        assert audio_part["input_audio"]["data"] == base64.b64encode(audio.data).decode("ascii")
        assert audio_part["input_audio"]["format"] == "wav"
        assert TARGET_TEXT in text_part["text"]
        schema = kwargs["response_format"]["json_schema"]["schema"]
        assert schema is EVALUATION_SCHEMA
        assert set(schema["required"]) == {"accuracy", "intonation", "fluency", "transcribed", "feedback"}

    def test_build_prompt_contains_target(self):
        assert f'"{TARGET_TEXT}"' in build_prompt(TARGET_TEXT)

    @pytest.mark.asyncio
    async def test_no_credential_returns_failure_without_network(self, audio):
        """キー未設定の場合は通信せずに失敗を返す"""
        service = OpenAIService(CredentialService(api_key=None))

        with patch("speaklevel.services.openai_service.AsyncOpenAI") as mock_openai:
            outcome = await service.analyze_speech(audio, TARGET_TEXT)

        assert isinstance(outcome, EvaluationFailure)
        assert outcome.kind == EvaluationErrorKind.CREDENTIAL_MISSING
        sentinel = outcome.to_result()
        assert sentinel.accuracy == sentinel.intonation == sentinel.fluency == 0
        assert sentinel.transcribed == FAILED_TRANSCRIPTION
        assert sentinel.is_failure_marker
        mock_openai.assert_not_called()

    @pytest.mark.asyncio
    async def test_reads_current_credential_on_every_call(self, audio, mock_client):
        """キーは呼び出しのたびに最新の値を読む"""
        credentials = CredentialService(api_key=None)
        service = OpenAIService(credentials)
        mock_client.chat.completions.create.return_value = make_response(
            '{"accuracy": 50, "intonation": 50, "fluency": 50, "transcribed": "a", "feedback": "b"}'
        )

        with patch("speaklevel.services.openai_service.AsyncOpenAI", return_value=mock_client) as mock_openai:
            first = await service.analyze_speech(audio, TARGET_TEXT)
            credentials.set_api_key("new_key")
            second = await service.analyze_speech(audio, TARGET_TEXT)

        assert isinstance(first, EvaluationFailure)
        assert isinstance(second, EvaluationResult)
        mock_openai.assert_called_once_with(api_key="new_key", max_retries=0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, expected",
        [
            (status_error(openai.AuthenticationError, 401), EvaluationErrorKind.CREDENTIAL_INVALID),
            (status_error(openai.PermissionDeniedError, 403), EvaluationErrorKind.BACKEND_NOT_PROVISIONED),
            (status_error(openai.NotFoundError, 404), EvaluationErrorKind.BACKEND_NOT_PROVISIONED),
            (status_error(openai.RateLimitError, 429), EvaluationErrorKind.GENERIC),
            (status_error(openai.InternalServerError, 500), EvaluationErrorKind.GENERIC),
            (
                openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1")),
                EvaluationErrorKind.GENERIC,
            ),
        ],
    )
    async def test_api_errors_are_classified(self, service, audio, mock_client, error, expected):
        """APIエラーは例外にせず分類済みの失敗として返す"""
        mock_client.chat.completions.create.side_effect = error

        with patch("speaklevel.services.openai_service.AsyncOpenAI", return_value=mock_client):
            outcome = await service.analyze_speech(audio, TARGET_TEXT)

        assert isinstance(outcome, EvaluationFailure)
        assert outcome.kind == expected
        assert outcome.message
        mock_client.chat.completions.create.assert_awaited_once()
        mock_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        [
            None,
            "",
            "Invalid JSON",
            '{"accuracy": 80, "intonation": 80, "fluency": 80, "transcribed": "a"}',
            '{"accuracy": 180, "intonation": 80, "fluency": 80, "transcribed": "a", "feedback": "b"}',
            '{"accuracy": 80, "intonation": 80, "fluency": 80, "transcribed": "a", "feedback": "b", "extra": 1}',
        ],
    )
    async def test_malformed_response_is_generic_failure(self, service, audio, mock_client, content):
        """空・不正な形式のレスポンスは一般的な失敗"""
        mock_client.chat.completions.create.return_value = make_response(content)

        with patch("speaklevel.services.openai_service.AsyncOpenAI", return_value=mock_client):
            outcome = await service.analyze_speech(audio, TARGET_TEXT)

        assert isinstance(outcome, EvaluationFailure)
        assert outcome.kind == EvaluationErrorKind.GENERIC

    @pytest.mark.asyncio
    async def test_empty_audio_never_crashes(self, service, mock_client):
        """空の音声でも評価結果か分類済みの失敗を返す"""
        mock_client.chat.completions.create.side_effect = status_error(openai.BadRequestError, 400)

        with patch("speaklevel.services.openai_service.AsyncOpenAI", return_value=mock_client):
            outcome = await service.analyze_speech(AudioArtifact(), TARGET_TEXT)

        assert isinstance(outcome, EvaluationFailure)
        assert outcome.kind == EvaluationErrorKind.GENERIC
