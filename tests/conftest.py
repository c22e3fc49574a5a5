"""
テスト共通のフィクスチャ
"""
from typing import List

import pytest

from speaklevel.models.exceptions import MicrophonePermissionError
from speaklevel.models.schemas import AudioArtifact, EvaluationOutcome, EvaluationResult
from speaklevel.services.audio_service import AudioCapture
from speaklevel.services.credential_service import CredentialDialog, CredentialService
from speaklevel.services.storage_service import HistoryStorageService, MemoryKeyValueStore


class FakeRecorder(AudioCapture):
    """録音デバイスの代わりに固定の音声を返す"""

    def __init__(self, fail_on_start: bool = False) -> None:
        self.fail_on_start = fail_on_start
        self._recording = False
        self.start_count = 0
        self.played: List[AudioArtifact] = []

    @property
    def is_recording(self) -> bool:
        return self._recording

    def start_recording(self) -> None:
        if self.fail_on_start:
            raise MicrophonePermissionError()
        self.start_count += 1
        self._recording = True

    def stop_recording(self) -> AudioArtifact:
        if not self._recording:
            return AudioArtifact()
        self._recording = False
        return AudioArtifact(data=b"RIFF-fake-audio")

    def play_artifact(self, artifact: AudioArtifact) -> bool:
        if artifact.is_empty:
            return False
        self.played.append(artifact)
        return True


class FakeEvaluator:
    """指定した評価結果を順番に返す"""

    def __init__(self, outcomes: List[EvaluationOutcome] | None = None, default: EvaluationOutcome | None = None) -> None:
        self.outcomes = list(outcomes or [])
        self.default = default or EvaluationResult(
            accuracy=80, intonation=80, fluency=80, transcribed="ok", feedback="좋아요"
        )
        self.calls: List[str] = []

    async def analyze_speech(self, audio: AudioArtifact, target_text: str) -> EvaluationOutcome:
        self.calls.append(target_text)
        if self.outcomes:
            return self.outcomes.pop(0)
        return self.default


class FakeDialog(CredentialDialog):
    """ダイアログを開くとキーを設定する"""

    def __init__(self, credentials: CredentialService, api_key: str | None = "sk-selected") -> None:
        self.credentials = credentials
        self.api_key = api_key
        self.open_count = 0

    def has_selected_credential(self) -> bool:
        return self.credentials.has_api_key()

    async def open_selector(self) -> None:
        self.open_count += 1
        if self.api_key:
            self.credentials.set_api_key(self.api_key)


@pytest.fixture
def history_storage():
    """メモリ上の履歴ストレージ"""
    return HistoryStorageService(MemoryKeyValueStore())


@pytest.fixture
def session_store():
    """セッション単位のストア"""
    return MemoryKeyValueStore()


@pytest.fixture
def credentials(session_store):
    """キー設定済みのCredentialService"""
    return CredentialService(api_key="sk-test", session_store=session_store)


@pytest.fixture
def no_credentials(session_store):
    """キー未設定のCredentialService"""
    return CredentialService(api_key=None, session_store=session_store)
