"""
音声入力/出力サービス
マイクからの録音とWAV形式へのエンコード、録音データの再生を行う
"""

import io
import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np
import scipy.io.wavfile as wavfile
import sounddevice as sd

from speaklevel.models.exceptions import MicrophonePermissionError, RecordingAlreadyActiveError
from speaklevel.models.schemas import AudioArtifact

logger = logging.getLogger(__name__)


class AudioCapture(ABC):
    """録音デバイスのインターフェース"""

    @property
    @abstractmethod
    def is_recording(self) -> bool:
        """録音中かどうか"""

    @abstractmethod
    def start_recording(self) -> None:
        """録音を開始する（マイクが使えない場合はMicrophonePermissionError）"""

    @abstractmethod
    def stop_recording(self) -> AudioArtifact:
        """録音を終了してデバイスを解放し、エンコード済みの音声を返す"""

    @abstractmethod
    def play_artifact(self, artifact: AudioArtifact) -> bool:
        """録音した音声を再生する（再生できた場合True）"""


class AudioService(AudioCapture):
    """マイク録音を管理するサービスクラス"""

    def __init__(self, sample_rate: int = 16000) -> None:
        """
        初期化処理

        Args:
            sample_rate: 録音サンプルレート
        """
        self.stream: Optional[sd.InputStream] = None
        self.chunks: List[np.ndarray] = []
        self.lock = threading.Lock()

        # 音声設定
        self.chunk_size: int = 1024
        self.sample_rate: int = sample_rate
        self.channels: int = 1
        self.dtype: str = "float32"

    @property
    def is_recording(self) -> bool:
        return self.stream is not None

    def _candidate_input_devices(self) -> List[Optional[int]]:
        """試行する入力デバイスのリストを作成"""
        candidate_devices: List[Optional[int]] = []

        # 1. デフォルトデバイス
        try:
            if sd.default.device[0] >= 0:
                candidate_devices.append(sd.default.device[0])
        except (TypeError, IndexError, sd.PortAudioError):
            pass

        # 2. その他の入力可能なデバイス
        try:
            devices = sd.query_devices()
            for i, dev in enumerate(devices):
                if dev["max_input_channels"] > 0 and i not in candidate_devices:
                    candidate_devices.append(i)
        except sd.PortAudioError as e:
            logger.warning("デバイス一覧の取得に失敗しました: %s", e)

        # 最後にNoneを追加（デフォルトの挙動を試す）
        if None not in candidate_devices:
            candidate_devices.append(None)
        return candidate_devices

    def _audio_callback(
        self, indata: np.ndarray, frames: int, time_info: dict, status: sd.CallbackFlags
    ) -> None:
        """sounddeviceのコールバック関数"""
        if status:
            logger.debug("Audio callback status: %s", status)
        with self.lock:
            self.chunks.append(indata.copy())

    def start_recording(self) -> None:
        """
        マイクを確保して録音を開始する

        Raises:
            RecordingAlreadyActiveError: 既に録音中の場合
            MicrophonePermissionError: どの入力デバイスも開けなかった場合
        """
        if self.is_recording:
            raise RecordingAlreadyActiveError()

        with self.lock:
            self.chunks = []

        last_error: Exception | None = None
        for device_index in self._candidate_input_devices():
            stream: sd.InputStream | None = None
            try:
                logger.info("録音を開始します (Device Index: %s)", device_index)
                stream = sd.InputStream(
                    samplerate=self.sample_rate,
                    channels=self.channels,
                    dtype=self.dtype,
                    blocksize=self.chunk_size,
                    callback=self._audio_callback,
                    device=device_index,
                )
                stream.start()
                self.stream = stream
                return
            except (sd.PortAudioError, ValueError, OSError) as e:
                logger.warning("デバイス %s でのエラー: %s", device_index, e)
                last_error = e
                if stream is not None:
                    stream.close()

        logger.error("すべてのデバイスで録音に失敗しました。最後のエラー: %s", last_error)
        raise MicrophonePermissionError()

    def stop_recording(self) -> AudioArtifact:
        """
        録音を終了してマイクを解放する

        Returns:
            WAV形式の音声データ（録音していない場合は空のデータ）
        """
        stream = self.stream
        if stream is None:
            return AudioArtifact(sample_rate=self.sample_rate)

        try:
            stream.stop()
        finally:
            # 成否にかかわらずデバイスを解放する
            stream.close()
            self.stream = None

        with self.lock:
            chunks = self.chunks
            self.chunks = []

        if not chunks:
            return AudioArtifact(sample_rate=self.sample_rate)

        samples: np.ndarray = np.concatenate(chunks, axis=0).flatten()
        return AudioArtifact(data=self.encode_wav(samples), sample_rate=self.sample_rate)

    def encode_wav(self, samples: np.ndarray) -> bytes:
        """
        float32の音声データを16bit PCMのWAVにエンコード

        Args:
            samples: -1.0〜1.0の音声データ

        Returns:
            WAVファイルのバイト列
        """
        pcm: np.ndarray = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
        buffer = io.BytesIO()
        wavfile.write(buffer, self.sample_rate, pcm)
        return buffer.getvalue()

    def play_artifact(self, artifact: AudioArtifact) -> bool:
        """
        録音した音声を再生する

        Args:
            artifact: 再生する音声データ

        Returns:
            再生できた場合True
        """
        if artifact.is_empty:
            return False
        try:
            rate, pcm = wavfile.read(io.BytesIO(artifact.data))
            samples: np.ndarray = pcm.astype(np.float32) / 32767
            sd.play(samples, samplerate=rate)
            sd.wait()  # 再生が完了するまで待機
            return True
        except (sd.PortAudioError, ValueError) as e:
            logger.warning("再生エラー: %s", e)
            return False
