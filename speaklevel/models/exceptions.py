"""
例外クラスの定義
"""


class SpeakLevelError(Exception):
    """アプリケーション固有の例外の基底クラス"""

    def __init__(self, detail: str = "予期しないエラーが発生しました", code: str = "SPEAKLEVEL_ERROR") -> None:
        self.detail = detail
        self.code = code
        super().__init__(detail)


class MicrophonePermissionError(SpeakLevelError):
    """マイクが利用できない、または権限がない場合"""

    def __init__(self, detail: str = "마이크 권한이 필요합니다. 브라우저 또는 시스템 설정에서 마이크 접근을 허용해주세요.") -> None:
        super().__init__(detail=detail, code="PERMISSION_DENIED")


class RecordingAlreadyActiveError(SpeakLevelError):
    """録音中に再度録音を開始しようとした場合"""

    def __init__(self) -> None:
        super().__init__(detail="既に録音中です", code="RECORDING_ALREADY_ACTIVE")


class StorageError(SpeakLevelError):
    """履歴の保存に失敗した場合"""

    def __init__(self, detail: str = "履歴の保存に失敗しました") -> None:
        super().__init__(detail=detail, code="STORAGE_ERROR")


class InvalidTransitionError(SpeakLevelError):
    """現在の状態では許可されていない操作"""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(
            detail=f"{state} 状態では {action} を実行できません",
            code="INVALID_TRANSITION",
        )
        self.action = action
        self.state = state
