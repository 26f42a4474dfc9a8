"""QMediaPlayer backed AudioTransport."""
from __future__ import annotations

import os
from typing import Optional

from PySide6.QtCore import QObject, QTimer, QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from scrollscene.controller.audio import PlayResult


class QtAudioTransport(QObject):
    """Looping QMediaPlayer whose play() reports its outcome asynchronously."""

    def __init__(self, source: Optional[str], volume: float = 0.6, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.source = source
        self.player = QMediaPlayer(self)
        self.output = QAudioOutput(self)
        self.output.setVolume(volume)
        self.player.setAudioOutput(self.output)
        self.player.setLoops(QMediaPlayer.Loops.Infinite)
        if source and os.path.isfile(source):
            self.player.setSource(QUrl.fromLocalFile(source))

        self._pending: Optional[PlayResult] = None
        self.player.playbackStateChanged.connect(self._on_state_changed)
        self.player.errorOccurred.connect(self._on_error)

    def play(self, on_result: PlayResult) -> None:
        if self.player.source().isEmpty():
            QTimer.singleShot(0, self, lambda: on_result(False, f"No playable source: {self.source}"))
            return
        self._pending = on_result
        self.player.play()

    def pause(self) -> None:
        self.player.pause()

    def is_playing(self) -> bool:
        return self.player.playbackState() == QMediaPlayer.PlaybackState.PlayingState

    def _on_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState:
            self._resolve(True, "")

    def _on_error(self, error: QMediaPlayer.Error, message: str) -> None:
        self._resolve(False, message or str(error))

    def _resolve(self, ok: bool, message: str) -> None:
        callback, self._pending = self._pending, None
        if callback is not None:
            callback(ok, message)
