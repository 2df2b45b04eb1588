"""Shared fixtures: synthetic signals and a recording decoder double."""

import io

import numpy as np
import pytest
import soundfile as sf

from beatcoach.core.config import AnalysisConfig
from beatcoach.core.decoder import DecodedAudio
from beatcoach.core.errors import DecodeFormatError

# 1024-sample blocks at 20480 Hz are exactly 50 ms, so a beat every
# 10 blocks is exactly 120 BPM.
CLICK_SR = 20480
BLOCK = 1024


def make_click_track(
    seconds: float = 12.0,
    beat_every_blocks: int = 10,
    sr: int = CLICK_SR,
) -> np.ndarray:
    """Quiet sine bed with a loud one-block burst every *beat_every_blocks*."""
    n = int(seconds * sr)
    t = np.arange(n) / sr
    y = 0.01 * np.sin(2 * np.pi * 220 * t)
    burst = 0.8 * np.sin(2 * np.pi * 440 * t)
    n_blocks = n // BLOCK
    for block in range(0, n_blocks, beat_every_blocks):
        start = block * BLOCK
        y[start:start + BLOCK] = burst[start:start + BLOCK]
    return y.astype(np.float32)


def wav_bytes(channels, sr: int) -> bytes:
    """Encode channels as an in-memory 32-bit float WAV."""
    data = np.stack(channels, axis=1) if len(channels) > 1 else channels[0]
    buf = io.BytesIO()
    sf.write(buf, data, sr, format="WAV", subtype="FLOAT")
    return buf.getvalue()


class FakeSession:
    def __init__(self, owner):
        self.owner = owner
        self.closed = False

    async def decode(self, data: bytes) -> DecodedAudio:
        if self.owner.fail:
            raise DecodeFormatError(detail="fake decoder rejected the bytes")
        return self.owner.decoded

    def close(self) -> None:
        self.closed = True
        self.owner.closes += 1


class FakeDecoder:
    """Decoder double that counts acquired and released sessions."""

    def __init__(self, decoded: DecodedAudio | None = None, fail: bool = False):
        self.decoded = decoded
        self.fail = fail
        self.opens = 0
        self.closes = 0
        self.sessions = []

    def open(self) -> FakeSession:
        self.opens += 1
        session = FakeSession(self)
        self.sessions.append(session)
        return session


@pytest.fixture
def config():
    return AnalysisConfig()


@pytest.fixture
def click_track():
    """12 s mono click track at exactly 120 BPM."""
    return make_click_track(), CLICK_SR


@pytest.fixture
def silence():
    """3 s of digital silence at 44.1 kHz."""
    sr = 44100
    return np.zeros(3 * sr, dtype=np.float32), sr


@pytest.fixture
def click_decoded(click_track):
    y, sr = click_track
    return DecodedAudio(channels=[y, y.copy()], sample_rate=sr, duration=len(y) / sr)
