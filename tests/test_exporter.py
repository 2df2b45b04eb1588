"""Tests for the feature payload exporter and the CLI that prints it."""

import json

import pytest

from beatcoach.cli import main
from beatcoach.core.analyzer import Section
from beatcoach.io.exporter import FeaturesExporter
from beatcoach.pipeline import AudioFeatures

from conftest import CLICK_SR, make_click_track, wav_bytes

CONTRACT_KEYS = {
    "bpm",
    "beatConfidence",
    "energy",
    "energyLabel",
    "intensity",
    "duration",
    "tempoLabel",
    "recommendedStyle",
    "sections",
}


@pytest.fixture
def features():
    return AudioFeatures(
        bpm=120,
        beat_confidence=0.83333333,
        energy=0.123456789,
        energy_label="soft",
        intensity=0.176366841,
        duration=10.0,
        tempo_label="fast",
        recommended_style="commercial hip-hop",
        sections=(
            Section(start=0.0, end=10.0 / 3, intensity=0.1),
            Section(start=10.0 / 3, end=10.0, intensity=0.2),
        ),
    )


class TestFeaturesExporter:
    def test_contract_keys(self, features):
        payload = FeaturesExporter().to_dict(features)
        assert set(payload) == CONTRACT_KEYS
        assert set(payload["sections"][0]) == {"start", "end", "intensity"}

    def test_rounding(self, features):
        payload = FeaturesExporter(precision=3).to_dict(features)
        assert payload["beatConfidence"] == 0.833
        assert payload["energy"] == 0.123
        assert payload["sections"][0]["end"] == 3.333

    def test_no_rounding(self, features):
        payload = FeaturesExporter(precision=None).to_dict(features)
        assert payload["energy"] == features.energy
        assert payload["sections"][0]["end"] == 10.0 / 3

    def test_labels_pass_through(self, features):
        payload = FeaturesExporter().to_dict(features)
        assert payload["bpm"] == 120
        assert payload["tempoLabel"] == "fast"
        assert payload["energyLabel"] == "soft"
        assert payload["recommendedStyle"] == "commercial hip-hop"

    def test_json_round_trips(self, features):
        text = FeaturesExporter().to_json(features)
        assert json.loads(text) == FeaturesExporter().to_dict(features)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

class TestCli:
    def test_prints_features(self, tmp_path, capsys):
        path = tmp_path / "click.wav"
        path.write_bytes(wav_bytes([make_click_track()], CLICK_SR))

        assert main([str(path)]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert set(payload) == CONTRACT_KEYS
        assert payload["bpm"] == 120
        assert len(payload["sections"]) == 6

    def test_section_override(self, tmp_path, capsys):
        path = tmp_path / "click.wav"
        path.write_bytes(wav_bytes([make_click_track(seconds=3.0)], CLICK_SR))

        assert main([str(path), "--sections", "4"]) == 0
        assert len(json.loads(capsys.readouterr().out)["sections"]) == 4

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.wav")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_directory_is_not_a_file(self, tmp_path, capsys):
        assert main([str(tmp_path)]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "click.wav"
        path.write_bytes(wav_bytes([make_click_track(seconds=1.0)], CLICK_SR))
        assert main([str(path), "--block-size", "0"]) == 1
        assert "block_size" in capsys.readouterr().err

    def test_corrupt_file(self, tmp_path, capsys):
        path = tmp_path / "broken.wav"
        path.write_bytes(b"RIFF....not really a wav" * 10)
        assert main([str(path)]) == 2
        assert "different file or format" in capsys.readouterr().err
