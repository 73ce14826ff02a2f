"""
Unit tests for ID3Tagger with mocked mutagen.
"""
from unittest.mock import MagicMock, patch

import pytest
from mutagen.id3 import ID3NoHeaderError

from nehm.exceptions import TagError
from nehm.metadata import ID3Tagger


class TestID3Tagger:
    """Test ID3Tagger with mocked ID3."""

    @pytest.fixture
    def tagger(self):
        return ID3Tagger()

    @pytest.fixture
    def audio_file(self, tmp_test_dir):
        audio_file = tmp_test_dir / "test.mp3"
        audio_file.write_bytes(b"fake mp3 content")
        return audio_file

    @staticmethod
    def added_frames(mock_id3):
        return {c.args[0].FrameID: c.args[0] for c in mock_id3.add.call_args_list}

    def test_tag_basic_frames(self, tagger, sample_track, audio_file):
        with patch("nehm.metadata.ID3") as mock_id3_class:
            mock_id3 = MagicMock()
            mock_id3_class.return_value = mock_id3

            tagger.tag(audio_file, sample_track)

            frames = self.added_frames(mock_id3)
            assert frames["TPE1"].text == ["Flume"]
            assert frames["TIT2"].text == ["Never Be Like You"]
            assert frames["TYER"].text == ["2016"]
            assert "APIC" not in frames
            mock_id3.save.assert_called_once_with(str(audio_file), v2_version=3)

    def test_tag_does_not_parse_existing_tags(self, tagger, sample_track, audio_file):
        with patch("nehm.metadata.ID3") as mock_id3_class:
            tagger.tag(audio_file, sample_track)
            mock_id3_class.assert_called_once_with()

    def test_tag_with_artwork(self, tagger, sample_track, audio_file, tmp_test_dir):
        artwork = tmp_test_dir / "cover.jpg"
        artwork.write_bytes(b"jpeg bytes")

        with patch("nehm.metadata.ID3") as mock_id3_class:
            mock_id3 = MagicMock()
            mock_id3_class.return_value = mock_id3

            tagger.tag(audio_file, sample_track, artwork)

            apic = self.added_frames(mock_id3)["APIC"]
            assert apic.mime == "image/jpeg"
            assert apic.type == 3
            assert apic.data == b"jpeg bytes"

    def test_empty_artwork_is_skipped(self, tagger, sample_track, audio_file, tmp_test_dir):
        artwork = tmp_test_dir / "cover.jpg"
        artwork.write_bytes(b"")

        with patch("nehm.metadata.ID3") as mock_id3_class:
            mock_id3 = MagicMock()
            mock_id3_class.return_value = mock_id3

            tagger.tag(audio_file, sample_track, artwork)

            assert "APIC" not in self.added_frames(mock_id3)
            assert mock_id3.save.called

    def test_unreadable_artwork_still_saves(self, tagger, sample_track, audio_file, tmp_test_dir):
        with patch("nehm.metadata.ID3") as mock_id3_class:
            mock_id3 = MagicMock()
            mock_id3_class.return_value = mock_id3

            with pytest.raises(TagError, match="couldn't read artwork file"):
                tagger.tag(audio_file, sample_track, tmp_test_dir / "missing.jpg")

            assert mock_id3.save.called

    def test_save_failure(self, tagger, sample_track, audio_file):
        with patch("nehm.metadata.ID3") as mock_id3_class:
            mock_id3 = MagicMock()
            mock_id3.save.side_effect = ID3NoHeaderError("broken")
            mock_id3_class.return_value = mock_id3

            with pytest.raises(TagError, match="couldn't save tag"):
                tagger.tag(audio_file, sample_track)

    def test_file_not_found(self, tagger, sample_track, tmp_test_dir):
        with pytest.raises(TagError, match="File not found"):
            tagger.tag(tmp_test_dir / "nonexistent.mp3", sample_track)
