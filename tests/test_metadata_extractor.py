"""
Tests for the ExifTool adapter, with PyExifTool mocked out.
"""

from unittest.mock import patch

import pytest
from exiftool.exceptions import ExifToolException

from video_organizer.exceptions import TagExtractionError
from video_organizer.metadata_extractor import MetadataExtractor


@pytest.fixture
def helper():
    with patch("video_organizer.metadata_extractor.exiftool.ExifToolHelper") as helper_cls:
        yield helper_cls


class TestMetadataExtractor:
    def test_runs_without_group_prefixes_or_numeric_output(self, helper):
        MetadataExtractor()
        helper.assert_called_once_with(common_args=[])

    def test_custom_executable(self, helper):
        MetadataExtractor("/opt/exiftool/exiftool")
        helper.assert_called_once_with(common_args=[], executable="/opt/exiftool/exiftool")

    def test_extract_tags_drops_source_file(self, helper):
        helper.return_value.get_metadata.return_value = [
            {"SourceFile": "/videos/clip.mov", "Model": "iPhone 12 Pro", "ImageWidth": 1920}
        ]
        tags = MetadataExtractor().extract_tags("/videos/clip.mov")

        assert tags == {"Model": "iPhone 12 Pro", "ImageWidth": 1920}
        helper.return_value.get_metadata.assert_called_once_with("/videos/clip.mov")

    def test_exiftool_failure(self, helper):
        helper.return_value.get_metadata.side_effect = ExifToolException("exit status 1")
        with pytest.raises(TagExtractionError) as excinfo:
            MetadataExtractor().extract_tags("/videos/broken.mp4")
        assert "broken.mp4" in str(excinfo.value)

    def test_exiftool_not_installed(self, helper):
        helper.return_value.get_metadata.side_effect = FileNotFoundError("exiftool")
        with pytest.raises(TagExtractionError):
            MetadataExtractor().extract_tags("/videos/clip.mp4")

    def test_empty_result(self, helper):
        helper.return_value.get_metadata.return_value = []
        with pytest.raises(TagExtractionError):
            MetadataExtractor().extract_tags("/videos/clip.mp4")

    def test_context_manager_stops_exiftool(self, helper):
        helper.return_value.running = True
        with MetadataExtractor():
            pass
        helper.return_value.terminate.assert_called_once_with()

    def test_close_when_not_running(self, helper):
        helper.return_value.running = False
        MetadataExtractor().close()
        helper.return_value.terminate.assert_not_called()

    @pytest.mark.parametrize("name,supported", [
        ("clip.mov", True),
        ("CLIP.MP4", True),
        ("old.AVI", True),
        ("clip.mkv", False),
        ("photo.jpg", False),
        ("mov", False),
    ])
    def test_is_supported_file(self, name, supported):
        assert MetadataExtractor.is_supported_file(name) is supported
