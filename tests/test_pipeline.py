"""
End-to-end tests for the filing pipeline with fake extractor and geocoder.
"""

import pytest

from fakes import ECHO_PARK_RESPONSE, FakeGeocodeClient, ManualClock
from video_organizer.content_address import address_of
from video_organizer.exceptions import GeocodeServiceError, MissingDateError
from video_organizer.file_organizer import FileOrganizer
from video_organizer.geocoder import Geocoder, RateLimiter
from video_organizer.main import FileOutcome, VideoOrganizer


def fresh_geocoder(response=ECHO_PARK_RESPONSE):
    clock = ManualClock()
    client = FakeGeocodeClient(response)
    return Geocoder(client, RateLimiter(5.0, clock=clock, sleep=clock.sleep)), client


class TestScenarios:
    """Filing scenarios for each camera."""

    def test_sony_file_lands_in_place_directory(self, video_organizer, fake_extractor,
                                                geocode_client, sony_tags, make_video, target_dir):
        source = make_video("C0001.MP4")
        fake_extractor.add(source, sony_tags)

        assert video_organizer.process_file(source) is FileOutcome.FILED

        expected = target_dir / "2022" / "06-15 Echo Park (Los Angeles)" / f"{address_of(source)}.mp4"
        assert expected.exists()
        assert geocode_client.calls == [(34.086, -118.256)]

    def test_canon_file_lands_in_bare_day_directory(self, video_organizer, fake_extractor,
                                                    geocode_client, canon_tags, make_video, target_dir):
        source = make_video("MVI_0042.MOV")
        fake_extractor.add(source, canon_tags)

        assert video_organizer.process_file(source) is FileOutcome.FILED

        assert (target_dir / "2022" / "06-15" / f"{address_of(source)}.mov").exists()
        assert geocode_client.calls == []

    def test_iphone_file_upgrades_canon_directory(self, video_organizer, fake_extractor,
                                                  canon_tags, iphone_tags, make_video, target_dir):
        canon = make_video("MVI_0042.MOV")
        iphone = make_video("IMG_1234.MOV")
        fake_extractor.add(canon, canon_tags)
        fake_extractor.add(iphone, iphone_tags)

        summary = video_organizer.process_files([canon, iphone])

        day_dir = target_dir / "2022" / "06-15 Echo Park (Los Angeles)"
        assert sorted(p.name for p in day_dir.iterdir()) == sorted(
            [f"{address_of(canon)}.mov", f"{address_of(iphone)}.mov"]
        )
        assert summary.filed == [canon, iphone]
        assert summary.ok

    def test_generic_file_without_gps(self, video_organizer, fake_extractor, make_video, target_dir):
        source = make_video("VID_2021.mp4")
        fake_extractor.add(source, {"Model": "Pixel 7", "CreateDate": "2021:12:31 23:59:59"})

        video_organizer.process_file(source)

        assert (target_dir / "2021" / "12-31" / f"{address_of(source)}.mp4").exists()


class TestReruns:
    """Already filed files must not reach the geocoder."""

    def test_rerun_skips_before_geocoding(self, fake_extractor, sony_tags, make_video, target_dir):
        source = make_video("C0001.MP4")
        fake_extractor.add(source, sony_tags)

        first_geocoder, first_client = fresh_geocoder()
        first = VideoOrganizer(fake_extractor, first_geocoder, FileOrganizer(str(target_dir)),
                               show_progress=False)
        assert first.process_file(source) is FileOutcome.FILED

        second_geocoder, second_client = fresh_geocoder()
        second = VideoOrganizer(fake_extractor, second_geocoder, FileOrganizer(str(target_dir)),
                                show_progress=False)
        summary = second.process_files([source])

        assert summary.already_filed == [source]
        assert second_client.calls == []
        assert len(list((target_dir / "2022").rglob("*.mp4"))) == 1

    def test_same_path_twice_in_one_run(self, video_organizer, fake_extractor, geocode_client,
                                        sony_tags, make_video):
        source = make_video("C0001.MP4")
        fake_extractor.add(source, sony_tags)

        summary = video_organizer.process_files([source, source])

        assert summary.filed == [source]
        assert summary.already_filed == [source]
        assert len(geocode_client.calls) == 1


class TestFailures:
    """Fatal errors abort the run unless keep_going is set."""

    def test_missing_date_aborts_run(self, video_organizer, fake_extractor, canon_tags,
                                     make_video, target_dir):
        broken = make_video("broken.mp4")
        good = make_video("good.mov")
        fake_extractor.add(broken, {"Model": "Pixel 7"})
        fake_extractor.add(good, canon_tags)

        with pytest.raises(MissingDateError):
            video_organizer.process_files([broken, good])

        assert fake_extractor.calls == [broken]
        assert not (target_dir / "2022").exists()

    def test_geocode_failure_aborts_run(self, fake_extractor, sony_tags, make_video, target_dir):
        source = make_video("C0001.MP4")
        fake_extractor.add(source, sony_tags)
        geocoder, _ = fresh_geocoder({"status": "REQUEST_DENIED", "results": []})
        organizer = VideoOrganizer(fake_extractor, geocoder, FileOrganizer(str(target_dir)),
                                   show_progress=False)

        with pytest.raises(GeocodeServiceError):
            organizer.process_files([source])
        assert not (target_dir / "2022").exists()

    def test_keep_going_collects_failures(self, fake_extractor, geocoder, canon_tags,
                                          make_video, target_dir):
        broken = make_video("broken.mp4")
        good = make_video("good.mov")
        fake_extractor.add(broken, {"Model": "Pixel 7"})
        fake_extractor.add(good, canon_tags)
        organizer = VideoOrganizer(fake_extractor, geocoder, FileOrganizer(str(target_dir)),
                                   keep_going=True, show_progress=False)

        summary = organizer.process_files([broken, good])

        assert not summary.ok
        assert [path for path, _ in summary.failures] == [broken]
        assert summary.filed == [good]
        assert summary.total_files == 2
