"""
Unit tests for change feed candidate filtering
"""

import unittest

from stubs import audio_item

from transcribe_robot.core.models import CandidateItem
from transcribe_robot.webhook.filters import filter_candidates, is_candidate


class TestCandidateFilter(unittest.TestCase):
    """Test which feed entries qualify for processing"""

    def test_audio_file_with_extension(self):
        self.assertTrue(is_candidate(audio_item("talk.en-US.wav")))
        self.assertTrue(is_candidate(audio_item("Audio.en-us.wav")))

    def test_audio_facet_without_extension(self):
        """Test the service's audio facet qualifies a file with another extension"""
        self.assertTrue(is_candidate(audio_item("talk.en-US.mp3", has_audio_property=True)))

    def test_extension_match_is_case_sensitive(self):
        self.assertFalse(is_candidate(audio_item("talk.en-US.WAV")))

    def test_other_extension(self):
        self.assertFalse(is_candidate(audio_item("notes.txt")))

    def test_folder_is_never_candidate(self):
        folder = CandidateItem(item_id="f1", name="archive.wav", is_file=False)
        self.assertFalse(is_candidate(folder))

    def test_deleted_file_is_never_candidate(self):
        self.assertFalse(is_candidate(audio_item("talk.en-US.wav", is_deleted=True)))

    def test_missing_name(self):
        self.assertFalse(is_candidate(CandidateItem(item_id="x", name=None, is_file=True)))

    def test_custom_extension(self):
        self.assertTrue(is_candidate(audio_item("talk.en-US.flac"), ".flac"))

    def test_filter_preserves_order(self):
        items = [
            audio_item("b.en-US.wav"),
            audio_item("skip.txt"),
            audio_item("a.en-US.wav"),
        ]
        self.assertEqual([i.name for i in filter_candidates(items)], ["b.en-US.wav", "a.en-US.wav"])

    def test_from_graph_facets(self):
        """Test driveItem facets map to candidate flags"""
        item = CandidateItem.from_graph(
            {
                "id": "01ABC",
                "name": "memo.en-US.wav",
                "size": 2048,
                "file": {"mimeType": "audio/wav"},
                "audio": {},
                "parentReference": {"driveId": "b!drive"},
            }
        )
        self.assertTrue(item.is_file)
        self.assertTrue(item.has_audio_property)
        self.assertFalse(item.is_deleted)
        self.assertEqual(item.size, 2048)
        self.assertEqual(item.parent_container_id, "b!drive")

        deleted = CandidateItem.from_graph({"id": "02", "name": "gone.wav", "deleted": {"state": "deleted"}})
        self.assertTrue(deleted.is_deleted)
        self.assertFalse(deleted.is_file)


if __name__ == "__main__":
    unittest.main()
