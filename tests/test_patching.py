import json
import unittest

from mixtape_patch.errors import InvalidPatchListError
from mixtape_patch.models import Patch, Playlist
from mixtape_patch.patching import PatchEngine, load_patches
from mixtape_patch.store import CatalogStore


def _catalog() -> dict:
    return {
        "users": [{"id": "1", "name": "Albin Jaye"}, {"id": "2", "name": "Dipika Crescentia"}],
        "playlists": [{"id": "3", "user_id": "1", "song_ids": ["10"]}],
        "songs": [
            {"id": "10", "artist": "Camila Cabello", "title": "Never Be the Same"},
            {"id": "11", "artist": "Zedd", "title": "The Middle"},
            {"id": "12", "artist": "The Weeknd", "title": "Pray For Me"},
        ],
    }


def _store() -> CatalogStore:
    return CatalogStore.load(json.dumps(_catalog()))


def _patches(records: list) -> list:
    return load_patches(json.dumps(records).encode("utf-8"))


def _playlists(store: CatalogStore) -> dict:
    return {p.id: p.to_record() for p in store.playlists}


class TestLoadPatches(unittest.TestCase):
    def test_builds_patches_in_file_order(self) -> None:
        patches = _patches(
            [
                {"op": "remove", "path": "/playlists/3"},
                {"op": "add", "path": "/playlists/3/song_ids/-", "value": "12"},
            ]
        )
        self.assertEqual(
            patches,
            [
                Patch(op="remove", path="/playlists/3"),
                Patch(op="add", path="/playlists/3/song_ids/-", value="12"),
            ],
        )

    def test_non_array_patch_file_is_fatal(self) -> None:
        with self.assertLogs("mixtape_patch.validation", level="WARNING"):
            with self.assertRaises(InvalidPatchListError):
                load_patches(b"{}")

    def test_unknown_op_is_fatal(self) -> None:
        with self.assertLogs("mixtape_patch.validation", level="WARNING"):
            with self.assertRaises(InvalidPatchListError):
                _patches([{"op": "replace", "path": "/playlists/3", "value": {}}])


class TestPatchEngineScenarios(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = PatchEngine()
        self.store = _store()

    def test_add_playlist(self) -> None:
        patches = _patches(
            [
                {
                    "op": "add",
                    "path": "/playlists/-",
                    "value": {"id": "ignored", "user_id": "2", "song_ids": ["11", "12"]},
                }
            ]
        )
        report = self.engine.apply(self.store, patches)
        self.assertEqual(report.applied, 1)
        self.assertEqual(
            _playlists(self.store),
            {
                "3": {"id": "3", "user_id": "1", "song_ids": ["10"]},
                "4": {"id": "4", "user_id": "2", "song_ids": ["11", "12"]},
            },
        )

    def test_remove_playlist(self) -> None:
        self.engine.apply(self.store, _patches([{"op": "remove", "path": "/playlists/3"}]))
        self.assertEqual(self.store.playlists, [])

    def test_add_song_to_playlist(self) -> None:
        self.engine.apply(
            self.store,
            _patches([{"op": "add", "path": "/playlists/3/song_ids/-", "value": "12"}]),
        )
        self.assertEqual(self.store.get_playlist("3").song_ids, ["10", "12"])

    def test_invalid_patch_is_skipped_and_later_ones_apply(self) -> None:
        patches = _patches(
            [
                {"op": "add", "path": "/playlists/3/song_ids/-", "value": "999"},
                {"op": "remove", "path": "/playlists/3"},
            ]
        )
        with self.assertLogs("mixtape_patch.patching", level="WARNING") as logs:
            report = self.engine.apply(self.store, patches)
        self.assertEqual(self.store.playlists, [])
        self.assertEqual(report.applied, 1)
        self.assertEqual(len(report.rejected), 1)
        self.assertEqual(report.rejected[0].index, 1)
        self.assertEqual(report.rejected[0].reason, "Song ID 999 does not exist.")
        self.assertIn("Skipping add song to playlist (patch #1)", logs.output[0])

    def test_dangling_user_in_new_playlist_leaves_catalog_unchanged(self) -> None:
        before = self.store.to_document()
        patches = _patches(
            [
                {
                    "op": "add",
                    "path": "/playlists/-",
                    "value": {"id": "x", "user_id": "99", "song_ids": ["10"]},
                }
            ]
        )
        with self.assertLogs("mixtape_patch.patching", level="WARNING"):
            report = self.engine.apply(self.store, patches)
        self.assertEqual(len(report.rejected), 1)
        self.assertEqual(self.store.to_document(), before)
        self.assertEqual(self.store.next_playlist_id, 4)


class TestPatchEngineRejections(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = PatchEngine()
        self.store = _store()

    def _apply_one(self, record: dict):
        with self.assertLogs("mixtape_patch.patching", level="WARNING"):
            return self.engine.apply(self.store, _patches([record]))

    def test_playlist_value_must_match_schema(self) -> None:
        for value in (
            None,
            "3",
            {"user_id": "1", "song_ids": ["10"]},
            {"id": "x", "user_id": "1", "song_ids": []},
            {"id": "x", "user_id": "1", "song_ids": ["10", "10"]},
            {"id": "x", "user_id": "1", "song_ids": ["10"], "name": "extra"},
        ):
            with self.subTest(value=value):
                report = self._apply_one({"op": "add", "path": "/playlists/-", "value": value})
                self.assertEqual(len(report.rejected), 1)
        self.assertEqual([p.id for p in self.store.playlists], ["3"])

    def test_song_value_must_be_a_string(self) -> None:
        for value in (None, 12, ["12"], {"id": "12"}):
            with self.subTest(value=value):
                report = self._apply_one(
                    {"op": "add", "path": "/playlists/3/song_ids/-", "value": value}
                )
                self.assertEqual(len(report.rejected), 1)
        self.assertEqual(self.store.get_playlist("3").song_ids, ["10"])

    def test_missing_playlist_targets(self) -> None:
        report = self._apply_one({"op": "remove", "path": "/playlists/42"})
        self.assertEqual(report.rejected[0].reason, "Playlist ID 42 does not exist.")
        report = self._apply_one({"op": "add", "path": "/playlists/42/song_ids/-", "value": "10"})
        self.assertEqual(report.rejected[0].reason, "Playlist ID 42 does not exist.")

    def test_duplicate_song_append_is_rejected(self) -> None:
        report = self._apply_one({"op": "add", "path": "/playlists/3/song_ids/-", "value": "10"})
        self.assertEqual(len(report.rejected), 1)
        self.assertEqual(self.store.get_playlist("3").song_ids, ["10"])


class TestPatchEngineRouting(unittest.TestCase):
    def test_unsupported_op_path_pairs_are_ignored(self) -> None:
        store = _store()
        before = store.to_document()
        patches = _patches(
            [
                {"op": "remove", "path": "/playlists/-"},
                {"op": "remove", "path": "/playlists/3/song_ids/-"},
                {"op": "add", "path": "/playlists/3", "value": "10"},
            ]
        )
        with self.assertLogs("mixtape_patch.patching", level="INFO") as logs:
            report = PatchEngine().apply(store, patches)
        self.assertEqual(report.ignored, 3)
        self.assertEqual(report.applied, 0)
        self.assertEqual(report.rejected, [])
        self.assertEqual(store.to_document(), before)
        self.assertFalse(any(line.startswith("WARNING") for line in logs.output))

    def test_patches_apply_in_order(self) -> None:
        store = _store()
        patches = _patches(
            [
                {"op": "remove", "path": "/playlists/3"},
                {"op": "add", "path": "/playlists/3/song_ids/-", "value": "12"},
            ]
        )
        with self.assertLogs("mixtape_patch.patching", level="WARNING"):
            report = PatchEngine().apply(store, patches)
        self.assertEqual(report.applied, 1)
        self.assertEqual(report.rejected[0].index, 2)

    def test_patched_catalog_matches_direct_mutation(self) -> None:
        records = [
            {"op": "add", "path": "/playlists/-", "value": {"id": "1", "user_id": "2", "song_ids": ["12"]}},
            {"op": "add", "path": "/playlists/3/song_ids/-", "value": "11"},
            {"op": "add", "path": "/playlists/4/song_ids/-", "value": "10"},
            {"op": "remove", "path": "/playlists/3"},
            {"op": "add", "path": "/playlists/-", "value": {"id": "1", "user_id": "1", "song_ids": ["10", "11"]}},
        ]
        patched = _store()
        report = PatchEngine().apply(patched, _patches(records))
        self.assertEqual(report.applied, len(records))

        direct = _store()
        direct.add_playlist(Playlist(id="1", user_id="2", song_ids=["12"]))
        direct.add_song_to_playlist("3", "11")
        direct.add_song_to_playlist("4", "10")
        direct.remove_playlist("3")
        direct.add_playlist(Playlist(id="1", user_id="1", song_ids=["10", "11"]))

        self.assertEqual(patched.serialize(), direct.serialize())
        self.assertEqual(sorted(_playlists(patched)), ["4", "5"])

    def test_report_summary(self) -> None:
        store = _store()
        patches = _patches(
            [
                {"op": "remove", "path": "/playlists/3"},
                {"op": "remove", "path": "/playlists/3"},
                {"op": "remove", "path": "/playlists/-"},
            ]
        )
        with self.assertLogs("mixtape_patch.patching", level="WARNING"):
            report = PatchEngine().apply(store, patches)
        self.assertEqual(report.total, 3)
        self.assertEqual(report.summary(), "1 applied, 1 skipped, 1 ignored of 3 patch(es)")


if __name__ == "__main__":
    unittest.main()
