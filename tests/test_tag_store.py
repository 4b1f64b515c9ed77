import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

import yaml

from folder_tags.core.tag_store import FolderTagStore, load_plugin_data, save_plugin_data, unique_tags
from folder_tags.data_models import FolderTagSettings, InheritanceMode, PluginData


class FolderTagStoreTests(unittest.TestCase):
    def test_unique_tags_preserves_first_seen_order(self) -> None:
        self.assertEqual(unique_tags(["b", "a", "b", " ", "", " c "]), ["b", "a", "c"])

    def test_unknown_folder_has_no_tags(self) -> None:
        self.assertEqual(FolderTagStore().get("Missing"), [])

    def test_paths_are_normalized(self) -> None:
        store = FolderTagStore({"/Projects/Alpha/": ["a"]})
        self.assertEqual(store.get("Projects/Alpha"), ["a"])
        self.assertIn("Projects/Alpha", store)

    def test_get_returns_a_copy(self) -> None:
        store = FolderTagStore({"A": ["x"]})
        store.get("A").append("y")
        self.assertEqual(store.get("A"), ["x"])

    def test_set_replaces_whole_list(self) -> None:
        store = FolderTagStore({"A": ["x", "y"]})
        self.assertEqual(store.set("A", ["z", "z"]), ["z"])
        self.assertEqual(store.get("A"), ["z"])

    def test_delete_includes_descendants(self) -> None:
        store = FolderTagStore({"A": ["x"], "A/B": ["y"], "AB": ["z"]})
        self.assertEqual(store.delete("A"), ["A", "A/B"])
        self.assertEqual(list(store), ["AB"])

    def test_delete_single_folder(self) -> None:
        store = FolderTagStore({"A": ["x"], "A/B": ["y"]})
        self.assertEqual(store.delete("A", include_descendants=False), ["A"])
        self.assertEqual(store.get("A/B"), ["y"])

    def test_all_tags_and_lookup(self) -> None:
        store = FolderTagStore({"A": ["x", "y"], "B": ["y", "z"]})
        self.assertEqual(store.all_tags(), ["x", "y", "z"])
        self.assertEqual(store.folders_with_tag("y"), ["A", "B"])
        self.assertEqual(len(store), 2)


class PluginDataPersistenceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.data_path = Path(self.tmpdir.name).resolve() / ".folder-tags.yaml"

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_missing_file_yields_defaults(self) -> None:
        data = load_plugin_data(self.data_path)
        self.assertEqual(data.folder_tags, {})
        self.assertEqual(data.settings, FolderTagSettings())

    def test_default_settings(self) -> None:
        settings = PluginData().settings
        self.assertEqual(settings.inheritance_mode, InheritanceMode.IMMEDIATE)
        self.assertEqual(settings.excluded_folders, [])
        self.assertTrue(settings.auto_apply_tags)
        self.assertTrue(settings.use_front_matter)
        self.assertTrue(settings.show_new_folder_modal)
        self.assertFalse(settings.debug_mode)

    def test_save_then_load(self) -> None:
        data = PluginData(
            settings=FolderTagSettings(inheritance_mode=InheritanceMode.ALL, excluded_folders=["Archive/"]),
            folder_tags={"Projects": ["work"], "Projects/Alpha": ["secret"]},
        )
        save_plugin_data(self.data_path, data)
        loaded = load_plugin_data(self.data_path)
        self.assertEqual(loaded.settings.inheritance_mode, InheritanceMode.ALL)
        self.assertEqual(loaded.settings.excluded_folders, ["Archive"])
        self.assertEqual(loaded.folder_tags, {"Projects": ["work"], "Projects/Alpha": ["secret"]})

    def test_saved_blob_uses_persisted_keys(self) -> None:
        save_plugin_data(self.data_path, PluginData(folder_tags={"A": ["x"]}))
        raw = yaml.safe_load(self.data_path.read_text(encoding="utf-8"))
        self.assertEqual(set(raw), {"settings", "folderTags", "version"})
        self.assertEqual(raw["folderTags"], {"A": ["x"]})
        self.assertEqual(raw["settings"]["inheritanceMode"], "immediate")
        self.assertIn("useFrontMatter", raw["settings"])

    def test_corrupt_yaml_yields_defaults(self) -> None:
        self.data_path.write_text("settings: [unclosed\n", encoding="utf-8")
        with self.assertLogs("folder_tags.core.tag_store", level="WARNING"):
            data = load_plugin_data(self.data_path)
        self.assertEqual(data.folder_tags, {})

    def test_non_mapping_yields_defaults(self) -> None:
        self.data_path.write_text("- just\n- a list\n", encoding="utf-8")
        self.assertEqual(load_plugin_data(self.data_path).folder_tags, {})

    def test_invalid_settings_yield_defaults(self) -> None:
        self.data_path.write_text("settings:\n  inheritanceMode: sideways\n", encoding="utf-8")
        data = load_plugin_data(self.data_path)
        self.assertEqual(data.settings.inheritance_mode, InheritanceMode.IMMEDIATE)

    def test_unknown_keys_are_ignored(self) -> None:
        self.data_path.write_text(
            "settings:\n  autoApplyTags: false\n  folderIcons: true\nfolderTags:\n  A:\n",
            encoding="utf-8",
        )
        data = load_plugin_data(self.data_path)
        self.assertFalse(data.settings.auto_apply_tags)
        self.assertEqual(data.folder_tags, {"A": []})


if __name__ == "__main__":
    unittest.main()
