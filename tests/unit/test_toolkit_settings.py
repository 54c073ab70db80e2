from django.test import SimpleTestCase, override_settings

from api_toolkit.core.settings import ApiToolkitSettings, get_setting
from api_toolkit.defaults import LIBRARY_DEFAULTS, merge_settings


class SettingsMergeTests(SimpleTestCase):
    def test_merge_is_deep(self):
        merged = merge_settings(LIBRARY_DEFAULTS, {"criteria": {"strict": True}})

        self.assertTrue(merged["criteria"]["strict"])
        self.assertEqual(merged["criteria"]["max_eager_load_depth"], 4)
        self.assertFalse(LIBRARY_DEFAULTS["criteria"]["strict"])

    def test_project_settings_override_defaults(self):
        config = ApiToolkitSettings.load()

        self.assertIn("test_app_organization.secret", config.searchable_exclusions)
        self.assertIn("test_app.Post", config.resource_map)
        self.assertEqual(config.default_limit, 50)
        self.assertEqual(config.fixed_fields, ["id", "_type"])

    @override_settings(API_TOOLKIT={"criteria": {"strict": True, "max_eager_load_depth": 2}})
    def test_load_reads_current_settings(self):
        config = ApiToolkitSettings.load()

        self.assertTrue(config.strict)
        self.assertEqual(config.max_eager_load_depth, 2)
        self.assertTrue(config.enable_eager_loading)

    def test_get_setting_by_path(self):
        self.assertEqual(get_setting("parser.defaults.limit"), 50)
        self.assertEqual(get_setting("parser.missing", "fallback"), "fallback")
