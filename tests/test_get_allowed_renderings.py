import threading
import unittest
from unittest.mock import patch
from phsettings import (
    ArgumentNullError,
    Database,
    GetAllowedRenderings,
    GetPlaceholderRenderingsArgs,
    User,
    clear_cache,
    context,
    is_security_disabled,
    security_disabler,
)

D1 = "{FE5D7FDF-89C0-4D99-9AA3-B5FBD009C9F3}"
D2 = "{46D2F427-4CE5-4E1F-BA10-EF3636F43534}"
SETTINGS_ROOT = "/sitecore/layout/Placeholder Settings"
RENDERINGS_ROOT = "/sitecore/layout/Renderings"


def layout_xml(*devices):
    """devices: (device_id, [(key, md), ...])"""
    parts = ["<r>"]
    for device_id, placeholders in devices:
        parts.append(f'<d id="{device_id}" l="{{14030E9F-CE92-49C6-AD87-7D49B50E42EA}}">')
        for key, md in placeholders:
            md_attr = f' md="{md}"' if md else ""
            parts.append(f'<p key="{key}"{md_attr} />')
        parts.append("</d>")
    parts.append("</r>")
    return "".join(parts)


class SiteTestCase(unittest.TestCase):
    def setUp(self):
        clear_cache()
        context.reset()
        self.db = Database("master")
        self.r1 = self.db.add_item(f"{RENDERINGS_ROOT}/Hero")
        self.r2 = self.db.add_item(f"{RENDERINGS_ROOT}/Teaser")
        self.r3 = self.db.add_item(f"{RENDERINGS_ROOT}/Footer Links")
        self.processor = GetAllowedRenderings()

    def tearDown(self):
        clear_cache()
        context.reset()

    def settings(self, name, allowed=(), key=None, read_roles=None):
        fields = {"Allowed Controls": "|".join(str(a) for a in allowed)}
        if key is not None:
            fields["Placeholder Key"] = key
        return self.db.add_item(f"{SETTINGS_ROOT}/{name}", fields, read_roles=read_roles)

    def args(self, key, layout=None, device_id=D1):
        return GetPlaceholderRenderingsArgs(
            placeholder_key=key,
            content_database=self.db,
            layout_definition=layout,
            device_id=device_id,
        )


class TestProcess(SiteTestCase):
    def test_union_of_allow_lists_deduplicated(self):
        m1 = self.settings("Main A", [self.r1.id, self.r2.id])
        m3 = self.settings("Main B", [self.r2.id, self.r3.id])
        layout = layout_xml((D1, [("main", m1.id), ("main", m3.id)]))
        args = self.args("main", layout)
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r1, self.r2, self.r3])
        self.assertFalse(args.options.show_tree)
        self.assertTrue(args.has_placeholder_settings)

    def test_allow_list_entries_by_path(self):
        m1 = self.settings("Main", [f"{RENDERINGS_ROOT}/hero", self.r3.id])
        args = self.args("page/main", layout_xml((D1, [("main", m1.id)])))
        self.processor.process(args)
        self.assertEqual(
            [r.name for r in args.placeholder_renderings], ["Hero", "Footer Links"]
        )

    def test_repeated_settings_item_is_read_once(self):
        m1 = self.settings("Main", [self.r1.id])
        layout = layout_xml((D1, [("main", m1.id), ("page/main", m1.id)]))
        with context.device_switcher(D1):
            items = self.processor.get_placeholder_items("page/main", self.db, layout)
        self.assertEqual(items, [m1])

    def test_empty_allow_list_keeps_tree(self):
        m1 = self.settings("Main")
        args = self.args("main", layout_xml((D1, [("main", m1.id)])))
        self.processor.process(args)
        self.assertIsNone(args.placeholder_renderings)
        self.assertTrue(args.options.show_tree)
        self.assertTrue(args.has_placeholder_settings)

    def test_mixed_empty_and_filled_allow_lists(self):
        empty = self.settings("Empty")
        filled = self.settings("Filled", [self.r2.id])
        layout = layout_xml((D1, [("main", empty.id), ("main", filled.id)]))
        args = self.args("main", layout)
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r2])
        self.assertFalse(args.options.show_tree)

    def test_unresolvable_entries_are_skipped(self):
        m1 = self.settings("Main", ["/sitecore/layout/Renderings/Gone", self.r1.id])
        args = self.args("main", layout_xml((D1, [("main", m1.id)])))
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r1])

    def test_only_unresolvable_entries(self):
        m1 = self.settings("Main", ["{99999999-9999-9999-9999-999999999999}"])
        args = self.args("main", layout_xml((D1, [("main", m1.id)])))
        self.processor.process(args)
        self.assertIsNone(args.placeholder_renderings)
        self.assertTrue(args.options.show_tree)

    def test_definitions_without_metadata_are_ignored(self):
        args = self.args("main", layout_xml((D1, [("main", None)])))
        self.processor.process(args)
        self.assertFalse(args.has_placeholder_settings)
        self.assertIsNone(args.placeholder_renderings)

    def test_upstream_renderings_are_kept_and_not_repeated(self):
        m1 = self.settings("Main", [self.r1.id, self.r2.id])
        args = self.args("main", layout_xml((D1, [("main", m1.id)])))
        upstream = self.db.get_item(self.r2.id)
        args.placeholder_renderings = [self.r3, upstream]
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r3, self.r2, self.r1])
        self.assertIs(args.placeholder_renderings[1], upstream)

    def test_no_match_does_not_use_legacy_cache(self):
        self.settings("Sidebar", [self.r1.id], key="sidebar")
        m1 = self.settings("Main", [self.r2.id])
        args = self.args("sidebar", layout_xml((D1, [("main", m1.id)])))
        self.processor.process(args)
        self.assertFalse(args.has_placeholder_settings)
        self.assertIsNone(args.placeholder_renderings)

    def test_device_without_definitions_uses_legacy_cache(self):
        self.settings("Sidebar", [self.r1.id], key="sidebar")
        m1 = self.settings("Main", [self.r2.id])
        layout = layout_xml((D1, [("main", m1.id)]), (D2, []))
        args = self.args("page/sidebar", layout, device_id=D2)
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r1])
        self.assertFalse(args.options.show_tree)

    def test_legacy_cache_prefers_full_key(self):
        self.settings("Nested", [self.r3.id], key="page/sidebar")
        self.settings("Sidebar", [self.r1.id], key="sidebar")
        with context.device_switcher(D1):
            items = self.processor.get_placeholder_items("Page/Sidebar", self.db, layout_xml())
        self.assertEqual([i.name for i in items], ["Nested"])

    def test_legacy_cache_miss(self):
        with context.device_switcher(D1):
            items = self.processor.get_placeholder_items("page/sidebar", self.db, layout_xml())
        self.assertEqual(items, [])

    def test_device_restored_after_process(self):
        context.device_id = D2
        m1 = self.settings("Main", [self.r1.id])
        self.processor.process(self.args("main", layout_xml((D1, [("main", m1.id)]))))
        self.assertEqual(context.device_id, D2)

    def test_args_required(self):
        with self.assertRaises(ArgumentNullError):
            self.processor.process(None)
        with self.assertRaises(ArgumentNullError):
            self.processor.get_placeholder_items(None, self.db, "")
        with self.assertRaises(ArgumentNullError):
            self.processor.get_allowed_renderings_by_placeholder(None)


class TestSecurity(SiteTestCase):
    def test_restricted_settings_item_is_read_with_security_disabled(self):
        context.user = User.with_roles("extranet\\visitor", [])
        m1 = self.settings("Main", [self.r1.id], read_roles=["sitecore\\Designer"])
        self.assertIsNone(self.db.get_item(m1.id))
        args = self.args("main", layout_xml((D1, [("main", m1.id)])))
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r1])
        self.assertFalse(is_security_disabled())

    def test_renderings_are_read_with_user_rights(self):
        context.user = User.with_roles("extranet\\visitor", [])
        hidden = self.db.add_item(f"{RENDERINGS_ROOT}/Hidden", read_roles=["sitecore\\Designer"])
        m1 = self.settings("Main", [hidden.id, self.r2.id])
        args = self.args("main", layout_xml((D1, [("main", m1.id)])))
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r2])

    def test_elevation_is_released_when_lookup_fails(self):
        m1 = self.settings("Main", [self.r1.id])
        seen = []

        def failing(identifier):
            seen.append((str(identifier), is_security_disabled()))
            raise RuntimeError("database unavailable")

        with patch.object(Database, "get_item", side_effect=failing) as get_item:
            with context.device_switcher(D1):
                with self.assertRaises(RuntimeError):
                    self.processor.get_placeholder_items(
                        "main", self.db, layout_xml((D1, [("main", m1.id)]))
                    )
        get_item.assert_called_once()
        self.assertEqual(seen, [(str(m1.id), True)])
        self.assertFalse(is_security_disabled())

    def test_elevation_is_not_visible_to_other_threads(self):
        entered = threading.Event()
        release = threading.Event()

        def elevated_worker():
            with security_disabler():
                entered.set()
                release.wait(5)

        worker = threading.Thread(target=elevated_worker)
        worker.start()
        try:
            self.assertTrue(entered.wait(5))
            self.assertFalse(is_security_disabled())
            restricted = self.db.add_item("/secret", read_roles=["sitecore\\Designer"])
            self.assertIsNone(self.db.get_item(restricted.id))
        finally:
            release.set()
            worker.join(5)

    def test_device_switch_is_not_visible_to_other_threads(self):
        context.device_id = D2
        entered = threading.Event()
        release = threading.Event()

        def switching_worker():
            with context.device_switcher(D1):
                entered.set()
                release.wait(5)

        worker = threading.Thread(target=switching_worker)
        worker.start()
        try:
            self.assertTrue(entered.wait(5))
            self.assertEqual(context.device_id, D2)
        finally:
            release.set()
            worker.join(5)


class TestEffectiveLayout(SiteTestCase):
    def setUp(self):
        super().setUp()
        self.m1 = self.settings("Main", [self.r1.id])
        self.m2 = self.settings("Designer Main", [self.r2.id])
        self.page = self.db.add_item(
            "/sitecore/content/Home",
            {"__Renderings": layout_xml((D1, [("main", self.m1.id)]))},
        )
        context.item = self.page

    def test_context_item_layout(self):
        self.assertEqual(
            self.processor.get_effective_layout_definition(), self.page["__Renderings"]
        )
        args = self.args("main")
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r1])

    def test_page_designer_session_layout_wins(self):
        context.page_designer.is_designing = True
        context.page_designer.handle = "pd-handle"
        context.session["pd-handle"] = layout_xml((D1, [("main", self.m2.id)]))
        args = self.args("main")
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r2])

    def test_session_ignored_when_not_designing(self):
        context.page_designer.handle = "pd-handle"
        context.session["pd-handle"] = layout_xml((D1, [("main", self.m2.id)]))
        args = self.args("main")
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r1])

    def test_empty_session_value_falls_back_to_item(self):
        context.page_designer.is_designing = True
        context.page_designer.handle = "pd-handle"
        self.assertEqual(
            self.processor.get_effective_layout_definition(), self.page["__Renderings"]
        )

    def test_no_layout_anywhere(self):
        context.item = None
        self.assertIsNone(self.processor.get_effective_layout_definition())
        self.assertIsNone(self.processor.get_placeholder_items("main", self.db))
        args = self.args("main")
        self.processor.process(args)
        self.assertFalse(args.has_placeholder_settings)


class TestWithoutDevice(SiteTestCase):
    def test_single_item_from_context_device(self):
        m1 = self.settings("Main", [self.r1.id])
        m3 = self.settings("Main Two", [self.r2.id])
        layout = layout_xml((D1, [("main", m1.id), ("main", m3.id)]))
        context.device_id = D1
        args = self.args("main", layout, device_id=None)
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r1])

    def test_null_device_falls_back_to_cache(self):
        self.settings("Main", [self.r3.id], key="main")
        args = self.args("page/main", layout_xml(), device_id="{00000000-0000-0000-0000-000000000000}")
        self.processor.process(args)
        self.assertEqual(args.placeholder_renderings, [self.r3])

    def test_nothing_found(self):
        args = self.args("main", layout_xml(), device_id="")
        self.processor.process(args)
        self.assertFalse(args.has_placeholder_settings)
        self.assertTrue(args.options.show_tree)
        self.assertIsNone(args.placeholder_renderings)


if __name__ == "__main__":
    unittest.main()
