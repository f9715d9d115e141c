import io
import unittest

from pyportal.runtime.registry import BucketKind, PortalRegistry, policy_for


class TestPortalRegistry(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = PortalRegistry()

    def test_append_keeps_order(self) -> None:
        for text in ["a", "b", "c", "b"]:
            self.registry.append("k", text)

        out = io.StringIO()
        self.registry.flush(out, "k")
        self.assertEqual(out.getvalue(), "abcb")
        self.assertEqual(self.registry.fragments("k"), ["a", "b", "c", "b"])

    def test_append_unique_is_idempotent(self) -> None:
        self.registry.append_unique("k", "<p>once</p>")
        self.registry.append_unique("k", "<p>once</p>")
        self.assertEqual(self.registry.fragments("k"), ["<p>once</p>"])

    def test_append_unique_is_case_sensitive(self) -> None:
        self.registry.append_unique("k", "<b>x</b>")
        self.registry.append_unique("k", "<B>x</B>")
        self.assertEqual(self.registry.fragments("k"), ["<b>x</b>", "<B>x</B>"])

    def test_append_unique_front(self) -> None:
        self.registry.append_unique_front("k", "a")
        self.registry.append_unique_front("k", "b")
        self.assertEqual(self.registry.fragments("k"), ["b", "a"])

        self.registry.append_unique_front("k", "a")
        self.assertEqual(self.registry.fragments("k"), ["b", "a"])

    def test_front_insert_keeps_existing_positions(self) -> None:
        for text in ["a", "b", "c"]:
            self.registry.append_unique_front("k", text)
        self.registry.append_unique_front("k", "b")
        self.registry.append_unique_front("k", "d")
        self.assertEqual(self.registry.fragments("k"), ["d", "c", "b", "a"])

    def test_unwritten_bucket_is_empty(self) -> None:
        self.assertEqual(self.registry.render("never-written"), "")
        self.assertEqual(self.registry.fragments("never-written"), [])
        self.assertEqual(self.registry.render(BucketKind.STYLESHEET), "")

    def test_clear(self) -> None:
        self.registry.append("k", "x")
        self.registry.append("k", "y")
        self.registry.clear("k")
        self.assertEqual(self.registry.render("k"), "")

        # Clearing an empty or untouched bucket is fine
        self.registry.clear("k")
        self.registry.clear("other")

    def test_clear_defaults_to_default_bucket(self) -> None:
        self.registry.append(BucketKind.DEFAULT, "x")
        self.registry.append("k", "y")
        self.registry.clear()
        self.assertEqual(self.registry.render(), "")
        self.assertEqual(self.registry.render("k"), "y")

    def test_buckets_are_isolated(self) -> None:
        self.registry.append("k1", "one")
        self.registry.append("k2", "two")
        self.registry.append("K1", "upper")
        self.assertEqual(self.registry.render("k1"), "one")
        self.assertEqual(self.registry.render("k2"), "two")
        self.assertEqual(self.registry.render("K1"), "upper")

    def test_flush_does_not_clear(self) -> None:
        self.registry.append("k", "x")
        out = io.StringIO()
        self.registry.flush(out, "k")
        self.registry.flush(out, "k")
        self.assertEqual(out.getvalue(), "xx")

    def test_flush_only_sees_earlier_appends(self) -> None:
        self.registry.append("k", "before")
        first = self.registry.render("k")
        self.registry.append("k", "after")
        self.assertEqual(first, "before")
        self.assertEqual(self.registry.render("k"), "beforeafter")

    def test_default_bucket_is_verbatim(self) -> None:
        self.registry.append(BucketKind.DEFAULT, "<div>X</div>")
        self.assertEqual(self.registry.render(), "<div>X</div>")

    def test_stylesheet_output(self) -> None:
        self.registry.add_css("~/content/a.css")
        self.registry.add_css("~/content/b.css")
        self.assertEqual(
            self.registry.render(BucketKind.STYLESHEET),
            '<link href="/content/b.css" rel="stylesheet" type="text/css"/>'
            '<link href="/content/a.css" rel="stylesheet" type="text/css"/>',
        )

    def test_stylesheet_dedup_by_resolved_path(self) -> None:
        self.registry.add_css("~/content/a.css")
        self.registry.add_css_absolute("/content/a.css")
        self.assertEqual(self.registry.fragments(BucketKind.STYLESHEET), ["/content/a.css"])

    def test_script_file_output(self) -> None:
        self.registry.add_js("~/scripts/app.js")
        self.registry.add_js_absolute("https://cdn.example.com/lib.js")
        self.assertEqual(
            self.registry.render(BucketKind.SCRIPT_FILE),
            '<script src="https://cdn.example.com/lib.js" type="text/javascript"></script>'
            '<script src="/scripts/app.js" type="text/javascript"></script>',
        )

    def test_root_path_applies_to_relative_assets(self) -> None:
        registry = PortalRegistry(root_path="/shop/")
        registry.add_css("~/content/site.css")
        registry.add_js("~/scripts/site.js")
        self.assertEqual(registry.fragments(BucketKind.STYLESHEET), ["/shop/content/site.css"])
        self.assertEqual(registry.fragments(BucketKind.SCRIPT_FILE), ["/shop/scripts/site.js"])

    def test_custom_resolver(self) -> None:
        registry = PortalRegistry(resolver=lambda path: "/v2" + path[1:])
        registry.add_css("~/a.css")
        self.assertEqual(registry.fragments(BucketKind.STYLESHEET), ["/v2/a.css"])

    def test_custom_resolver_ignores_root_path(self) -> None:
        registry = PortalRegistry(root_path="/shop", resolver=lambda path: "/cdn" + path[1:])
        registry.add_js("~/app.js")
        self.assertEqual(registry.fragments(BucketKind.SCRIPT_FILE), ["/cdn/app.js"])
        self.assertFalse(hasattr(registry, "root_path"))

    def test_script_block(self) -> None:
        block = "<script>init();</script>"
        self.registry.add_script(block)
        self.registry.add_script(block)
        self.assertEqual(self.registry.render(BucketKind.SCRIPT_BLOCK), block * 2)

        self.registry.clear(BucketKind.SCRIPT_BLOCK)
        self.registry.add_script_unique(block)
        self.registry.add_script_unique(block)
        self.assertEqual(self.registry.render(BucketKind.SCRIPT_BLOCK), block)

    def test_reserved_name_shares_kind(self) -> None:
        self.registry.add_css_absolute("/a.css")
        self.assertEqual(self.registry.fragments("__PORTAL_CSS_KEY"), ["/a.css"])
        self.assertIn("<link", self.registry.render("__PORTAL_CSS_KEY"))

    def test_add_uses_bucket_policy(self) -> None:
        self.registry.add(BucketKind.STYLESHEET, "/a.css")
        self.registry.add(BucketKind.STYLESHEET, "/b.css")
        self.registry.add(BucketKind.STYLESHEET, "/a.css")
        self.registry.add("custom", "x")
        self.registry.add("custom", "x")
        self.assertEqual(self.registry.fragments(BucketKind.STYLESHEET), ["/b.css", "/a.css"])
        self.assertEqual(self.registry.fragments("custom"), ["x", "x"])

    def test_policy_table(self) -> None:
        self.assertTrue(policy_for(BucketKind.SCRIPT_FILE).front)
        self.assertFalse(policy_for(BucketKind.SCRIPT_BLOCK).unique)
        self.assertEqual(policy_for("anything").format("x"), "x")

    def test_fragments_returns_copy(self) -> None:
        self.registry.append("k", "x")
        self.registry.fragments("k").append("y")
        self.assertEqual(self.registry.fragments("k"), ["x"])

    def test_touched_buckets(self) -> None:
        self.assertEqual(len(self.registry), 0)
        self.registry.append("k", "x")
        self.registry.render("empty")
        self.assertIn("k", self.registry)
        self.assertIn("empty", self.registry)
        self.assertNotIn("other", self.registry)
        self.assertEqual(self.registry.buckets(), ["k", "empty"])
        self.assertEqual(list(self.registry), ["k", "empty"])


if __name__ == "__main__":
    unittest.main()
