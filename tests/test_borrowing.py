"""Tests for key borrowing (Registry.use).

Covers linking, validation, cycle detection across namespaces and the
propagation of target changes to borrowing keys.
"""

from nsi18n import ChangeEvent, ErrorCode, ErrorCollector, Namespace
from nsi18n.enums import EntryKind


class Recorder:
    """Listener that records delivered payloads."""

    def __init__(self) -> None:
        self.keys: list[str] = []

    def __call__(self, event: ChangeEvent, value: str) -> None:
        assert event is ChangeEvent.KEY
        self.keys.append(value)


class TestUse:
    """Test linking a key to an external full key."""

    def test_borrowed_value(self, root: Namespace, errors: ErrorCollector) -> None:
        """A borrowed key resolves through its target."""
        common = root.register("common")
        dialog = root.register("dialog")
        assert common is not None
        assert dialog is not None
        common.set("ok", "OK", "ru_ru")

        assert dialog.use("confirm", "common.ok") is True
        assert root.t("dialog.confirm") == "OK"
        assert dialog.entry_kind("confirm") is EntryKind.BORROW
        assert dialog.borrow_target("confirm") == "common.ok"
        assert len(errors) == 0

    def test_lookup_reports_target_registry(self, root: Namespace) -> None:
        """The Found of a borrowed key names the registry holding the value."""
        common = root.register("common")
        dialog = root.register("dialog")
        assert common is not None
        assert dialog is not None
        common.set("ok", "OK", "ru_ru")
        dialog.use("confirm", "common.ok")
        found = root.lookup("dialog.confirm")
        assert found is not None
        assert found.registry is common

    def test_target_registered_later(self, root: Namespace, errors: ErrorCollector) -> None:
        """The target may be registered and set after the borrow."""
        dialog = root.register("dialog")
        assert dialog is not None
        assert dialog.use("confirm", "common.ok") is True
        assert root.t("dialog.confirm") == ""

        common = root.register("common")
        assert common is not None
        common.set("ok", "OK", "ru_ru")
        assert root.t("dialog.confirm") == "OK"
        assert errors.codes == (ErrorCode.UNREGISTERED_KEY,)

    def test_same_target_is_noop(self, root: Namespace) -> None:
        """Borrowing the current target again changes nothing."""
        dialog = root.register("dialog")
        assert dialog is not None
        dialog.use("confirm", "common.ok")
        recorder = Recorder()
        root.on("key", recorder)

        assert dialog.use("confirm", "common.ok") is True
        assert recorder.keys == []
        assert root.resolver.notifier.listener_count("common") == 1

    def test_relink_moves_subscription(self, root: Namespace) -> None:
        """Borrowing a new target drops the old link."""
        common = root.register("common")
        dialog = root.register("dialog")
        assert common is not None
        assert dialog is not None
        common.set("ok", "OK", "ru_ru")
        common.set("yes", "Yes", "ru_ru")
        dialog.use("confirm", "common.ok")
        dialog.use("confirm", "common.yes")

        assert root.t("dialog.confirm") == "Yes"
        assert root.resolver.notifier.listener_count("common") == 1
        common.set("ok", "Okay", "ru_ru")
        assert root.t("dialog.confirm") == "Yes"

    def test_use_replaces_direct_values(self, root: Namespace) -> None:
        """use() discards every stored locale of the key."""
        common = root.register("common")
        dialog = root.register("dialog")
        assert common is not None
        assert dialog is not None
        common.set("ok", "OK", "ru_ru")
        dialog.set("confirm", "Own", "ru_ru")
        dialog.set("confirm", "Own EN", "en_us")
        assert root.t("dialog.confirm") == "Own"

        dialog.use("confirm", "common.ok")
        assert root.t("dialog.confirm") == "OK"

    def test_set_replaces_borrow(self, root: Namespace) -> None:
        """set() turns a borrow into a direct value and unlinks it."""
        common = root.register("common")
        dialog = root.register("dialog")
        assert common is not None
        assert dialog is not None
        common.set("ok", "OK", "ru_ru")
        dialog.use("confirm", "common.ok")
        assert root.t("dialog.confirm") == "OK"

        dialog.set("confirm", "Own", "ru_ru")
        assert dialog.entry_kind("confirm") is EntryKind.DIRECT
        assert root.resolver.notifier.listener_count("common") == 0
        common.set("ok", "Changed", "ru_ru")
        assert root.t("dialog.confirm") == "Own"

    def test_keys_in_insertion_order(self, root: Namespace) -> None:
        """keys() lists direct and borrowed keys in insertion order."""
        ns = root.register("ns")
        assert ns is not None
        ns.set("b", "B", "ru_ru")
        ns.use("a", "other.key")
        assert list(ns.keys()) == ["b", "a"]
        assert ns.has_key("a")
        assert root.has("ns.a")


class TestUseValidation:
    """Test refused borrows."""

    def test_invalid_key(self, root: Namespace, errors: ErrorCollector) -> None:
        """A malformed local key is refused."""
        ns = root.register("ns")
        assert ns is not None
        assert ns.use("a..b", "other.key") is False
        detail = errors.last
        assert detail is not None
        assert detail.code is ErrorCode.INVALID_KEY_SYNTAX
        assert detail.namespace == "ns"

    def test_invalid_target(self, root: Namespace, errors: ErrorCollector) -> None:
        """A malformed target is refused."""
        ns = root.register("ns")
        assert ns is not None
        assert ns.use("a", "other..key") is False
        detail = errors.last
        assert detail is not None
        assert detail.code is ErrorCode.INVALID_KEY_SYNTAX
        assert detail.namespace is None
        assert detail.key == "other..key"

    def test_top_level_target(self, root: Namespace, errors: ErrorCollector) -> None:
        """A target without a namespace part is refused."""
        ns = root.register("ns")
        assert ns is not None
        assert ns.use("a", "he") is False
        assert errors.codes == (ErrorCode.INVALID_KEY_SYNTAX,)
        assert not ns.has_key("a")

    def test_self_reference(self, root: Namespace, errors: ErrorCollector) -> None:
        """A key cannot borrow itself."""
        ns = root.register("ns")
        assert ns is not None
        assert ns.use("a", "ns.a") is False
        detail = errors.last
        assert detail is not None
        assert detail.code is ErrorCode.CIRCULAR_DEPENDENCY
        assert detail.key == "ns.a"
        assert not ns.has_key("a")


class TestCycles:
    """Test cycle detection when borrowing."""

    def test_direct_cycle(self, root: Namespace, errors: ErrorCollector) -> None:
        """Two keys of one namespace cannot borrow each other."""
        ns = root.register("ns")
        assert ns is not None
        assert ns.use("a", "ns.b") is True
        assert ns.use("b", "ns.a") is False
        assert errors.codes == (ErrorCode.CIRCULAR_DEPENDENCY,)
        assert ns.entry_kind("b") is None

        assert root.get_value("ns.a") == ""
        assert errors.codes == (ErrorCode.CIRCULAR_DEPENDENCY, ErrorCode.UNREGISTERED_KEY)

    def test_cycle_through_three_namespaces(self, root: Namespace, errors: ErrorCollector) -> None:
        """A cycle closing through other namespaces is refused and changes nothing."""
        ns1 = root.register("ns1")
        ns2 = root.register("ns2")
        ns3 = root.register("ns3")
        assert ns1 is not None
        assert ns2 is not None
        assert ns3 is not None

        assert ns1.use("v", "ns2.v") is True
        assert ns2.use("v", "ns3.v") is True
        assert ns3.use("v", "ns1.w") is True
        assert ns1.set("w", "X", "ru_ru") is True
        assert root.t("ns1.v") == "X"
        assert len(errors) == 0

        assert ns1.use("w", "ns1.v") is False
        assert errors.codes == (ErrorCode.CIRCULAR_DEPENDENCY,)
        assert ns1.entry_kind("w") is EntryKind.DIRECT
        assert root.t("ns1.v") == "X"
        assert root.t("ns1.w") == "X"

    def test_diamond_is_not_a_cycle(self, root: Namespace, errors: ErrorCollector) -> None:
        """Two keys borrowing the same target do not form a cycle."""
        ns = root.register("ns")
        assert ns is not None
        ns.set("base", "Base", "ru_ru")
        assert ns.use("left", "ns.base") is True
        assert ns.use("right", "ns.base") is True
        assert ns.use("top", "ns.left") is True
        assert root.t("ns.top") == "Base"
        assert root.t("ns.right") == "Base"
        assert len(errors) == 0

    def test_cycle_found_during_lookup(self, root: Namespace, errors: ErrorCollector) -> None:
        """A lookup skips cyclic candidates and reports the cycle instead of a miss."""
        p = root.register("p")
        pq = root.register("p.q")
        z = root.register("z")
        assert p is not None
        assert pq is not None
        assert z is not None
        p.set("q.r", "X", "ru_ru")
        assert z.use("w", "p.q.r") is True
        assert pq.use("r", "z.w") is True

        # An empty value counts as absent: the search falls through to p.q,
        # whose borrow leads back to p.q.r.
        p.set("q.r", "", "ru_ru")
        assert len(errors) == 0

        assert root.get_value("p.q.r") == ""
        assert ErrorCode.CIRCULAR_DEPENDENCY in errors.codes
        assert ErrorCode.UNREGISTERED_KEY not in errors.codes
        reported = len(errors)

        assert root.get_value("p.q.r") == ""
        assert len(errors) == reported

        p.set("q.r", "Y", "ru_ru")
        assert root.t("p.q.r") == "Y"
        assert root.t("z.w") == "Y"
        assert len(errors) == reported


class TestPropagation:
    """Test change propagation from targets to borrowing keys."""

    def test_target_change_updates_borrowed_value(self, root: Namespace) -> None:
        """A cached borrowed value follows its target."""
        ns1 = root.register("ns1")
        ns2 = root.register("ns2")
        assert ns1 is not None
        assert ns2 is not None
        ns1.set("var", "one", "ru_ru")
        ns2.use("x", "ns1.var")
        assert root.t("ns2.x") == "one"

        ns1.set("var", "two", "ru_ru")
        assert root.t("ns2.x") == "two"

    def test_chain_propagates(self, root: Namespace) -> None:
        """Changes travel through chains of borrows."""
        a = root.register("a")
        b = root.register("b")
        c = root.register("c")
        assert a is not None
        assert b is not None
        assert c is not None
        a.set("x", "one", "ru_ru")
        b.use("y", "a.x")
        c.use("z", "b.y")
        assert root.t("c.z") == "one"

        a.set("x", "two", "ru_ru")
        assert root.t("c.z") == "two"

    def test_target_in_nested_registry(self, root: Namespace) -> None:
        """Targets owned by a deeper registry still propagate."""
        deep = root.register("ns1.deep")
        ns2 = root.register("ns2")
        assert deep is not None
        assert ns2 is not None
        deep.set("var", "one", "ru_ru")
        ns2.use("x", "ns1.deep.var")
        assert root.t("ns2.x") == "one"

        deep.set("var", "two", "ru_ru")
        assert root.t("ns2.x") == "two"

    def test_key_events_for_borrowing_keys(self, root: Namespace) -> None:
        """Every scope above a borrowing key hears about it, relative to itself."""
        ns1 = root.register("ns1")
        ns2 = root.register("ns2")
        assert ns1 is not None
        assert ns2 is not None
        ns1.set("var", "one", "ru_ru")

        all_keys, ns2_keys, deep_keys = Recorder(), Recorder(), Recorder()
        root.on("key", all_keys)
        root.get_namespace("ns2").on("key", ns2_keys)
        root.get_namespace("ns2.very.long").on("key", deep_keys)

        ns2.use("very.long.variable", "ns1.var")
        assert all_keys.keys == ["ns2.very.long.variable"]
        assert ns2_keys.keys == ["very.long.variable"]
        assert deep_keys.keys == ["variable"]

        ns1.set("var", "two", "ru_ru")
        assert all_keys.keys == [
            "ns2.very.long.variable",
            "ns1.var",
            "ns2.very.long.variable",
        ]
        assert ns2_keys.keys == ["very.long.variable", "very.long.variable"]
        assert deep_keys.keys == ["variable", "variable"]

    def test_unrelated_target_key_ignored(self, root: Namespace) -> None:
        """Changes of sibling keys in the target namespace do not propagate."""
        ns1 = root.register("ns1")
        ns2 = root.register("ns2")
        assert ns1 is not None
        assert ns2 is not None
        ns2.use("x", "ns1.var")
        recorder = Recorder()
        root.get_namespace("ns2").on("key", recorder)

        ns1.set("other", "value", "ru_ru")
        assert recorder.keys == []

    def test_mutual_borrows_through_nested_registries(self, root: Namespace) -> None:
        """Borrows resolving through each other announce each key once per change."""
        p = root.register("p")
        pq = root.register("p.q")
        z = root.register("z")
        assert p is not None
        assert pq is not None
        assert z is not None
        p.set("q.r", "X", "ru_ru")
        assert z.use("w", "p.q.r") is True
        recorder = Recorder()
        root.on("key", recorder)

        # p.q.r still resolves through p, so this is not a cycle.
        assert pq.use("r", "z.w") is True
        assert recorder.keys == ["p.q.r", "z.w"]
        assert root.t("p.q.r") == "X"
        assert root.t("z.w") == "X"

        recorder.keys.clear()
        p.set("q.r", "Y", "ru_ru")
        assert recorder.keys == ["p.q.r", "z.w", "p.q.r"]
        assert root.t("z.w") == "Y"
