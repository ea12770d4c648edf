"""
Order Diff Tests

The diff engine classifies menu items into added / removed / updated sets.
"""
from types import SimpleNamespace

from orders.services.diff_service import DECREASED, INCREASED, diff_lines


def line(menu_item_id, quantity, name=None, category="uncategorized"):
    return SimpleNamespace(
        menu_item_id=menu_item_id, quantity=quantity, name=name or menu_item_id.upper(), category=category
    )


class TestDiffLines:
    def test_scenario_add_and_increase(self):
        """Two A becomes three A plus one B."""
        diff = diff_lines([line("a", 2)], [line("a", 3), line("b", 1)])

        assert [c.menu_item_id for c in diff.added] == ["b"]
        assert diff.removed == ()
        assert len(diff.updated) == 1
        updated = diff.updated[0]
        assert (updated.menu_item_id, updated.old_quantity, updated.new_quantity) == ("a", 2, 3)
        assert updated.direction == INCREASED
        assert updated.change == 1

    def test_removed_and_decreased(self):
        diff = diff_lines([line("a", 3), line("b", 1)], [line("a", 1)])

        assert [c.menu_item_id for c in diff.removed] == ["b"]
        assert diff.updated[0].direction == DECREASED
        assert diff.updated[0].to_dict()["type"] == "decreased"

    def test_equal_quantities_are_not_changes(self):
        diff = diff_lines([line("a", 2), line("b", 1)], [line("b", 1), line("a", 2)])
        assert not diff.has_changes

    def test_sets_are_disjoint_and_complete(self):
        old = [line("a", 1), line("b", 2), line("c", 3)]
        new = [line("b", 2), line("c", 4), line("d", 1)]
        diff = diff_lines(old, new)

        added = {c.menu_item_id for c in diff.added}
        removed = {c.menu_item_id for c in diff.removed}
        updated = {c.menu_item_id for c in diff.updated}

        assert added == {"d"}
        assert removed == {"a"}
        assert updated == {"c"}
        assert not (added & removed or added & updated or removed & updated)

    def test_iteration_order_does_not_change_sets(self):
        old = [line("a", 1), line("b", 2)]
        new = [line("c", 1), line("b", 5)]
        forward = diff_lines(old, new)
        backward = diff_lines(list(reversed(old)), list(reversed(new)))

        assert {c.menu_item_id for c in forward.added} == {c.menu_item_id for c in backward.added}
        assert {c.menu_item_id for c in forward.removed} == {c.menu_item_id for c in backward.removed}
        assert {c.menu_item_id for c in forward.updated} == {c.menu_item_id for c in backward.updated}

    def test_removed_entries_keep_old_snapshot_name(self):
        diff = diff_lines([line("a", 1, name="Old Burger")], [line("b", 1)])
        assert diff.removed[0].name == "Old Burger"

    def test_summary_and_history_shapes(self):
        diff = diff_lines([line("a", 1)], [line("a", 2), line("b", 1)])

        assert set(diff.to_summary()) == {"items_added", "items_removed", "items_updated"}
        history = diff.to_history()
        assert history["added"][0]["menu_item_id"] == "b"
        assert history["updated"][0]["old_quantity"] == 1
        assert history["removed"] == []
