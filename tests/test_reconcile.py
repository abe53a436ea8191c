from src.render.reconcile import diff_keys, reconcile


def test_diff_keys_orders_by_sequence():
    diff = diff_keys(["a", "b", "c"], ["d", "c", "a", "d"])
    assert diff.entered == ["d"]
    assert diff.retained == ["c", "a"]
    assert diff.exited == ["b"]


def test_reconcile_enters_updates_and_exits():
    rendered = {}
    exited = []

    def enter(item):
        return {"value": item, "updates": 0}

    def update(mark, item):
        mark["value"] = item
        mark["updates"] += 1
        return mark

    reconcile(rendered, [1, 2, 3], key=str, on_enter=enter, on_update=update)
    kept = rendered["2"]

    diff = reconcile(
        rendered, [4, 2], key=str, on_enter=enter, on_update=update, on_exit=exited.append
    )

    assert list(rendered) == ["4", "2"]
    assert rendered["2"] is kept
    assert kept["updates"] == 1
    assert diff.entered == ["4"]
    assert diff.exited == ["1", "3"]
    assert [m["value"] for m in exited] == [1, 3]


def test_reconcile_to_empty_removes_everything():
    rendered = {}
    reconcile(rendered, ["x"], key=str, on_enter=lambda i: i, on_update=lambda m, i: m)
    diff = reconcile(rendered, [], key=str, on_enter=lambda i: i, on_update=lambda m, i: m)
    assert rendered == {}
    assert diff.exited == ["x"]
