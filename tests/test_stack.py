#!/usr/bin/env python3
"""Tests for the stacked layout."""
import sys
import threading
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chartshape.stack import StackLayout, stack_layout, x_domain


def test_simple_stacked_data():
    """Two series sharing numeric x values stack on each other."""
    data = [
        {"name": "a", "data": [{"x": 0, "y": 1}, {"x": 1, "y": 2}]},
        {"name": "b", "data": [{"x": 0, "y": 4}, {"x": 1, "y": 5}]},
    ]
    expected = [
        {"name": "a", "data": [{"x": 0, "y": 1, "y0": 0}, {"x": 1, "y": 2, "y0": 0}]},
        {"name": "b", "data": [{"x": 0, "y": 4, "y0": 1}, {"x": 1, "y": 5, "y0": 2}]},
    ]

    res = stack_layout()(data)

    assert res == expected
    assert res is data


def test_stacked_categorical_data():
    """Categorical labels accumulate only within the same label."""
    data = [
        {"name": "app1", "data": [{"x": "10.10", "y": 5}]},
        {"name": "app2", "data": [{"x": "10.10", "y": 7}]},
        {"name": "app3", "data": [{"x": "10.11", "y": 9}]},
        {"name": "app4", "data": [{"x": "10.11", "y": 3}]},
    ]
    expected = [
        {"name": "app1", "data": [{"x": "10.10", "y": 5, "y0": 0}]},
        {"name": "app2", "data": [{"x": "10.10", "y": 7, "y0": 5}]},
        {"name": "app3", "data": [{"x": "10.11", "y": 9, "y0": 0}]},
        {"name": "app4", "data": [{"x": "10.11", "y": 3, "y0": 9}]},
    ]

    assert stack_layout()(data) == expected


def test_complex_categorical_data():
    """Four series on one label accumulate 0, 1, 5, 6."""
    data = [
        {"data": [{"x": "10.0.17.22", "y": 1}], "name": "/monitoring/model-lua"},
        {"data": [{"x": "10.0.17.22", "y": 4}], "name": "/jaimedp/pda"},
        {"data": [{"x": "10.0.17.22", "y": 1}], "name": "/monitoring/model-julia"},
        {"data": [{"x": "10.0.17.22", "y": 146}], "name": "Free"},
    ]
    expected = [
        {"data": [{"x": "10.0.17.22", "y": 1, "y0": 0}], "name": "/monitoring/model-lua"},
        {"data": [{"x": "10.0.17.22", "y": 4, "y0": 1}], "name": "/jaimedp/pda"},
        {"data": [{"x": "10.0.17.22", "y": 1, "y0": 5}], "name": "/monitoring/model-julia"},
        {"data": [{"x": "10.0.17.22", "y": 146, "y0": 6}], "name": "Free"},
    ]

    assert stack_layout()(data) == expected


def test_point_identity_preserved():
    """Only y0 is added; point objects are the caller's own."""
    point = {"x": 0, "y": 3}
    data = [{"name": "a", "data": [point]}, {"name": "b", "data": [{"x": 0, "y": 2}]}]

    res = stack_layout()(data)

    assert res[0]["data"][0] is point
    assert point == {"x": 0, "y": 3, "y0": 0}
    assert res[1]["data"][0]["y0"] == 3


def test_none_y_contributes_zero():
    """A missing y still gets a baseline but does not raise it."""
    data = [
        {"name": "a", "data": [{"x": 0, "y": None}]},
        {"name": "b", "data": [{"x": 0}]},
        {"name": "c", "data": [{"x": 0, "y": 2}]},
    ]

    res = stack_layout()(data)

    assert [s["data"][0]["y0"] for s in res] == [0, 0, 0]
    assert res[1]["data"][0]["y"] is None


def test_disjoint_x_start_at_zero():
    """Series that share no x never stack."""
    data = [
        {"name": "a", "data": [{"x": 0, "y": 1}]},
        {"name": "b", "data": [{"x": 1, "y": 2}]},
        {"name": "c", "data": [{"x": 0.5, "y": 3}]},
    ]

    res = stack_layout()(data)

    assert [s["data"][0]["y0"] for s in res] == [0, 0, 0]


def test_accepts_raw_shapes():
    """Arrays of arrays are normalized before stacking."""
    res = stack_layout()([[1, 2, 3], [10, 20, 30], [100, 200, 300]])

    assert [p["y0"] for p in res[0]["data"]] == [0, 0, 0]
    assert [p["y0"] for p in res[1]["data"]] == [1, 2, 3]
    assert [p["y0"] for p in res[2]["data"]] == [11, 22, 33]


def test_categories_forwarded():
    """Categories label raw values before stacking."""
    res = StackLayout(categories=["q1", "q2"])([[1, 2], [3, 4]])

    assert [p["x"] for p in res[1]["data"]] == ["q1", "q2"]
    assert [p["y0"] for p in res[1]["data"]] == [1, 2]


def test_empty_input():
    """An empty collection stays empty."""
    data = []
    assert stack_layout()(data) is data


def test_x_domain_first_seen_order():
    """Distinct x values follow first appearance, not sort order."""
    data = [
        {"name": "a", "data": [{"x": "z", "y": 1}, {"x": "b", "y": 1}]},
        {"name": "b", "data": [{"x": "a", "y": 1}, {"x": "z", "y": 1}]},
    ]

    assert x_domain(data) == ["z", "b", "a"]


def test_layout_reusable_across_threads():
    """One layout function can serve independent inputs concurrently."""
    layout = stack_layout()
    results = {}

    def worker(n):
        data = [[n, n], [n, n]]
        results[n] = layout(data)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for n, res in results.items():
        assert [p["y0"] for p in res[1]["data"]] == [n, n]
