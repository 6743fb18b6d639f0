from __future__ import annotations

import itertools
import random

import pytest

from core.models import COLLAPSED, Collapsed, Expanded, LayoutMetrics
from core.services.catalog_service import Catalog
from core.services.layout_service import GalleryLayout, compute_geometry, content_height


def closed_form(layout: GalleryLayout) -> float:
    m = layout.metrics
    extra = m.detail_height if layout.expanded_index is not None else 0
    return m.top_inset + layout.row_count * (m.row_height + m.margin) + extra


class TestComputeGeometry:
    def test_collapsed_rows_are_evenly_spaced(self, metrics):
        geo = compute_geometry(3, COLLAPSED, metrics)
        assert geo.row_offsets() == [0, 210, 420]
        assert geo.detail is None
        assert geo.content_height == 630

    def test_expanded_row_pushes_later_rows_down(self, metrics):
        geo = compute_geometry(4, Expanded(1), metrics)
        assert geo.row_offsets() == [0, 210, 540, 750]
        assert geo.detail is not None
        assert geo.detail.index == 1
        assert geo.detail.y == 410
        assert geo.detail.height == 120
        assert geo.content_height == 960

    def test_top_inset_shifts_everything(self):
        m = LayoutMetrics(row_height=200, margin=10, detail_height=120, top_inset=10)
        geo = compute_geometry(2, Expanded(0), m)
        assert geo.row_offsets() == [10, 340]
        assert geo.content_height == 10 + 2 * 210 + 120

    def test_empty_gallery(self, metrics):
        geo = compute_geometry(0, COLLAPSED, metrics)
        assert geo.rows == ()
        assert geo.content_height == 0

    def test_expanded_out_of_range_rejected(self, metrics):
        with pytest.raises(ValueError):
            compute_geometry(2, Expanded(2), metrics)

    def test_content_height_closed_form(self, metrics):
        assert content_height(5, COLLAPSED, metrics) == 5 * 210
        assert content_height(5, Expanded(4), metrics) == 5 * 210 + 120


class TestGalleryLayoutTransitions:
    def test_tap_expands_then_collapses(self, metrics):
        layout = GalleryLayout(metrics, row_count=3)
        before = layout.geometry().row_offsets()

        assert layout.tap(1) == Expanded(1)
        assert layout.content_height == 630 + 120

        assert layout.tap(1) == COLLAPSED
        assert layout.geometry().row_offsets() == before
        assert layout.content_height == 630

    def test_tap_other_row_moves_expansion(self, metrics):
        layout = GalleryLayout(metrics, row_count=5)
        before = layout.geometry().row_offsets()
        layout.tap(1)
        layout.tap(3)
        assert layout.state == Expanded(3)
        after = layout.geometry().row_offsets()

        assert after[:2] == before[:2]
        # rows between the two taps end where they started
        assert after[2] == before[2]
        assert after[3] == before[3]
        assert after[4] == before[4] + 120
        assert layout.content_height == 5 * 210 + 120

    def test_tap_earlier_row_moves_expansion_backwards(self, metrics):
        layout = GalleryLayout(metrics, row_count=5)
        before = layout.geometry().row_offsets()
        layout.tap(3)
        layout.tap(1)
        after = layout.geometry().row_offsets()
        assert after[:2] == before[:2]
        assert after[2:] == [y + 120 for y in before[2:]]

    def test_tap_out_of_range(self, metrics):
        layout = GalleryLayout(metrics, row_count=2)
        with pytest.raises(IndexError):
            layout.tap(2)
        assert layout.state == COLLAPSED

    def test_expand_while_expanded_is_rejected(self, metrics):
        layout = GalleryLayout(metrics, row_count=3)
        layout.expand(0)
        with pytest.raises(RuntimeError):
            layout.expand(2)
        assert layout.state == Expanded(0)

    def test_reset_forces_collapsed(self, metrics):
        layout = GalleryLayout(metrics, row_count=3)
        layout.tap(2)
        layout.reset(1)
        assert isinstance(layout.state, Collapsed)
        assert layout.row_count == 1
        assert layout.content_height == 210

    def test_random_taps_keep_extent_in_closed_form(self, metrics):
        rng = random.Random(7)
        layout = GalleryLayout(metrics, row_count=6)
        for _ in range(200):
            layout.tap(rng.randrange(6))
            assert layout.content_height == closed_form(layout)
            geo = layout.geometry()
            assert (geo.detail is None) == (layout.expanded_index is None)

    @pytest.mark.parametrize("i,j", list(itertools.permutations(range(4), 2)))
    def test_rows_before_both_taps_never_move(self, metrics, i, j):
        layout = GalleryLayout(metrics, row_count=4)
        before = layout.geometry().row_offsets()
        layout.tap(i)
        layout.tap(j)
        after = layout.geometry().row_offsets()
        assert after[: min(i, j) + 1] == before[: min(i, j) + 1]


class TestLayoutFollowsCatalog:
    def test_query_change_collapses(self, records, metrics):
        catalog = Catalog()
        layout = GalleryLayout(metrics)
        catalog.add_listener(layout.reset)
        catalog.load(records)
        layout.tap(2)

        catalog.set_query("cat")
        assert layout.state == COLLAPSED
        assert layout.row_count == 1

    def test_filtered_scenario(self, records, metrics):
        catalog = Catalog()
        layout = GalleryLayout(metrics)
        catalog.add_listener(layout.reset)
        catalog.load(records)
        catalog.set_query("cat")
        assert catalog.view() == (records[1],)

        before = layout.content_height
        assert layout.tap(0) == Expanded(0)
        assert layout.content_height == before + metrics.detail_height

    def test_reload_collapses(self, records, metrics):
        catalog = Catalog()
        layout = GalleryLayout(metrics)
        catalog.add_listener(layout.reset)
        catalog.load(records)
        layout.tap(0)
        catalog.load(records[:2])
        assert layout.state == COLLAPSED
        assert layout.row_count == 2
