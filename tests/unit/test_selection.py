"""
Unit tests for best-fit selection, coverage and improvement checks
"""

import pytest

from common.types import CatalogEntry, Layer, TextureBinding, Tile
from static_imagery.selection import is_within_coverage, select_best_image, should_improve
from tests.fakes import CRS, ext


def entry(name, *bounds):
    return CatalogEntry(image=name, extent=ext(*bounds))


def loaded_layer(*entries):
    return Layer(id="ortho", projection=CRS, url="x/metadata.json", extent=ext(0, 0, 100, 100), catalog=tuple(entries))


class TestSelectBestImage:
    """Pairwise-dominance selection of the smallest covering image"""

    def test_nested_images_pick_smaller(self):
        """Both cover; the one smaller on both axes wins"""
        catalog = (entry("img1", 0, 0, 10, 10), entry("img2", 2, 2, 4, 4))
        best = select_best_image(catalog, ext(3, 3, 3.5, 3.5))
        assert best is not None
        assert best.image == "img2"

    def test_only_covering_entries_qualify(self):
        """A smaller entry that does not contain the target is ignored"""
        catalog = (entry("big", 0, 0, 10, 10), entry("small_elsewhere", 6, 6, 7, 7))
        best = select_best_image(catalog, ext(1, 1, 2, 2))
        assert best.image == "big"
        assert ext(1, 1, 2, 2).is_inside(best.extent)

    def test_single_covering_entry_is_returned(self):
        catalog = (entry("a", 0, 0, 1, 1), entry("b", 5, 5, 9, 9), entry("c", 20, 20, 30, 30))
        assert select_best_image(catalog, ext(6, 6, 7, 7)).image == "b"

    def test_no_covering_entry(self):
        catalog = (entry("img1", 0, 0, 10, 10), entry("img2", 2, 2, 4, 4))
        assert select_best_image(catalog, ext(20, 20, 21, 21)) is None
        assert select_best_image((), ext(0, 0, 1, 1)) is None

    def test_partial_overlap_does_not_qualify(self):
        catalog = (entry("half", 0, 0, 5, 5),)
        assert select_best_image(catalog, ext(4, 4, 6, 6)) is None

    @pytest.mark.parametrize("order", [("A", "B"), ("B", "A")])
    def test_dominant_entry_wins_regardless_of_order(self, order):
        """A (2x2) dominates B (4x4) whichever is seen first"""
        by_name = {"A": entry("A", 0, 0, 2, 2), "B": entry("B", 0, 0, 4, 4)}
        catalog = tuple(by_name[n] for n in order)
        assert select_best_image(catalog, ext(0.5, 0.5, 1, 1)).image == "A"

    def test_incomparable_entries_keep_first_seen(self):
        """A (2 wide, 5 tall) vs B (5 wide, 2 tall): neither dominates, order decides"""
        a = entry("A", 0, 0, 2, 5)
        b = entry("B", 0, 0, 5, 2)
        target = ext(0.5, 0.5, 1, 1)
        assert select_best_image((a, b), target).image == "A"
        assert select_best_image((b, a), target).image == "B"

    def test_equal_dimensions_later_entry_replaces(self):
        """Ties count as dominance (<=), so the later equal-size entry is kept"""
        first = entry("first", 0, 0, 4, 4)
        second = entry("second", 1, 1, 5, 5)
        assert select_best_image((first, second), ext(2, 2, 3, 3)).image == "second"

    def test_dominance_is_not_area_minimum(self):
        """
        C is seen first; A (smaller area) does not dominate C, so C stays and B,
        which is dominated by C, cannot replace it either.
        """
        c = entry("C", 0, 0, 3, 3)      # 9
        a = entry("A", 0, 0, 1, 8)      # 8, taller than C
        b = entry("B", 0, 0, 4, 4)      # 16
        assert select_best_image((c, a, b), ext(0.2, 0.2, 0.8, 0.8)).image == "C"


class TestCoverage:
    """Tile within any catalog entry"""

    def test_scenario_outside_coverage(self):
        layer = loaded_layer(entry("img1", 0, 0, 10, 10), entry("img2", 2, 2, 4, 4))
        assert not is_within_coverage(Tile(extent=ext(20, 20, 21, 21), level=3), layer)
        assert is_within_coverage(Tile(extent=ext(3, 3, 3.5, 3.5), level=3), layer)

    def test_unloaded_layer_covers_nothing(self):
        layer = Layer(id="ortho", projection=CRS, url="x/metadata.json", extent=[0, 0, 10, 10])
        assert not is_within_coverage(Tile(extent=ext(1, 1, 2, 2), level=0), layer)


class TestShouldImprove:
    """Identity-based improvement check"""

    def setup_method(self):
        self.layer = loaded_layer(entry("img1", 0, 0, 10, 10), entry("img2", 2, 2, 4, 4))

    def test_false_when_nothing_covers(self):
        tile = Tile(extent=ext(20, 20, 21, 21), level=3, surface=object())
        assert should_improve(self.layer, tile) is False

    def test_false_when_catalog_not_loaded(self):
        layer = Layer(id="ortho", projection=CRS, url="x/metadata.json", extent=[0, 0, 10, 10])
        assert should_improve(layer, Tile(extent=ext(1, 1, 2, 2), level=0)) is False

    def test_true_when_nothing_bound(self):
        tile = Tile(extent=ext(3, 3, 3.5, 3.5), level=3, surface=object())
        assert should_improve(self.layer, tile) is True

    def test_check_does_not_create_binding(self):
        tile = Tile(extent=ext(3, 3, 3.5, 3.5), level=3, surface=object())
        assert should_improve(self.layer, tile) is True
        assert tile.bindings == {}

    def test_false_when_already_bound_to_selection(self):
        tile = Tile(extent=ext(3, 3, 3.5, 3.5), level=3, surface=object())
        tile.bindings["ortho"] = TextureBinding(source_file="img2")
        assert should_improve(self.layer, tile) is False

    def test_true_when_bound_to_other_image(self):
        tile = Tile(extent=ext(3, 3, 3.5, 3.5), level=3, surface=object())
        tile.bindings["ortho"] = TextureBinding(source_file="img1")
        assert should_improve(self.layer, tile) is True

    def test_explicit_binding_overrides_tile_slot(self):
        tile = Tile(extent=ext(3, 3, 3.5, 3.5), level=3, surface=object())
        tile.bindings["ortho"] = TextureBinding(source_file="img1")
        assert should_improve(self.layer, tile, TextureBinding(source_file="img2")) is False
