# backend/tests/unit/board/test_reorder.py
"""Unit tests for folding a partial reorder back into the full ordering."""

import pytest

from app.modules.board.core.models import Tile
from app.modules.board.core.reorder import partition_by_variant, reconcile, renumber


def make_tiles(*ids: str, large: tuple[str, ...] = ()) -> list[Tile]:
    return [
        Tile(id=tile_id, title=tile_id, order=i, variant="large" if tile_id in large else "regular")
        for i, tile_id in enumerate(ids)
    ]


class TestReconcile:
    def test_subset_reorder_keeps_other_tiles_in_place(self) -> None:
        """Moving E before A in a filtered view swaps the two slots only."""
        result = reconcile(make_tiles("A", "B", "C", "D", "E"), ["E", "A"])

        assert [t.id for t in result.tiles] == ["E", "B", "C", "D", "A"]
        assert [t.order for t in result.tiles] == [0, 1, 2, 3, 4]
        assert result.tile_order == ["E", "B", "C", "D", "A"]

    @pytest.mark.parametrize("subset", [["A", "C"], ["A", "E"], ["B", "C", "D"]])
    def test_subset_already_in_order_changes_nothing(self, subset: list[str]) -> None:
        result = reconcile(make_tiles("A", "B", "C", "D", "E"), subset)
        assert result.tile_order == ["A", "B", "C", "D", "E"]
        assert [t.order for t in result.tiles] == [0, 1, 2, 3, 4]

    @pytest.mark.parametrize(
        "subset", [["E", "A"], ["D", "B"], ["C", "A", "E"], ["E", "D", "C", "B"]]
    )
    def test_tiles_outside_the_subset_keep_their_slots(self, subset: list[str]) -> None:
        ids = ["A", "B", "C", "D", "E"]
        result = reconcile(make_tiles(*ids), subset)

        for slot, tile_id in enumerate(ids):
            if tile_id not in subset:
                assert result.tile_order[slot] == tile_id
        assert [i for i in result.tile_order if i in subset] == subset

    def test_full_permutation(self) -> None:
        result = reconcile(make_tiles("A", "B", "C"), ["C", "A", "B"])
        assert result.tile_order == ["C", "A", "B"]

    def test_large_tiles_follow_regular_ones(self) -> None:
        tiles = make_tiles("A", "B", "L", "C", large=("L",))
        result = reconcile(tiles, ["C", "A"])

        assert result.tile_order == ["C", "B", "A", "L"]
        assert result.tiles[-1].order == 3

    def test_unknown_duplicate_and_large_ids_are_ignored(self) -> None:
        tiles = make_tiles("A", "B", "C", "L", large=("L",))
        result = reconcile(tiles, ["X", "B", "L", "B", "A"])
        assert result.tile_order == ["B", "A", "C", "L"]

    def test_input_is_not_mutated(self) -> None:
        tiles = make_tiles("A", "B")
        reconcile(tiles, ["B", "A"])
        assert [(t.id, t.order) for t in tiles] == [("A", 0), ("B", 1)]

    def test_empty_subset_is_a_noop(self) -> None:
        assert reconcile(make_tiles("A", "B"), []).tile_order == ["A", "B"]


def test_renumber_densifies_orders() -> None:
    tiles = [Tile(id="a", order=5), Tile(id="b", order=20), Tile(id="c", order=10)]
    result = renumber(tiles)
    assert [(t.id, t.order) for t in result.tiles] == [("a", 0), ("c", 1), ("b", 2)]


def test_partition_by_variant_is_stable() -> None:
    regular, large = partition_by_variant(make_tiles("A", "L", "B", large=("L",)))
    assert [t.id for t in regular] == ["A", "B"]
    assert [t.id for t in large] == ["L"]
