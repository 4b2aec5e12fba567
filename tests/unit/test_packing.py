import random
import unittest

from cribsheet.core.errors import LayoutInvariantError
from cribsheet.layout.blocks import BlockSpec, build_block, build_blocks
from cribsheet.layout.packing import PackingContext, add, pack_blocks, rebuild
from cribsheet.layout.types import Column, RowGroup, SheetLayout
from tests.test_support import grid_spec, key_id_spec, pack_specs, row_keys, text_spec


class TestPackBlocks(unittest.TestCase):
    def test_single_block_with_margins(self) -> None:
        spec = BlockSpec(
            key="greeting", header="Greeting", data="HELLO", margin_left=2, margin_right=2
        )
        layout = pack_specs([spec], 40)
        self.assertEqual(len(layout.rows), 1)
        row = layout.rows[0]
        self.assertEqual(row.height, 2)
        self.assertEqual(row.columns, (Column(block_ids=(0,), width=9, height=2),))

    def test_second_wide_block_starts_new_row(self) -> None:
        layout = pack_specs([text_spec("a", 12), text_spec("b", 12)], 20)
        self.assertEqual(row_keys(layout), [[["a"]], [["b"]]])

    def test_blocks_share_row_as_columns(self) -> None:
        layout = pack_specs([text_spec("a", 5), text_spec("b", 6), text_spec("c", 7)], 20)
        self.assertEqual(row_keys(layout), [[["a"], ["b"], ["c"]]])
        self.assertEqual(layout.rows[0].width, 18)

    def test_full_width_block_occupies_row_alone(self) -> None:
        layout = pack_specs([text_spec("a", 3), text_spec("full", 10), text_spec("d", 1)], 10)
        self.assertEqual(row_keys(layout), [[["a"]], [["full"]], [["d"]]])

    def test_taller_block_grows_row(self) -> None:
        specs = [
            text_spec("abc", 3),
            grid_spec("digits", "grid10"),
            text_spec("de", 2),
            text_spec("fgh", 3),
        ]
        layout = pack_specs(specs, 20)
        self.assertEqual(row_keys(layout), [[["abc"], ["digits"], ["de", "fgh"]]])
        row = layout.rows[0]
        self.assertEqual(row.height, 9)
        self.assertEqual(row.columns[2], Column(block_ids=(2, 3), width=3, height=4))

    def test_growth_replay_stacks_earlier_blocks(self) -> None:
        specs = [text_spec("ab", 2), text_spec("cd", 2), grid_spec("digits", "grid10")]
        layout = pack_specs(specs, 12)
        self.assertEqual(row_keys(layout), [[["ab", "cd"], ["digits"]]])
        self.assertEqual(layout.rows[0].columns[0].height, 4)

    def test_failed_growth_starts_new_row(self) -> None:
        specs = [text_spec("wide", 10), grid_spec("digits", "grid10")]
        layout = pack_specs(specs, 12)
        self.assertEqual(row_keys(layout), [[["wide"]], [["digits"]]])
        self.assertEqual([row.height for row in layout.rows], [2, 9])

    def test_stacking_respects_table_width(self) -> None:
        # "b" fits under "a" by height but widening the column would overflow.
        specs = [grid_spec("digits", "grid10"), text_spec("a", 2), text_spec("b", 11)]
        layout = pack_specs(specs, 13)
        self.assertEqual(row_keys(layout), [[["digits"], ["a"]], [["b"]]])


class TestKeyIdCompaction(unittest.TestCase):
    def test_compaction_makes_room_for_next_block(self) -> None:
        layout = pack_specs([key_id_spec(), text_spec("note", 14)], 30)
        self.assertEqual(row_keys(layout), [[["keyid"], ["note"]]])
        key_block = layout.block(0)
        self.assertTrue(key_block.compact)
        self.assertEqual(key_block.width, 10)
        self.assertEqual(key_block.height, 3)
        self.assertEqual(layout.rows[0].height, 3)
        self.assertEqual(layout.rows[0].width, 24)

    def test_compaction_is_rolled_back_when_rebuild_fails(self) -> None:
        layout = pack_specs([key_id_spec(), text_spec("note", 14)], 20)
        self.assertEqual(row_keys(layout), [[["keyid"]], [["note"]]])
        key_block = layout.block(0)
        self.assertFalse(key_block.compact)
        self.assertEqual(key_block.width, 18)
        self.assertEqual(layout.rows[0], RowGroup(height=2, columns=(Column((0,), 18, 2),)))

    def test_compaction_rebuild_grows_whole_row(self) -> None:
        specs = [text_spec("lead", 12), key_id_spec(), text_spec("tail", 14)]
        layout = pack_specs(specs, 40)
        self.assertEqual(row_keys(layout), [[["lead"], ["keyid"], ["tail"]]])
        self.assertEqual(layout.rows[0].height, 3)
        self.assertTrue(layout.block(1).compact)

    def test_no_compaction_when_key_id_shares_its_column(self) -> None:
        specs = [
            grid_spec("digits", "grid10"),
            key_id_spec(),
            text_spec("x", 5),
            text_spec("z", 19),
        ]
        layout = pack_specs(specs, 28)
        self.assertEqual(row_keys(layout), [[["digits"], ["keyid", "x"]], [["z"]]])
        self.assertFalse(layout.block(1).compact)

    def test_no_compaction_when_key_id_is_not_last_column(self) -> None:
        specs = [key_id_spec(), text_spec("b", 4), text_spec("c", 10)]
        layout = pack_specs(specs, 24)
        self.assertEqual(row_keys(layout), [[["keyid"], ["b"]], [["c"]]])
        self.assertFalse(layout.block(0).compact)

    def test_callers_blocks_are_not_modified(self) -> None:
        blocks = build_blocks([key_id_spec(), text_spec("note", 14)], 30)
        layout = pack_blocks(blocks, 30)
        self.assertTrue(layout.block(0).compact)
        self.assertFalse(blocks[0].compact)
        self.assertEqual(blocks[0].width, 18)


class TestPackingInvariants(unittest.TestCase):
    def _random_specs(self, seed: int) -> tuple[list[BlockSpec], int]:
        rng = random.Random(seed)
        table_width = rng.randint(40, 60)
        specs: list[BlockSpec] = []
        for index in range(rng.randint(5, 25)):
            roll = rng.random()
            if roll < 0.1:
                specs.append(grid_spec(f"g36_{index}", "grid36"))
            elif roll < 0.25:
                specs.append(grid_spec(f"g10_{index}", "grid10"))
            elif roll < 0.35 and not any(spec.key == "keyid" for spec in specs):
                specs.append(key_id_spec())
            else:
                specs.append(
                    BlockSpec(
                        key=f"t{index}",
                        header=f"T{index}",
                        data="x" * rng.randint(1, 20),
                        margin_left=rng.randint(0, 2),
                        margin_right=rng.randint(0, 2),
                    )
                )
        return specs, table_width

    def test_layout_invariants_hold(self) -> None:
        for seed in range(40):
            specs, table_width = self._random_specs(seed)
            with self.subTest(seed=seed):
                layout = pack_specs(specs, table_width)
                layout.verify()
                self.assertEqual(
                    [placement.key for placement in layout.placements()],
                    [spec.key for spec in specs],
                )
                for row in layout.rows:
                    self.assertLessEqual(row.width, table_width)
                    for column in row.columns:
                        self.assertLessEqual(column.height, row.height)

    def test_packing_is_idempotent(self) -> None:
        for seed in range(10):
            specs, table_width = self._random_specs(seed)
            with self.subTest(seed=seed):
                blocks = build_blocks(specs, table_width)
                self.assertEqual(pack_blocks(blocks, table_width), pack_blocks(blocks, table_width))

    def test_empty_input_has_no_rows(self) -> None:
        layout = pack_blocks([], 10)
        self.assertEqual(layout.rows, ())
        self.assertEqual(layout.placements(), [])

    def test_block_wider_than_table_is_an_internal_error(self) -> None:
        block = build_block(text_spec("wide", 12), 20)
        with self.assertRaises(LayoutInvariantError):
            pack_blocks([block], 10)


class TestPrimitives(unittest.TestCase):
    def setUp(self) -> None:
        specs = [text_spec("a", 4), text_spec("b", 4), grid_spec("digits", "grid10")]
        self.ctx = PackingContext(build_blocks(specs, 20))

    def test_add_does_not_modify_input_group(self) -> None:
        group = add(self.ctx, RowGroup(), 0, 20)
        assert group is not None
        grown = add(self.ctx, group, 2, 20)
        assert grown is not None
        self.assertEqual(group, RowGroup(height=2, columns=(Column((0,), 4, 2),)))
        self.assertEqual(grown.height, 9)

    def test_add_returns_none_when_block_does_not_fit(self) -> None:
        group = add(self.ctx, RowGroup(), 2, 20)
        assert group is not None
        self.assertIsNone(add(self.ctx, group, 0, 12))

    def test_fixed_height_rebuild_never_grows(self) -> None:
        self.assertIsNone(rebuild(self.ctx, [0, 1], 2, 20, height=2))
        rebuilt = rebuild(self.ctx, [0, 1], 2, 20)
        assert rebuilt is not None
        self.assertEqual(rebuilt.height, 9)
        self.assertEqual(rebuilt.block_ids(), [0, 1, 2])

    def test_context_replace_keeps_identity(self) -> None:
        with self.assertRaises(LayoutInvariantError):
            self.ctx.replace(0, self.ctx.block(1))


class TestSheetLayoutVerify(unittest.TestCase):
    def test_verify_rejects_overwide_row(self) -> None:
        blocks = tuple(build_blocks([text_spec("a", 6), text_spec("b", 6)], 10))
        layout = SheetLayout(
            table_width=10,
            blocks=blocks,
            rows=(RowGroup(height=2, columns=(Column((0,), 6, 2), Column((1,), 6, 2))),),
        )
        with self.assertRaises(LayoutInvariantError):
            layout.verify()

    def test_verify_rejects_reordered_blocks(self) -> None:
        blocks = tuple(build_blocks([text_spec("a", 2), text_spec("b", 2)], 10))
        layout = SheetLayout(
            table_width=10,
            blocks=blocks,
            rows=(RowGroup(height=2, columns=(Column((1,), 2, 2), Column((0,), 2, 2))),),
        )
        with self.assertRaises(LayoutInvariantError):
            layout.verify()


if __name__ == "__main__":
    unittest.main()
