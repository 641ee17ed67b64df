"""StorageLinkTable / CraftPanelListing / 기하 헬퍼 / Diagnostics 테스트"""

import math

from contentforge.core.content.links import CraftPanelListing, StorageLinkTable
from contentforge.core.diagnostics import Diagnostics, ErrorCategory
from contentforge.core.geometry import (
    MAT3_IDENTITY,
    PLANET_RADIUS_METERS,
    ZERO,
    Vec3,
    m_to_p,
    mat3_rotate,
)


class TestStorageLinkTable:
    def test_declaration_order(self):
        links = StorageLinkTable()
        links.register("hs:apple", "hs:basket")
        links.register("hs:pear", "hs:basket")
        links.register("hs:rock", None)
        assert links.get("hs:basket") == ["hs:apple", "hs:pear"]
        assert links.as_dict() == {"hs:basket": ["hs:apple", "hs:pear"]}

    def test_consume_clears_key(self):
        links = StorageLinkTable()
        links.register("hs:apple", "hs:basket")
        assert links.consume("hs:basket") == ["hs:apple"]
        assert "hs:basket" not in links
        assert links.consume("hs:basket") == []


class TestCraftPanelListing:
    def test_apply_to_prepends(self):
        panel = CraftPanelListing()
        panel.add(3, 10)
        panel.add(3, 11)
        item_lists = {3: [1, 2]}
        panel.apply_to(item_lists)
        assert item_lists[3] == [11, 10, 1, 2]

    def test_apply_to_creates_missing_area(self):
        panel = CraftPanelListing()
        panel.add(5, 7)
        assert panel.apply_to({}) == {5: [7]}


class TestGeometry:
    def test_m_to_p(self):
        assert m_to_p(PLANET_RADIUS_METERS) == 1.0

    def test_zero_axis_returns_matrix(self):
        assert mat3_rotate(MAT3_IDENTITY, 1.0, ZERO) == MAT3_IDENTITY

    def test_quarter_turn_about_y(self):
        rotated = mat3_rotate(MAT3_IDENTITY, math.pi / 2, Vec3(0.0, 1.0, 0.0))
        assert math.isclose(rotated[0][2], 1.0)
        assert math.isclose(rotated[2][0], -1.0)
        assert math.isclose(rotated[1][1], 1.0)


class TestDiagnostics:
    def test_counts_by_category(self):
        diagnostics = Diagnostics()
        diagnostics.record(ErrorCategory.WRONG_TYPE, "bad %s", "x")
        diagnostics.record(ErrorCategory.WRONG_TYPE, "bad %s", "y")
        diagnostics.record(ErrorCategory.NOT_IMPLEMENTED, "later")
        assert diagnostics.error_count == 3
        assert diagnostics.count(ErrorCategory.WRONG_TYPE) == 2
        assert diagnostics.by_category() == {"wrong_type": 2, "not_implemented": 1}
