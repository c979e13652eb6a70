"""
Tests for feature keyword detection.
"""

import pytest
from matching.features import FeatureDetector


@pytest.fixture
def detector():
    return FeatureDetector()


class TestFeatureDetector:

    def test_gaming_under_budget(self, detector):
        assert detector.detect("điện thoại chơi game dưới 10 triệu") == ["price", "gaming"]

    def test_accented_keywords_match_unaccented_query(self, detector):
        assert detector.detect("dien thoai gia re") == ["price"]

    def test_premium(self, detector):
        assert "premium" in detector.detect("điện thoại cao cấp")

    def test_camera_and_battery(self, detector):
        assert detector.detect("chụp ảnh đẹp pin trâu") == ["camera", "battery"]

    @pytest.mark.parametrize("query,expected", [
        ("dien thoai ram8gb", ["storage", "ram"]),
        ("dien thoai 256gb", ["storage"]),
        ("may pin5000mah", ["battery"]),
        ("dien thoai choi gamer", ["gaming"]),
    ])
    def test_keywords_match_inside_words(self, detector, query, expected):
        assert detector.detect(query) == expected

    def test_cheap_keyword_needs_whole_word(self, detector):
        # "re" (cheap) must not fire inside "realme"
        assert detector.detect("realme c55") == []
        assert detector.detect("realme gia re") == ["price"]

    def test_nothing_detected(self, detector):
        assert detector.detect("asdkjasd") == []

    def test_custom_table(self):
        detector = FeatureDetector({"waterproof": ["chống nước"]})
        assert detector.detect("Điện thoại chống nước") == ["waterproof"]

    def test_custom_whole_words(self):
        detector = FeatureDetector({"ram": ["ram"]}, whole_words=("ram",))
        assert detector.detect("program") == []
        assert detector.detect("ram 8") == ["ram"]
