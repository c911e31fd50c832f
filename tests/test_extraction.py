import pytest

from engine.extraction import (
    BoundingBox,
    OcrWord,
    extract_from_html,
    extract_from_words,
    normalize_manual,
    order_words,
    parse_ocr_token,
    summarize,
)


def _word(text, x, y):
    return OcrWord(text=text, bbox=BoundingBox(x0=x, y0=y, x1=x + 40, y1=y + 12))


class TestHtml:
    def test_span_values_in_document_order(self):
        html = (
            '<div><span class="v">2.5x</span><span>abc</span>'
            "<span>0.001</span><span> 12.3 </span><span>20000</span>"
            "<span>1.004</span></div>"
        )
        assert extract_from_html(html) == [2.5, 12.3, 1.0]

    def test_no_spans(self):
        assert extract_from_html("<p>1.5</p>") == []


class TestOcrToken:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1.25", 1.25),
            ("1.5x", 1.5),
            ("112", 1.12),
            ("162525", 1625.25),
            ("42", 42.0),
            ("x", None),
            ("", None),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_ocr_token(text) == expected


class TestReadingOrder:
    def test_rows_then_columns(self):
        words = [_word("2.00", 50, 100), _word("1.50", 10, 103), _word("3.10", 300, 40)]
        assert [w.text for w in order_words(words)] == ["3.10", "1.50", "2.00"]

    def test_extract_filters_range(self):
        words = [_word("0", 0, 0), _word("215", 50, 0), _word("4.75", 0, 30)]
        assert extract_from_words(words) == [2.15, 4.75]

    def test_word_from_dict(self):
        word = OcrWord.from_dict({"text": "1.1", "bbox": {"x0": 1, "y0": 2, "x1": 3, "y1": 4}})
        assert word.bbox.y0 == 2


class TestManual:
    def test_drops_non_numeric(self):
        values = [1, "2.5", True, None, float("nan"), float("inf"), "abc", 3.456]
        assert normalize_manual(values) == [1.0, 2.5, 3.46]

    def test_summarize(self):
        assert summarize([1.0, 2.0, 6.0]) == {"min": 1.0, "max": 6.0, "avg": 3.0}
        assert summarize([]) is None
