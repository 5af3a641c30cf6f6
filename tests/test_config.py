"""Unit tests for configuration parsing."""

import pytest

from xclog_regroup.config import DEFAULT_FLATTEN_SAMPLE_SIZE, parse_sample_size


class TestParseSampleSize:

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_default(self, raw):
        assert parse_sample_size(raw) == DEFAULT_FLATTEN_SAMPLE_SIZE == 15

    def test_override(self):
        assert parse_sample_size(" 40 ") == 40

    @pytest.mark.parametrize("raw", ["0", "-3", "ten", "1.5"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError, match="XCLOG_FLATTEN_SAMPLE_SIZE"):
            parse_sample_size(raw)
