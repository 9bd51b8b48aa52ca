"""
Unit tests for write-concern resolution.
"""

import enum
import logging

import pytest
from pydantic import ValidationError

from mdb_facade.core.write_concern import (ACKNOWLEDGED, NO_RESPONSE,
                                           UNACKNOWLEDGED, WriteConcern,
                                           resolve_write_concern)


class SafetyKey(enum.Enum):
    W = "w"


@pytest.mark.unit
class TestResolveBasicShapes:
    def test_none_means_no_response(self):
        concern = resolve_write_concern(None)
        assert (concern.w, concern.wtimeout, concern.fsync) == (-1, 0, False)
        assert not concern.expects_response
        assert not concern.acknowledged

    def test_default_argument_is_no_response(self):
        assert resolve_write_concern() == NO_RESPONSE

    def test_false_means_unacknowledged(self):
        concern = resolve_write_concern(False)
        assert (concern.w, concern.wtimeout, concern.fsync) == (0, 0, False)
        assert concern.expects_response
        assert not concern.acknowledged

    def test_true_means_acknowledged(self):
        concern = resolve_write_concern(True)
        assert (concern.w, concern.wtimeout, concern.fsync) == (1, 0, False)
        assert concern.acknowledged

    @pytest.mark.parametrize("safety", ["yes", 1, 2.5, ["w"]])
    def test_other_values_mean_unacknowledged(self, safety):
        assert resolve_write_concern(safety) == UNACKNOWLEDGED

    def test_three_levels_are_distinct(self):
        assert len({NO_RESPONSE.w, UNACKNOWLEDGED.w, ACKNOWLEDGED.w}) == 3

    def test_write_concern_passes_through(self):
        concern = WriteConcern(w=3)
        assert resolve_write_concern(concern) is concern


@pytest.mark.unit
class TestResolveOptions:
    def test_full_options(self):
        concern = resolve_write_concern({"w": 2, "wtimeout": 500, "fsync": True})
        assert (concern.w, concern.wtimeout, concern.fsync) == (2, 500, True)

    def test_empty_options_default_to_acknowledged(self):
        concern = resolve_write_concern({})
        assert (concern.w, concern.wtimeout, concern.fsync) == (1, 0, False)

    def test_fsync_only(self):
        concern = resolve_write_concern({"fsync": True})
        assert (concern.w, concern.wtimeout, concern.fsync) == (1, 0, True)

    def test_explicit_zero_w_is_kept(self):
        assert resolve_write_concern({"w": 0}).w == 0

    def test_boolean_w_means_acknowledged(self):
        assert resolve_write_concern({"w": True}).w == 1

    def test_tag_set_w(self):
        concern = resolve_write_concern({"w": "majority"})
        assert concern.w == "majority"
        assert concern.acknowledged

    def test_symbol_keys(self):
        assert resolve_write_concern({SafetyKey.W: 3}).w == 3

    def test_unknown_keys_ignored_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            concern = resolve_write_concern({"w": 2, "j": True})
        assert concern.w == 2
        assert "j" in caplog.text

    @pytest.mark.parametrize(
        "options", [{"w": 1.5}, {"wtimeout": -1}, {"wtimeout": "soon"}]
    )
    def test_malformed_options_degrade_to_unacknowledged(self, options):
        assert resolve_write_concern(options) == UNACKNOWLEDGED


@pytest.mark.unit
class TestWriteConcernModel:
    def test_frozen(self):
        with pytest.raises(ValidationError):
            ACKNOWLEDGED.w = 5

    def test_rejects_negative_wtimeout(self):
        with pytest.raises(ValidationError):
            WriteConcern(wtimeout=-5)
