"""Tests for logic transition extraction."""
import numpy as np
import pytest

from rigol_mso import ScopeConfigurationError, extract_edges, parse_preamble


def test_reference_example():
    log = extract_edges(bytes([0x00, 0x00, 0x01, 0x01, 0x03]), {"A": 0, "B": 1})
    assert log.transitions == {0: 0x00, 2: 0x01, 4: 0x03}
    assert log.last_change == {"A": 2, "B": 4}
    assert log.edges == {"A": (2,), "B": (4,)}


def test_initial_entry_always_recorded():
    log = extract_edges(bytes([0x00, 0x00]), {"A": 0})
    assert log.transitions == {0: 0x00}
    assert log.last_change == {}
    assert log.edges == {"A": ()}


def test_nonzero_first_byte_is_transition_at_zero():
    log = extract_edges(bytes([0x05, 0x05, 0x04]), {"A": 0, "C": 2})
    assert log.transitions == {0: 0x05, 2: 0x04}
    assert log.last_change == {"A": 2, "C": 0}


def test_simultaneous_bits_share_index():
    log = extract_edges(bytes([0x00, 0x1F, 0x00]), {"RD": 0, "MREQ": 1, "ROMCS": 4})
    assert log.last_change == {"RD": 2, "MREQ": 2, "ROMCS": 2}
    assert log.edges["MREQ"] == (1, 2)


def test_full_history_and_last_change():
    payload = bytes([0, 1, 0, 1, 1, 0])
    log = extract_edges(payload, {"A": 0})
    assert log.edges["A"] == (1, 2, 3, 5)
    assert log.last_change["A"] == 5


def test_unmapped_bits_still_logged():
    log = extract_edges(bytes([0x00, 0x80]), {"A": 0})
    assert log.transitions == {0: 0x00, 1: 0x80}
    assert log.last_change == {}


def test_idempotent():
    payload = bytes(np.random.default_rng(1).integers(0, 256, 500, dtype=np.uint8))
    signals = {"A": 0, "B": 3, "C": 7}
    assert extract_edges(payload, signals) == extract_edges(payload, signals)


def test_empty_payload():
    log = extract_edges(b"", {"A": 0})
    assert log.transitions == {0: 0}
    assert log.length == 0
    assert log.levels("A").size == 0


def test_levels():
    log = extract_edges(bytes([0x00, 0x00, 0x01, 0x01, 0x03]), {"A": 0, "B": 1})
    assert log.levels("A").tolist() == [0, 0, 1, 1, 1]
    assert log.levels("B").tolist() == [0, 0, 0, 0, 1]


def test_edge_times():
    log = extract_edges(bytes([0, 0, 1, 1, 3]), {"A": 0, "B": 1})
    preamble = parse_preamble("0,2,5,1,1e-06,0,0,1,0,0")
    np.testing.assert_allclose(log.edge_times("A", preamble), [2e-6])
    np.testing.assert_allclose(log.edge_times("B", preamble), [4e-6])


@pytest.mark.parametrize("bit", [-1, 8, "1", True])
def test_invalid_bit_plane(bit):
    with pytest.raises(ScopeConfigurationError):
        extract_edges(b"\x00", {"A": bit})
