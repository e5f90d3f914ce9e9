from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import itertools

import numpy as np
import pytest

from rgbspace.cat import LmsConeSpace
from rgbspace.conversion import ConversionCache, convert, derive, linear_matrix
from rgbspace.primaries import AP1, BT709, Primaries
from rgbspace.space import ColorSpace
from rgbspace.spaces import (
    ACES_CG,
    BT_2100_PQ,
    CIE_XYZ,
    CIE_XYZ_D50,
    DISPLAY_P3,
    LINEAR_DISPLAY_P3,
    LINEAR_SRGB,
    SPACES,
    SRGB,
)
from rgbspace.transfer import LINEAR, Gamma
from rgbspace.whitepoint import D65, E


# Linear sRGB -> linear Display P3.
SRGB_TO_P3 = np.array(
    [
        [0.8225, 0.1774, 0.0000],
        [0.0332, 0.9669, 0.0000],
        [0.0171, 0.0724, 0.9108],
    ]
)


@pytest.mark.parametrize("name", sorted(SPACES))
def test_derive_to_self_is_identity(name: str) -> None:
    space = SPACES[name]
    transform = derive(space, space)
    assert transform.is_identity
    assert np.array_equal(transform.matrix, np.eye(3))


def test_equal_descriptors_built_separately_give_identity() -> None:
    rebuilt = ColorSpace(Primaries(*BT709, D65), SRGB.transfer)
    assert rebuilt == SRGB
    assert derive(SRGB, rebuilt).is_identity


def test_round_trip_composition_is_identity(tol: float) -> None:
    names = sorted(SPACES)
    for a, b in itertools.combinations(names, 2):
        forward = derive(SPACES[a], SPACES[b]).matrix
        backward = derive(SPACES[b], SPACES[a]).matrix
        assert np.allclose(backward @ forward, np.eye(3), atol=tol * 100), (a, b)


def test_linear_srgb_to_p3_matches_reference() -> None:
    m = linear_matrix(LINEAR_SRGB, LINEAR_DISPLAY_P3)
    assert np.allclose(m, SRGB_TO_P3, atol=1e-3)


def test_unit_white_identity_path_is_exact() -> None:
    space = ColorSpace(Primaries(*BT709, E), LINEAR)
    same = ColorSpace(Primaries(*BT709, E), LINEAR, name="copy")
    out = convert(derive(space, same), [1.0, 1.0, 1.0])
    assert np.array_equal(out, [1.0, 1.0, 1.0])


def test_same_white_different_primaries_keeps_white(tol: float) -> None:
    source = ColorSpace(Primaries(*BT709, E), LINEAR)
    target = ColorSpace(Primaries(*AP1, E), LINEAR)
    transform = derive(source, target)
    assert not transform.is_identity
    assert np.allclose(transform.convert([1.0, 1.0, 1.0]), [1.0, 1.0, 1.0], atol=tol)


def test_srgb_white_to_xyz_is_d65(tol: float) -> None:
    out = convert(derive(SRGB, CIE_XYZ), [1.0, 1.0, 1.0])
    assert np.allclose(out, D65.xyz, atol=max(tol, 1e-7))


def test_xyz_d65_to_srgb_is_white() -> None:
    out = derive(CIE_XYZ, SRGB).convert(D65.xyz)
    assert np.allclose(out, [1.0, 1.0, 1.0], atol=1e-6)


def test_white_adapts_across_white_points() -> None:
    out = derive(SRGB, CIE_XYZ_D50).convert([1.0, 1.0, 1.0])
    assert np.allclose(out, [0.34567 / 0.35850, 1.0, (1 - 0.34567 - 0.35850) / 0.35850], atol=1e-6)
    # ACEScg white is D60; sRGB white must land on ACEScg white.
    assert np.allclose(derive(SRGB, ACES_CG).convert([1.0, 1.0, 1.0]), [1.0, 1.0, 1.0], atol=1e-6)


def test_convert_decodes_before_matrix_and_encodes_after() -> None:
    transform = derive(SRGB, DISPLAY_P3)
    value = np.array([0.8, 0.2, 0.4])
    expected = DISPLAY_P3.encode(transform.matrix @ SRGB.decode(value))
    assert np.allclose(transform.convert(value), expected)
    naive = SRGB.decode(value)
    assert not np.allclose(transform.convert(value), DISPLAY_P3.encode(naive))


def test_out_of_gamut_values_are_finite() -> None:
    transform = derive(BT_2100_PQ, SRGB)
    out = transform.convert([0.9, 0.1, 0.1])
    assert np.all(np.isfinite(out))
    assert out[1] < 0.0


def test_negative_values_survive_gamma_round_trip() -> None:
    space = ColorSpace(Primaries(*BT709, D65), Gamma(2.2))
    there = derive(space, LINEAR_SRGB).convert([-0.2, 0.5, 0.1])
    back = derive(LINEAR_SRGB, space).convert(there)
    assert np.allclose(back, [-0.2, 0.5, 0.1], atol=1e-6)


def test_transform_inverse() -> None:
    transform = derive(SRGB, ACES_CG, cone_space="cat02")
    inverse = transform.inverse()
    assert inverse.source == ACES_CG
    assert inverse.cone_space is LmsConeSpace.CAT02
    assert np.allclose(inverse.convert(transform.convert([0.3, 0.6, 0.9])), [0.3, 0.6, 0.9], atol=1e-6)


def test_transform_matrix_is_read_only() -> None:
    transform = derive(SRGB, ACES_CG)
    with pytest.raises(ValueError):
        transform.matrix[0, 0] = 1.0


def test_cache_returns_same_transform_as_derive() -> None:
    cache = ConversionCache()
    first = cache.get(SRGB, ACES_CG)
    second = cache.get(ColorSpace(Primaries(*BT709, D65), SRGB.transfer), ACES_CG)
    assert first is second
    assert np.array_equal(first.matrix, derive(SRGB, ACES_CG).matrix)
    assert len(cache) == 1
    assert cache.hits == 1
    assert cache.misses == 1


def test_cache_keys_include_cone_space() -> None:
    cache = ConversionCache()
    bradford = cache.get(SRGB, ACES_CG)
    cat02 = cache.get(SRGB, ACES_CG, "cat02")
    assert bradford is not cat02
    assert (SRGB, ACES_CG, LmsConeSpace.CAT02) in cache


def test_cache_evicts_oldest_entry() -> None:
    cache = ConversionCache(max_entries=2)
    cache.get(SRGB, ACES_CG)
    cache.get(SRGB, CIE_XYZ)
    cache.get(SRGB, DISPLAY_P3)
    assert len(cache) == 2
    assert (SRGB, ACES_CG, LmsConeSpace.BRADFORD) not in cache
    cache.clear()
    assert len(cache) == 0


def test_cache_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        ConversionCache(max_entries=0)


def test_cache_is_shared_across_threads() -> None:
    cache = ConversionCache()
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: cache.get(SRGB, ACES_CG), range(64)))
    assert len(cache) == 1
    assert all(r is results[0] for r in results)
