"""Tests for the helical thread generator."""

import math

import numpy as np
import pytest

from scadgen.core.vectors import rotation_z
from scadgen.errors import DegenerateGeometry, ValidationError
from scadgen.generators.threads import ThreadGenerator, ThreadParameters, minor_diameter, thread_height


def make_thread(**kwargs):
    params = {"pitch": 1.0, "major_diameter": 6.0, "segments": 16, "turns": 1.0}
    params.update(kwargs)
    return ThreadGenerator(ThreadParameters(**params))


def test_iso_dimensions():
    assert thread_height(1.0) == pytest.approx(math.sqrt(3) / 2)
    assert minor_diameter(6.0, 1.0) == pytest.approx(6.0 - 1.25 * math.sqrt(3) / 2)
    params = ThreadParameters(pitch=1.0, major_diameter=6.0)
    assert params.minor_diameter == pytest.approx(minor_diameter(6.0, 1.0))
    assert params.crest_width > 0
    assert params.lead == 1.0


@pytest.mark.parametrize("segments", [3, 8, 16, 36])
def test_one_turn_face_count_and_manifold(segments):
    """One turn of N segments: N faces per tooth edge plus two end caps."""
    thread = make_thread(segments=segments).generate()
    assert thread.face_count == 4 * segments + 2
    assert thread.vertex_count == 4 * (segments + 1)
    assert thread.open_edges() == []
    assert thread.is_watertight()
    assert thread.volume() > 0


def test_thread_trimesh_agrees():
    thread = make_thread(segments=36, turns=2.0).generate()
    mesh = thread.to_trimesh()
    assert mesh.is_watertight
    # Flank quads are not planar, so the two triangulations differ slightly
    assert mesh.volume == pytest.approx(thread.volume(), rel=0.02)


def test_volume_is_close_to_swept_tooth():
    generator = make_thread(segments=180)
    params = generator.params
    tooth = generator.tooth()
    # Pappus estimate from the tooth cross section
    area = 0.5 * abs(np.dot(tooth[:, 0], np.roll(tooth[:, 1], -1)) - np.dot(np.roll(tooth[:, 0], -1), tooth[:, 1]))
    centroid_r = params.minor_diameter / 2 + params.depth * (params.base_width + 2 * params.crest_width) / (
        3 * (params.base_width + params.crest_width)
    )
    assert generator.generate().volume() == pytest.approx(2 * math.pi * centroid_r * area, rel=0.01)


def test_helix_closes_after_each_turn():
    generator = make_thread(turns=3.0)
    thread = generator.generate()
    first = thread.points[:4]
    last = thread.points[-4:]
    np.testing.assert_allclose(last[:, 2] - first[:, 2], 3.0, atol=1e-9)
    np.testing.assert_allclose(last[:, :2], first[:, :2], atol=1e-9)


def test_step_geometry():
    thread = make_thread(segments=8).generate()
    second_root = thread.points[4]
    np.testing.assert_allclose(second_root[:2] / np.linalg.norm(second_root[:2]), [math.cos(math.pi / 4), math.sin(math.pi / 4)])
    assert second_root[2] == pytest.approx(1.0 / 8)


def test_left_handed_winds_clockwise():
    thread = make_thread(segments=8, left_handed=True).generate()
    assert thread.points[4][1] < 0
    assert thread.is_watertight()
    assert thread.volume() > 0


def test_lead_in_and_lead_out_taper_the_crest():
    generator = make_thread(segments=16, turns=2.0, lead_in_degrees=90.0, lead_out_degrees=90.0)
    params = generator.params
    full = params.major_diameter / 2
    r_min = params.minor_diameter / 2
    thread = generator.generate()
    crest_radii = np.linalg.norm(thread.points[1::4, :2], axis=1)
    assert crest_radii[0] == pytest.approx(r_min + params.depth / 5)
    assert crest_radii[16] == pytest.approx(full)
    assert crest_radii[-1] == pytest.approx(r_min + params.depth / 5)
    assert np.all(crest_radii > r_min)
    assert thread.is_watertight()


def test_multi_start():
    single = make_thread(segments=12).generate()
    double = make_thread(segments=12, starts=2).generate()
    assert double.vertex_count == 2 * single.vertex_count
    assert double.face_count == 2 * single.face_count
    assert double.is_watertight()
    # Each helix advances two pitches per turn
    assert double.points[single.vertex_count - 1][2] == pytest.approx(2.0 + 0.75)
    rotated = double.points[single.vertex_count:single.vertex_count + 4]
    np.testing.assert_allclose(rotated, double.points[:4] @ rotation_z(180.0).T, atol=1e-12)


def test_convexity_follows_turns():
    assert make_thread(turns=3.0).generate().convexity == 4


@pytest.mark.parametrize("kwargs,field", [
    ({"pitch": 0.0}, "pitch"),
    ({"pitch": -1.0}, "pitch"),
    ({"segments": 2}, "segments"),
    ({"segments": 8.5}, "segments"),
    ({"starts": 0}, "starts"),
    ({"turns": 0.0}, "turns"),
    ({"turns": 0.3}, "turns"),
    ({"tooth_angle": 180.0}, "tooth_angle"),
    ({"tooth_angle": 120.0}, "tooth_angle"),
    ({"base_ratio": 0.0}, "base_ratio"),
    ({"minor_diameter": 7.0}, "major_diameter"),
    ({"minor_diameter": -1.0}, "minor_diameter"),
    ({"lead_in_degrees": -10.0}, "lead_in_degrees"),
    ({"lead_in_degrees": 300.0, "lead_out_degrees": 100.0}, "lead_in_degrees"),
])
def test_invalid_parameters(kwargs, field):
    with pytest.raises(ValidationError) as exc_info:
        make_thread(**kwargs)
    assert exc_info.value.field == field
    assert exc_info.value.shape == "thread"


def test_closure_check_rejects_open_helix():
    generator = make_thread()
    ring = generator._ring(0)
    with pytest.raises(DegenerateGeometry):
        generator._check_closure(ring, ring)
