import math

import pytest

from hingebox_kernel import ClipperKernel, Region, path_area, path_centroid, subtract_all, union_all


def test_rectangle_is_counter_clockwise(kernel):
    r = kernel.rectangle(1.0, 2.0, 10.0, 5.0)
    assert len(r.outers) == 1 and r.holes == ()
    assert path_area(r.paths[0]) == pytest.approx(50.0)
    assert r.bounds() == pytest.approx((1.0, 2.0, 11.0, 7.0))


def test_union_of_touching_rectangles_merges(kernel):
    a = kernel.rectangle(0.0, 0.0, 10.0, 10.0)
    b = kernel.rectangle(10.0, 2.0, 3.0, 4.0)
    u = kernel.union(a, b)
    assert len(u.outers) == 1
    assert u.area() == pytest.approx(112.0)
    assert u.bounds() == pytest.approx((0.0, 0.0, 13.0, 10.0))


def test_difference_inside_makes_a_hole(kernel):
    a = kernel.rectangle(0.0, 0.0, 10.0, 10.0)
    d = kernel.difference(a, kernel.rectangle(4.0, 4.0, 2.0, 2.0))
    assert len(d.outers) == 1
    assert len(d.holes) == 1
    assert d.area() == pytest.approx(96.0)
    assert d.contains(1.0, 1.0)
    assert not d.contains(5.0, 5.0)
    assert not d.contains(20.0, 5.0)


def test_difference_at_edge_makes_a_notch(kernel):
    a = kernel.rectangle(0.0, 0.0, 10.0, 10.0)
    d = kernel.difference(a, kernel.rectangle(4.0, 8.0, 2.0, 3.0))
    assert d.holes == ()
    assert d.area() == pytest.approx(96.0)
    assert not d.contains(5.0, 9.0)


def test_intersection(kernel):
    a = kernel.rectangle(0.0, 0.0, 10.0, 10.0)
    b = kernel.rectangle(5.0, 5.0, 10.0, 10.0)
    assert kernel.intersection(a, b).area() == pytest.approx(25.0)
    assert kernel.intersection(a, Region()).is_empty()


@pytest.mark.parametrize("r", [2.0, 4.0, 25.0])
def test_circle_area_close_to_true_area(kernel, r):
    c = kernel.circle(3.0, -2.0, r)
    assert c.area() == pytest.approx(math.pi * r * r, rel=0.01)
    cx, cy = path_centroid(c.outers[0])
    assert (cx, cy) == pytest.approx((3.0, -2.0), abs=1e-3)


def test_rounded_rectangle_area(kernel):
    rr = kernel.rounded_rectangle(0.0, 0.0, 20.0, 4.5, 1.575)
    expected = 20.0 * 4.5 - (4.0 - math.pi) * 1.575 ** 2
    assert rr.area() == pytest.approx(expected, rel=1e-3)
    assert rr.bounds() == pytest.approx((0.0, 0.0, 20.0, 4.5), abs=1e-3)
    assert not rr.contains(0.05, 0.05)
    assert rr.contains(10.0, 2.0)


def test_rounded_rectangle_without_radius_is_a_rectangle(kernel):
    assert kernel.rounded_rectangle(0.0, 0.0, 5.0, 5.0, 0.0) == kernel.rectangle(0.0, 0.0, 5.0, 5.0)


def test_empty_operands_short_circuit(kernel):
    a = kernel.rectangle(0.0, 0.0, 1.0, 1.0)
    empty = Region()
    assert kernel.union(a, empty) is a
    assert kernel.union(empty, a) is a
    assert kernel.difference(a, empty) is a
    assert kernel.difference(empty, a) is empty


def test_fold_helpers_skip_the_kernel_without_operands(counting_kernel):
    base = counting_kernel.rectangle(0.0, 0.0, 1.0, 1.0)
    assert union_all(counting_kernel, base, []) is base
    assert union_all(counting_kernel, None, []) is None
    assert subtract_all(counting_kernel, base, []) is base
    assert sum(counting_kernel.calls.values()) == 0


def test_subtract_all_unions_cuts_first(counting_kernel):
    base = counting_kernel.rectangle(0.0, 0.0, 10.0, 10.0)
    cuts = [counting_kernel.rectangle(float(i) * 3, 0.0, 1.0, 1.0) for i in range(3)]
    out = subtract_all(counting_kernel, base, cuts)
    assert counting_kernel.calls == {"union": 2, "difference": 1}
    assert out.area() == pytest.approx(97.0)


def test_translated(kernel):
    r = kernel.rectangle(0.0, 0.0, 2.0, 3.0)
    assert r.translated(0, 0) is r
    assert r.translated(5.0, -1.0).bounds() == pytest.approx((5.0, -1.0, 7.0, 2.0))


def test_results_are_deterministic():
    def build(k):
        base = k.rectangle(0.0, 0.0, 30.0, 20.0)
        base = k.union(base, k.circle(15.0, 20.0, 6.0))
        return k.difference(base, k.circle(15.0, 20.0, 2.0))

    assert build(ClipperKernel()) == build(ClipperKernel())


def test_kernel_rejects_bad_settings():
    with pytest.raises(ValueError):
        ClipperKernel(scale=0)
    with pytest.raises(ValueError):
        ClipperKernel(arc_tolerance=-1)
