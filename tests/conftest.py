import collections

import pytest

from hingebox_kernel import ClipperKernel


class CountingKernel(ClipperKernel):
    """ClipperKernel that records how many boolean operations it ran."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls = collections.Counter()

    def union(self, a, b):
        self.calls["union"] += 1
        return super().union(a, b)

    def difference(self, a, b):
        self.calls["difference"] += 1
        return super().difference(a, b)


@pytest.fixture
def kernel():
    return ClipperKernel()


@pytest.fixture
def counting_kernel():
    return CountingKernel()
