"""
Unit tests for ResolutionResolver domain service
"""
import pytest

from resize_backend.domain.exceptions import (
    DimensionOutOfRangeError,
    InvalidDimensionError,
    UnsupportedUnitError,
)
from resize_backend.domain.services.resolution_resolver import ResolutionResolver
from resize_backend.domain.value_objects import PipelineConfig, TargetGeometry, TransformRequest


@pytest.fixture
def resolver():
    return ResolutionResolver()


class TestEffectiveDensity:
    def test_auto_physical_units_use_print_density(self, resolver):
        for unit in ("in", "cm", "mm"):
            assert resolver.effective_density(unit, "auto") == 300

    def test_auto_pixels_use_screen_density(self, resolver):
        assert resolver.effective_density("px", "auto") == 96

    def test_auto_ignores_explicit_density(self, resolver):
        assert resolver.effective_density("in", "auto", 72) == 300

    def test_fixed_uses_explicit_density(self, resolver):
        assert resolver.effective_density("in", "fixed", 150) == 150
        assert resolver.effective_density("px", "fixed", "72") == 72

    def test_fixed_accepts_integral_float_density(self, resolver):
        assert resolver.effective_density("in", "fixed", 150.0) == 150

    @pytest.mark.parametrize("density", [None, 0, -10, "many", 0.4, 150.5])
    def test_fixed_without_valid_density_is_rejected(self, resolver, density):
        with pytest.raises(InvalidDimensionError) as excinfo:
            resolver.effective_density("in", "fixed", density)
        assert excinfo.value.field == "dpi"

    def test_configured_defaults_are_honored(self):
        resolver = ResolutionResolver(PipelineConfig(print_density=600, screen_density=72))
        assert resolver.effective_density("mm") == 600
        assert resolver.effective_density("px") == 72


class TestResolve:
    @pytest.mark.parametrize(
        "value, unit, expected",
        [
            (2, "in", 600),
            (10, "cm", 1181),
            (25.4, "mm", 300),
            (100.5, "px", 101),
            (100.4, "px", 100),
            ("640", "px", 640),
        ],
    )
    def test_auto_policy_conversions(self, resolver, value, unit, expected):
        assert resolver.resolve(value, unit) == expected

    def test_fixed_policy_conversion(self, resolver):
        assert resolver.resolve(4, "in", "fixed", 150) == 600

    def test_fixed_policy_leaves_pixels_untouched(self, resolver):
        assert resolver.resolve(640, "px", "fixed", 300) == 640

    @pytest.mark.parametrize("value", [0, -5, "abc", None, float("nan")])
    def test_invalid_values(self, resolver, value):
        with pytest.raises(InvalidDimensionError) as excinfo:
            resolver.resolve(value, "px", field="width")
        assert excinfo.value.field == "width"

    @pytest.mark.parametrize("value, unit", [(20000, "px"), (60, "in"), (0.4, "px")])
    def test_out_of_range(self, resolver, value, unit):
        with pytest.raises(DimensionOutOfRangeError) as excinfo:
            resolver.resolve(value, unit, field="height")
        assert excinfo.value.field == "height"
        assert excinfo.value.maximum == 16384

    def test_upper_bound_is_inclusive(self, resolver):
        assert resolver.resolve(16384, "px") == 16384

    def test_unknown_unit(self, resolver):
        with pytest.raises(UnsupportedUnitError):
            resolver.resolve(5, "ft")


class TestResolveTarget:
    def test_print_sized_request(self, resolver):
        request = TransformRequest(width=4, height=6, unit="in")
        assert resolver.resolve_target(request) == TargetGeometry(1200, 1800, 300)

    def test_fixed_density_request(self, resolver):
        request = TransformRequest(width=10, height=15, unit="cm", resolution_policy="fixed", density=200)
        assert resolver.resolve_target(request) == TargetGeometry(787, 1181, 200)

    def test_sub_unit_fixed_density_is_a_dimension_error(self, resolver):
        request = TransformRequest(width=10, height=10, resolution_policy="fixed", density=0.4)
        with pytest.raises(InvalidDimensionError) as excinfo:
            resolver.resolve_target(request)
        assert excinfo.value.field == "dpi"

    def test_error_names_failing_axis(self, resolver):
        request = TransformRequest(width=100, height=-1)
        with pytest.raises(InvalidDimensionError) as excinfo:
            resolver.resolve_target(request)
        assert excinfo.value.field == "height"
