"""
Test Suite for Multi-Factor Risk Composer Module

Weight validation, normalizers, redistribution and composition.
"""

import itertools
from datetime import datetime, timedelta

import numpy as np
import pytest

from market_signals.risk import (
    WeightConfigurationError,
    RiskFactorType,
    RiskFactorWeights,
    RiskFactor,
    normalize_rsi,
    normalize_sma_position,
    normalize_funding_rate,
    normalize_fear_greed,
    normalize_vix,
    normalize_dxy,
    normalize_macro_risk,
    normalize_log_deviation,
    RiskFactorData,
    validate_factor_weights,
    redistribute_weights,
    MultiFactorRiskComposer,
    LogRegressionFit,
    fit_log_regression,
    log_deviation,
)
from market_signals.signals import RiskCategory
from market_signals.stats import TimeSeriesPoint

from . import assert_in_unit_interval, generate_series

ORIGIN = datetime(2020, 1, 1)


def power_law_prices(days, intercept=-1.0, slope=2.0):
    """Prices exactly on log10(price) = intercept + slope * log10(days)"""
    return [10.0 ** (intercept + slope * np.log10(d)) for d in days]


def make_factors(values, weights=RiskFactorWeights.DEFAULT):
    """Factors carrying preset weights; None marks an unavailable factor"""
    factors = []
    for factor_type, value in zip(RiskFactorType, values):
        if value is None:
            factors.append(RiskFactor.unavailable(factor_type, weights.weight_for(factor_type)))
        else:
            factors.append(RiskFactor(factor_type, value, value, weights.weight_for(factor_type)))
    return factors


class TestRiskFactorWeights:
    """Test weight configuration validation"""

    def test_default_weights(self):
        """Test canonical weights"""
        weights = RiskFactorWeights.DEFAULT

        assert weights.log_regression == 0.40
        assert weights.weight_for(RiskFactorType.RSI) == 0.15
        assert weights.total == pytest.approx(1.0)
        assert set(weights.as_dict()) == set(RiskFactorType)

    @pytest.mark.parametrize("preset", ["DEFAULT", "CONSERVATIVE", "SENTIMENT_FOCUSED"])
    def test_presets_sum_to_one(self, preset):
        """Test presets are valid"""
        assert getattr(RiskFactorWeights, preset).total == pytest.approx(1.0)

    def test_total_must_be_one(self):
        """Test weights not summing to 1 fail fast"""
        with pytest.raises(WeightConfigurationError):
            RiskFactorWeights(0.5, 0.15, 0.15, 0.10, 0.10, 0.10)

    def test_negative_weight_rejected(self):
        """Test negative weights fail fast"""
        with pytest.raises(WeightConfigurationError):
            RiskFactorWeights(0.60, -0.05, 0.15, 0.10, 0.10, 0.10)

    def test_non_finite_weight_rejected(self):
        """Test NaN weights fail fast"""
        with pytest.raises(WeightConfigurationError):
            RiskFactorWeights(float("nan"), 0.15, 0.15, 0.10, 0.10, 0.10)

    def test_is_value_error(self):
        """Test configuration errors are ValueErrors"""
        assert issubclass(WeightConfigurationError, ValueError)

    def test_from_mapping(self):
        """Test loading weights from configuration"""
        mapping = RiskFactorWeights.CONSERVATIVE.to_mapping()
        assert RiskFactorWeights.from_mapping(mapping) == RiskFactorWeights.CONSERVATIVE

    def test_from_mapping_rejects_unknown_and_missing(self):
        """Test mapping keys are validated"""
        mapping = RiskFactorWeights.DEFAULT.to_mapping()

        with pytest.raises(WeightConfigurationError):
            RiskFactorWeights.from_mapping({**mapping, "volume": 0.0})

        del mapping["rsi"]
        with pytest.raises(WeightConfigurationError):
            RiskFactorWeights.from_mapping(mapping)


class TestRiskFactor:
    """Test RiskFactor validation"""

    def test_normalized_value_range(self):
        """Test normalized values outside [0, 1] are rejected"""
        with pytest.raises(ValueError):
            RiskFactor(RiskFactorType.RSI, 80.0, 1.2, 0.15)

    def test_unavailable(self):
        """Test unavailable factors keep their weight"""
        factor = RiskFactor.unavailable(RiskFactorType.FEAR_GREED, 0.10)

        assert not factor.is_available
        assert factor.weight == 0.10
        assert factor.weighted_contribution is None


class TestNormalizers:
    """Test raw value normalization"""

    def test_rsi(self):
        assert normalize_rsi(30) == 0.0
        assert normalize_rsi(50) == pytest.approx(0.5)
        assert normalize_rsi(70) == 1.0
        assert normalize_rsi(95) == 1.0
        assert normalize_rsi(None) is None

    @pytest.mark.parametrize("price, expected", [
        (130.0, 0.2),
        (115.0, 0.3),
        (105.0, 0.4),
        (95.0, 0.6),
        (85.0, 0.7),
        (70.0, 0.8),
    ])
    def test_sma_position_bands(self, price, expected):
        """Test banded SMA position"""
        assert normalize_sma_position(price, 100.0) == expected

    def test_sma_position_degenerate(self):
        """Test non-positive SMA and missing data"""
        assert normalize_sma_position(100.0, 0.0) == 0.5
        assert normalize_sma_position(None, 100.0) is None

    def test_funding_rate(self):
        assert normalize_funding_rate(0.0) == pytest.approx(0.5)
        assert normalize_funding_rate(0.001) == pytest.approx(1.0)
        assert normalize_funding_rate(-0.002) == 0.0

    def test_fear_greed(self):
        assert normalize_fear_greed(72) == pytest.approx(0.72)
        assert normalize_fear_greed(float("nan")) is None

    def test_vix_inverse(self):
        """Test low VIX maps to higher risk"""
        assert normalize_vix(10.0) == pytest.approx(0.7)
        assert normalize_vix(25.0) == pytest.approx(0.5)
        assert normalize_vix(40.0) == pytest.approx(0.3)

    def test_dxy(self):
        assert normalize_dxy(100.0) == pytest.approx(0.5)
        assert normalize_dxy(120.0) == 1.0

    def test_macro_risk(self):
        """Test macro average over available components"""
        assert normalize_macro_risk(25.0, 100.0) == pytest.approx(0.5)
        assert normalize_macro_risk(10.0, None) == pytest.approx(0.7)
        assert normalize_macro_risk(None, None) is None

    def test_log_deviation(self):
        """Test linear mapping within historical bounds"""
        assert normalize_log_deviation(0.0, (-1.0, 1.0)) == pytest.approx(0.5)
        assert normalize_log_deviation(2.0, (-1.0, 1.0)) == 1.0
        assert normalize_log_deviation(-3.0, (-1.0, 1.0)) == 0.0
        assert normalize_log_deviation(0.3, (1.0, 1.0)) == 0.5
        assert normalize_log_deviation(0.3, None) is None


class TestWeightRedistribution:
    """Test proportional weight redistribution"""

    @pytest.mark.parametrize("mask", list(itertools.product([True, False], repeat=6))[:-1])
    def test_effective_weights_sum_to_one(self, mask):
        """Test any non-empty subset of available factors sums to 1"""
        values = [0.5 if available else None for available in mask]
        factors = redistribute_weights(make_factors(values))

        total = sum(f.weight for f in factors if f.is_available)
        assert total == pytest.approx(1.0)

    def test_proportional(self):
        """Test weights keep their relative proportions"""
        factors = redistribute_weights(make_factors([0.5, 0.5, None, None, None, None]))

        assert factors[0].weight == pytest.approx(0.40 / 0.55)
        assert factors[1].weight == pytest.approx(0.15 / 0.55)

    def test_unavailable_keep_nominal_weight(self):
        """Test unavailable factors are untouched"""
        factors = redistribute_weights(make_factors([0.5, None, 0.5, 0.5, 0.5, 0.5]))
        assert factors[1].weight == 0.15

    def test_none_available(self):
        """Test nothing changes when no factor is available"""
        factors = make_factors([None] * 6)
        assert redistribute_weights(factors) == factors


class TestMultiFactorRiskComposer:
    """Test composite risk computation"""

    def test_all_unavailable_is_undefined(self):
        """Test the composite is explicitly unavailable"""
        result = MultiFactorRiskComposer().compose(make_factors([None] * 6))

        assert result.risk_level is None
        assert not result.is_available
        assert result.category is None
        assert result.available_count == 0

    def test_empty_data_is_undefined(self):
        """Test composing raw data with no inputs"""
        result = MultiFactorRiskComposer().compose_data(RiskFactorData())

        assert result.risk_level is None
        assert len(result.factors) == 6

    def test_weighted_average(self):
        """Test composite of two available factors"""
        result = MultiFactorRiskComposer().compose_data(RiskFactorData(rsi=70, fear_greed=80))

        assert result.risk_level == pytest.approx(0.6 * 1.0 + 0.4 * 0.8)
        assert result.available_count == 2
        assert sum(result.effective_weights.values()) == pytest.approx(1.0)

    def test_uniform_factors(self):
        """Test identical normalized values compose to that value"""
        result = MultiFactorRiskComposer().compose(make_factors([0.3] * 6))
        assert result.risk_level == pytest.approx(0.3)

    def test_result_in_unit_interval(self):
        """Test random factor sets stay within [0, 1]"""
        rng = np.random.default_rng(7)
        composer = MultiFactorRiskComposer()

        for _ in range(50):
            values = [float(v) if rng.random() > 0.3 else None for v in rng.random(6)]
            result = composer.compose(make_factors(values))
            if result.is_available:
                assert_in_unit_interval(result.risk_level)

    def test_factor_weights_honored(self):
        """Test composition uses the weight each factor carries"""
        factors = [
            RiskFactor(RiskFactorType.LOG_REGRESSION, 0.1, 1.0, 0.4),
            RiskFactor(RiskFactorType.RSI, 50.0, 0.0, 0.1),
        ]
        result = MultiFactorRiskComposer().compose(factors)

        assert result.risk_level == pytest.approx(0.8)
        assert result.effective_weights[RiskFactorType.RSI] == pytest.approx(0.2)

    def test_factor_weights_over_one_rejected(self):
        """Test carried weights summing past 1.0 fail fast"""
        factors = [
            RiskFactor(RiskFactorType.LOG_REGRESSION, 0.1, 1.0, 0.9),
            RiskFactor(RiskFactorType.RSI, 50.0, 0.0, 0.2),
        ]
        with pytest.raises(WeightConfigurationError):
            MultiFactorRiskComposer().compose(factors)

    def test_full_factor_set_must_sum_to_one(self):
        """Test a complete factor set with weights short of 1.0 is rejected"""
        factors = [RiskFactor(f.type, 0.5, 0.5, f.weight / 2) for f in make_factors([0.5] * 6)]
        with pytest.raises(WeightConfigurationError):
            validate_factor_weights(factors)

    def test_custom_weights(self):
        """Test composer with a preset"""
        weights = RiskFactorWeights.CONSERVATIVE
        composer = MultiFactorRiskComposer(weights)
        result = composer.compose(make_factors([1.0, 0.0, None, None, None, None], weights))
        assert result.risk_level == pytest.approx(0.55 / 0.65)

        factors = composer.build_factors(RiskFactorData(rsi=50.0))
        assert factors[1].weight == 0.10

    def test_duplicate_factor_rejected(self):
        """Test duplicate factor types raise"""
        factors = make_factors([0.5, 0.5, None, None, None, None])
        with pytest.raises(ValueError):
            MultiFactorRiskComposer().compose(factors + [factors[0]])

    def test_build_factors(self):
        """Test raw inputs become weighted factors"""
        data = RiskFactorData(
            log_deviation=0.0,
            deviation_bounds=(-0.5, 0.5),
            rsi=50.0,
            sma200=100.0,
            current_price=130.0,
            funding_rate=0.0,
            fear_greed=50.0,
            vix=25.0,
            dxy=100.0,
        )
        factors = MultiFactorRiskComposer().build_factors(data)
        by_type = {f.type: f for f in factors}

        assert len(factors) == 6
        assert all(f.is_available for f in factors)
        assert by_type[RiskFactorType.SMA_POSITION].normalized_value == 0.2
        assert by_type[RiskFactorType.SMA_POSITION].raw_value == 0.3
        assert by_type[RiskFactorType.MACRO_RISK].raw_value == pytest.approx(62.5)
        assert by_type[RiskFactorType.LOG_REGRESSION].weight == 0.40

    def test_composite_category(self):
        """Test category of a full composite"""
        data = RiskFactorData(
            log_deviation=0.0,
            deviation_bounds=(-0.5, 0.5),
            rsi=50.0,
            sma200=100.0,
            current_price=100.0,
            funding_rate=0.0,
            fear_greed=50.0,
            vix=25.0,
            dxy=100.0,
        )
        result = MultiFactorRiskComposer().compose_data(data)

        # 0.4*0.5 + 0.15*0.5 + 0.15*0.6 + 0.1*0.5 + 0.1*0.5 + 0.1*0.5
        assert result.risk_level == pytest.approx(0.515)
        assert result.category is RiskCategory.NEUTRAL

    def test_risk_point(self):
        """Test dated risk point"""
        composer = MultiFactorRiskComposer()
        point = composer.risk_point(
            date=datetime(2024, 3, 14),
            price=70000.0,
            fair_value=52000.0,
            deviation=0.129,
            factors_or_data=RiskFactorData(rsi=70, fear_greed=80),
        )

        assert point.date_string == "2024-03-14"
        assert point.risk_level == pytest.approx(0.92)
        assert point.factor(RiskFactorType.RSI).normalized_value == 1.0
        assert point.factor(RiskFactorType.FUNDING_RATE).is_available is False
        assert point.category is RiskCategory.EXTREME
        assert point.available_count == 2

    def test_regression_risk_point(self):
        """Test fair value and deviation derived from a fit"""
        days = list(range(10, 210, 10))
        fit = fit_log_regression(generate_series(power_law_prices(days), start=ORIGIN + timedelta(days=10), step_days=10), ORIGIN)
        date = ORIGIN + timedelta(days=100)

        point = MultiFactorRiskComposer().regression_risk_point(
            date=date,
            price=2000.0,
            data=RiskFactorData(deviation_bounds=(-0.5, 0.5)),
            regression=fit,
        )

        assert point.fair_value == pytest.approx(1000.0)
        assert point.deviation == pytest.approx(np.log10(2.0))
        assert point.factor(RiskFactorType.LOG_REGRESSION).raw_value == pytest.approx(np.log10(2.0))
        assert point.risk_level == pytest.approx(0.5 + np.log10(2.0))
        assert point.available_count == 1

    def test_regression_risk_point_from_history(self):
        """Test fitting from price history when no fit is supplied"""
        days = list(range(10, 210, 10))
        history = generate_series(power_law_prices(days), start=ORIGIN + timedelta(days=10), step_days=10)
        composer = MultiFactorRiskComposer()
        data = RiskFactorData(deviation_bounds=(-0.5, 0.5), rsi=50.0)

        point = composer.regression_risk_point(
            ORIGIN + timedelta(days=100), 1000.0, data, price_history=history, origin=ORIGIN
        )
        assert point.deviation == pytest.approx(0.0, abs=1e-9)
        assert point.risk_level == pytest.approx(0.5)

        # No fit available, or a date before the origin
        assert composer.regression_risk_point(ORIGIN, 1000.0, data) is None
        assert composer.regression_risk_point(
            ORIGIN - timedelta(days=1), 1000.0, data, price_history=history, origin=ORIGIN
        ) is None
        assert composer.regression_risk_point(
            ORIGIN + timedelta(days=100), 1000.0, data, price_history=history[:9], origin=ORIGIN
        ) is None


class TestLogRegression:
    """Test the log-regression fair value fit"""

    @pytest.fixture
    def history(self):
        days = list(range(10, 210, 10))
        return generate_series(power_law_prices(days), start=ORIGIN + timedelta(days=10), step_days=10)

    def test_fit_recovers_power_law(self, history):
        """Test exact power-law prices give the generating coefficients"""
        fit = fit_log_regression(history, ORIGIN)

        assert isinstance(fit, LogRegressionFit)
        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(-1.0)
        assert fit.r_squared == pytest.approx(1.0)
        assert fit.n_points == 20

    def test_fair_value(self, history):
        fit = fit_log_regression(history, ORIGIN)

        assert fit.fair_value_at(ORIGIN + timedelta(days=100)) == pytest.approx(1000.0)
        assert fit.fair_value_at(ORIGIN) == 0.0
        assert fit.fair_value_at(ORIGIN - timedelta(days=5)) == 0.0

    def test_noisy_fit(self):
        """Test R² drops below 1 with noise"""
        np.random.seed(42)
        days = np.arange(1, 366)
        prices = np.array(power_law_prices(days)) * np.exp(np.random.normal(0, 0.2, len(days)))
        fit = fit_log_regression(generate_series(prices, start=ORIGIN + timedelta(days=1)), ORIGIN)

        assert 0.0 < fit.r_squared < 1.0
        assert fit.slope == pytest.approx(2.0, abs=0.1)

    def test_too_few_points(self, history):
        """Test fewer than 10 valid points give no fit"""
        assert fit_log_regression(history[:9], ORIGIN) is None
        assert fit_log_regression(history[:10], ORIGIN) is not None
        assert fit_log_regression([], ORIGIN) is None

    def test_invalid_points_filtered(self, history):
        """Test non-positive prices and dates on or before the origin are dropped"""
        points = history[:10]
        bad = generate_series([0.0, -5.0, float("nan")], start=ORIGIN + timedelta(days=3))
        before_origin = generate_series([50.0, 60.0], start=ORIGIN - timedelta(days=1))

        fit = fit_log_regression(bad + before_origin + points, ORIGIN)

        assert fit.n_points == 10
        assert fit.slope == pytest.approx(2.0)

        # Invalid points do not count toward the minimum
        assert fit_log_regression(bad + before_origin + points[:8], ORIGIN) is None

    def test_single_day_is_degenerate(self):
        """Test points sharing one date cannot be fitted"""
        date = ORIGIN + timedelta(days=30)
        points = [TimeSeriesPoint(date=date, value=100.0 + i) for i in range(12)]
        assert fit_log_regression(points, ORIGIN) is None

    def test_log_deviation(self):
        assert log_deviation(1000.0, 100.0) == pytest.approx(1.0)
        assert log_deviation(50.0, 100.0) < 0
        assert log_deviation(100.0, 0.0) == 0.0
        assert log_deviation(-1.0, 100.0) == 0.0
