"""
Tests for Indicator System

Tests the leaf indicators, the base class contract and the registry.
"""

import pytest
import pandas as pd
import numpy as np
from tastream.indicators import (
    Bar, BarLike, InvalidParameter, typical_price, validate_period,
    SimpleMovingAverage, TrueRange, CommodityChannelIndex, MeanAbsoluteDeviation,
    VolumeWeightedAveragePrice, TrendMagic,
    INDICATOR_REGISTRY, list_available_indicators, create_indicator
)


# Sample data fixture
@pytest.fixture
def sample_data():
    """Create sample OHLCV data for testing"""
    np.random.seed(42)
    n = 100

    # Generate realistic price data
    close = np.cumsum(np.random.randn(n) * 0.5) + 100
    high = close + np.abs(np.random.randn(n) * 0.5)
    low = close - np.abs(np.random.randn(n) * 0.5)
    open_price = close + np.random.randn(n) * 0.3

    return pd.DataFrame({
        'time': range(n),
        'open': open_price,
        'high': high,
        'low': low,
        'close': close,
        'volume': np.random.randint(1000, 10000, n).astype(float)
    })


def bars_from(df):
    return [Bar(r.open, r.high, r.low, r.close, r.volume) for r in df.itertuples(index=False)]


class TestBase:
    """Test base helpers"""

    def test_validate_period(self):
        """Test zero and non-integer periods are rejected"""
        assert validate_period(1) == 1
        with pytest.raises(InvalidParameter):
            validate_period(0)
        with pytest.raises(InvalidParameter):
            validate_period(-3)
        with pytest.raises(InvalidParameter):
            validate_period(2.5)

    def test_invalid_parameter_is_value_error(self):
        """Test callers catching ValueError also catch InvalidParameter"""
        with pytest.raises(ValueError):
            SimpleMovingAverage(period=0)

    def test_bar_is_bar_like(self):
        """Test Bar satisfies the accessor protocol"""
        bar = Bar(1.0, 2.0, 0.5, 1.5, 10.0)
        assert isinstance(bar, BarLike)

    def test_typical_price(self):
        """Test HLC3"""
        assert typical_price(Bar(0.0, 12.0, 6.0, 9.0)) == pytest.approx(9.0)

    def test_validate_dataframe(self, sample_data):
        """Test missing columns are reported"""
        sma = SimpleMovingAverage(period=3)
        with pytest.raises(ValueError, match="missing required columns"):
            sma.consume_frame(sample_data.drop(columns=['volume']))

    def test_unknown_source_column(self, sample_data):
        """Test a missing source column is a ValueError, not AttributeError"""
        sma = SimpleMovingAverage(period=2, source='hlc3')
        with pytest.raises(ValueError, match="Source column 'hlc3' not found"):
            sma.consume_frame(sample_data)

        assert sma.consume_frame_safe(sample_data) is None
        assert MeanAbsoluteDeviation(period=2, source='vwap').consume_frame_safe(sample_data) is None

    def test_consume_frame_safe(self, sample_data):
        """Test safe variant returns None on bad input"""
        sma = SimpleMovingAverage(period=3)
        assert sma.consume_frame_safe(sample_data.iloc[0:0]) is None
        assert sma.consume_frame_safe(sample_data) is not None

    def test_to_dict(self):
        """Test identity summary"""
        info = SimpleMovingAverage(period=7).to_dict()
        assert info['name'] == 'SimpleMovingAverage'
        assert info['id'] == 'SMA_7'
        assert info['display_name'] == 'SMA(7)'
        assert info['params']['period'] == 7


class TestSMA:
    """Test Simple Moving Average"""

    def test_sma_warmup_and_window(self):
        """Test mean over values seen so far, then over the window"""
        sma = SimpleMovingAverage(period=3)

        assert sma.consume(1.0) == pytest.approx(1.0)
        assert sma.consume(2.0) == pytest.approx(1.5)
        assert sma.consume(3.0) == pytest.approx(2.0)
        assert sma.consume(4.0) == pytest.approx(3.0)
        assert sma.consume(5.0) == pytest.approx(4.0)

    def test_sma_matches_rolling_mean(self, sample_data):
        """Test streaming SMA agrees with pandas rolling mean"""
        sma = SimpleMovingAverage(period=20)
        result = sma.consume_frame(sample_data)

        expected = sample_data['close'].rolling(window=20, min_periods=1).mean()
        assert np.allclose(result['value'], expected)

    def test_sma_recovers_after_outlier(self):
        """Test one huge value leaves no residue once it leaves the window"""
        sma = SimpleMovingAverage(period=2)
        sma.consume(1e17)

        for _ in range(10):
            value = sma.consume(1.0)

        assert value == 1.0

    def test_sma_period_one(self):
        """Test period 1 echoes its input"""
        sma = SimpleMovingAverage(period=1)
        assert sma.consume(4.0) == 4.0
        assert sma.consume(-2.0) == -2.0

    def test_sma_period_validation(self):
        """Test SMA period validation"""
        with pytest.raises(InvalidParameter):
            SimpleMovingAverage(period=0)

    def test_sma_reset(self):
        """Test reset forgets the window"""
        sma = SimpleMovingAverage(period=4)
        for v in [10.0, 11.0, 12.0]:
            sma.consume(v)

        sma.reset()
        assert sma.consume(2.0) == pytest.approx(2.0)

    def test_sma_display(self):
        assert str(SimpleMovingAverage(period=9)) == "SMA(9)"


class TestTrueRange:
    """Test True Range"""

    def test_first_bar_is_high_minus_low(self):
        tr = TrueRange()
        assert tr.consume(Bar(10.0, 12.0, 9.0, 11.0)) == pytest.approx(3.0)

    def test_uses_previous_close(self):
        """Test gaps against the previous close widen the range"""
        tr = TrueRange()
        tr.consume(Bar(10.0, 12.0, 9.0, 11.0))

        assert tr.consume(Bar(11.0, 15.0, 13.0, 14.0)) == pytest.approx(4.0)
        assert tr.consume(Bar(14.0, 14.0, 8.0, 9.0)) == pytest.approx(6.0)
        assert tr.consume(Bar(5.0, 6.0, 4.0, 5.0)) == pytest.approx(5.0)

    def test_reset(self):
        """Test reset forgets the previous close"""
        tr = TrueRange()
        tr.consume(Bar(10.0, 12.0, 9.0, 11.0))
        tr.reset()

        assert tr.consume(Bar(11.0, 15.0, 13.0, 14.0)) == pytest.approx(2.0)

    def test_display(self):
        assert str(TrueRange()) == "TR"


class TestCCI:
    """Test Commodity Channel Index"""

    def test_flat_prices_give_zero(self):
        """Test zero deviation does not divide by zero"""
        cci = CommodityChannelIndex(period=5)
        for _ in range(10):
            assert cci.consume(Bar(100.0, 100.0, 100.0, 100.0)) == 0.0

    def test_cci_matches_rolling_formula(self, sample_data):
        """Test streaming CCI agrees with the rolling-window formula"""
        period = 20
        cci = CommodityChannelIndex(period=period)
        result = cci.consume_frame(sample_data)

        tp = (sample_data['high'] + sample_data['low'] + sample_data['close']) / 3
        sma_tp = tp.rolling(window=period, min_periods=1).mean()
        mad = tp.rolling(window=period, min_periods=1).apply(
            lambda x: np.abs(x - x.mean()).mean(),
            raw=True
        )
        expected = (tp - sma_tp) / (0.015 * mad)

        assert result['value'].iloc[0] == 0.0
        assert np.allclose(result['value'].iloc[1:], expected.iloc[1:])

    def test_cci_sign(self):
        """Test a bar above the recent average is positive"""
        cci = CommodityChannelIndex(period=3)
        cci.consume(Bar(10.0, 10.0, 10.0, 10.0))
        cci.consume(Bar(10.0, 10.0, 10.0, 10.0))
        assert cci.consume(Bar(12.0, 12.0, 12.0, 12.0)) > 0
        assert cci.consume(Bar(8.0, 8.0, 8.0, 8.0)) < 0

    def test_cci_period_validation(self):
        with pytest.raises(InvalidParameter):
            CommodityChannelIndex(period=0)
        CommodityChannelIndex(period=1)

    def test_cci_reset(self, sample_data):
        """Test reset clears both sub-indicators"""
        bars = bars_from(sample_data)
        cci = CommodityChannelIndex(period=5)
        first = [cci.consume(b) for b in bars[:10]]

        cci.reset()
        again = [cci.consume(b) for b in bars[:10]]
        assert first == again


class TestMAD:
    """Test Mean Absolute Deviation"""

    def test_mad_values(self):
        mad = MeanAbsoluteDeviation(period=3)
        assert mad.consume(1.0) == 0.0
        assert mad.consume(3.0) == pytest.approx(1.0)
        # window [1, 3, 5]: mean 3
        assert mad.consume(5.0) == pytest.approx(4.0 / 3.0)
        # window [3, 5, 5]: mean 13/3
        assert mad.consume(5.0) == pytest.approx((4.0 / 3.0 + 2.0 / 3.0 + 2.0 / 3.0) / 3.0)


class TestResetIdempotence:
    """reset() must be indistinguishable from fresh construction"""

    @pytest.mark.parametrize('factory', [
        lambda: SimpleMovingAverage(period=5),
        lambda: MeanAbsoluteDeviation(period=5),
    ])
    def test_scalar_indicators(self, factory, sample_data):
        used = factory()
        for v in sample_data['close']:
            used.consume(v)
        used.reset()

        assert used.consume(42.0) == factory().consume(42.0)

    @pytest.mark.parametrize('factory', [
        lambda: TrueRange(),
        lambda: CommodityChannelIndex(period=7),
        lambda: VolumeWeightedAveragePrice(period=7),
        lambda: TrendMagic(atr_period=3, multiplier=2.0, cci_period=7),
    ])
    def test_bar_indicators(self, factory, sample_data):
        bars = bars_from(sample_data)
        used = factory()
        for b in bars:
            used.consume(b)
        used.reset()

        assert used.consume(bars[0]) == factory().consume(bars[0])

    def test_reset_before_first_consume(self, sample_data):
        bars = bars_from(sample_data)
        tm = TrendMagic()
        tm.reset()
        assert tm.consume(bars[0]) == TrendMagic().consume(bars[0])


class TestIndicatorFactory:
    """Test indicator registry and factory function"""

    def test_create_indicator(self):
        """Test create_indicator factory"""
        vwap = create_indicator('vwap', period=20)
        assert isinstance(vwap, VolumeWeightedAveragePrice)
        assert vwap.period == 20

        tm = create_indicator('trend_magic', atr_period=3, multiplier=1.5, cci_period=10)
        assert isinstance(tm, TrendMagic)
        assert tm.params['multiplier'] == 1.5

    def test_create_case_insensitive(self):
        assert isinstance(create_indicator('CCI', period=10), CommodityChannelIndex)

    def test_create_invalid_type(self):
        """Test creating unknown indicator"""
        with pytest.raises(ValueError, match="Unknown indicator type"):
            create_indicator('invalid_type')

    def test_create_invalid_params(self):
        """Test construction errors propagate"""
        with pytest.raises(InvalidParameter):
            create_indicator('vwap', period=0)

    def test_list_available(self):
        """Test every registry entry builds with defaults"""
        listed = list_available_indicators()

        assert len(listed) == len(INDICATOR_REGISTRY)
        by_key = {item['key']: item for item in listed}
        assert by_key['vwap']['display_name'] == 'VWAP(14)'
        assert by_key['trend_magic']['display_name'] == 'TrendMagic(5,1.0,20)'
        assert by_key['cci']['default_params'] == {'period': 20}


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
