"""
Tests for generator config validation
Every rejection happens in the generator constructor, before generation
"""
import json
import math

import pytest
from pydantic import ValidationError

from fraudscope.errors import (
    GeneratorConfigError,
    InvalidCountError,
    InvalidDateRangeError,
    InvalidFraudMixSumError,
    InvalidPercentageRangeError,
    InvalidProcessorSetError,
    InvalidStatusMixSumError,
)
from fraudscope.generators import GeneratorConfig, SyntheticTransactionGenerator


class TestCountValidation:

    @pytest.mark.parametrize("count", [0, -5, 10001])
    def test_rejects_out_of_range(self, make_config, count):
        """✅ count outside 1-10,000 is rejected."""
        with pytest.raises(InvalidCountError) as exc_info:
            SyntheticTransactionGenerator(make_config(count=count))
        assert exc_info.value.value == count

    @pytest.mark.parametrize("count", [1, 10000])
    def test_accepts_bounds(self, make_config, count):
        SyntheticTransactionGenerator(make_config(count=count))


class TestMixValidation:

    def test_fraud_mix_summing_to_90(self, make_config, only_mix):
        """✅ Fraud mix of 90% is rejected with the actual sum."""
        config = make_config(fraudMix=only_mix(cardTesting=10, legitimate=80))

        with pytest.raises(InvalidFraudMixSumError) as exc_info:
            SyntheticTransactionGenerator(config)

        assert exc_info.value.value == pytest.approx(90)
        assert "90" in str(exc_info.value)

    def test_fraud_mix_over_100(self, make_config, only_mix):
        with pytest.raises(InvalidFraudMixSumError):
            SyntheticTransactionGenerator(make_config(fraudMix=only_mix(highValue=50, legitimate=60)))

    def test_fraud_mix_within_tolerance(self, make_config, only_mix):
        """✅ Float noise below 0.01 is accepted."""
        SyntheticTransactionGenerator(make_config(fraudMix=only_mix(cardTesting=33.333, velocityFraud=33.333,
                                                                    legitimate=33.334)))

    @pytest.mark.parametrize("mix", [{"legitimate": 100}, {"cardTesting": 100}])
    def test_extreme_mixes_accepted(self, make_config, only_mix, mix):
        SyntheticTransactionGenerator(make_config(fraudMix=only_mix(**mix)))

    def test_status_distribution_sum(self, make_config):
        config = make_config(statusDistribution={"succeeded": 50, "failed": 20, "pending": 5, "canceled": 5})

        with pytest.raises(InvalidStatusMixSumError) as exc_info:
            SyntheticTransactionGenerator(config)

        assert exc_info.value.value == pytest.approx(80)

    def test_status_all_succeeded(self, make_config):
        SyntheticTransactionGenerator(make_config(statusDistribution={"succeeded": 100}))


class TestPercentageRange:

    def test_negative_fraud_percentage(self, make_config, only_mix):
        """✅ Negative share is a range error even when the sum is 100."""
        config = make_config(fraudMix=only_mix(cardTesting=-10, highValue=50, legitimate=60))

        with pytest.raises(InvalidPercentageRangeError) as exc_info:
            SyntheticTransactionGenerator(config)

        assert "cardTesting" in str(exc_info.value)

    def test_negative_status_percentage(self, make_config):
        config = make_config(statusDistribution={"succeeded": 110, "failed": -10, "pending": 0, "canceled": 0})
        with pytest.raises(InvalidPercentageRangeError):
            SyntheticTransactionGenerator(config)

    def test_percentage_over_100(self, make_config, only_mix):
        with pytest.raises(InvalidPercentageRangeError):
            SyntheticTransactionGenerator(make_config(fraudMix=only_mix(cardTesting=150, legitimate=-50)))


class TestOtherValidation:

    def test_empty_processors(self, make_config):
        with pytest.raises(InvalidProcessorSetError, match="At least one processor"):
            SyntheticTransactionGenerator(make_config(processors=[]))

    def test_unknown_processor_is_a_shape_error(self, make_config):
        with pytest.raises(ValidationError):
            make_config(processors=["visa"])

    def test_start_after_end(self, make_config):
        config = make_config(dateRange={"start": "2024-12-31T00:00:00Z", "end": "2024-01-01T00:00:00Z"})
        with pytest.raises(InvalidDateRangeError):
            SyntheticTransactionGenerator(config)

    def test_same_start_and_end(self, make_config):
        SyntheticTransactionGenerator(make_config(dateRange={"start": 1717200000, "end": 1717200000}))

    def test_errors_are_value_errors(self):
        """✅ Taxonomy shares one ValueError base."""
        for cls in (InvalidCountError, InvalidProcessorSetError, InvalidFraudMixSumError,
                    InvalidStatusMixSumError, InvalidPercentageRangeError, InvalidDateRangeError):
            assert issubclass(cls, GeneratorConfigError)
            assert issubclass(cls, ValueError)

    def test_snake_case_names_accepted(self, make_config):
        """✅ Config can be built with field names too."""
        wire = make_config()
        config = GeneratorConfig(
            count=5,
            processors=["paypal"],
            date_range=wire.date_range,
            fraud_mix=wire.fraud_mix,
            status_distribution=wire.status_distribution,
        )
        assert config.count == 5
        assert config.preserve_category_signals is False


class TestNonFinitePercentages:

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_fraud_mix_rejected_at_construction(self, make_config, only_mix, bad):
        """✅ NaN/inf shares fail in the constructor, not in generate()."""
        config = make_config(fraudMix=only_mix(cardTesting=bad, legitimate=100))

        with pytest.raises(InvalidPercentageRangeError, match="fraudMix.cardTesting"):
            SyntheticTransactionGenerator(config)

    def test_status_nan_rejected(self, make_config):
        config = make_config(statusDistribution={"succeeded": math.nan, "failed": 100})

        with pytest.raises(InvalidPercentageRangeError, match="statusDistribution.succeeded"):
            SyntheticTransactionGenerator(config)

    def test_nan_from_json_config(self, make_config):
        """✅ A NaN literal in a JSON config is caught the same way."""
        data = make_config().model_dump(mode="json", by_alias=True)
        data["fraudMix"]["nightTime"] = math.nan
        config = GeneratorConfig.model_validate(json.loads(json.dumps(data)))

        with pytest.raises(InvalidPercentageRangeError):
            SyntheticTransactionGenerator(config)


class TestConfigImmutability:

    def test_processors_cannot_be_emptied(self, make_config):
        """✅ Validated processor set can't be changed under the generator."""
        config = make_config(processors=["stripe", "paypal"])
        generator = SyntheticTransactionGenerator(config, seed=1)

        assert config.processors == ("stripe", "paypal")
        with pytest.raises(AttributeError):
            config.processors.clear()

        assert len(generator.generate()) == 100

    def test_fields_cannot_be_reassigned(self, make_config):
        config = make_config()
        with pytest.raises(ValidationError):
            config.processors = []


class TestFractionalDateRange:

    def test_start_rounds_up_to_whole_second(self, make_config):
        """✅ Fractional start never lets created fall before it."""
        config = make_config(count=200, dateRange={"start": 1717200000.5, "end": 1717200003})

        assert config.date_range.start_ts == 1717200001
        for txn in SyntheticTransactionGenerator(config, seed=3).generate():
            assert 1717200001 <= txn.created <= 1717200003

    def test_end_rounds_down(self, make_config):
        config = make_config(dateRange={"start": 1717200000, "end": 1717200002.9})
        assert config.date_range.end_ts == 1717200002

    def test_range_without_whole_second(self, make_config):
        config = make_config(dateRange={"start": 1717200000.2, "end": 1717200000.7})

        with pytest.raises(InvalidDateRangeError, match="whole second"):
            SyntheticTransactionGenerator(config)
