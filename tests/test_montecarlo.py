import math

import numpy as np
import pytest

from biaslab import (
    BiasResult,
    MonteCarloRunner,
    RandomStream,
    SimpleDiD,
    generate,
    get_world,
    summarize,
)
from biaslab.estimators import EstimationResult

R = 200


def result(estimate, std_err=1.0, method="m", world="w", degenerate=False):
    return EstimationResult(
        method=method,
        world=world,
        estimate=estimate,
        std_err=std_err,
        statistic=estimate / std_err,
        pvalue=0.5,
        conf_int=(estimate - 1.96 * std_err, estimate + 1.96 * std_err),
        n_obs=10,
        degenerate=degenerate,
    )


class TestSummarize:
    def test_bias_is_mean_minus_truth(self):
        bias = summarize([result(1.0), result(2.0), result(6.0)], true_effect=2.0)
        assert bias.mean_estimate == pytest.approx(3.0)
        assert bias.bias == pytest.approx(1.0)
        assert bias.sd == pytest.approx(np.std([1.0, 2.0, 6.0], ddof=1))
        assert bias.rmse == pytest.approx(math.sqrt((1 + 0 + 16) / 3))
        assert bias.n_reps == 3

    def test_order_independent(self):
        results = [result(float(x), std_err=0.5 + x) for x in range(10)]
        forward = summarize(results, 4.0)
        backward = summarize(results[::-1], 4.0)
        assert forward.mean_estimate == pytest.approx(backward.mean_estimate)
        assert forward.sd == pytest.approx(backward.sd)
        assert forward.median_std_err == backward.median_std_err
        assert forward.coverage == backward.coverage

    def test_coverage_and_unreliable_count(self):
        results = [result(0.0), result(10.0), result(0.5, degenerate=True)]
        bias = summarize(results, 0.0)
        assert bias.coverage == pytest.approx(2 / 3)
        assert bias.n_unreliable == 1

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            summarize([], 0.0)

    def test_mixed_pairs_raise(self):
        with pytest.raises(ValueError, match="one \\(world, method\\) pair"):
            summarize([result(1.0, world="a"), result(1.0, world="b")], 0.0)

    def test_summary_renders(self):
        bias = summarize([result(1.0), result(2.0)], 1.5)
        text = bias.summary()
        assert "Bias" in text
        assert "world w" in text


class TestMonteCarloRunner:
    def test_reproducible_with_same_seed(self):
        runner = MonteCarloRunner(get_world("iv_a", n=300), "tsls")
        assert runner.simulate(n_reps=20, seed=5) == runner.simulate(n_reps=20, seed=5)

    def test_different_seeds_differ(self):
        runner = MonteCarloRunner(get_world("iv_a", n=300), "tsls")
        assert runner.simulate(n_reps=20, seed=5).mean_estimate != runner.simulate(n_reps=20, seed=6).mean_estimate

    def test_repetitions_use_independent_streams(self):
        results = MonteCarloRunner(get_world("iv_a", n=300), "tsls").replicate(n_reps=10, seed=1)
        assert len({r.estimate for r in results}) == 10

    def test_repetition_matches_direct_generation(self):
        scenario = get_world("did_parallel", n=300)
        results = MonteCarloRunner(scenario, SimpleDiD()).replicate(n_reps=3, seed=9)
        direct = SimpleDiD().fit(generate(scenario, RandomStream.for_repetition(9, 2)))
        assert results[2] == direct

    def test_parallel_matches_sequential(self):
        runner = MonteCarloRunner(get_world("iv_b", n=200), "as_treated")
        sequential = runner.replicate(n_reps=8, seed=3)
        parallel = runner.replicate(n_reps=8, seed=3, n_jobs=2)
        np.testing.assert_allclose(
            [r.estimate for r in parallel], [r.estimate for r in sequential], rtol=1e-12,
        )

    def test_custom_generator_plugs_in(self):
        calls = []

        def generator(scenario, stream):
            calls.append(stream)
            return generate(scenario, stream)

        runner = MonteCarloRunner(get_world("did_parallel", n=200), "did_simple", generator=generator)
        runner.replicate(n_reps=4, seed=0)
        assert len(calls) == 4

    def test_true_effect_comes_from_scenario(self):
        assert MonteCarloRunner(get_world("iv_c"), "tsls").true_effect == pytest.approx(-1.5)
        assert MonteCarloRunner(get_world("did_divergent"), "did_regression").true_effect == -40.0

    def test_small_world_c_samples_complete(self):
        # At n = 4 some repetitions draw a constant instrument or treatment.
        bias = MonteCarloRunner(get_world("iv_c", n=4), "tsls").simulate(n_reps=50, seed=0)
        assert bias.n_reps == 50
        assert bias.n_unreliable > 0
        assert math.isfinite(bias.mean_estimate)

    @pytest.mark.parametrize("kwargs", [{"n_reps": 0}, {"n_reps": 5, "n_jobs": 0}])
    def test_bad_run_arguments_raise(self, kwargs):
        runner = MonteCarloRunner(get_world("iv_a", n=100), "tsls")
        with pytest.raises(ValueError):
            runner.replicate(**kwargs)


class TestBiasProperties:
    """Monte Carlo behaviour of each estimator in each world."""

    def test_did_parallel_world_unbiased(self):
        bias = MonteCarloRunner(get_world("did_parallel"), "did_regression").simulate(n_reps=R, seed=1)
        assert isinstance(bias, BiasResult)
        assert abs(bias.bias) < 1.0
        assert 0.85 < bias.coverage <= 1.0

    def test_did_divergent_world_biased(self):
        first = MonteCarloRunner(get_world("did_divergent"), "did_regression").simulate(n_reps=R, seed=1)
        second = MonteCarloRunner(get_world("did_divergent"), "did_regression").simulate(n_reps=R, seed=2)
        assert first.bias > 20
        assert abs(first.bias - second.bias) < 2.0

    def test_iv_world_a_tsls_unbiased_and_naive_biased(self):
        tsls = MonteCarloRunner(get_world("iv_a"), "tsls").simulate(n_reps=R, seed=1)
        naive = MonteCarloRunner(get_world("iv_a"), "as_treated").simulate(n_reps=R, seed=1)
        assert abs(tsls.bias) < 0.1
        assert abs(naive.bias) > abs(tsls.bias)
        assert abs(naive.bias) > 0.5
        assert tsls.n_unreliable == 0

    def test_iv_world_b_both_shifted(self):
        tsls_a = MonteCarloRunner(get_world("iv_a"), "tsls").simulate(n_reps=R, seed=1)
        tsls_b = MonteCarloRunner(get_world("iv_b"), "tsls").simulate(n_reps=R, seed=1)
        naive_a = MonteCarloRunner(get_world("iv_a"), "as_treated").simulate(n_reps=R, seed=1)
        naive_b = MonteCarloRunner(get_world("iv_b"), "as_treated").simulate(n_reps=R, seed=1)
        # leakage / first stage = -0.5 / 0.3
        assert tsls_b.mean_estimate - tsls_a.mean_estimate == pytest.approx(-0.5 / 0.3, abs=0.2)
        assert naive_b.mean_estimate < naive_a.mean_estimate - 0.1
        assert abs(tsls_b.bias) > 1.0

    def test_iv_world_c_tsls_uninformative(self):
        a = MonteCarloRunner(get_world("iv_a"), "tsls").simulate(n_reps=R, seed=1)
        c = MonteCarloRunner(get_world("iv_c"), "tsls").simulate(n_reps=R, seed=1)
        assert c.median_std_err > 10 * a.median_std_err
        assert c.n_unreliable > 0.9 * R
        assert math.isfinite(c.mean_estimate)
