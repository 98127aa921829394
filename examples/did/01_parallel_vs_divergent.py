"""
DiD under parallel and divergent trends.

Units are treated when their baseline outcome is at least 110. In the
parallel world the untreated change from baseline is the same for everyone;
in the divergent world it grows with the baseline, so the control group is
a bad stand-in for the treated group's counterfactual.

True ATT in both worlds: -40.
"""

from biaslab import MonteCarloRunner, RandomStream, estimate, generate, get_world

dataset = generate(get_world("did_parallel"), RandomStream(0))
print(estimate(dataset, "did_regression").summary())

for world in ("did_parallel", "did_divergent"):
    result = MonteCarloRunner(get_world(world), "did_regression").simulate(n_reps=1000, seed=1)
    print(result.summary())
