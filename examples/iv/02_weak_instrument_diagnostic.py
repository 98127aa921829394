"""
The first-stage F diagnostic on a single sample from each IV world.
"""

from biaslab import RandomStream, TwoStageLeastSquares, generate, get_world

for world in ("iv_a", "iv_c"):
    result = TwoStageLeastSquares().fit(generate(get_world(world), RandomStream(7)))
    print(result.summary())
    print(f"  reliable: {result.reliable}")
