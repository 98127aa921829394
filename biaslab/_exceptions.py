class BiasLabError(Exception):
    """Base class for errors raised by biaslab."""
    pass


class ConfigurationError(BiasLabError, ValueError):
    """
    Raised when a scenario is invalid: proportions that do not sum to one,
    a non-positive sample size or standard deviation, or an unknown world.

    Raised while the scenario is constructed, so no dataset is ever
    generated from a bad configuration.
    """
    pass
