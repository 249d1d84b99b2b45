"""Exception types raised by the simulation core."""


class PlanetSimError(Exception):
    """Base class for all planet-sim errors."""


class ConfigurationError(PlanetSimError, ValueError):
    """Invalid bodies, world files, config files or initial rates.

    Raised at startup; the simulation does not start.
    """


class InvariantViolation(PlanetSimError, RuntimeError):
    """A programming error detected inside the engine.

    The step that detected it is aborted and the Body Store is left untouched.
    """
