"""
Exceptions raised by the semdiff analysis engine.
"""


class InvalidConfiguration(ValueError):
    """
    Raised when a caller-controlled setting is outside its valid domain.

    Examples are a non-positive number of scale points, a non-positive
    cluster count or iteration budget, or an unknown presentation mode.
    Empty or incomplete response data never raises this; it produces
    empty statistics or an empty clustering instead.
    """
