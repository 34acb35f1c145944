"""Plugin package for the Genro REST dispatcher.

Note: Do not import concrete plugins here to keep imports side-effect free.
Concrete plugin modules (logging) self-register when imported via the main
genro_rest package.
"""

__all__: list[str] = []
