"""growthfolio: compound-growth projections for a multi-product portfolio.

The core is split between ``portfolio`` (state: entries and return rates
per product) and ``projection`` (pure future-value math). ``db``,
``sync``, ``export`` and ``ingest`` are collaborators around that core,
and ``main`` exposes everything over a newline-delimited JSON sidecar.
"""

__version__ = "0.1.0"
