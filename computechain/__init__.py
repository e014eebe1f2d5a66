"""In-memory state machines for a compute network: attestations, burn-mint settlement, jobs, models, nonces, prices, PoUW rewards, balances and operator stake."""

__version__ = "0.1.0"