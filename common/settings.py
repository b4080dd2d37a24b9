"""Shared engine settings read from environment variables."""

import os

_seed = os.environ.get('SETTLERS_SEED')

# Seed for the game RNG; None means a fresh nondeterministic game each time.
SEED: int | None = int(_seed) if _seed else None
# Cards of each resource type held by the bank at game start.
BANK_SIZE: int = int(os.environ.get('SETTLERS_BANK_SIZE', '19'))
