# computechain

In-memory models of the on-chain logic of a decentralised inference network.
Each component is a plain Python object that shares a `Chain` (the current
block number, a storage cost table and the event log). A call that is refused
raises a `DispatchError` subclass and leaves the component's state as it was;
values outside their fixed-width integer range (for example a negative amount
or a `vendor_set` above 255) raise `ValueError`.

## Components

| Module | Main names | Purpose |
| --- | --- | --- |
| `computechain.frame` | `Chain`, `Origin`, `Weight`, `DbWeight`, `ensure_signed`, `ensure_root`, `repeat_byte`, `from_low_u64_be` | Block number, events, call origins, weights and 32-byte hash helpers |
| `computechain.attestation` | `AttestationRegistry`, `CrlKind`, `Vendor` | TEE attestation summaries and a revocation list per kind |
| `computechain.bme` | `BurnMintEquilibrium` | Gateway burns, and operator mints capped at burn × elasticity / 10 000 |
| `computechain.job_market` | `JobMarket`, `JobState` | Job lifecycle: submitted, assigned, finalized, disputed |
| `computechain.model_registry` | `ModelRegistry` | Base models and adapters keyed by content hash, ids unique across both |
| `computechain.nonce_vault` | `NonceVault` | 14 400-block anti-replay window for customer nonces, pruned in bounded batches |
| `computechain.oracle_twap` | `TwapOracle` | Median price over the latest 240 submissions, one per block |
| `computechain.pouw_mint` | `PouwMint` | Transcript submission and a reward lane that is off unless `enabled=True` |
| `computechain.balances` | `Balances` | Free and reserved balances used for stake |
| `computechain.operator_stake` | `OperatorStake` | Operator registration, heartbeats, freezes and slashing |

Every component module also has a weights class (`BmeWeights`,
`JobMarketWeights`, and so on) that gives the cost of each call as a `Weight`;
pass it a `DbWeight` to add the price of the storage reads and writes.

## Origins

Privileged calls (revoking attestations, burns and mints, job assignment,
recording nonces, price submission, reward emission, slashing) accept
`Origin.root()` by default; a signed origin such as `Origin.signed(1)` raises
`BadOrigin` there. Each component takes the check it uses as a keyword
argument (for example `BurnMintEquilibrium(chain, gateway_origin=...)`), so any
callable that raises on a refused `Origin` can stand in for `ensure_root`.

## Example

```python
from computechain.frame import Chain, Origin, repeat_byte
from computechain.bme import BurnMintEquilibrium, MintExceedsHeadroom

chain = Chain()
chain.set_block_number(1)
bme = BurnMintEquilibrium(chain)
bme.set_elasticity(Origin.root(), 10_000)

bme.submit_burn(Origin.root(), repeat_byte(9), 1_000)
bme.mint_to_operator(Origin.root(), 42, 500)
assert bme.operator_balance(42) == 500

try:
    bme.mint_batch(1, [(42, 600)])
except MintExceedsHeadroom:
    pass

print(chain.last_event())
```

Operator stake draws on a `Balances` ledger:

```python
from computechain.balances import Balances
from computechain.frame import Chain, Origin, repeat_byte
from computechain.operator_stake import OperatorStake

chain = Chain()
balances = Balances({1: 1_000})
stake = OperatorStake(chain, balances, min_stake=100, max_heartbeat_epoch_advance=100)
stake.register(Origin.signed(1), 100, repeat_byte(1))
assert balances.reserved_balance(1) == 100
```

## What it does not do

The package holds all state in memory for the life of the objects. It has no
blocks of its own beyond the number set on `Chain`, no storage on disk, no
networking, no consensus, no transaction pool and no command-line program.
The components do not call one another: a mint does not read the oracle's
price and a finalized job does not mint anything unless the caller does so.

## Tests

```
pip install -e ".[test]"
pytest
```