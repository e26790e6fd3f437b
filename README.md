# moeminers

Game rules for a collecting game about miners and the lands they work. All
state lives in plain Python dataclasses (`moeminers.state`), and every rule is
a function that checks its preconditions and then changes that state or
returns new records.

When a game rule is broken, `moeminers.errors.GameError` is raised. Its
`error` attribute is a `MoeError` member (for example
`MoeError.INVALID_RARITY`), its message is that member's text, and its `code`
is 6000 plus the member's position in `MoeError`. Token movements that cannot
happen (wrong owner, insufficient funds, mismatched mints) raise
`moeminers.tokens.TokenError` instead.

## Modules

- `moeminers.constants`: seeds, domains, limits (`MAX_ITEM_LEVEL`,
  `MARKETPLACE_FEE_BPS`, reveal delays) and `u64_le_bytes`.
- `moeminers.rules`: pure rules: `compute_affinity_bps`, `commitment` and
  `rng32` (SHA-256 based), `pick_u8`, the equipment tier tables
  (`hand_power_bps_by_tier`, `head_discount_bps_by_tier`, `remelt_cost_ess`),
  the progression curves (`exp_required`, `ess_cost`), the `require_*`
  validators, `add_exp`, and `derive_address`, which turns seed byte strings
  into a deterministic 32-byte address.
- `moeminers.config`: `initialize_config`, `set_paused`,
  `create_miner_debug`, `create_land_debug` and `compute_affinity`.
- `moeminers.lootbox`: a commit/reveal flow for miners
  (`lootbox_miner_init`, `lootbox_miner_commit`, `lootbox_miner_reveal`) and
  lands (`lootbox_land_init`, `lootbox_land_commit`, `lootbox_land_reveal`).
  A reveal must come at least 2 and at most 21,600 slots after the commit.
  Rarity, element, hash power, visuals and land slots are drawn from the
  revealed commitment, the owner and the reveal slot.
- `moeminers.progression`: `progression_init` with the default curves,
  `claim_mining_exp` (one EXP per full mining window, with capped accrual),
  `admin_grant_exp`, and `miner_level_up`, which charges ESS: 35% is burned
  and the rest goes to the recipient.
- `moeminers.economy`: `economy_init` with the default basis-point
  allocations, admin setters (`set_rewards_vault`, `set_recipient`,
  `set_mint`), `rewards_deposit`, and the spends `spend_buy`, `spend_send`,
  `spend_recharge` and `spend_trade_fee`. Each spend takes a `SpendAccounts`,
  burns one share, transfers the rest to the recipient, updates running totals
  and returns an `EconomySpent` record.
- `moeminers.equipment`: `inventory_init`, `grant_item` (admin),
  `equipment_init`, `replace_hand` / `replace_head` (equip a higher tier; the
  old item becomes broken) and `remelt_hand` / `remelt_head` (four non-remelted
  items of one tier plus an ESS fee give one remelted item of the next tier).
- `moeminers.marketplace`: create, cancel and buy listings of miners, lands
  and equipment bundles. A buy takes a `BuyAccounts`; `marketplace_fee` (5%)
  goes to the economy recipient and is added to the trade-fee totals, the rest
  goes to the seller.
- `moeminers.tokens`: in-memory `Mint` and `TokenAccount` objects moved by
  `token_transfer` and `token_burn`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from moeminers.config import create_miner_debug, initialize_config
from moeminers.errors import GameError, MoeError
from moeminers.lootbox import lootbox_miner_commit, lootbox_miner_init, lootbox_miner_reveal
from moeminers.rules import compute_affinity_bps

admin = bytes(32)
owner = bytes([1]) * 32

config = initialize_config(admin)
miner = create_miner_debug(config, owner, rarity=2, element=3, hash_base=300, now_ts=0)
print(compute_affinity_bps(miner.element, 4))  # 11000: element 3 is strong against 4

try:
    create_miner_debug(config, owner, rarity=7, element=0, hash_base=1, now_ts=0)
except GameError as exc:
    assert exc.error is MoeError.INVALID_RARITY

salt = bytes(range(32))
box = lootbox_miner_init(config, owner, 1)
lootbox_miner_commit(box, owner, 1, salt, slot=100)
rolled, progress = lootbox_miner_reveal(config, box, owner, 1, salt, slot=102, now_ts=0)
print(rolled.rarity, rolled.hash_base, progress.level)
```

## What this package does not do

- It keeps no storage: every record is an in-memory object, and saving or
  loading them is up to the caller.
- It has no command line, server or user interface.
- The weekly mining pool is not implemented. `GlobalMiningState` and
  `MinerMiningState` exist as records (and a miner's mining record changes
  owner when the miner is bought), but there are no functions to start or roll
  over a mining week, accrue or claim pool rewards, or assign miners to lands.
- Addresses from `derive_address` are deterministic hashes for identifying
  records; they are not keys on any network, and tokens never leave the
  in-memory `TokenAccount` objects.