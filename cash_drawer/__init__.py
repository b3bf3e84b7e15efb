"""Cash drawer ledger: per-branch cash register sessions and their movements."""
