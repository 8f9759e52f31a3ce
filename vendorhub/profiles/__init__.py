"""
Vendor profiles.

Responsibilities:
- Model the vendor profile document and its nested blocks.
- Keep the per-vendor availability ledger (one entry per calendar date).
- Store profiles with atomic per-vendor read-modify-write.
- Expose the profile, availability, portfolio and performance operations.
"""
