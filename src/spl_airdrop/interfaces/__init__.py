"""Protocol interfaces for all spl_airdrop components."""

from spl_airdrop.interfaces.queries import TokenQueries
from spl_airdrop.interfaces.submitter import TransferSubmitter
from spl_airdrop.interfaces.store import ClaimStore

__all__ = ["TokenQueries", "TransferSubmitter", "ClaimStore"]
