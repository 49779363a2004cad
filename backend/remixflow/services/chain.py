import logging
import secrets
from typing import Any, Callable, TypeVar

from eth_account import Account
from web3 import Web3

from remixflow.core.config import settings
from remixflow.services.contracts import REMIX_PROVENANCE_ABI, ROYALTY_SPLITTER_ABI

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BlockchainError(RuntimeError):
    """Raised when a contract call or transaction fails."""


def random_tx_hash() -> str:
    """Placeholder transaction hash used when no chain is configured."""
    return "0x" + secrets.token_hex(32)


def to_checksum(address: str) -> str:
    try:
        return Web3.to_checksum_address(address)
    except ValueError as exc:
        raise BlockchainError(f"Invalid address: {address}") from exc


class ChainClient:
    """Signs contract writes with the configured key and reads contract views."""

    def __init__(
        self,
        rpc_url: str | None = None,
        private_key: str | None = None,
        chain_id: int | None = None,
    ):
        self.w3 = Web3(Web3.HTTPProvider(rpc_url or settings.RPC_URL))
        self.account = Account.from_key(private_key or settings.PRIVATE_KEY)
        self.chain_id = chain_id or settings.CHAIN_ID
        self.royalty_splitter = self.w3.eth.contract(
            address=to_checksum(settings.ROYALTY_SPLITTER_ADDRESS), abi=ROYALTY_SPLITTER_ABI
        )
        self.provenance = self.w3.eth.contract(
            address=to_checksum(settings.REMIX_PROVENANCE_ADDRESS), abi=REMIX_PROVENANCE_ABI
        )

    def write(self, contract: Any, function_name: str, *args: Any, value: int = 0) -> tuple[str, Any]:
        """Build, sign and send a contract write; returns the tx hash and its receipt."""
        try:
            tx = contract.functions[function_name](*args).build_transaction(
                {
                    "from": self.account.address,
                    "nonce": self.w3.eth.get_transaction_count(self.account.address),
                    "chainId": self.chain_id,
                    "value": value,
                }
            )
            signed = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
            logger.info("Sent %s transaction %s", function_name, Web3.to_hex(tx_hash))
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=settings.TX_RECEIPT_TIMEOUT
            )
        except Exception as exc:
            logger.error("Contract write %s failed: %s", function_name, exc)
            raise BlockchainError(f"Contract call {function_name} failed: {exc}") from exc

        if receipt["status"] != 1:
            raise BlockchainError(f"Transaction {Web3.to_hex(tx_hash)} reverted")
        return Web3.to_hex(tx_hash), receipt

    def call(self, contract: Any, function_name: str, *args: Any) -> Any:
        try:
            return contract.functions[function_name](*args).call()
        except Exception as exc:
            logger.error("Contract view %s failed: %s", function_name, exc)
            raise BlockchainError(f"Contract call {function_name} failed: {exc}") from exc


_chain_client_instance: ChainClient | None = None


def get_chain_client() -> ChainClient:
    """Lazily connects so the app can start without chain configuration."""
    global _chain_client_instance
    if _chain_client_instance is None:
        _chain_client_instance = ChainClient()
    return _chain_client_instance


def write_or_simulate(
    operation: str,
    send: Callable[[], T],
    simulate: Callable[[], T] = random_tx_hash,  # type: ignore[assignment]
) -> T:
    """
    Runs `send` when on-chain writes are enabled, otherwise returns the
    `simulate` placeholder. With ONCHAIN_FAILURE_FALLBACK a failed write also
    yields the placeholder instead of raising.
    """
    if not settings.onchain_enabled:
        result = simulate()
        logger.info("Chain not configured; simulated %s: %s", operation, result)
        return result
    try:
        return send()
    except BlockchainError as exc:
        if not settings.ONCHAIN_FAILURE_FALLBACK:
            raise
        result = simulate()
        logger.warning("%s failed (%s); substituting placeholder %s", operation, exc, result)
        return result
