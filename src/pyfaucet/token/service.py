from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

from eth_account import Account
from web3 import AsyncWeb3, Web3

from pyfaucet.contracts import FAUCET_TOKEN_ABI
from pyfaucet.core.config import DEFAULT_FAUCET_AMOUNT
from pyfaucet.core.errors import create_error
from pyfaucet.core.utils import ZERO_ADDRESS, format_units, parse_units, to_hex
from .types import BalanceInfo, FaucetReceipt, TokenMetadata

logger = logging.getLogger(__name__)

RECEIPT_TIMEOUT_SECONDS = 120


def _checked_address(address: Optional[str]) -> str:
    if not address:
        raise ValueError("Address is required")
    if not Web3.is_address(address):
        raise ValueError("Invalid address format")
    return Web3.to_checksum_address(address)


class SyncTokenService:
    def __init__(
        self,
        web3: Web3,
        contract_address: str,
        account_address: Optional[str] = None,
        private_key: Optional[str] = None,
    ) -> None:
        self._web3 = web3
        self._address = Web3.to_checksum_address(contract_address)
        self._private_key = private_key
        if account_address is None and private_key is not None:
            account_address = Account.from_key(private_key).address
        self._account = account_address
        self._contract = web3.eth.contract(address=self._address, abi=FAUCET_TOKEN_ABI)

    @property
    def contract_address(self) -> str:
        return self._address

    @property
    def account(self) -> Optional[str]:
        return self._account

    def get_metadata(self) -> TokenMetadata:
        return TokenMetadata(
            name=self._contract.functions.name().call(),
            symbol=self._contract.functions.symbol().call(),
            decimals=int(self._contract.functions.decimals().call()),
        )

    def balance(self, address: str) -> BalanceInfo:
        owner = _checked_address(address)
        raw = int(self._contract.functions.balanceOf(owner).call())
        meta = self.get_metadata()
        return BalanceInfo(
            address=address,
            balance=format_units(raw, meta.decimals),
            raw_balance=str(raw),
            symbol=meta.symbol,
            name=meta.name,
            decimals=meta.decimals,
            contract_address=self._address,
        )

    def faucet(self, to: str, amount: str = DEFAULT_FAUCET_AMOUNT) -> FaucetReceipt:
        recipient = _checked_address(to)
        if not self._private_key or not self._account:
            raise ValueError("private_key required for faucet")
        decimals = int(self._contract.functions.decimals().call())
        txn = self._contract.functions.faucet(recipient, parse_units(amount, decimals)).build_transaction(
            {
                "from": self._account,
                "nonce": self._web3.eth.get_transaction_count(self._account),
            }
        )
        signed = self._web3.eth.account.sign_transaction(txn, private_key=self._private_key)
        tx_hash = self._web3.eth.send_raw_transaction(signed.raw_transaction)
        receipt = self._web3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT_SECONDS)
        if receipt.get("status") == 0:
            raise create_error("token", "faucet", f"transaction {to_hex(tx_hash)} reverted")
        logger.info("faucet sent %s to %s in tx %s", amount, to, to_hex(tx_hash))
        return FaucetReceipt(
            transaction_hash=to_hex(tx_hash),
            block_number=int(receipt["blockNumber"]),
            address=to,
            amount=str(amount),
        )

    def get_block_number(self) -> int:
        return int(self._web3.eth.block_number)

    def get_block_timestamp(self, block_number: int) -> Optional[int]:
        block = self._web3.eth.get_block(block_number)
        if not block:
            return None
        return int(block["timestamp"])

    def query_dispense_logs(self, from_block: int, to_block: int) -> List[Any]:
        return list(self._contract.events.FaucetUsed().get_logs(from_block=from_block, to_block=to_block))

    def query_mint_logs(self, from_block: int, to_block: int) -> List[Any]:
        return list(
            self._contract.events.Transfer().get_logs(
                argument_filters={"from": ZERO_ADDRESS},
                from_block=from_block,
                to_block=to_block,
            )
        )


class AsyncTokenService:
    def __init__(
        self,
        web3: AsyncWeb3,
        contract_address: str,
        account_address: Optional[str] = None,
        private_key: Optional[str] = None,
    ) -> None:
        self._web3 = web3
        self._address = Web3.to_checksum_address(contract_address)
        self._private_key = private_key
        if account_address is None and private_key is not None:
            account_address = Account.from_key(private_key).address
        self._account = account_address
        self._contract = web3.eth.contract(address=self._address, abi=FAUCET_TOKEN_ABI)

    @property
    def contract_address(self) -> str:
        return self._address

    @property
    def account(self) -> Optional[str]:
        return self._account

    async def get_metadata(self) -> TokenMetadata:
        name, symbol, decimals = await asyncio.gather(
            self._contract.functions.name().call(),
            self._contract.functions.symbol().call(),
            self._contract.functions.decimals().call(),
        )
        return TokenMetadata(name=name, symbol=symbol, decimals=int(decimals))

    async def balance(self, address: str) -> BalanceInfo:
        owner = _checked_address(address)
        raw = int(await self._contract.functions.balanceOf(owner).call())
        meta = await self.get_metadata()
        return BalanceInfo(
            address=address,
            balance=format_units(raw, meta.decimals),
            raw_balance=str(raw),
            symbol=meta.symbol,
            name=meta.name,
            decimals=meta.decimals,
            contract_address=self._address,
        )

    async def faucet(self, to: str, amount: str = DEFAULT_FAUCET_AMOUNT) -> FaucetReceipt:
        """
        Call ``faucet(to, amount)`` on the token and wait for the receipt.

        Args:
            to: Recipient address (any case)
            amount: Human-readable amount, scaled by the token decimals

        Returns:
            FaucetReceipt with the mined transaction hash and block

        Raises:
            ValueError: If the address is missing/invalid or no key is configured
            FaucetError: If the transaction was mined but reverted
        """
        recipient = _checked_address(to)
        if not self._private_key or not self._account:
            raise ValueError("private_key required for faucet")
        decimals = int(await self._contract.functions.decimals().call())
        txn = await self._contract.functions.faucet(recipient, parse_units(amount, decimals)).build_transaction(
            {
                "from": self._account,
                "nonce": await self._web3.eth.get_transaction_count(self._account),
            }
        )
        signed = self._web3.eth.account.sign_transaction(txn, private_key=self._private_key)
        tx_hash = await self._web3.eth.send_raw_transaction(signed.raw_transaction)
        receipt = await self._web3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT_SECONDS)
        if receipt.get("status") == 0:
            raise create_error("token", "faucet", f"transaction {to_hex(tx_hash)} reverted")
        logger.info("faucet sent %s to %s in tx %s", amount, to, to_hex(tx_hash))
        return FaucetReceipt(
            transaction_hash=to_hex(tx_hash),
            block_number=int(receipt["blockNumber"]),
            address=to,
            amount=str(amount),
        )

    async def get_block_number(self) -> int:
        return int(await self._web3.eth.block_number)

    async def get_block_timestamp(self, block_number: int) -> Optional[int]:
        block = await self._web3.eth.get_block(block_number)
        if not block:
            return None
        return int(block["timestamp"])

    async def query_dispense_logs(self, from_block: int, to_block: int) -> List[Any]:
        return list(await self._contract.events.FaucetUsed().get_logs(from_block=from_block, to_block=to_block))

    async def query_mint_logs(self, from_block: int, to_block: int) -> List[Any]:
        return list(
            await self._contract.events.Transfer().get_logs(
                argument_filters={"from": ZERO_ADDRESS},
                from_block=from_block,
                to_block=to_block,
            )
        )
