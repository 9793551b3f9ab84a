"""Transaction builders and in-memory API fakes shared by the tests."""

from typing import Any, Dict, List, Optional, Tuple

STX_YES = "SP00000000000000000000000000000YES0000000"
STX_NO = "SP0000000000000000000000000000000NO000000"
BTC_YES = "bc1qyesvote0000000000000000000000000000000"
BTC_NO = "bc1qnovote00000000000000000000000000000000"

ALICE = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"
BOB = "SP3FBR2AGK5H9QBDH3EEN6DF8EK8JY7RX8QJ5SVTE"
CAROL = "SP1HTBVD3JG9C05J7HBJTHGR0GGW7KXW28M5JS8QE"
DAVE = "SPQE3J7XMMK0DN0BWJZHGE6B05VDYQRXRMDV734D"

PAYOUT_1 = "bc1qpayout1aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
PAYOUT_2 = "bc1qpayout2bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"
PAYOUT_UNKNOWN = "bc1qunknowncccccccccccccccccccccccccccccc"


def make_stx_tx(
    sender: str,
    recipient: str,
    block_height: int,
    nonce: int,
    tx_status: str = "success",
    tx_type: str = "token_transfer",
) -> Dict[str, Any]:
    """A transaction record as returned by /extended/v2/addresses/{a}/transactions."""
    tx: Dict[str, Any] = {
        "tx_id": f"0x{block_height:08x}{nonce:04x}",
        "tx_status": tx_status,
        "tx_type": tx_type,
        "sender_address": sender,
        "block_height": block_height,
        "tx_nonce": nonce,
    }
    if tx_type == "token_transfer":
        tx["token_transfer"] = {
            "recipient_address": recipient,
            "amount": "1",
            "memo": "0x",
        }
    return {"tx": tx, "stx_sent": "181", "stx_received": "0"}


def make_btc_tx(input_addresses: List[str], confirmed: bool = True) -> Dict[str, Any]:
    """A transaction as returned by mempool.space /address/{a}/txs."""
    return {
        "txid": "ab" * 32,
        "status": {"confirmed": confirmed, "block_height": 850000},
        "vin": [
            {"prevout": {"scriptpubkey_address": address, "value": 1000}}
            for address in input_addresses
        ],
        "vout": [],
    }


class FakeStacksApi:
    """In-memory stand-in for StacksApiClient."""

    def __init__(
        self,
        transactions: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        balances: Optional[Dict[str, Tuple[int, int]]] = None,
        signers: Optional[Dict[int, List[Dict[str, Any]]]] = None,
        stackers: Optional[Dict[Tuple[int, str], List[Dict[str, Any]]]] = None,
    ):
        self.transactions = transactions or {}
        self.balances = balances or {}
        self.signers = signers or {}
        self.stackers = stackers or {}
        self.balance_calls: List[Tuple[str, int]] = []

    async def get_address_transactions(self, address: str):
        return self.transactions.get(address, [])

    async def get_stx_balance(self, address: str, until_block: int):
        self.balance_calls.append((address, until_block))
        return self.balances.get(address, (0, 0))

    async def get_cycle_signers(self, cycle: int):
        return self.signers.get(cycle, [])

    async def get_signer_stackers(self, cycle: int, signing_key: str):
        return self.stackers.get((cycle, signing_key), [])


class FakeMempoolApi:
    """In-memory stand-in for MempoolApiClient."""

    def __init__(self, transactions: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.transactions = transactions or {}

    async def get_address_transactions(self, address: str):
        return self.transactions.get(address, [])
