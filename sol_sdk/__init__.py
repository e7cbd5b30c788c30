"""
Solana SDK core for Python.
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .commitment import Commitment  # noqa: F401
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    EncodingError,
    IncompleteSignaturesError,
    InvalidKeyError,
    InvalidKeyLength,
    InvalidSeeds,
    NoValidBumpFound,
    PdaDerivationError,
    RpcError,
    SerializationError,
    SigningError,
    SolSdkError,
    TransactionError,
)

# Keys
from .publickey import PublicKey  # noqa: F401
from .wallet.keypair import Keypair  # noqa: F401

# Program ids & PDAs
from .programs import PROGRAM_IDS, ProgramIds  # noqa: F401
from .pda import (  # noqa: F401
    ProgramDerivedAddress,
    create_program_address,
    find_associated_token_address,
    find_program_address,
)

# Tx helpers
from .tx.instructions import (  # noqa: F401
    AccountMeta,
    Instruction,
    create_associated_token_account,
    memo,
    set_compute_unit_limit,
    set_compute_unit_price,
    spl_transfer,
    transfer,
)
from .tx.message import Message, MessageHeader  # noqa: F401
from .tx.transaction import Transaction  # noqa: F401

# RPC
from .rpc.client import RpcClient  # noqa: F401
from .rpc.types import AccountInfo, LatestBlockhash, TokenAmount  # noqa: F401

# Utilities
from .utils.encoding import b58decode, b58encode, b64decode, b64encode  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "Commitment", "SDKConfig",
    "SolSdkError", "InvalidKeyError", "InvalidKeyLength", "EncodingError",
    "SerializationError", "PdaDerivationError", "InvalidSeeds", "NoValidBumpFound",
    "TransactionError", "SigningError", "IncompleteSignaturesError", "RpcError",
    # Keys
    "PublicKey", "Keypair",
    # Programs / PDA
    "ProgramIds", "PROGRAM_IDS",
    "ProgramDerivedAddress", "create_program_address", "find_program_address",
    "find_associated_token_address",
    # Tx
    "AccountMeta", "Instruction",
    "transfer", "spl_transfer", "create_associated_token_account",
    "set_compute_unit_limit", "set_compute_unit_price", "memo",
    "MessageHeader", "Message", "Transaction",
    # RPC
    "RpcClient", "AccountInfo", "LatestBlockhash", "TokenAmount",
    # Utilities
    "b58encode", "b58decode", "b64encode", "b64decode",
]
