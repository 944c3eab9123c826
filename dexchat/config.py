from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Derive the wallet address from the signing key when it is not configured."""

        super().model_post_init(__context)

        if not self.solana_wallet_address and self.solana_private_key:
            # Local import: keeps solders out of settings import time.
            from .core.execution.wallet import SolanaWallet, WalletError

            try:
                address = SolanaWallet.from_secret(self.solana_private_key).address
            except WalletError:
                address = ""
            if address:
                object.__setattr__(self, "solana_wallet_address", address)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: Optional[bool] = Field(default=None, description="Force JSON (true) or console (false) log output")

    # OKX DEX API credentials
    okx_api_key: str = Field(default="", description="OKX Web3 API key")
    okx_secret_key: str = Field(default="", description="OKX Web3 API secret used for HMAC signing")
    okx_api_passphrase: str = Field(
        default="",
        description="OKX Web3 API passphrase",
        validation_alias=AliasChoices("okx_api_passphrase", "okx_passphrase"),
    )
    okx_project_id: str = Field(default="", description="OKX developer portal project id")
    okx_base_url: str = Field(default="https://www.okx.com", description="OKX REST base URL")

    # Network
    dex_chain_id: str = Field(default="501", description="OKX chain index of the supported network (Solana)")
    solana_rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com",
        description="Solana JSON-RPC endpoint used to broadcast swaps",
        validation_alias=AliasChoices("solana_rpc_url", "rpc_url"),
    )
    solana_private_key: str = Field(default="", description="Base58 encoded Solana secret key")
    solana_wallet_address: str = Field(default="", description="Wallet that signs and receives swaps")

    # Timeouts
    request_timeout_seconds: int = Field(default=30, description="OKX request timeout")
    confirm_timeout_seconds: int = Field(default=60, description="Max seconds to wait for swap confirmation")

    # Quote session
    quote_ttl_seconds: int = Field(
        default=300,
        ge=0,
        description="Seconds a prepared quote stays confirmable (0 disables expiry)",
    )

    # Slippage defaults (OKX expects decimal fractions as strings)
    default_quote_slippage: str = Field(default="0.001", description="Slippage for structured quotes")
    natural_language_quote_slippage: str = Field(default="0.1", description="Slippage for conversational quotes")
    default_swap_slippage: str = Field(default="0.5", description="Slippage when auto slippage is off")
    default_max_auto_slippage_bps: str = Field(default="100", description="Auto slippage ceiling in bps")

    explorer_tx_url: str = Field(
        default="https://www.okx.com/web3/explorer/sol/tx/{tx_id}",
        description="Explorer link template for submitted swaps",
    )

    @property
    def has_okx_credentials(self) -> bool:
        return all((
            self.okx_api_key,
            self.okx_secret_key,
            self.okx_api_passphrase,
        ))

    @property
    def has_wallet(self) -> bool:
        return bool(self.solana_private_key and self.solana_wallet_address)

    def explorer_url(self, tx_id: str) -> str:
        return self.explorer_tx_url.format(tx_id=tx_id)


# Global settings instance
settings = Settings()
