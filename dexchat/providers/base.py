from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass


class DexAggregatorProvider(Provider):
    """Provider for DEX aggregation (quotes, swaps, listings) on one chain"""

    @abstractmethod
    async def get_quote(
        self,
        chain_id: str,
        from_token_address: str,
        to_token_address: str,
        amount: str,
        slippage: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Get a swap quote; amounts are integer base units"""
        pass

    @abstractmethod
    async def execute_swap(
        self,
        chain_id: str,
        from_token_address: str,
        to_token_address: str,
        amount: str,
        slippage: str,
        auto_slippage: bool,
        max_auto_slippage: str,
        user_wallet_address: str,
    ) -> Dict[str, Any]:
        """Build, sign and submit a swap; returns transactionId and explorerUrl"""
        pass

    @abstractmethod
    async def get_tokens(self, chain_id: str) -> Dict[str, Any]:
        """List tokens tradable on the chain"""
        pass

    @abstractmethod
    async def get_liquidity(self, chain_id: str) -> Dict[str, Any]:
        """List liquidity sources the aggregator routes through"""
        pass

    @abstractmethod
    async def get_supported_chains(self, chain_id: str) -> Dict[str, Any]:
        """List chains the aggregator supports"""
        pass
