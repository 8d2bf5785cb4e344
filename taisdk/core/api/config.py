"""
Blob store configuration module.

Provides configuration for the Walrus publisher/aggregator client.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, NamedTuple

from ..exceptions import InvalidConfigurationError

WALRUS_PUBLISHER_TESTNET = 'https://publisher.walrus-testnet.walrus.space'
WALRUS_AGGREGATOR_TESTNET = 'https://aggregator.walrus-testnet.walrus.space'
WALRUS_PUBLISHER_MAINNET = 'https://publisher.wal.cloud'
WALRUS_AGGREGATOR_MAINNET = 'https://aggregator.wal.cloud'

NETWORKS = ('testnet', 'mainnet')


class Endpoints(NamedTuple):
    """Resolved store endpoints."""
    publisher: str
    aggregator: str


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Applied per request; a retried request gets a fresh timeout.
    """
    total: float = 30.0  # Total request timeout
    connect: float = 10.0  # Connection timeout

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(total=self.total, connect=self.connect)


@dataclass
class RetryConfig:
    """
    Retry configuration.

    Controls retry behavior for failed requests.
    """
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 16.0
    exponential_base: float = 2.0
    retry_on_status: tuple = (429, 500, 502, 503, 504)

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for given attempt number (0-based)."""
        delay = self.base_delay * (self.exponential_base ** attempt)
        return min(delay, self.max_delay)


@dataclass
class StoreConfig:
    """
    Complete blob store configuration.

    Attributes:
        network: 'testnet' or 'mainnet'
        epochs: Storage duration in epochs for uploaded blobs
        publisher_url: Optional publisher override (e.g. a Tai node)
        aggregator_url: Optional aggregator override
    """
    network: str = 'testnet'
    epochs: int = 5
    publisher_url: Optional[str] = None
    aggregator_url: Optional[str] = None

    user_agent: str = 'taisdk/1.0.0'

    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)

    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Connection pool settings
    limit_per_host: int = 10
    limit: int = 100

    def __post_init__(self):
        if self.network not in NETWORKS:
            raise InvalidConfigurationError(
                f"Unknown network {self.network!r}, expected one of {NETWORKS}"
            )
        if self.epochs < 1:
            raise InvalidConfigurationError(f"Epochs must be positive, got {self.epochs}")

    @classmethod
    def default(cls) -> 'StoreConfig':
        """Create default (testnet) configuration."""
        return cls()

    @classmethod
    def mainnet(cls, **kwargs) -> 'StoreConfig':
        """Create mainnet configuration."""
        return cls(network='mainnet', **kwargs)

    @property
    def endpoints(self) -> Endpoints:
        """Publisher and aggregator for the configured network."""
        if self.network == 'mainnet':
            publisher, aggregator = WALRUS_PUBLISHER_MAINNET, WALRUS_AGGREGATOR_MAINNET
        else:
            publisher, aggregator = WALRUS_PUBLISHER_TESTNET, WALRUS_AGGREGATOR_TESTNET
        return Endpoints(
            publisher=(self.publisher_url or publisher).rstrip('/'),
            aggregator=(self.aggregator_url or aggregator).rstrip('/'),
        )

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }
        return {'headers': headers}
