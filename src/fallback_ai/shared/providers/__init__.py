"""Provider fallback framework.

Provides the ordered provider registry, priority demotion and recovery,
and the sequential failover gateway for any outbound completion provider.
"""

from fallback_ai.shared.providers.types import (
    FallbackOptions,
    Provider,
    ProviderFailure,
    ProviderState,
)
from fallback_ai.shared.providers.priority import (
    check_and_recover,
    demote_providers,
    recover_on_success,
    sort_providers,
)
from fallback_ai.shared.providers.registry import ProviderRegistry
from fallback_ai.shared.providers.gateway import FallbackGateway

__all__ = [
    "FallbackGateway",
    "FallbackOptions",
    "Provider",
    "ProviderFailure",
    "ProviderRegistry",
    "ProviderState",
    "check_and_recover",
    "demote_providers",
    "recover_on_success",
    "sort_providers",
]
