"""Quote provider registry."""

from __future__ import annotations

from tickerlens.config import QuoteProviderType
from tickerlens.providers.base import BaseQuoteProvider

# Lazy registry — classes imported on demand so the mock provider never
# pulls in network dependencies.
PROVIDER_CLASSES: dict[QuoteProviderType, str] = {
    QuoteProviderType.KIS: "tickerlens.providers.kis.KisProvider",
    QuoteProviderType.MOCK: "tickerlens.providers.mock.MockProvider",
}


def create_provider(
    provider_type: QuoteProviderType,
    **kwargs,
) -> BaseQuoteProvider:
    """Instantiate a provider by type, forwarding kwargs to its constructor."""
    import importlib

    dotted = PROVIDER_CLASSES[provider_type]
    module_path, cls_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, cls_name)
    return cls(**kwargs)


__all__ = ["BaseQuoteProvider", "PROVIDER_CLASSES", "create_provider"]
