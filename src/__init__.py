"""
Catalog Price Sync

Modules:
    models      - Data models (TenantConfig, Product, PriceDelta)
    common      - Shared utilities (config loader, logging, errors, constants)
    catalog     - Partner catalog request signing and GetItems client
    reconcile   - Stored vs fetched price classification
    notify      - Telegram change notices
    persistence - Product store gateways (Supabase, in-memory)
    pipeline    - Multi-tenant batch price refresh
    api         - HTTP trigger endpoints
"""
