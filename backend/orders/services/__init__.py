"""
Orders services package - the order lifecycle split into focused modules:

- tables: table-number normalization and display text
- pricing: OrderPricingService, validates and prices requested lines
- diff_service: line-level diff between two order revisions
- ports: abstract collaborators (catalog, store, ledger, notifier)
- store: DjangoOrderStore
- order_service: OrderLifecycleService (create, update, complete, cancel, delete, acknowledge)
- query_service: OrderQueryService, read-only order lookups

Modules are imported directly; `orders.models` depends on `tables`, so this
package must stay import-free.
"""
