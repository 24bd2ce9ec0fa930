"""
Age and expiry scanning for paginated cloud inventories.

- engine: flat and nested traversal over Paginator / DetailFetcher adapters
- predicates: pure expiry and age checks
- handlers: request validation and response shaping
- aws_*, azure_*, dummy: provider adapters
"""
