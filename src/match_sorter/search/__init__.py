"""
Matching engine package.

Leaf-first pipeline used by the service layer:
- normalize: stringification and diacritic stripping
- extract: key paths, wildcards and callbacks to candidate values
- matcher: rank a single candidate string against the query
- aggregate: pick the best candidate per item, honouring key overrides
"""
