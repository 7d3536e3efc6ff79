"""Unit tests for the consolidation engine.

- Tiers: subnet grouping and force-association
- Ingress: flattened source range equivalence
- Classifier: listener protocol mapping
- Engine: greedy placement, port collision rules
- Aggregator: totals and savings estimate
"""
