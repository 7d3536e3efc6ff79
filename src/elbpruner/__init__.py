"""elb-pruner - classic ELB consolidation advisor

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Read-only by design (never mutates AWS resources)
- Fail fast with helpful guidance

elb-pruner examines the classic load balancers in an AWS account and
recommends how they could be consolidated into a smaller set of ALBs and
NLBs per network tier, with an estimate of the potential saving.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
