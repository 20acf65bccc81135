#!/usr/bin/env python3
"""
Errors Module
Exceptions raised by the compiler passes
"""


class PipelineInvariantError(RuntimeError):
    """A compiler pass reached a state that valid input can never produce

    Raised for cycles in the scene tree, removed nodes visited again,
    or a pruning fixpoint that does not converge. These are bugs in the
    compiler, not input errors, and must not be swallowed.
    """
