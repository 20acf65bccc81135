#!/usr/bin/env python3
"""
Structural Pruner Module
Removes and merges redundant wrapper groups.

Each pass visits the tree bottom-up and tombstones nodes matching one of
the heuristics below (first match wins). A structural repair then rebuilds
the child lists: children of a tombstoned node take its place under the
nearest surviving ancestor. Passes repeat until nothing is tombstoned, so
collapses that only become possible after re-parenting are caught too.

The input tree is never modified, the pruner works on a copy.
"""

from dataclasses import dataclass, field
from typing import List, Union, Callable, Optional

from .scene_data import SceneNode, NodeType
from .attributes import AttributeProjector, resolved_type, TRANSFORM_KINDS
from .numeric import round_angle
from .errors import PipelineInvariantError

ZERO_ROTATION = (0.0, 0.0, 0.0)


@dataclass
class PruneResult:
    """Outcome of a pruning run

    Attributes:
        nodes: Surviving top-level nodes (the root, or its promoted children)
        removed: uids of every tombstoned node, in decision order
        decisions: Human-readable trace, one line per removed or merged group
        passes: Number of passes run, including the final pass without changes
    """
    nodes: List[SceneNode]
    removed: List[str] = field(default_factory=list)
    decisions: List[str] = field(default_factory=list)
    passes: int = 0


class StructuralPruner:
    """Fixpoint tree rewrite over group-like nodes

    Disabled entirely by keep_groups or when the scene is animated.

    Heuristics, in order:
        1. Empty or no-property group
        2. Double negative rotation
        3. Double negative rotation with extra child props
        4. Transform overlap (parent transform moved onto the only child)
        5. Lack of content (subtree of groups only)
    """

    def __init__(self, projector: AttributeProjector, log: Optional[Callable[[str], None]] = None):
        """Initialize pruner

        Args:
            projector: Attribute projector of the current run
            log: Optional callable receiving decision lines when debug is on
        """
        self.projector = projector
        self.options = projector.options
        self.precision = projector.precision
        self.log = log

    def prune(self, roots: Union[SceneNode, List[SceneNode]]) -> PruneResult:
        """Prune a tree (or forest) to its fixpoint

        Args:
            roots: Root node, or the top-level nodes of a previous run

        Returns:
            PruneResult: New forest plus the decision trace

        Raises:
            PipelineInvariantError: On cycles or when the fixpoint is not reached
        """
        if isinstance(roots, SceneNode):
            roots = [roots]
        forest = [root.copy_tree() for root in roots]
        result = PruneResult(nodes=forest)
        # Animation tracks bind to objects by name, groups must keep their identity
        if self.options.keep_groups or self.projector.has_animations:
            return result

        # Every pass with decisions removes at least one node
        limit = sum(1 for root in forest for _ in root.traverse()) + 1
        while result.passes < limit:
            result.passes += 1
            tombstones = {}
            for root in result.nodes:
                self._visit(root, tombstones, result)
            if not tombstones:
                return result
            result.removed.extend(node.uid for node in tombstones.values())
            result.nodes = self._repair(result.nodes, tombstones)

        raise PipelineInvariantError(f"Pruning did not converge after {limit} passes")

    def _visit(self, node, tombstones, result):
        # Bones keep their native hierarchy for the skeleton binding
        if NodeType.is_bone(node.type):
            return
        for child in node.children:
            self._visit(child, tombstones, result)
        self._decide(node, tombstones, result)

    def _decide(self, node, tombstones, result):
        if id(node) in tombstones:
            raise PipelineInvariantError(f"Node {node.uid} was visited after being removed")
        if not NodeType.is_group_like(node.type):
            return

        attrs = self.projector.project(node)
        kinds = [a.kind for a in attrs]

        if not attrs or not node.children:
            self._remove(node, tombstones, result, "empty")
            return

        first = node.children[0]
        if (len(node.children) == 1 and id(first) not in tombstones
                and not NodeType.is_bone(first.type)):
            first_kinds = [a.kind for a in self.projector.project(first)]

            if resolved_type(first) == resolved_type(node) and self._equal_or_negated(node.rotation, first.rotation):
                if kinds == ["rotation"] and first_kinds == ["rotation"]:
                    self._remove(node, tombstones, result, "aggressive: double negative rotation")
                    self._remove(first, tombstones, result, "aggressive: double negative rotation")
                    return
                if kinds == ["rotation"] and len(first_kinds) > 1 and "rotation" in first_kinds:
                    first.rotation = ZERO_ROTATION
                    self._remove(node, tombstones, result, "aggressive: double negative rotation w/ props")
                    return

            if not TRANSFORM_KINDS.intersection(first_kinds) and all(k in TRANSFORM_KINDS for k in kinds):
                for kind in kinds:
                    setattr(first, kind, getattr(node, kind))
                self._remove(node, tombstones, result, f"aggressive: {' '.join(kinds)} overlap")
                return

        subtree = list(node.traverse())
        if all(NodeType.is_group_like(o.type) for o in subtree):
            for o in subtree:
                if id(o) not in tombstones:
                    self._remove(o, tombstones, result, "aggressive: lack of content")

    def _equal_or_negated(self, a, b):
        for x, y in zip(a, b):
            rx = round_angle(x, self.precision)
            if rx != round_angle(y, self.precision) and rx != round_angle(-y, self.precision):
                return False
        return True

    def _remove(self, node, tombstones, result, reason):
        tombstones[id(node)] = node
        message = f"group {node.name} removed ({reason})"
        result.decisions.append(message)
        if self.options.debug and self.log:
            self.log(message)

    def _repair(self, forest, tombstones):
        repaired = []
        for root in forest:
            repaired.extend(self._rebuild(root, tombstones))
        return repaired

    def _rebuild(self, node, tombstones):
        survivors = []
        for child in node.children:
            survivors.extend(self._rebuild(child, tombstones))
        if id(node) in tombstones:
            for survivor in survivors:
                survivor.parent = None
            node.children = []
            return survivors
        node.children = survivors
        for survivor in survivors:
            survivor.parent = node
        return [node]


def prune_tree(root, projector, log=None) -> PruneResult:
    """Convenience wrapper: prune a tree with a fresh StructuralPruner"""
    return StructuralPruner(projector, log=log).prune(root)
