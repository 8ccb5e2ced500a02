"""
Pipeline printing

Rich-based rendering of a pipeline's steps as a tree. Higher-order steps
(run_if_truthy, map_over, ...) show their nested steps as children.
"""

from typing import Any, Optional, Tuple

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from .steps import ROOT_LABELS, FunctionStep, Step, StepSource, as_step, flatten


def _add_steps(tree: Tree, leaves: Tuple[Step, ...]) -> None:
    for leaf in leaves:
        if type(leaf) in ROOT_LABELS:
            continue
        node = tree.add(Text(leaf.describe(), style="cyan"))
        for child in leaf.children():
            _add_steps(node, flatten(child))


def pipeline_tree(pipeline: Any) -> Tree:
    """
    Build a rich Tree for a pipeline (or a Step or plain callable).

    The root label is the pipeline's root (It, Self) or the decorated
    function, e.g. ``decorate(len)``; each following step is one child node.
    """
    step = pipeline.as_step() if isinstance(pipeline, StepSource) else as_step(pipeline)
    head, *rest = flatten(step)
    if isinstance(head, FunctionStep):
        label = f"decorate({head.label()})"
    else:
        label = ROOT_LABELS.get(type(head), "It")
        rest = [head, *rest]
    tree = Tree(Text(label, style="bold magenta"))
    _add_steps(tree, tuple(rest))
    return tree


def print_pipeline(pipeline: Any, console: Optional[Console] = None) -> None:
    """Print the step tree of a pipeline to the console (stdout by default)."""
    console = console or Console()
    console.print(pipeline_tree(pipeline))
